"""
Tests for text, batch and file orchestration.
"""

import re
import unittest
from unittest.mock import patch

from zulumorph import batch
from zulumorph.batch import (
    STATUS_COMPLETED,
    STATUS_FAILED,
    AnalysisService,
    UploadedFile,
    count_lines,
    count_words,
    utc_timestamp,
)
from zulumorph.config import ANALYZER_VERSION, ServiceConfig
from zulumorph.errors import InputValidationError

UMUNTU = "<LINE 1>u[NPrePre3]-mu[BPre3]-ntu[NStem]"


class TestHelpers(unittest.TestCase):

    def test_timestamp_format(self):
        self.assertRegex(utc_timestamp(), r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")

    def test_count_words(self):
        self.assertEqual(count_words("umuntu abantu"), 2)
        self.assertEqual(count_words("umuntu\n\tabantu  inja"), 3)
        # Leading whitespace yields an empty first piece
        self.assertEqual(count_words("  umuntu"), 2)

    def test_count_words_separator_set(self):
        self.assertEqual(count_words("umuntu abantu"), 2)
        self.assertEqual(count_words("umuntu\x1cabantu"), 1)

    def test_count_lines(self):
        self.assertEqual(count_lines("jongo"), 1)
        self.assertEqual(count_lines("a\nb\n"), 3)

    def test_uploaded_file_size(self):
        self.assertEqual(UploadedFile("a.txt", b"12345").size, 5)


class TestProcessText(unittest.TestCase):

    def setUp(self):
        self.service = AnalysisService()

    def test_result_shape(self):
        result = self.service.process_text("umuntu")

        self.assertTrue(result["success"])
        self.assertEqual(result["original_text"], "umuntu")
        self.assertEqual(result["morphological_analysis"], UMUNTU)
        metadata = result["analysis_metadata"]
        self.assertEqual(metadata["lines_processed"], 1)
        self.assertEqual(metadata["analyzer_version"], ANALYZER_VERSION)
        self.assertTrue(metadata["processing_time"].endswith("Z"))

    def test_lines_processed_counts_output_lines(self):
        result = self.service.process_text("jongo\n\nAfrika\nabantu")
        self.assertEqual(result["analysis_metadata"]["lines_processed"], 3)

    def test_rejects_missing_text(self):
        for bad in (None, "", 42, ["umuntu"]):
            with self.assertRaises(InputValidationError) as ctx:
                self.service.process_text(bad)
            self.assertEqual(str(ctx.exception), "No text provided for analysis")

    def test_module_level_helper(self):
        self.assertEqual(batch.process_text("umuntu")["morphological_analysis"], UMUNTU)


class TestProcessBatch(unittest.TestCase):

    def setUp(self):
        self.service = AnalysisService()

    def test_records_in_input_order(self):
        result = self.service.process_batch(["umuntu", "jongo.\nAfrika"])

        self.assertTrue(result["success"])
        first, second = result["results"]
        self.assertEqual(first["index"], 0)
        self.assertEqual(first["status"], STATUS_COMPLETED)
        self.assertEqual(first["morphological_analysis"], UMUNTU)
        self.assertEqual(second["index"], 1)
        self.assertEqual(second["word_count"], 2)
        self.assertEqual(second["line_count"], 2)

    def test_summary_totals(self):
        summary = self.service.process_batch(["umuntu abantu", "inja"])["summary"]

        self.assertEqual(summary["total_texts"], 2)
        self.assertEqual(summary["successful"], 2)
        self.assertEqual(summary["failed"], 0)
        self.assertEqual(summary["total_words"], 3)
        self.assertEqual(summary["total_lines"], 2)

    def test_empty_batch(self):
        result = self.service.process_batch([])
        self.assertEqual(result["results"], [])
        self.assertEqual(result["summary"]["total_texts"], 0)

    def test_non_string_item_fails_alone(self):
        result = self.service.process_batch(["umuntu", 7, "inja"])

        statuses = [r["status"] for r in result["results"]]
        self.assertEqual(statuses, [STATUS_COMPLETED, STATUS_FAILED, STATUS_COMPLETED])
        self.assertIn("not a string", result["results"][1]["error"])
        self.assertEqual(result["summary"]["failed"], 1)
        self.assertEqual(result["summary"]["successful"], 2)

    def test_unexpected_error_is_recorded(self):
        with patch.object(AnalysisService, "analyze", side_effect=RuntimeError("boom")):
            result = self.service.process_batch(["umuntu"])

        record = result["results"][0]
        self.assertEqual(record["status"], STATUS_FAILED)
        self.assertEqual(record["error"], "boom")

    def test_rejects_non_list(self):
        for bad in (None, "umuntu", {"texts": []}):
            with self.assertRaises(InputValidationError) as ctx:
                self.service.process_batch(bad)
            self.assertEqual(str(ctx.exception), "Invalid texts array provided")

    def test_parallel_matches_sequential(self):
        texts = ["umuntu", "abantu", "inja", "ukuhamba", "jongo.", "Afrika"] * 5
        sequential = AnalysisService().process_batch(texts)["results"]
        parallel = AnalysisService(ServiceConfig(workers=4)).process_batch(texts)["results"]
        self.assertEqual(sequential, parallel)


class TestProcessFiles(unittest.TestCase):

    def setUp(self):
        self.service = AnalysisService(ServiceConfig(max_file_size=64, max_files=3))

    def test_text_file_record(self):
        record = self.service.process_file(UploadedFile("a.txt", b"umuntu", "text/plain"))

        self.assertEqual(record["filename"], "a.txt")
        self.assertEqual(record["size"], 6)
        self.assertEqual(record["type"], "text/plain")
        self.assertEqual(record["status"], STATUS_COMPLETED)
        self.assertEqual(record["extracted_text"], "umuntu")
        self.assertEqual(record["morphological_analysis"], UMUNTU)
        self.assertEqual(record["word_count"], 1)
        self.assertEqual(record["line_count"], 1)
        self.assertIn("processing_timestamp", record)

    def test_unsupported_file_fails_alone(self):
        result = self.service.process_files([
            UploadedFile("a.txt", b"umuntu"),
            UploadedFile("b.png", b"\x89PNG"),
        ])

        first, second = result["processed_files"]
        self.assertEqual(first["status"], STATUS_COMPLETED)
        self.assertEqual(second["status"], STATUS_FAILED)
        self.assertIn("Unsupported file type", second["error"])
        self.assertNotIn("morphological_analysis", second)
        self.assertEqual(result["summary"]["successful"], 1)
        self.assertEqual(result["summary"]["failed"], 1)
        self.assertEqual(result["summary"]["total_files"], 2)

    def test_oversized_file_fails(self):
        record = self.service.process_file(UploadedFile("big.txt", b"a" * 65))
        self.assertEqual(record["status"], STATUS_FAILED)
        self.assertIn("exceeds the maximum size", record["error"])

    def test_no_files(self):
        with self.assertRaises(InputValidationError) as ctx:
            self.service.process_files([])
        self.assertEqual(str(ctx.exception), "No files uploaded")

    def test_too_many_files(self):
        uploads = [UploadedFile(f"{i}.txt", b"inja") for i in range(4)]
        with self.assertRaises(InputValidationError) as ctx:
            self.service.process_files(uploads)
        self.assertTrue(re.match(r"Too many files", str(ctx.exception)))


if __name__ == '__main__':
    unittest.main()
