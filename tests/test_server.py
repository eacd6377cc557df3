"""
Tests for the HTTP API using Flask's test client.
"""

import io
import json
import unittest
from unittest.mock import patch

from zulumorph.batch import AnalysisService
from zulumorph.config import ANALYZER_VERSION, ServiceConfig
from zulumorph.server import FEATURES, create_app

UMUNTU = "<LINE 1>u[NPrePre3]-mu[BPre3]-ntu[NStem]"


class ServerTestCase(unittest.TestCase):

    def setUp(self):
        self.config = ServiceConfig(max_files=2, log_file=None)
        self.app = create_app(self.config)
        self.client = self.app.test_client()


class TestHealth(ServerTestCase):

    def test_health(self):
        response = self.client.get("/api/health")

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["service"], "Zulu NLP Processing System")
        self.assertEqual(body["version"], ANALYZER_VERSION)
        self.assertEqual(body["features"], FEATURES)
        self.assertTrue(body["timestamp"].endswith("Z"))

    def test_cors_headers(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.headers["Access-Control-Allow-Origin"], "*")

    def test_unknown_route_is_json_404(self):
        response = self.client.get("/api/nothing-here")
        self.assertEqual(response.status_code, 404)
        self.assertFalse(response.get_json()["success"])


class TestProcessText(ServerTestCase):

    def test_success(self):
        response = self.client.post("/api/process-text", json={"text": "umuntu"})

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["success"])
        self.assertEqual(body["morphological_analysis"], UMUNTU)
        self.assertEqual(body["analysis_metadata"]["lines_processed"], 1)

    def test_missing_text(self):
        response = self.client.post("/api/process-text", json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json(),
                         {"success": False, "error": "No text provided for analysis"})

    def test_non_json_body(self):
        response = self.client.post("/api/process-text", data="umuntu", content_type="text/plain")
        self.assertEqual(response.status_code, 400)

    def test_unexpected_error_is_500(self):
        with patch.object(AnalysisService, "process_text", side_effect=RuntimeError("boom")):
            response = self.client.post("/api/process-text", json={"text": "umuntu"})

        self.assertEqual(response.status_code, 500)
        body = response.get_json()
        self.assertEqual(body["error"], "Internal server error")
        self.assertEqual(body["message"], "boom")


class TestProcessBatch(ServerTestCase):

    def test_success(self):
        response = self.client.post("/api/process-batch", json={"texts": ["umuntu", 3]})

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertEqual(body["summary"]["successful"], 1)
        self.assertEqual(body["summary"]["failed"], 1)
        self.assertEqual(body["results"][0]["morphological_analysis"], UMUNTU)

    def test_invalid_texts(self):
        response = self.client.post("/api/process-batch", json={"texts": "umuntu"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid texts array provided")


class TestProcessFiles(ServerTestCase):

    def test_upload(self):
        response = self.client.post(
            "/api/process-files",
            data={"files": [(io.BytesIO(b"umuntu"), "a.txt"), (io.BytesIO(b"x"), "b.png")]},
            content_type="multipart/form-data",
        )

        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        first, second = body["processed_files"]
        self.assertEqual(first["filename"], "a.txt")
        self.assertEqual(first["status"], "completed")
        self.assertEqual(first["morphological_analysis"], UMUNTU)
        self.assertEqual(second["status"], "failed")
        self.assertEqual(body["summary"]["total_files"], 2)

    def test_no_files(self):
        response = self.client.post("/api/process-files", data={}, content_type="multipart/form-data")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "No files uploaded")

    def test_too_many_files(self):
        files = [(io.BytesIO(b"inja"), f"{i}.txt") for i in range(3)]
        response = self.client.post("/api/process-files", data={"files": files},
                                    content_type="multipart/form-data")
        self.assertEqual(response.status_code, 400)


class TestExport(ServerTestCase):

    def test_csv_download(self):
        records = [{"filename": "a.txt", "status": "completed"}]
        response = self.client.post("/api/export", json={"data": records, "format": "csv"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.mimetype.startswith("text/csv"))
        self.assertEqual(response.headers["Content-Disposition"],
                         'attachment; filename="zulu_analysis_results.csv"')
        self.assertTrue(response.get_data(as_text=True).startswith("Filename,Size,Type"))

    def test_json_download(self):
        records = [{"filename": "a.txt"}]
        response = self.client.post("/api/export", json={"data": records, "format": "json"})
        self.assertEqual(json.loads(response.get_data(as_text=True)), records)

    def test_non_dict_records(self):
        response = self.client.post("/api/export", json={"data": ["x"], "format": "csv"})

        self.assertEqual(response.status_code, 200)
        lines = response.get_data(as_text=True).split("\n")
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].startswith("N/A,0,N/A,N/A"))

    def test_empty_list_exports_header(self):
        response = self.client.post("/api/export", json={"data": [], "format": "csv"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_data(as_text=True).split("\n"), [
            "Filename,Size,Type,Status,Word_Count,Line_Count,"
            "Extracted_Text_Preview,Morphological_Analysis_Preview,Processing_Time",
        ])

    def test_unsupported_format(self):
        response = self.client.post("/api/export", json={"data": [{}], "format": "xml"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Unsupported export format")

    def test_missing_data(self):
        response = self.client.post("/api/export", json={"format": "csv"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "No data provided for export")


if __name__ == '__main__':
    unittest.main()
