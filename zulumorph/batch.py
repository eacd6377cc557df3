"""
Batch and file orchestration around the analyser.

Every item (text or uploaded file) is processed independently: a failure is
recorded on that item's result with status "failed" and never aborts or
alters the other items.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from .config import ANALYZER_VERSION, ServiceConfig
from .errors import ExtractionError, InputValidationError
from .extraction import extract_text
from .logging_config import ProgressLogger
from .parser import WHITESPACE_RE, analyze_text
from .rules import RuleTables, default_rule_tables

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "completed"
STATUS_FAILED = "failed"


@dataclass
class UploadedFile:
    """An uploaded file held in memory."""
    filename: str
    data: bytes
    mimetype: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def count_words(text: str) -> int:
    """Pieces between runs of whitespace; leading/trailing whitespace counts an empty piece."""
    return len(WHITESPACE_RE.split(text))


def count_lines(text: str) -> int:
    return len(text.split("\n"))


def _preview(text: str, limit: int = 100) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class AnalysisService:
    """
    Runs the analyser over single texts, batches of texts and uploaded files.

    Usage:
        service = AnalysisService()
        result = service.process_text("Umuntu uhamba.")
        print(result["morphological_analysis"])
    """

    def __init__(self, config: Optional[ServiceConfig] = None, tables: Optional[RuleTables] = None):
        self.config = config or ServiceConfig()
        self.tables = tables or default_rule_tables()

    def analyze(self, text: str) -> str:
        return analyze_text(text, tables=self.tables, workers=self.config.workers)

    def _map(self, func: Callable, items: Sequence) -> List:
        """Apply func to every item, in parallel when configured; keeps input order."""
        if self.config.workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix="zulumorph-batch") as executor:
                return list(executor.map(func, items))
        return [func(item) for item in items]

    # --- Single text ---

    def process_text(self, text) -> Dict:
        """
        Analyse one text.

        Raises:
            InputValidationError: text is missing, empty or not a string.
        """
        if not text or not isinstance(text, str):
            raise InputValidationError("No text provided for analysis")

        logger.info(f"Processing text: {_preview(text)}")
        analysis = self.analyze(text)

        return {
            "success": True,
            "original_text": text,
            "morphological_analysis": analysis,
            "analysis_metadata": {
                "lines_processed": len(analysis.split("\n")),
                "processing_time": utc_timestamp(),
                "analyzer_version": ANALYZER_VERSION,
            },
        }

    # --- Batch of texts ---

    def _process_batch_item(self, indexed) -> Dict:
        index, text = indexed
        record = {"index": index, "original_text": text}
        try:
            if not isinstance(text, str):
                raise InputValidationError(f"Batch item {index} is not a string")
            record.update({
                "status": STATUS_COMPLETED,
                "morphological_analysis": self.analyze(text),
                "word_count": count_words(text),
                "line_count": count_lines(text),
            })
        except InputValidationError as e:
            logger.warning(f"Skipping batch item {index}: {e}")
            record.update({"status": STATUS_FAILED, "error": str(e), "word_count": 0, "line_count": 0})
        except Exception as e:
            logger.error(f"Batch item {index} failed: {e}", exc_info=True)
            record.update({"status": STATUS_FAILED, "error": str(e), "word_count": 0, "line_count": 0})
        return record

    def process_batch(self, texts) -> Dict:
        """
        Analyse a list of texts.

        Raises:
            InputValidationError: texts is missing or not a list.
        """
        if not isinstance(texts, list):
            raise InputValidationError("Invalid texts array provided")

        logger.info(f"Processing batch of {len(texts)} texts...")
        progress = ProgressLogger(total=len(texts), desc="Batch texts", logger=logger)

        def run(indexed):
            record = self._process_batch_item(indexed)
            progress.update(1)
            return record

        results = self._map(run, list(enumerate(texts)))
        progress.close()

        return {
            "success": True,
            "results": results,
            "summary": {
                "total_texts": len(texts),
                "successful": sum(1 for r in results if r["status"] == STATUS_COMPLETED),
                "failed": sum(1 for r in results if r["status"] == STATUS_FAILED),
                "total_words": sum(r["word_count"] for r in results),
                "total_lines": sum(r["line_count"] for r in results),
                "processing_time": utc_timestamp(),
            },
        }

    # --- Uploaded files ---

    def process_file(self, upload: UploadedFile) -> Dict:
        """Extract and analyse one file. Never raises; failures are recorded."""
        record = {
            "filename": upload.filename,
            "size": upload.size,
            "type": upload.mimetype,
        }
        try:
            if upload.size > self.config.max_file_size:
                raise ExtractionError(
                    f"File {upload.filename} exceeds the maximum size of {self.config.max_file_size} bytes",
                    upload.filename,
                )

            logger.info(f"Extracting text from: {upload.filename}")
            extracted = extract_text(upload.data, upload.filename)

            logger.info(f"Analyzing text from: {upload.filename}")
            analysis = self.analyze(extracted)

            record.update({
                "status": STATUS_COMPLETED,
                "extracted_text": extracted,
                "morphological_analysis": analysis,
                "word_count": count_words(extracted),
                "line_count": count_lines(extracted),
            })
        except ExtractionError as e:
            logger.error(f"Error processing file {upload.filename}: {e}")
            record.update({"status": STATUS_FAILED, "error": str(e)})
        except Exception as e:
            logger.error(f"Error processing file {upload.filename}: {e}", exc_info=True)
            record.update({"status": STATUS_FAILED, "error": str(e)})

        record["processing_timestamp"] = utc_timestamp()
        return record

    def process_files(self, uploads: Sequence[UploadedFile]) -> Dict:
        """
        Extract and analyse uploaded files.

        Raises:
            InputValidationError: no files were given, or more than max_files.
        """
        if not uploads:
            raise InputValidationError("No files uploaded")
        if len(uploads) > self.config.max_files:
            raise InputValidationError(
                f"Too many files: {len(uploads)} uploaded, at most {self.config.max_files} allowed"
            )

        logger.info(f"Processing {len(uploads)} files...")
        progress = ProgressLogger(total=len(uploads), desc="Files", logger=logger)

        def run(upload):
            record = self.process_file(upload)
            progress.update(1, item_desc=f"{upload.filename} ({record['status']})")
            return record

        results = self._map(run, list(uploads))
        progress.close()

        return {
            "success": True,
            "processed_files": results,
            "summary": {
                "total_files": len(uploads),
                "successful": sum(1 for r in results if r["status"] == STATUS_COMPLETED),
                "failed": sum(1 for r in results if r["status"] == STATUS_FAILED),
                "processing_time": utc_timestamp(),
            },
        }


# Module-level conveniences over a default service

def process_text(text) -> Dict:
    return AnalysisService().process_text(text)


def process_batch(texts) -> Dict:
    return AnalysisService().process_batch(texts)


def process_files(uploads: Sequence[UploadedFile]) -> Dict:
    return AnalysisService().process_files(uploads)
