import logging
import sys
import threading
import time
from datetime import datetime

LOGGER_NAME = "zulumorph"

DEFAULT_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'

CONTEXT_VALUE_LIMIT = 200


class ProgressLogger:
    """
    Reports how far a batch of texts or files has got.

    A line is logged each time another `step` percent completes, for every
    item that comes with a description, and once the batch is done.
    """

    def __init__(self, total, desc="Progress", logger=None, step=10):
        self.total = total
        self.desc = desc
        self.step = step
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.current = 0
        self.started = time.monotonic()
        self._reported_percent = None
        self._lock = threading.Lock()

    @property
    def percent(self):
        if self.total <= 0:
            return 0
        return int(self.current * 100 / self.total)

    def _eta(self):
        elapsed = time.monotonic() - self.started
        if self.current <= 0 or elapsed <= 0 or self.current >= self.total:
            return None
        per_item = elapsed / self.current
        return int((self.total - self.current) * per_item)

    def update(self, n=1, item_desc=None):
        """Advance by n items. Safe to call from worker threads."""
        with self._lock:
            self._advance(n, item_desc)

    def _advance(self, n, item_desc):
        self.current += n
        percent = self.percent

        crossed_step = (self._reported_percent is None and percent >= self.step) or (
            self._reported_percent is not None and percent - self._reported_percent >= self.step)
        if not (crossed_step or item_desc or self.current == self.total):
            return

        message = f"{self.desc}: {self.current}/{self.total} ({percent}%)"
        if item_desc:
            message += f" - {item_desc}"
        eta = self._eta()
        if eta:
            message += f" [ETA: {eta}s]"

        self.logger.info(message)
        self._reported_percent = percent

    def close(self):
        """Jump to 100% if items were skipped."""
        with self._lock:
            if self.current < self.total:
                self.current = self.total
                self._advance(0, None)


def setup_logging(log_file='zulumorph.log', level=logging.INFO, debug=False, stream=None):
    """
    Point the root logger at the console and, optionally, a log file.

    Args:
        log_file: Append-mode log file, or None to log to the console only.
        level: Level used when debug is off.
        debug: Switch to DEBUG with file/line in every record; the segmenter
            then traces each rule it applies.
        stream: Console stream, stdout by default.
    """
    if debug:
        level = logging.DEBUG
    formatter = logging.Formatter(DEBUG_FORMAT if debug else DEFAULT_FORMAT)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handlers = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    separator = "=" * 80
    logging.info(separator)
    logging.info(f"ZULUMORPH RUN STARTED - {datetime.now():%Y-%m-%d %H:%M:%S}")
    if debug:
        logging.info("DEBUG MODE ENABLED - rule-by-rule segmentation logging active")
    logging.info(separator)


def log_with_context(message, context=None, level=logging.DEBUG, logger=None):
    """
    Log a message, then one indented `key: value` line per context entry.

    Nothing is formatted unless the level is enabled. Context lines need
    DEBUG and long values are cut at CONTEXT_VALUE_LIMIT characters.
    """
    logger = logger or logging.getLogger(LOGGER_NAME)
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message)

    if not context or not logger.isEnabledFor(logging.DEBUG):
        return
    for key, value in context.items():
        text = str(value)
        if len(text) > CONTEXT_VALUE_LIMIT:
            text = text[:CONTEXT_VALUE_LIMIT] + "..."
        logger.debug(f"  └─ {key}: {text}")
