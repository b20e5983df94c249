import logging
import logging.handlers
import os
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class DynamicDailyFileHandler(logging.handlers.WatchedFileHandler):
    """
    Writes to <base>/<YYYY>/<MM>/log-<YYYY-MM-DD>.log and moves to the next
    file on the first record of a new day.
    """

    def __init__(self, base_log_dir, encoding="utf-8"):
        self.base_log_dir = base_log_dir
        self.current_date = self._today()
        super().__init__(self._path_for(self.current_date), encoding=encoding)

    @staticmethod
    def _today():
        return datetime.now().strftime("%Y-%m-%d")

    def _path_for(self, day):
        year, month, _ = day.split("-")
        folder = os.path.join(self.base_log_dir, year, month)
        os.makedirs(folder, exist_ok=True)
        return os.path.join(folder, f"log-{day}.log")

    def _rollover_if_needed(self):
        today = self._today()
        if today == self.current_date:
            return
        if self.stream and not self.stream.closed:
            self.stream.close()
        self.current_date = today
        self.baseFilename = self._path_for(today)
        self.stream = self._open()

    def emit(self, record):
        try:
            self._rollover_if_needed()
            super().emit(record)
        except Exception:
            self.handleError(record)


def _base_log_dir():
    return os.environ.get("APP_LOG_DIR") or os.path.abspath(
        os.path.join(os.path.dirname(__file__), "../../storage/logs")
    )


def _level():
    return getattr(logging, (os.environ.get("APP_LOG_LEVEL") or "DEBUG").upper(), logging.DEBUG)


def _build_logger(name):
    logger = logging.getLogger(name)
    logger.setLevel(_level())
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in (logging.StreamHandler(), DynamicDailyFileHandler(_base_log_dir())):
        handler.setLevel(_level())
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


Log = _build_logger("crosspost")

__all__ = ["Log"]
