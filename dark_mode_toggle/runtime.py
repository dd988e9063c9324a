import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILENAME = "Dark-Mode-Toggle.log"
CONFIG_FILENAME = "config.ini"
DATA_DIR_NAME = "Dark-Mode-Toggle"
PACKAGE_LOGGER = "dark_mode_toggle"


def get_app_dir() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent


def get_data_dir() -> Path:
    local = os.environ.get("LOCALAPPDATA")
    if local:
        return Path(local) / DATA_DIR_NAME
    return get_app_dir()


def is_debug_enabled(argv: list[str] | None = None) -> bool:
    args = sys.argv[1:] if argv is None else argv
    for arg in args:
        if arg.strip().lower() == "-debug":
            return True
    return False


def init_logging(debug_enabled: bool, app_dir: Path, data_dir: Path) -> Path | None:
    """Set up the package logger and return the log file path, or None when file logging is off.

    Without ``-debug`` nothing is written anywhere. With it, records go to a
    rotating file next to the application, or to the data directory when the
    application directory cannot be written.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)

    if not debug_enabled:
        logger.addHandler(logging.NullHandler())
        return None

    logger.setLevel(logging.INFO)
    primary = app_dir / LOG_FILENAME
    fallback = data_dir / LOG_FILENAME
    try:
        handler = RotatingFileHandler(primary, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8")
        log_path = primary
    except OSError:
        data_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(fallback, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8")
        log_path = fallback

    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] [%(threadName)s] %(message)s"))
    logger.addHandler(handler)
    logger.info("logger-initialized path=%s", log_path)
    return log_path
