# Logging_Config.py
# Description: Configuration for logging
#
# Imports
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Optional
#
# 3rd-Party Imports
from loguru import logger as loguru_logger
from rich.console import Console
from rich.logging import RichHandler
#
# Local Imports
from freemind_cli.config import get_cli_log_file_path
#
########################################################################################################################
#
# Functions:

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGURU_LEVEL_MAPPING = {
    "TRACE": logging.DEBUG, "DEBUG": logging.DEBUG, "INFO": logging.INFO,
    "SUCCESS": logging.INFO, "WARNING": logging.WARNING, "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def sink_to_standard_logging(message):
    """Loguru sink that hands every record to the standard logging logger of the same name."""
    record = message.record
    std_level = _LOGURU_LEVEL_MAPPING.get(record["level"].name, logging.INFO)
    std_logger = logging.getLogger(record["name"])
    if record["exception"]:
        std_logger.log(std_level, record["message"], exc_info=record["exception"])
    else:
        std_logger.log(std_level, record["message"])


def _level(name: Any, fallback: int) -> int:
    return getattr(logging, str(name).upper(), fallback)


def configure_application_logging(settings: Dict[str, Any], log_file_path: Optional[Path] = None,
                                  console: Optional[Console] = None) -> logging.Logger:
    """
    Routes loguru into standard logging and installs a rich console handler and
    a rotating file handler on the root logger. Safe to call more than once.
    """
    logging_section = settings.get("logging", {})
    console_level = _level(logging_section.get("log_level", "WARNING"), logging.WARNING)
    file_level = _level(logging_section.get("file_log_level", "DEBUG"), logging.DEBUG)

    loguru_logger.remove()
    loguru_logger.add(sink_to_standard_logging, level="TRACE", format="{message}")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    console_handler.setLevel(console_level)
    root_logger.addHandler(console_handler)

    try:
        log_file_path = log_file_path or get_cli_log_file_path()
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=int(logging_section.get("log_max_bytes", 10485760)),
            backupCount=int(logging_section.get("log_backup_count", 5)),
            encoding='utf-8',
        )
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        root_logger.addHandler(file_handler)
    except OSError as e:
        logging.warning(f"Could not set up file logging at {log_file_path}: {e}")

    handler_levels = [h.level for h in root_logger.handlers if h.level > 0]
    root_logger.setLevel(min(handler_levels) if handler_levels else console_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    loguru_logger.debug(f"Logging configured (console={logging.getLevelName(console_level)}, "
                        f"file={logging.getLevelName(file_level)})")
    return root_logger

#
# End of Logging_Config.py
########################################################################################################################
