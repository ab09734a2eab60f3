# okrcoach logging setup
import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, Union

NAME = "okrcoach"

def setup_logging(
    log_dir: Union[str, Path] = "./logs",
    console: bool = True,
    level: str = "INFO",
    quiet_console: bool = False,
    console_level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
) -> Tuple[logging.Logger, logging.Logger]:
    """
    Configure the okrcoach logger tree.

    Everything goes to a log file (``log_file`` or a timestamped file under
    ``log_dir``); the console gets the same records unless ``quiet_console``,
    in which case only summary errors are shown. A separate
    ``okrcoach.summary`` logger carries run summaries.

    Returns:
        (main logger, summary logger)
    """
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = Path(log_dir) / f"{NAME}_{ts}.log"

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
        },
        "handlers": {
            "file": {
                "class": "logging.FileHandler",
                "formatter": "plain",
                "filename": str(log_path),
                "encoding": "utf-8",
                "mode": "w",
                "level": "DEBUG",
            }
        },
        "loggers": {
            NAME: {
                "level": level.upper(),
                "handlers": ["file"],
                "propagate": False,
            },
        },
        "root": {"handlers": []},
    }

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    logger = logging.getLogger(NAME)
    console_formatter = logging.Formatter("{levelname:<7} {message}", style="{")

    summary_logger = logging.getLogger(f"{NAME}.summary")
    summary_logger.setLevel(logging.INFO)
    summary_logger.propagate = False
    for handler in list(summary_logger.handlers):
        summary_logger.removeHandler(handler)
        handler.close()

    fh_summary = logging.FileHandler(log_path, encoding="utf-8", mode="a")
    fh_summary.setLevel(logging.INFO)
    fh_summary.setFormatter(logging.Formatter("{asctime} SUMMARY - {message}", style="{"))
    summary_logger.addHandler(fh_summary)

    if console:
        console_handler = logging.StreamHandler()
        if quiet_console:
            console_handler.setLevel(logging.ERROR)
        else:
            console_handler.setLevel(getattr(logging, (console_level or level).upper()))
            logger.addHandler(console_handler)
        console_handler.setFormatter(console_formatter)
        summary_logger.addHandler(console_handler)

    logger.info("Logging initialised. File: %s", log_path)
    return logger, summary_logger
