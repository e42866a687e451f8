import logging
import logging.config
import os


class ColourizedFormatter(logging.Formatter):
    """
    Formatter that colours the level name for terminal output.
    """
    GREY = "\x1b[90m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    RED = "\x1b[31m"
    BOLD_RED = "\x1b[31;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        colour = self.LEVEL_COLORS.get(record.levelno)
        if colour:
            record.levelname = f"{colour}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # Other handlers share the record.
            record.levelname = levelname


def _handler_config(log_dir: str | None) -> tuple[dict[str, dict[str, str]], list[str]]:
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "colour",
        },
    }
    names = ["console"]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": os.path.join(log_dir, "app.log"),
            "formatter": "plain",
        }
        names.append("file")
    return handlers, names


def get_logging_config() -> dict:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    handlers, names = _handler_config(os.getenv("LOG_DIR"))

    server_logger = {"handlers": names, "level": "INFO", "propagate": False}
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "colour": {
                "()": "lumina.logger.ColourizedFormatter",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "plain": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {"handlers": names, "level": level},
            "uvicorn": dict(server_logger),
            "uvicorn.error": dict(server_logger),
            "uvicorn.access": dict(server_logger),
            # The OpenAI SDK logs every request at INFO through httpx.
            "httpx": {"handlers": names, "level": "WARNING", "propagate": False},
        },
    }


def setup_logging() -> None:
    logging.config.dictConfig(get_logging_config())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
