import logging
import os
from dotenv import load_dotenv
from rich.logging import RichHandler

def get_logger(name: str) -> logging.Logger:
    # Loggers are created at import time, before load_settings() runs,
    # so .env has to be read here for LOG_LEVEL to take effect.
    load_dotenv()
    # Safe to call multiple times; basicConfig is a no-op once a handler exists.
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
    return logging.getLogger(name)
