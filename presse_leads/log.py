"""
Logging setup shared by the dashboard and the API server.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the package logger with a single console handler.

    Safe to call more than once (Streamlit reruns the script on every
    interaction): existing handlers are replaced, not stacked.
    """
    logger = logging.getLogger("presse_leads")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    for noisy_logger in ["urllib3", "openai", "httpx", "httpcore"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    return logger
