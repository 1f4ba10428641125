"""
Centralized logging configuration for the costume studio pipeline.

This module provides consistent logging setup across scripts.
Log levels:
    DEBUG: Prompts, raw model responses, poll iterations
    INFO: Stage progress (grounding, conversation, artifact generation)
    WARNING: Best-effort stage fallbacks (grounding, concept art)
    ERROR: Fatal stage failures

Every handler installed here carries a CredentialRedactingFilter, so
authorized download links never reach a log file or the console.

Usage:
    from logging_config import setup_logging

    logger = setup_logging(__name__)
    logger.info("Design generation started")
"""

import logging
import re
import sys
from pathlib import Path
from typing import Iterable, Optional

_KEY_PARAM = re.compile(r"([?&]key=)[^&\s]+")
REDACTED = "***REDACTED***"


class CredentialRedactingFilter(logging.Filter):
    """Scrub API keys from log records.

    Removes ``key=`` query parameters and any explicitly registered
    secret values from the fully formatted message.
    """

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def redact(self, text: str) -> str:
        text = _KEY_PARAM.sub(rf"\g<1>{REDACTED}", text)
        for secret in self.secrets:
            text = text.replace(secret, REDACTED)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = self.redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console_output: bool = True,
    secrets: Iterable[str] = ()
) -> logging.Logger:
    """
    Configure and return a logger instance.

    Args:
        name: Logger name (typically __name__ from calling module)
        level: Logging level (default: INFO)
        log_file: Optional path to write logs to file
        console_output: Whether to output to console (default: True)
        secrets: Extra secret strings to redact (e.g. the API key)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    redactor = CredentialRedactingFilter(secrets)

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        console_handler.addFilter(redactor)
        logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(redactor)
        logger.addHandler(file_handler)

    return logger
