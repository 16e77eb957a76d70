"""
Logging Configuration for the RTL fixer

Console output for operators, optional detailed log file for debugging.

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
import logging
from pathlib import Path
from typing import Optional

ROOT_LOGGER = "rtl_fix"
PREVIEW_CHARS = 50


def setup_logging(level=logging.INFO, log_file: Optional[Path] = None) -> Optional[Path]:
    """
    Setup logging to the console and, optionally, a file.

    Log levels:
    - DEBUG: Text traces, cache trims, scope recomputation
    - INFO: Cache load/save, diagnostics summary
    - WARNING: Diagnostics cases that did nothing
    - ERROR: Pipeline failures (input is returned unchanged)
    """
    file_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-28s | %(funcName)-20s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(levelname)-8s | %(name)-20s | %(message)s'
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Reduce noise from the service stack
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.debug(f"Logging started (console={logging.getLevelName(level)}, file={log_file})")
    return log_file


def trace_preview(text: Optional[str], max_chars: int = PREVIEW_CHARS) -> str:
    """Bound text for log lines."""
    if text is None:
        return "<null>"
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "..."
