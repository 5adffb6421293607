import logging
import sys
import os
from typing import Optional, TextIO

from pythonjsonlogger import jsonlogger

def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configures the root logger for structured JSON logging.

    Logs go to stderr by default so that stdout carries only the invocation
    result. Trace and span IDs injected by the OpenTelemetry logging
    instrumentation are renamed to snake_case fields.

    Args:
        level: Log level name. Falls back to LOG_LEVEL, then INFO.
        stream: Destination stream. Defaults to sys.stderr.

    Returns:
        The configured root logger.
    """
    logger = logging.getLogger()
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicate logs
    if logger.hasHandlers():
        logger.handlers.clear()

    log_handler = logging.StreamHandler(stream or sys.stderr)

    format_str = '%(asctime)s %(levelname)s %(name)s %(message)s'
    formatter = jsonlogger.JsonFormatter(
        format_str,
        rename_fields={
            'asctime': 'timestamp',
            'levelname': 'level',
            'name': 'logger',
            'otelTraceID': 'trace_id',
            'otelSpanID': 'span_id',
            'otelServiceName': 'service_name'
        }
    )

    log_handler.setFormatter(formatter)
    logger.addHandler(log_handler)

    # urllib3 logs every connection at DEBUG; keep it out unless asked for explicitly.
    logging.getLogger("urllib3").setLevel(max(logger.level, logging.WARNING))

    logger.debug(f"Structured JSON logging configured with level {log_level}.")
    return logger
