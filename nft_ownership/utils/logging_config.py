"""
Logging configuration with structured logging support.

This module provides a centralized logging configuration that supports:
- JSON structured logging for production
- Human-readable logging for development
- Performance metrics for contract calls and metadata fetches
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from pythonjsonlogger import jsonlogger


class StructuredFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional context."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['service'] = 'nft-ownership'
        log_record['version'] = os.getenv('APP_VERSION', 'unknown')
        log_record['environment'] = os.getenv('ENVIRONMENT', 'development')

        # Wallet context, when a caller passes extra={"wallet": ...}
        wallet = getattr(record, 'wallet', None)
        if wallet:
            log_record['wallet'] = wallet


class ColoredFormatter(logging.Formatter):
    """Colored formatter for development console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        record = logging.makeLogRecord(record.__dict__)
        log_color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "text",
    log_file: Optional[str] = None,
) -> None:
    """
    Set up application logging with structured output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ('json' for structured logging, 'text' for human-readable)
        log_file: Optional file path for log output
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if log_format == "json" else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        console_handler.setFormatter(StructuredFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        ))
    else:
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
    handlers.append(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter(
            '%(asctime)s %(name)s %(levelname)s %(message)s'
        ))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        format='%(message)s'
    )

    # Reduce noise from third-party libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)
    logging.getLogger('web3').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return structlog.get_logger(name)


class PerformanceLogger:
    """Logger for performance metrics and monitoring."""

    def __init__(self):
        self.logger = get_logger("performance")

    def log_contract_call(self, method: str, duration_ms: float, success: bool):
        """Log contract query performance metrics."""
        self.logger.debug(
            "contract_call",
            method=method,
            duration_ms=duration_ms,
            success=success,
            metric_type="contract_performance"
        )

    def log_metadata_fetch(self, url: str, duration_ms: float, status_code: Optional[int]):
        """Log metadata gateway performance metrics."""
        self.logger.debug(
            "metadata_fetch",
            url=url,
            duration_ms=duration_ms,
            status_code=status_code,
            metric_type="metadata_performance"
        )


# Global performance logger instance
performance_logger = PerformanceLogger()
