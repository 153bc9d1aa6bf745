"""
Structured operation logging for the record store, query engine and API.
"""

import logging
from typing import Any, Dict

from ..core.config import get_log_level


class StructuredLogger:
    """Structured logger for record, query and dispatch operations."""

    def __init__(self, name: str = "infoshare"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, get_log_level(), logging.INFO))

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.error(message)
        elif status == "rejected":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_record_operation(self, operation: str, key: str, content: str = None, status: str = "success",
                             details: Dict[str, Any] = None):
        """Log a record-store operation. Content is truncated, never logged in full."""
        log_details = {"key": key}
        if content is not None:
            log_details["content"] = content[:50] + "..." if len(content) > 50 else content
        if details:
            log_details.update(details)

        self.log_operation(f"record.{operation}", status, log_details)

    def log_query_operation(self, attribute: str, value: str, result_count: int = None, status: str = "success",
                            details: Dict[str, Any] = None):
        """Log a selector query."""
        log_details = {"attribute": attribute, "value": value}
        if result_count is not None:
            log_details["result_count"] = result_count
        if details:
            log_details.update(details)

        self.log_operation("query.selector", status, log_details)

    def log_dispatch(self, function: str, arg_count: int, status: str = "success", details: Dict[str, Any] = None):
        """Log a dispatcher invocation."""
        log_details = {"function": function, "arg_count": arg_count}
        if details:
            log_details.update(details)

        self.log_operation("invoke", status, log_details)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()
