"""
Error taxonomy and error reporting utilities for the event bot.

Every layer raises one of the typed errors below; the event service is the
single place that turns them into chat replies.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import MetricUnit

from rhobot.handlers.utils.observability import logger, metrics, tracer


class ErrorSeverity(str, Enum):
    """Error severity levels for classification."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    BUSINESS_LOGIC = "BUSINESS_LOGIC"
    DATA_INTEGRITY = "DATA_INTEGRITY"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.BUSINESS_LOGIC,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.user_message = user_message or message
        self.error_id = str(uuid.uuid4())

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_id": self.error_id,
            "error_code": self.error_code,
            "message": self.message,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "category": self.category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseServiceError):
    """Raised when command parameters fail validation."""

    def __init__(self, errors: List[str]):
        super().__init__(
            message="; ".join(errors),
            error_code="VALIDATION_ERROR",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.VALIDATION,
        )
        self.errors = list(errors)


class NotFoundError(BaseServiceError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID '{resource_id}' not found"
        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.BUSINESS_LOGIC,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class MalformedRecordError(BaseServiceError):
    """Raised when a stored item cannot be decoded into a domain record."""

    def __init__(self, message: str, item: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="MALFORMED_RECORD",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.DATA_INTEGRITY,
            user_message="A stored record could not be read. If this persists, please reach out to the bot admin.",
        )
        self.item = item


class StoreError(BaseServiceError):
    """Raised when the key-value store call fails (transport, auth, throttling)."""

    def __init__(
        self,
        message: str,
        operation: str,
        table_name: str,
        error_code: str = "STORE_ERROR",
        cause: Optional[BaseException] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.EXTERNAL_SERVICE,
        )
        self.operation = operation
        self.table_name = table_name
        self.cause = cause


def log_error_metrics(error: BaseServiceError, error_logger: Logger = logger) -> None:
    """Log error metrics for monitoring and alerting."""

    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)
    tracer.put_metadata("error_details", error.to_dict())

    log = error_logger.warning if error.severity in (ErrorSeverity.LOW, ErrorSeverity.MEDIUM) else error_logger.error
    log(
        "Service error occurred",
        extra={
            "error_id": error.error_id,
            "error_code": error.error_code,
            "error_severity": error.severity.value,
            "error_category": error.category.value,
            "error_message": error.message,
        }
    )
