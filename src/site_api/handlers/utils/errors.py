"""
Error handling utilities for the site API handlers.

Every failure a handler can report is raised as a subclass of
``BaseServiceError``. The resolver's exception handlers turn these into
``{"error": <message>}`` responses with the status code of the error's
category; dependency and configuration detail stays in the logs.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit

from site_api.handlers.utils.observability import logger, metrics, tracer

INTERNAL_SERVER_ERROR_MESSAGE = 'Internal server error'


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    DEPENDENCY = "DEPENDENCY"
    CONFIGURATION = "CONFIGURATION"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
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
            "category": self.category.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class ValidationError(BaseServiceError):
    """Raised when the request is missing or malformed. The message is returned as is."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
        )


class AuthenticationError(BaseServiceError):
    """Raised on a credential mismatch. Never says which field was wrong."""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            category=ErrorCategory.AUTHENTICATION,
        )


class DependencyError(BaseServiceError):
    """Raised when a secret store, model provider, search provider or table call fails."""

    def __init__(self, message: str, service_name: str):
        super().__init__(
            message=message,
            error_code="DEPENDENCY_ERROR",
            category=ErrorCategory.DEPENDENCY,
            user_message=INTERNAL_SERVER_ERROR_MESSAGE,
        )
        self.service_name = service_name


class ConfigurationError(BaseServiceError):
    """Raised when a required environment value is absent or invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            category=ErrorCategory.CONFIGURATION,
            user_message=INTERNAL_SERVER_ERROR_MESSAGE,
        )


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log error metrics for monitoring and alerting."""
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name=f"Error{error.category.value.title()}Count", unit=MetricUnit.Count, value=1)

    tracer.put_annotation("error_code", error.error_code)
    tracer.put_annotation("error_category", error.category.value)

    log_extra = {
        "error_id": error.error_id,
        "error_code": error.error_code,
        "error_category": error.category.value,
        "error_message": error.message,
    }
    if isinstance(error, DependencyError):
        log_extra["service_name"] = error.service_name

    if error.status_code >= 500:
        logger.exception("Service error occurred", extra=log_extra)
    else:
        logger.warning("Request rejected", extra=log_extra)


def format_error_response(error: BaseServiceError, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Format error for API response."""
    response: Dict[str, Any] = {"error": error.user_message}
    if request_id and error.status_code >= 500:
        response["requestId"] = request_id
    return response
