"""
Custom Exception Classes for the ATS Scanner pipeline
"""
import logging
from enum import Enum
from typing import Dict, Any, Optional, Type

from fastapi import HTTPException


class ErrorKind(str, Enum):
    """Machine-stable error kinds"""
    VALIDATION = "validation"
    DOCUMENT_PARSING = "document_parsing"
    CONFIGURATION = "configuration"
    EXTERNAL_SERVICE = "external_service"


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_SEVERITY_LOG_LEVELS = {
    ErrorSeverity.LOW: logging.INFO,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.HIGH: logging.ERROR,
}


class ATSScannerError(Exception):
    """Base exception for the ATS Scanner"""

    kind: ErrorKind = ErrorKind.VALIDATION
    severity: ErrorSeverity = ErrorSeverity.LOW
    default_code: str = "ATS_SCANNER_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_kind": self.kind.value,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    def log(self, logger: logging.Logger, operation: str = None) -> "ATSScannerError":
        """Log this error at the level derived from its severity and return it"""
        prefix = f"{operation} failed" if operation else "Pipeline error"
        logger.log(
            _SEVERITY_LOG_LEVELS[self.severity],
            f"{prefix} [{self.kind.value}/{self.error_code}]: {self.message}",
            extra={"error_kind": self.kind.value, "error_code": self.error_code}
        )
        return self


class ValidationError(ATSScannerError):
    """Raised when input is malformed or empty"""

    default_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)[:200]
        super().__init__(message, details=details, **kwargs)


class AnalysisError(ValidationError):
    """Raised when there is nothing to compare after keyword extraction"""

    default_code = "ANALYSIS_ERROR"


class DocumentParsingError(ATSScannerError):
    """Raised when structural extraction of a document fails"""

    kind = ErrorKind.DOCUMENT_PARSING
    severity = ErrorSeverity.MEDIUM
    default_code = "DOCUMENT_PARSING_ERROR"

    def __init__(self, message: str, document_kind: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if document_kind:
            details['document_kind'] = document_kind
        super().__init__(message, details=details, **kwargs)


class ConfigurationError(ATSScannerError):
    """Raised when configuration is invalid or missing"""

    kind = ErrorKind.CONFIGURATION
    severity = ErrorSeverity.MEDIUM
    default_code = "CONFIGURATION_ERROR"

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, details=details, **kwargs)


class ExternalServiceError(ATSScannerError):
    """Raised when a collaborator (database, inference service) is unavailable"""

    kind = ErrorKind.EXTERNAL_SERVICE
    severity = ErrorSeverity.HIGH
    default_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, details=details, **kwargs)


# HTTP Exception Mapping
_STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.DOCUMENT_PARSING: 422,
    ErrorKind.CONFIGURATION: 400,
    ErrorKind.EXTERNAL_SERVICE: 502,
}


def map_to_http_exception(exc: ATSScannerError) -> HTTPException:
    """Map pipeline exceptions to HTTP exceptions"""
    status_code = _STATUS_BY_KIND.get(exc.kind, 500)

    detail = {
        "error": exc.to_dict(),
        "message": exc.message
    }

    return HTTPException(status_code=status_code, detail=detail)


class ExceptionContext:
    """Context manager that logs an operation and wraps unexpected errors

    Pipeline errors pass through untouched. Anything else raised inside the
    block is re-raised as ``wrap_as`` with the original exception as cause.
    """

    def __init__(
        self,
        operation: str,
        logger: logging.Logger = None,
        wrap_as: Type[ATSScannerError] = ValidationError,
        **context
    ):
        self.operation = operation
        self.logger = logger
        self.wrap_as = wrap_as
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}")
            return False

        if isinstance(exc_val, ATSScannerError):
            return False
        if not isinstance(exc_val, Exception):
            # KeyboardInterrupt, CancelledError and friends
            return False

        wrapped_exc = self.wrap_as(
            f"{self.operation} failed: {exc_val}",
            details=dict(self.context),
            cause=exc_val
        )
        if self.logger:
            wrapped_exc.log(self.logger, self.operation)
        raise wrapped_exc from exc_val


def raise_logged(exc: ATSScannerError, logger: logging.Logger, operation: Optional[str] = None):
    """Log ``exc`` at its severity, then raise it"""
    raise exc.log(logger, operation)
