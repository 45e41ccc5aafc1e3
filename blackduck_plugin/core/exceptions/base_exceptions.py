"""Base exception classes for the Black Duck plugin."""

from typing import Optional, Dict, Any


class PluginException(Exception):
    """Base exception class for all plugin exceptions.

    Carries a machine-readable error code, structured details and an
    optional suggestion so the CLI can print something actionable.
    """

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 suggestion: Optional[str] = None):
        """Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code for programmatic handling
            details: Additional details about the error; copied, never mutated
            suggestion: Suggested action to resolve the error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = dict(details or {})
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'exception_type': self.__class__.__name__,
            'message': self.message,
            'error_code': self.error_code,
            'details': self.details,
            'suggestion': self.suggestion,
        }

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}. Suggestion: {self.suggestion}"
        return self.message


class PluginError(PluginException):
    """Error raised for a failed plugin run that was reported cleanly."""
    pass


def add_details(kwargs: Dict[str, Any], **fields: Any) -> Dict[str, Any]:
    """Return ``kwargs`` with a fresh ``details`` dict holding the non-None ``fields``.

    The caller's own ``details`` mapping is left untouched.
    """
    details = dict(kwargs.get('details') or {})
    details.update({key: value for key, value in fields.items() if value is not None})
    kwargs['details'] = details
    return kwargs
