"""Typed exceptions raised by the pickup pipeline.

Every stage of ``request_pickup`` (build, transmit, read, decode) raises
its own subclass of ``PickupError`` so callers can tell a request that
never left the process from one that may have reached ODFL.

Usage:
    try:
        result = client.request_pickup(request)
    except TransmissionError as e:
        # The pickup may or may not have been scheduled.
        logger.error("%s (retryable=%s)", e, e.is_retryable)
"""

from dataclasses import dataclass, field

from odfl_pickup.errors.registry import get_error


@dataclass
class PickupError(Exception):
    """Base pickup error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        operation: Name of the operation that failed.
        remediation: Action user should take to resolve.
        is_retryable: Whether the operation can be retried without user action.
        details: Additional context dictionary.
    """

    code: str
    message: str
    operation: str = "odfl_pickup.request_pickup"
    remediation: str = ""
    is_retryable: bool = False
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return formatted error message."""
        return f"[{self.code}] {self.operation}: {self.message}"

    @classmethod
    def from_code(cls, code: str, operation: str, **kwargs: object) -> "PickupError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            operation: Operation name the error is wrapped with.
            **kwargs: Context values for message template substitution.
                The special key 'details' is stored on the error instead.

        Returns:
            Instance of the calling class with formatted message.
        """
        details = kwargs.pop("details", None) or {}
        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                operation=operation,
                details=details,  # type: ignore[arg-type]
            )

        try:
            message = error_def.message_template.format(**kwargs)
        except KeyError:
            message = error_def.message_template

        return cls(
            code=error_def.code,
            message=message,
            operation=operation,
            remediation=error_def.remediation,
            is_retryable=error_def.is_retryable,
            details=details,  # type: ignore[arg-type]
        )


class SerializationError(PickupError):
    """The request object could not be turned into the wire payload."""


class TransmissionError(PickupError):
    """Network failure, timeout, or connection fault during the POST."""


class ReadError(PickupError):
    """The response stream could not be fully read."""


class DecodeError(PickupError):
    """The response body could not be parsed into the expected shape."""


class CarrierFaultError(PickupError):
    """ODFL answered with a fault instead of a confirmation."""
