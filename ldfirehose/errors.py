"""
Exception types raised or reported by the Firehose integration.

Only :class:`ConfigurationError` ever propagates to application code, and only from the
:class:`ldfirehose.sender.FirehoseSender` constructor. The others are used internally and
reported through :class:`ldfirehose.sender.DeliveryOutcome` or the package logger.
"""

from typing import Optional


class FirehoseError(Exception):
    """Base class for all errors defined by this package."""


class ConfigurationError(FirehoseError):
    """
    Raised when a sender cannot be constructed because no delivery stream name or no
    AWS credentials could be resolved.

    Applications normally catch this once at startup and continue without exporting
    experiment events.
    """


class ContextExtractionError(FirehoseError):
    """The evaluation context had a shape that could not be read."""


class SerializationError(FirehoseError):
    """A value or record could not be encoded as JSON for delivery."""


class TransportError(FirehoseError):
    """
    A call to Kinesis Data Firehose failed.

    :param message: a description of the failed operation
    :param cause: the underlying botocore exception, if any
    """

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super(TransportError, self).__init__(message)
        self._cause = cause

    @property
    def cause(self) -> Optional[Exception]:
        return self._cause
