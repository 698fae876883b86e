"""
Error taxonomy for instruction-hub.

Every failure a flow can report to the user is one of these:
- NotFoundError: repository, path or file absent (or private)
- AuthenticationError: bad or expired token
- ForbiddenError: insufficient permission
- TransportError: network or generic HTTP failure
- MalformedReferenceError: unparseable repository or file reference
- LocalIOError: filesystem read/write failure

Commands catch these, print the message and map `exit_code` to the
process exit status.
"""

from . import exit_codes


class InstructionHubError(Exception):
    """Base class for user-facing instruction-hub errors."""
    exit_code = exit_codes.GENERAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InstructionHubError):
    """Repository, path or file not found (or private)."""
    exit_code = exit_codes.NOT_FOUND


class NotAFileError(NotFoundError):
    """A file URL resolved to something that is not a file."""


class AuthenticationError(InstructionHubError):
    exit_code = exit_codes.AUTH_ERROR


class ForbiddenError(InstructionHubError):
    exit_code = exit_codes.PERMISSION_ERROR


class TransportError(InstructionHubError):
    """Network failure or unexpected HTTP response."""
    exit_code = exit_codes.NETWORK_ERROR


class MalformedReferenceError(InstructionHubError, ValueError):
    exit_code = exit_codes.DATA_ERROR


class LocalIOError(InstructionHubError):
    """Reading or writing an installed file failed."""
    exit_code = exit_codes.PERMISSION_ERROR
