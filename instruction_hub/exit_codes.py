"""
Standard exit codes for instruction-hub commands.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # Repository, path or file not found
PERMISSION_ERROR = 67    # Insufficient permissions or local write failure
NETWORK_ERROR = 68       # Network connection failed
AUTH_ERROR = 69          # Authentication/authorization failed
DATA_ERROR = 70          # Unparseable repository or file reference
PARTIAL_SUCCESS = 71     # Some operations succeeded, some failed
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


def get_exit_code_for_exception(exc: BaseException) -> int:
    """
    Get the appropriate exit code for an exception.

    Exceptions from the instruction-hub taxonomy carry their own code;
    anything else is a general error.
    """
    code = getattr(exc, 'exit_code', None)
    if isinstance(code, int):
        return code
    return GENERAL_ERROR


def exit_code_for_counts(succeeded: int, failed: int) -> int:
    """Exit code for a batch operation given its success/failure counts."""
    if failed == 0:
        return SUCCESS
    if succeeded > 0:
        return PARTIAL_SUCCESS
    return GENERAL_ERROR
