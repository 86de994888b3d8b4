"""Process exit codes.

Every failure the tool reports (bad input, rejected credentials, a failed
API step, a broken pipeline input) exits with ``FAILURE``. ``USAGE_ERROR``
is what Click itself uses for malformed command lines and is listed here so
callers can compare against it.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands. Values are stable."""

    OK = 0
    FAILURE = 1
    USAGE_ERROR = 2
