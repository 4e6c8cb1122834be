"""Process exit codes for sfp commands.

The publish command exits 0 only when every matching artifact was published.
Any other value tells CI which class of failure stopped or tainted the run.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad arguments, publish script not found)
    - 2: Environment error (unreadable or invalid config)
    - 3: Publish error (one or more artifacts failed or were not promoted)
    - 4: Network error (released package version query failed)
    - 5: I/O error (artifact directory missing)
    - 6: Git error (tag creation or push failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    PUBLISH_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5
    GIT_ERROR = 6
