"""Exit codes for the dispatch CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad arguments, unreadable report file)
- 2: Authentication required (no token from arguments, env or gh)
- 3: Network error (GitHub API unreachable)
- 4: Upstream error (GitHub answered with something we cannot decode)
- 5: I/O error (config file, listen socket)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    OK = 0
    USER_ERROR = 1
    AUTH_ERROR = 2
    NETWORK_ERROR = 3
    UPSTREAM_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
