"""Credential acquisition.

A token comes from the caller (``--token`` or ``GITHUB_TOKEN``), else from an
existing GitHub CLI session. dispatch never logs in interactively; when neither
source has a token the caller gets remediation text to show the user.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from dispatch.core.result import Err, Ok, Result
from dispatch.platform.process import run as run_process

__all__ = [
    "AUTH_REMEDIATION",
    "AuthError",
    "Credential",
    "TokenHelper",
    "authenticate",
    "gh_auth_token",
]

GH_TIMEOUT_SECONDS = 10.0

AUTH_REMEDIATION = """\
Option 1 - Use GitHub CLI (recommended):
  gh auth login
  # Re-run this command

Option 2 - Create a Personal Access Token manually:
  1. Visit: https://github.com/settings/tokens/new
  2. Select the target repository and grant:
       - Contents: Read (for downloading release assets)
       - Issues: Write (for creating issues)
  3. Click 'Generate token'

  export GITHUB_TOKEN=<YOUR_TOKEN>
  # Re-run this command"""

TokenHelper = Callable[[], str | None]


@dataclass(frozen=True, slots=True)
class Credential:
    token: str
    source: Literal["argument", "gh"]

    def __repr__(self) -> str:
        return f"Credential(token='***', source={self.source!r})"


@dataclass(frozen=True, slots=True)
class AuthError:
    kind: Literal["auth_required"]
    message: str
    hint: str | None = None


def gh_auth_token() -> str | None:
    """Return the token of the current ``gh`` session, if any."""
    if shutil.which("gh") is None:
        return None

    result = run_process(["gh", "auth", "token"], timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return None

    token = result.value.strip()
    return token or None


def authenticate(
    token: str | None,
    *,
    helper: TokenHelper = gh_auth_token,
) -> Result[Credential, AuthError]:
    """Resolve a GitHub token.

    Args:
        token: Caller-supplied token; blank strings count as missing.
        helper: Fallback token source, queried only when token is missing.

    Returns:
        Ok(Credential), or Err(AuthError) carrying AUTH_REMEDIATION as hint.
    """
    if token is not None and token.strip():
        return Ok(Credential(token=token.strip(), source="argument"))

    session_token = helper()
    if session_token:
        return Ok(Credential(token=session_token, source="gh"))

    return Err(
        AuthError(
            kind="auth_required",
            message="GitHub authentication required: no token from --token, GITHUB_TOKEN or gh",
            hint=AUTH_REMEDIATION,
        )
    )
