from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from dispatch.github.http import HttpError

__all__ = ["CatalogError", "from_http_error"]


@dataclass(frozen=True, slots=True)
class CatalogError:
    kind: Literal["network", "decode"]
    message: str
    hint: str | None = None


def from_http_error(error: HttpError) -> CatalogError:
    """Classify a transport error: undecodable bodies are decode errors."""
    if error.decode:
        return CatalogError(kind="decode", message=str(error), hint=error.url)
    return CatalogError(kind="network", message=str(error), hint=error.url)
