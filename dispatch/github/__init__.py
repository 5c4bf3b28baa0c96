"""GitHub side of dispatch: authentication, release catalog and reports."""

from dispatch.github.auth import AuthError, Credential, authenticate
from dispatch.github.catalog import Catalog
from dispatch.github.errors import CatalogError
from dispatch.github.http import HttpClient, HttpError, MockHttpClient, RealHttpClient, api_headers
from dispatch.github.models import (
    Asset,
    ContentType,
    Issue,
    MilestoneIndex,
    RepoRef,
    Report,
    Unrecognized,
    classify,
)

__all__ = [
    # auth
    "AuthError",
    "Credential",
    "authenticate",
    # catalog
    "Catalog",
    "CatalogError",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "api_headers",
    # models
    "Asset",
    "ContentType",
    "Issue",
    "MilestoneIndex",
    "RepoRef",
    "Report",
    "Unrecognized",
    "classify",
]
