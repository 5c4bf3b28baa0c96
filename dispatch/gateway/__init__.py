"""Boot gateway: serve release assets to network-booting firmware."""

from dispatch.gateway.context import (
    AssetLookup,
    GatewayContext,
    build_context,
    default_lookup,
    lookup_by_name,
    lookup_fixed,
)
from dispatch.gateway.policy import DEFAULT_POLICY, RedirectPolicy
from dispatch.gateway.upstream import (
    MockUpstreamClient,
    RealUpstreamClient,
    UpstreamClient,
    UpstreamError,
    UpstreamResponse,
)

__all__ = [
    # context
    "AssetLookup",
    "GatewayContext",
    "build_context",
    "default_lookup",
    "lookup_by_name",
    "lookup_fixed",
    # policy
    "DEFAULT_POLICY",
    "RedirectPolicy",
    # upstream
    "MockUpstreamClient",
    "RealUpstreamClient",
    "UpstreamClient",
    "UpstreamError",
    "UpstreamResponse",
]
