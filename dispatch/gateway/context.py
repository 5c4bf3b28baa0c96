"""Shared, immutable state handed to every gateway connection."""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from dispatch.gateway.policy import DEFAULT_POLICY, RedirectPolicy
from dispatch.gateway.upstream import RealUpstreamClient, UpstreamClient
from dispatch.github.auth import Credential
from dispatch.github.catalog import Catalog
from dispatch.github.models import Asset
from dispatch.output.status import StatusSink

__all__ = [
    "AssetLookup",
    "GatewayContext",
    "build_context",
    "default_lookup",
    "lookup_by_name",
    "lookup_fixed",
]

AssetLookup = Callable[[str], Asset | None]


def lookup_by_name(assets: Sequence[Asset]) -> AssetLookup:
    """Serve an asset when the last path segment equals its name."""
    by_name = {asset.name: asset for asset in assets}

    def lookup(path: str) -> Asset | None:
        return by_name.get(posixpath.basename(path.rstrip("/")))

    return lookup


def lookup_fixed(asset: Asset) -> AssetLookup:
    """Serve the same asset whatever path the firmware asks for."""

    def lookup(path: str) -> Asset | None:
        del path
        return asset

    return lookup


def default_lookup(assets: Sequence[Asset]) -> AssetLookup:
    # A single remaining asset is served on any path so firmware boot URLs
    # do not need to know release file names.
    if len(assets) == 1:
        return lookup_fixed(assets[0])
    return lookup_by_name(assets)


@dataclass(frozen=True, slots=True)
class GatewayContext:
    """Everything a connection handler may read.

    Copies of this value are cheap; nothing in it is written after startup
    except the append-only status sink.
    """

    catalog: Catalog
    upstream: UpstreamClient
    lookup: AssetLookup
    status: StatusSink


def build_context(
    catalog: Catalog,
    credential: Credential,
    assets: Sequence[Asset],
    status: StatusSink,
    *,
    policy: RedirectPolicy = DEFAULT_POLICY,
) -> GatewayContext:
    """Wire the production upstream client.

    Public repositories are fetched without credentials.
    """
    token = credential.token if catalog.private else None
    return GatewayContext(
        catalog=catalog,
        upstream=RealUpstreamClient(policy=policy, token=token),
        lookup=default_lookup(assets),
        status=status,
    )
