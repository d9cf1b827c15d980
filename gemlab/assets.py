"""Asset resolution: turn logical image references into bytes.

The layout engine never reads files or talks to the network; callers pick an
``AssetProvider`` (local directory, HTTP base URL, or an in-memory mapping)
and hand the resolved bytes to ``ReportRequest``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Protocol
from urllib.error import URLError
from urllib.parse import quote, urljoin, urlparse
from urllib.request import Request, urlopen

from .report.errors import AssetFetchFailure
from .worker_pool import WorkerPool

if TYPE_CHECKING:
    from .config import AssetsConfig

LOGGER = logging.getLogger(__name__)


class AssetProvider(Protocol):
    def fetch(self, ref: str) -> bytes: ...


class LocalAssetProvider:
    """Reads references as paths below *root* (leading ``/`` is ignored)."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def fetch(self, ref: str) -> bytes:
        path = (self.root / ref.lstrip("/")).resolve()
        if not path.is_relative_to(self.root):
            raise AssetFetchFailure(ref, f"path escapes asset root {self.root}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise AssetFetchFailure(ref, str(exc)) from exc


def _validate_url(url: str) -> None:
    if urlparse(url).scheme not in {"http", "https"}:
        raise ValueError(f"Refusing non-HTTP URL for asset fetch: {url}")


class HttpAssetProvider:
    """Fetches references relative to *base_url*; absolute URLs are used as-is."""

    def __init__(self, base_url: str, timeout_s: float = 30.0) -> None:
        _validate_url(base_url)
        self.base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self.timeout_s = timeout_s

    def url_for(self, ref: str) -> str:
        if urlparse(ref).scheme:
            return ref
        return urljoin(self.base_url, quote(ref.lstrip("/")))

    def fetch(self, ref: str) -> bytes:
        url = self.url_for(ref)
        try:
            _validate_url(url)
        except ValueError as exc:
            raise AssetFetchFailure(ref, str(exc)) from exc
        req = Request(url, headers={"User-Agent": "gemlab"})
        try:
            with urlopen(req, timeout=self.timeout_s) as resp:  # noqa: S310
                return resp.read()
        except (URLError, TimeoutError, OSError) as exc:
            raise AssetFetchFailure(ref, str(exc)) from exc


class InMemoryAssetProvider:
    def __init__(self, assets: Mapping[str, bytes]) -> None:
        self.assets = dict(assets)

    def fetch(self, ref: str) -> bytes:
        try:
            return self.assets[ref]
        except KeyError:
            raise AssetFetchFailure(ref, "not found") from None


@dataclass(frozen=True)
class AssetRefs:
    subject_image: str | None = None
    logo: str | None = None
    identifier_image: str | None = None
    signature: str | None = None


@dataclass(frozen=True)
class ResolvedAssets:
    subject_image: bytes | None = field(default=None, repr=False)
    logo: bytes | None = field(default=None, repr=False)
    identifier_image: bytes | None = field(default=None, repr=False)
    signature: bytes | None = field(default=None, repr=False)


_SLOTS = ("subject_image", "logo", "identifier_image", "signature")


def resolve_assets(
    provider: AssetProvider,
    refs: AssetRefs,
    pool: WorkerPool | None = None,
) -> ResolvedAssets:
    """Fetch every present reference; the first failure propagates unretried."""
    wanted = [(slot, getattr(refs, slot)) for slot in _SLOTS]
    wanted = [(slot, ref.strip()) for slot, ref in wanted if ref and ref.strip()]
    if not wanted:
        return ResolvedAssets()

    def _fetch(item: tuple[str, str]) -> bytes:
        slot, ref = item
        data = provider.fetch(ref)
        LOGGER.debug("Fetched %s asset %r (%d bytes)", slot, ref, len(data))
        return data

    if pool is None:
        with WorkerPool(max_workers=len(wanted), thread_name_prefix="gemlab-assets") as own:
            blobs = own.map_ordered(_fetch, wanted)
    else:
        blobs = pool.map_ordered(_fetch, wanted)
    return ResolvedAssets(**{slot: blob for (slot, _), blob in zip(wanted, blobs, strict=True)})


def provider_from_config(cfg: AssetsConfig) -> AssetProvider:
    if cfg.source == "http":
        return HttpAssetProvider(cfg.base_url, timeout_s=cfg.timeout_s)
    return LocalAssetProvider(cfg.root)
