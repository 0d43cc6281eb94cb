import base64
import io
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import unquote, urlparse

import requests
from PIL import Image


DEFAULT_TIMEOUT = 20.0


class ImageLoadError(Exception):
    """Raised when an image reference cannot be fetched or decoded."""


class ImageLoader:
    """
    Resolve opaque image references into decoded RGBA images.

    Supported references:
    - http(s) URLs (fetched with `requests`)
    - data: URIs with base64 payloads
    - file:// URLs and plain filesystem paths (relative paths resolve
      against `base_dir`)

    Decoded images are cached per reference for the lifetime of the loader,
    so the same clipart shared by several mockups is only fetched once.
    Callers must treat returned images as read-only.
    """

    def __init__(
        self,
        base_dir: Optional[Path] = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_dir = base_dir
        self.timeout = timeout
        self.session = session or requests.Session()
        self._cache: Dict[str, Image.Image] = {}

    def load(self, ref: str) -> Image.Image:
        if not ref:
            raise ImageLoadError("empty image reference")
        cached = self._cache.get(ref)
        if cached is not None:
            return cached

        raw = self._read_bytes(ref)
        try:
            with Image.open(io.BytesIO(raw)) as img:
                decoded = img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise ImageLoadError(f"cannot decode image {_short(ref)}: {exc}") from exc

        self._cache[ref] = decoded
        return decoded

    def _read_bytes(self, ref: str) -> bytes:
        if ref.startswith("data:"):
            return _decode_data_uri(ref)

        parsed = urlparse(ref)
        if parsed.scheme in ("http", "https"):
            try:
                response = self.session.get(ref, timeout=self.timeout)
                response.raise_for_status()
            except requests.RequestException as exc:
                raise ImageLoadError(f"cannot fetch {_short(ref)}: {exc}") from exc
            return response.content

        path = Path(unquote(parsed.path)) if parsed.scheme == "file" else Path(ref)
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        try:
            return path.read_bytes()
        except OSError as exc:
            raise ImageLoadError(f"cannot read {path}: {exc}") from exc


def _decode_data_uri(ref: str) -> bytes:
    header, _, payload = ref.partition(",")
    if ";base64" not in header:
        raise ImageLoadError("only base64 data URIs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError as exc:
        raise ImageLoadError(f"bad base64 payload: {exc}") from exc


def _short(ref: str) -> str:
    return ref if len(ref) <= 80 else ref[:77] + "..."
