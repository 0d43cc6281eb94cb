"""
Pytest configuration and shared test helpers.
"""

import os
import sys
from typing import Dict, List

from PIL import Image


def _ensure_repo_on_path() -> None:
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


_ensure_repo_on_path()

from mocktsy.images import ImageLoadError  # noqa: E402


class FakeLoader:
    """In-memory stand-in for ImageLoader; unknown refs fail like a bad URL."""

    def __init__(self, images: Dict[str, Image.Image] = None) -> None:
        self.images = dict(images or {})
        self.calls: List[str] = []

    def load(self, ref: str) -> Image.Image:
        self.calls.append(ref)
        if ref not in self.images:
            raise ImageLoadError(f"no such image: {ref}")
        return self.images[ref].convert("RGBA")


def solid(color, size=(40, 40)) -> Image.Image:
    return Image.new("RGBA", size, color)

