import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from .images import ImageLoader, ImageLoadError


logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

PALETTE_SIZE = 6
FALLBACK_PALETTE: List[str] = ["#000000", "#ffffff", "#cccccc", "#666666", "#999999", "#333333"]

MAX_IMAGES = 12
SAMPLE_SIZE = 64
GRID_STEPS = 8
MAX_SAMPLES = 2048
ITERATIONS = 8


def sample_image(img: Image.Image) -> List[RGB]:
    """
    Shrink an image to SAMPLE_SIZE square and read an evenly spaced
    GRID_STEPS x GRID_STEPS grid of pixels. Transparency is flattened onto
    white first so empty clipart backgrounds do not read as black (a raw
    canvas read would report them as (0, 0, 0) and pull clusters dark).
    """
    flat = Image.new("RGBA", img.size, (255, 255, 255, 255))
    flat.alpha_composite(img.convert("RGBA"))
    small = flat.convert("RGB").resize((SAMPLE_SIZE, SAMPLE_SIZE), Image.BILINEAR)

    cell = SAMPLE_SIZE / GRID_STEPS
    samples: List[RGB] = []
    for gy in range(GRID_STEPS):
        for gx in range(GRID_STEPS):
            px = int((gx + 0.5) * cell)
            py = int((gy + 0.5) * cell)
            samples.append(small.getpixel((px, py)))
    return samples


def cluster_colors(samples: Sequence[RGB], k: int, iterations: int = ITERATIONS) -> List[RGB]:
    """
    Small fixed-iteration k-means in RGB space.

    Centroids start at evenly spaced indices into `samples`, so the result
    depends only on sample order. A centroid that attracts no samples in an
    iteration keeps its previous position.
    """
    if not samples or k <= 0:
        return []

    data = np.asarray(samples, dtype=np.float64)
    n = data.shape[0]
    centroids = data[[int(i * n / k) for i in range(k)]].copy()

    for _ in range(iterations):
        d2 = ((data[:, None, :] - centroids[None, :, :]) ** 2).sum(axis=2)
        labels = np.argmin(d2, axis=1)
        for c in range(k):
            mask = labels == c
            if mask.any():
                centroids[c] = data[mask].mean(axis=0)

    return [tuple(int(np.floor(v + 0.5)) for v in c) for c in centroids]


def to_hex(rgb: Iterable[float]) -> str:
    r, g, b = (max(0, min(255, int(v))) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def extract_palette(
    image_refs: Sequence[str],
    k: int = PALETTE_SIZE,
    loader: Optional[ImageLoader] = None,
) -> List[str]:
    """
    Reduce up to MAX_IMAGES images to exactly `k` representative hex colors.

    Images that fail to load contribute no samples. When clustering yields
    fewer than `k` colors (no usable images), the neutral fallback ramp
    fills the remainder.
    """
    loader = loader or ImageLoader()
    samples: List[RGB] = []
    for ref in list(image_refs)[:MAX_IMAGES]:
        if not ref:
            continue
        try:
            img = loader.load(ref)
        except ImageLoadError as exc:
            logger.warning("Palette sample skipped: %s", exc)
            continue
        samples.extend(sample_image(img))
        if len(samples) >= MAX_SAMPLES:
            samples = samples[:MAX_SAMPLES]
            break

    colors = [to_hex(c) for c in cluster_colors(samples, k)]
    while len(colors) < k:
        colors.append(FALLBACK_PALETTE[len(colors) % len(FALLBACK_PALETTE)])
    return colors[:k]
