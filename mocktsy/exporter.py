"""
Render planned mockups and bundle them into a ZIP (or a multi-page PDF).

Archive layout is flat:  <slug>-mockup-1.png, <slug>-mockup-2.png, ...
numbered by position in the plan.
"""

import io
import logging
import re
import zipfile
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from PIL import Image

from .catalog import MOCKUP_CATALOG, MockupDefinition
from .images import ImageLoader
from .plan import BuildPlanItem
from .render import FontChoices, OutputSize, new_surface, render_plan_item


logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

IMAGE_EXT = "png"
DEFAULT_SLUG = "clipart"


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (text or "").lower())
    return slug.strip("-") or DEFAULT_SLUG


def archive_name(collection_name: str, index: int, ext: str = IMAGE_EXT) -> str:
    return f"{slugify(collection_name)}-mockup-{index}.{ext}"


def export_all(
    plan_items: Sequence[BuildPlanItem],
    output_size: OutputSize,
    collection_name: str,
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    logo_ref: Optional[str] = None,
    fonts: Optional[FontChoices] = None,
    loader: Optional[ImageLoader] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> bytes:
    """
    Render every plan item in order onto one reused surface and return the
    bytes of a ZIP holding one PNG per item.

    When no drawing surface can be created the result is an empty (but
    valid) archive; callers should treat that as a degraded export.
    """
    loader = loader or ImageLoader()
    buffer = io.BytesIO()
    total = len(plan_items)

    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        surface = new_surface(output_size)
        if surface is None:
            logger.warning("No drawing surface available; exporting an empty archive")
        else:
            for index, item in enumerate(plan_items, start=1):
                rendered = render_plan_item(
                    item,
                    output_size,
                    catalog=catalog,
                    logo_ref=logo_ref,
                    fonts=fonts,
                    loader=loader,
                    surface=surface,
                )
                zf.writestr(archive_name(collection_name, index), _encode_png(rendered))
                if on_progress:
                    on_progress(index, total)

    data = buffer.getvalue()
    logger.info("Archive ready: %d mockup(s), %d KB", total if surface is not None else 0, len(data) // 1024)
    return data


def export_pdf(
    plan_items: Sequence[BuildPlanItem],
    output_size: OutputSize,
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    logo_ref: Optional[str] = None,
    fonts: Optional[FontChoices] = None,
    loader: Optional[ImageLoader] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> bytes:
    """One page per plan item, in plan order. Returns b"" when nothing was rendered."""
    loader = loader or ImageLoader()
    pages: List[Image.Image] = []
    total = len(plan_items)
    for index, item in enumerate(plan_items, start=1):
        rendered = render_plan_item(
            item, output_size, catalog=catalog, logo_ref=logo_ref, fonts=fonts, loader=loader
        )
        pages.append(rendered.convert("RGB"))
        if on_progress:
            on_progress(index, total)

    if not pages:
        return b""
    buffer = io.BytesIO()
    pages[0].save(buffer, format="PDF", save_all=True, append_images=pages[1:], resolution=300.0)
    return buffer.getvalue()


def archive_entries(data: bytes) -> List[str]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return zf.namelist()


def write_archive(data: bytes, output_dir: Path, collection_name: str, suffix: str = "mockups.zip") -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{slugify(collection_name)}-{suffix}"
    path.write_bytes(data)
    return path


def _encode_png(img: Image.Image) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()
