import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageFont, ImageOps

from .catalog import (
    BASE_COORD,
    MOCKUP_CATALOG,
    Align,
    FitMode,
    FontRole,
    Frame,
    LogoMode,
    LogoPlacement,
    MockupDefinition,
    Rect,
    TextBox,
    get_mockup,
)
from .images import ImageLoader, ImageLoadError
from .plan import BuildPlanItem


logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class OutputSize:
    width: int
    height: int


EXPORT_PROFILES: Dict[str, OutputSize] = {
    "etsy_square": OutputSize(2000, 2000),
    "cf_square": OutputSize(2800, 2800),
    "cm_square": OutputSize(3000, 3000),
    "tpt_square": OutputSize(2400, 2400),
    "shopify_rect": OutputSize(2500, 2000),
}
DEFAULT_PROFILE = "etsy_square"

BACKGROUND: Color = (255, 255, 255)
CHECKER_LIGHT = "#f3f4f6"
CHECKER_DARK = "#e5e7eb"
TEXT_COLOR = "#111827"
LOGO_OPACITY = 0.95

# Font sizes in base units, scaled with the canvas.
FONT_SIZES: Dict[FontRole, int] = {FontRole.HEADING: 42, FontRole.BODY: 26}


@dataclass
class FontChoices:
    heading_font_path: Optional[str] = None
    body_font_path: Optional[str] = None

    def path_for(self, role: FontRole) -> Optional[str]:
        if role is FontRole.HEADING:
            return self.heading_font_path or self.body_font_path
        return self.body_font_path or self.heading_font_path


@dataclass(frozen=True)
class Transform:
    """
    Maps base coordinates onto the output canvas with one uniform scale.
    Non-square outputs centre the scaled base square.
    """

    scale: float
    offset_x: float = 0.0
    offset_y: float = 0.0

    @classmethod
    def for_size(cls, size: OutputSize) -> "Transform":
        scale = min(size.width, size.height) / BASE_COORD
        return cls(
            scale=scale,
            offset_x=(size.width - BASE_COORD * scale) / 2,
            offset_y=(size.height - BASE_COORD * scale) / 2,
        )

    def x(self, value: float) -> float:
        return self.offset_x + value * self.scale

    def y(self, value: float) -> float:
        return self.offset_y + value * self.scale

    def box(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        return (
            int(round(self.x(x))),
            int(round(self.y(y))),
            max(1, int(round(w * self.scale))),
            max(1, int(round(h * self.scale))),
        )


def fit_rect(
    img_w: float,
    img_h: float,
    box_w: float,
    box_h: float,
    mode: FitMode = FitMode.CONTAIN,
) -> Tuple[float, float, float, float]:
    """
    Aspect-preserving placement of an image inside a box.

    CONTAIN keeps the whole image visible; COVER fills the box and lets the
    excess hang over the edges. The image is centred on the free axis.
    Returns (x, y, w, h) relative to the box origin.
    """
    img_ratio = img_w / img_h
    box_ratio = box_w / box_h
    widest = img_ratio > box_ratio if mode is FitMode.CONTAIN else img_ratio < box_ratio
    if widest:
        w = box_w
        h = w / img_ratio
    else:
        h = box_h
        w = h * img_ratio
    return ((box_w - w) / 2, (box_h - h) / 2, w, h)


def new_surface(size: OutputSize) -> Optional[Image.Image]:
    """Allocate a drawing surface, or None when no surface can be created."""
    if size.width < 1 or size.height < 1:
        return None
    try:
        return Image.new("RGBA", (size.width, size.height), BACKGROUND + (255,))
    except (ValueError, MemoryError) as exc:
        logger.warning("Cannot allocate %dx%d surface: %s", size.width, size.height, exc)
        return None


def render_mockup(
    layout: MockupDefinition,
    images: Sequence[str],
    tokens: Mapping[str, str],
    size: OutputSize,
    logo_ref: Optional[str] = None,
    fonts: Optional[FontChoices] = None,
    palette: Optional[Sequence[str]] = None,
    loader: Optional[ImageLoader] = None,
    surface: Optional[Image.Image] = None,
) -> Image.Image:
    """
    Composite one mockup: background, frame images, palette strip, text,
    then the logo. An asset that fails to load skips only its own draw step.

    When `surface` is given it is cleared and drawn on in place, so one
    canvas can be reused across a sequential export.
    """
    fonts = fonts or FontChoices()
    loader = loader or ImageLoader()
    t = Transform.for_size(size)

    if surface is None:
        surface = new_surface(size)
        if surface is None:
            raise ValueError(f"cannot render at {size.width}x{size.height}")
    elif surface.size != (size.width, size.height):
        raise ValueError(f"surface is {surface.size}, expected {(size.width, size.height)}")

    surface.paste(BACKGROUND + (255,), (0, 0, size.width, size.height))
    if layout.overlay.transparency_background:
        _draw_checkerboard(surface, t)

    placement = layout.overlay.logo
    logo_fills_frame = bool(logo_ref and placement and placement.mode is LogoMode.FRAME)

    for index, frame in enumerate(layout.frames):
        if index == 0 and logo_fills_frame:
            ref = logo_ref
        else:
            ref = images[index] if index < len(images) else ""
        if not ref:
            continue
        try:
            img = loader.load(ref)
        except ImageLoadError as exc:
            logger.warning("Mockup %s frame %d skipped: %s", layout.id, index + 1, exc)
            continue
        _draw_frame_image(surface, frame, img, t)

    if palette and layout.overlay.palette_strip is not None:
        _draw_palette_strip(surface, layout.overlay.palette_strip, palette, t)

    draw = ImageDraw.Draw(surface)
    for box in layout.text_boxes:
        _draw_text_box(draw, box, tokens.get(box.token, "") or "", fonts, t)

    if logo_ref and placement and placement.mode is LogoMode.CORNER:
        try:
            logo = loader.load(logo_ref)
        except ImageLoadError as exc:
            logger.warning("Mockup %s logo skipped: %s", layout.id, exc)
        else:
            _draw_corner_logo(surface, placement, logo, t)

    return surface


def render_plan_item(
    item: BuildPlanItem,
    size: OutputSize,
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    logo_ref: Optional[str] = None,
    fonts: Optional[FontChoices] = None,
    loader: Optional[ImageLoader] = None,
    surface: Optional[Image.Image] = None,
) -> Image.Image:
    layout = get_mockup(item.id, catalog)
    return render_mockup(
        layout,
        images=item.images,
        tokens=item.fields,
        size=size,
        logo_ref=logo_ref,
        fonts=fonts,
        palette=item.palette,
        loader=loader,
        surface=surface,
    )


def _draw_checkerboard(surface: Image.Image, t: Transform) -> None:
    tile = max(16, int(round(24 * t.scale)))
    draw = ImageDraw.Draw(surface)
    width, height = surface.size
    for y in range(0, height, tile):
        for x in range(0, width, tile):
            even = (x // tile + y // tile) % 2 == 0
            draw.rectangle(
                [x, y, x + tile - 1, y + tile - 1],
                fill=CHECKER_LIGHT if even else CHECKER_DARK,
            )


def _draw_frame_image(surface: Image.Image, frame: Frame, img: Image.Image, t: Transform) -> None:
    bx, by, bw, bh = t.box(frame.x, frame.y, frame.w, frame.h)
    if frame.fit is FitMode.COVER:
        # Only the visible crop is resampled.
        placed = ImageOps.fit(img, (bw, bh), Image.LANCZOS)
        offset = (0, 0)
    else:
        fx, fy, fw, fh = fit_rect(img.width, img.height, bw, bh, frame.fit)
        placed = img.resize((max(1, int(round(fw))), max(1, int(round(fh)))), Image.LANCZOS)
        offset = (int(round(fx)), int(round(fy)))

    # Frame-sized tile: anything outside the frame is clipped away.
    tile = Image.new("RGBA", (bw, bh), (0, 0, 0, 0))
    tile.paste(placed, offset)

    if frame.corner_radius > 0:
        radius = min(frame.corner_radius * t.scale, min(bw, bh) / 2)
        mask = Image.new("L", (bw, bh), 0)
        ImageDraw.Draw(mask).rounded_rectangle([0, 0, bw - 1, bh - 1], radius=radius, fill=255)
        tile.putalpha(ImageChops.multiply(tile.getchannel("A"), mask))

    surface.alpha_composite(tile, dest=(max(0, bx), max(0, by)))


def _draw_palette_strip(surface: Image.Image, strip: Rect, palette: Sequence[str], t: Transform) -> None:
    x, y, w, h = t.box(strip.x, strip.y, strip.w, strip.h)
    draw = ImageDraw.Draw(surface)
    swatch = w / len(palette)
    for i, color in enumerate(palette):
        x0 = x + int(round(i * swatch))
        x1 = x + int(round((i + 1) * swatch)) - 1
        draw.rectangle([x0, y, x1, y + h - 1], fill=_parse_color(color))


def _draw_corner_logo(surface: Image.Image, placement: LogoPlacement, logo: Image.Image, t: Transform) -> None:
    size = placement.size * t.scale
    pad = placement.padding * t.scale
    x = max(0.0, t.x(placement.x) - size - pad)
    y = max(0.0, t.y(placement.y) - size - pad)
    box = max(1, int(round(size)))

    fx, fy, fw, fh = fit_rect(logo.width, logo.height, box, box, FitMode.CONTAIN)
    resized = logo.resize((max(1, int(round(fw))), max(1, int(round(fh)))), Image.LANCZOS)
    alpha = resized.getchannel("A").point(lambda a: int(a * LOGO_OPACITY))
    resized.putalpha(alpha)

    surface.alpha_composite(resized, dest=(int(round(x + fx)), int(round(y + fy))))


def _draw_text_box(
    draw: ImageDraw.ImageDraw,
    box: TextBox,
    value: str,
    fonts: FontChoices,
    t: Transform,
) -> None:
    if not value.strip():
        return
    font_size = max(1, int(round(FONT_SIZES[box.font_role] * t.scale)))
    font = _load_font(fonts.path_for(box.font_role), size=font_size)
    max_width = box.w * t.scale
    x = t.x(box.x)
    y = t.y(box.y)
    advance = box.line_height * font_size

    for i, line in enumerate(layout_text_lines(draw, value, font, max_width, box.max_lines)):
        line_w = draw.textlength(line, font=font)
        if box.align is Align.CENTER:
            lx = x + (max_width - line_w) / 2
        elif box.align is Align.RIGHT:
            lx = x + max_width - line_w
        else:
            lx = x
        draw.text((lx, y + i * advance), line, font=font, fill=TEXT_COLOR)


def layout_text_lines(
    draw: ImageDraw.ImageDraw,
    text: str,
    font: ImageFont.ImageFont,
    max_width: float,
    max_lines: int,
) -> List[str]:
    """Wrapped lines of `text`, truncated to the first `max_lines`."""
    if max_lines <= 0:
        return []
    return wrap_text(draw, text, font, max_width)[:max_lines]


def wrap_text(
    draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont, max_width: float
) -> List[str]:
    """
    Greedy word wrap. Explicit newlines always break; a word wider than the
    box keeps a line of its own rather than being split.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split():
            test = f"{current} {word}".strip()
            if draw.textlength(test, font=font) <= max_width or not current:
                current = test
            else:
                lines.append(current)
                current = word
        if current:
            lines.append(current)
    return lines


def _parse_color(color_str: str, default: Color = (204, 204, 204)) -> Color:
    """
    Parse hex color strings like '#FF0000' or 'FF0000' into an RGB tuple.
    Falls back to `default` if parsing fails.
    """
    s = color_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) == 6:
        try:
            return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
        except ValueError:
            pass
    return default


SYSTEM_FONTS = [
    # macOS
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/System/Library/Fonts/Helvetica.ttc",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "/Library/Fonts/Arial.ttf",
    # Linux
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    # Windows
    "C:/Windows/Fonts/arial.ttf",
    "C:/Windows/Fonts/calibri.ttf",
]


def _load_font(font_path: Optional[str], size: int) -> ImageFont.ImageFont:
    """
    Load a TrueType font, preferring the caller's choice, then any font
    shipped in the project's fonts/ folder, then common system fonts.
    Falls back to Pillow's built-in font so text always renders.
    """
    candidates: List[str] = []
    if font_path:
        candidates.append(font_path)

    fonts_dir = Path(__file__).parent.parent / "fonts"
    if fonts_dir.exists():
        candidates.extend(str(p) for p in sorted(fonts_dir.glob("*.ttf")))
        candidates.extend(str(p) for p in sorted(fonts_dir.glob("*.otf")))

    candidates.extend(SYSTEM_FONTS)

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size=size)
        except OSError:
            continue

    return ImageFont.load_default(size=size)
