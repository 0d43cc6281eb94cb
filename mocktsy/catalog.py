"""
Declarative layout catalog for the 26 marketing mockups.

Every geometry value is authored in a BASE_COORD x BASE_COORD square and is
scaled to the export size by the renderer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple


BASE_COORD = 2000


class ImageSource(str, Enum):
    NONE = "none"
    SELECTED = "selected"
    USER_FULL_FRAME = "user_fullframe"
    USER_OTHER_COLLECTIONS = "user_other_collections"
    LOGO_FULL_FRAME = "logo_fullframe"


class FitMode(str, Enum):
    CONTAIN = "contain"
    COVER = "cover"


class Align(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class FontRole(str, Enum):
    HEADING = "heading"
    BODY = "body"


class LogoMode(str, Enum):
    # Small badge in the bottom-right corner.
    CORNER = "corner"
    # Logo replaces the image of the primary frame.
    FRAME = "frame"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float


@dataclass(frozen=True)
class Frame:
    x: float
    y: float
    w: float
    h: float
    corner_radius: float = 0
    fit: FitMode = FitMode.CONTAIN


@dataclass(frozen=True)
class TextBox:
    token: str
    x: float
    y: float
    w: float
    line_height: float = 1.25
    align: Align = Align.LEFT
    max_lines: int = 2
    font_role: FontRole = FontRole.BODY


@dataclass(frozen=True)
class LogoPlacement:
    """
    Logo placement. (x, y) is the anchor corner; the logo box of `size`
    units sits `padding` units up and left of it.
    """

    size: float
    x: float = BASE_COORD
    y: float = BASE_COORD
    padding: float = 24
    mode: LogoMode = LogoMode.CORNER


@dataclass(frozen=True)
class Overlay:
    logo: Optional[LogoPlacement] = None
    transparency_background: bool = False
    palette_strip: Optional[Rect] = None


@dataclass(frozen=True)
class ImageRule:
    slot_count: int
    source: ImageSource
    repeat_all: bool = False
    uniqueness_group: FrozenSet[int] = frozenset()
    is_palette: bool = False


@dataclass(frozen=True)
class MockupDefinition:
    id: int
    name: str
    image_rule: ImageRule
    frames: Tuple[Frame, ...] = ()
    text_boxes: Tuple[TextBox, ...] = ()
    overlay: Overlay = Overlay()
    # Named field slot -> token in the field-value map.
    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def tokens(self) -> List[str]:
        """Every token this mockup reads, field bindings first, without repeats."""
        seen: List[str] = []
        for token in list(self.fields.values()) + [t.token for t in self.text_boxes]:
            if token not in seen:
                seen.append(token)
        return seen


class UnknownMockupError(KeyError):
    pass



def _grid(
    cols: int,
    rows: int,
    x0: float,
    y0: float,
    size: float,
    gap: float,
    radius: float,
) -> Tuple[Frame, ...]:
    step = size + gap
    return tuple(
        Frame(x0 + c * step, y0 + r * step, size, size, corner_radius=radius)
        for r in range(rows)
        for c in range(cols)
    )


def _row_of_three(y: float) -> Tuple[Frame, ...]:
    return _grid(3, 1, 160, y, 520, 60, 20)


def _heading(token: str, y: float, align: Align = Align.LEFT, x: float = 160, w: float = 1680) -> TextBox:
    return TextBox(token, x, y, w, line_height=1.2, align=align, max_lines=2, font_role=FontRole.HEADING)


def _body(
    token: str,
    y: float,
    align: Align = Align.LEFT,
    max_lines: int = 3,
    x: float = 160,
    w: float = 1680,
    line_height: float = 1.3,
) -> TextBox:
    return TextBox(token, x, y, w, line_height=line_height, align=align, max_lines=max_lines, font_role=FontRole.BODY)


def _logo(size: float) -> Overlay:
    return Overlay(logo=LogoPlacement(size=size))


_COLLECTION_GROUP = frozenset({3, 4, 5, 6})

_GRID_3X3 = _grid(3, 3, 160, 360, 520, 20, 20)
_GRID_4X4 = _grid(4, 4, 160, 360, 420, 20, 16)

_OVERVIEW_TEXT = (
    _heading("INCLUDED_HEADING", 180),
    _body("INCLUDED_DETAILS", 260),
)
_OVERVIEW_FIELDS = {"heading": "INCLUDED_HEADING", "caption": "INCLUDED_DETAILS"}


def _overview(mockup_id: int, name: str, grid: Tuple[Frame, ...], logo_size: float) -> MockupDefinition:
    return MockupDefinition(
        id=mockup_id,
        name=name,
        image_rule=ImageRule(
            slot_count=len(grid),
            source=ImageSource.SELECTED,
            uniqueness_group=_COLLECTION_GROUP - {mockup_id},
        ),
        frames=grid,
        text_boxes=_OVERVIEW_TEXT,
        overlay=_logo(logo_size),
        fields=_OVERVIEW_FIELDS,
    )


def _use_case(
    mockup_id: int,
    name: str,
    source: ImageSource,
    frame: Frame,
    token_prefix: str,
    heading_y: float,
    details_y: float,
) -> MockupDefinition:
    heading = f"{token_prefix}_HEADING"
    details = f"{token_prefix}_DETAILS"
    return MockupDefinition(
        id=mockup_id,
        name=name,
        image_rule=ImageRule(slot_count=1, source=source),
        frames=(frame,),
        text_boxes=(
            _heading(heading, heading_y, Align.CENTER),
            _body(details, details_y, Align.CENTER, max_lines=2),
        ),
        overlay=_logo(110),
        fields={"heading": heading, "caption": details},
    )


_BRANDING_FRAME = Frame(160, 220, 1680, 1400, corner_radius=24)
_POD_FRAME = Frame(200, 260, 1600, 1300, corner_radius=24)
_CRAFTING_FRAME = Frame(180, 300, 1640, 1280, corner_radius=24)


_MOCKUPS: Tuple[MockupDefinition, ...] = (
    MockupDefinition(
        id=1,
        name="Hero Mockup: Option 1",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(160, 260, 1680, 1200, corner_radius=24),),
        text_boxes=(
            _heading("clipart_title", 140),
            _body("CLIPART_DETAILS", 1540),
        ),
        overlay=_logo(120),
        fields={"title": "clipart_title", "caption": "CLIPART_DETAILS"},
    ),
    MockupDefinition(
        id=2,
        name="Hero Mockup: Option 2",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(160, 220, 1680, 1280, corner_radius=24),),
        text_boxes=(
            _heading("clipart_title", 1560, Align.CENTER),
            _body("CLIPART_DETAILS", 1700, Align.CENTER, max_lines=2),
        ),
        overlay=_logo(120),
        fields={"title": "clipart_title", "caption": "CLIPART_DETAILS"},
    ),
    _overview(3, "Mockup 3a: Collection Overview 1 - 3x3", _GRID_3X3, 100),
    _overview(4, "Mockup 3b: Collection Overview 1 - 4x4", _GRID_4X4, 90),
    _overview(5, "Mockup 4a: Collection Overview 2 - 3x3", _GRID_3X3, 100),
    _overview(6, "Mockup 4b: Collection Overview 2 - 4x4", _GRID_4X4, 90),
    MockupDefinition(
        id=7,
        name="Mockup 5: Close Up Detail",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(200, 360, 1600, 1200, corner_radius=24, fit=FitMode.COVER),),
        text_boxes=(
            _heading("QUALITY_HEADING_1", 180),
            _body("QUALITY_DETAILS_1", 1600),
        ),
        overlay=_logo(110),
        fields={"heading": "QUALITY_HEADING_1", "caption": "QUALITY_DETAILS_1"},
    ),
    MockupDefinition(
        id=8,
        name="Mockup 6: Transparency Demo",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(200, 520, 1600, 1000, corner_radius=24),),
        text_boxes=(
            _heading("TRANSPARENT_HEADING", 200),
            _body("TRANSPARENT_DETAILS", 1680),
        ),
        overlay=Overlay(logo=LogoPlacement(size=100), transparency_background=True),
        fields={"heading": "TRANSPARENT_HEADING", "caption": "TRANSPARENT_DETAILS"},
    ),
    MockupDefinition(
        id=9,
        name="Mockup 7: Transparency Demo",
        image_rule=ImageRule(slot_count=3, source=ImageSource.SELECTED, repeat_all=True),
        frames=_grid(3, 1, 160, 720, 520, 60, 20),
        text_boxes=(
            _heading("QUALITY_HEADING_2", 220, Align.CENTER),
            _body("QUALITY_DETAILS", 1360, Align.CENTER),
        ),
        overlay=Overlay(logo=LogoPlacement(size=90), transparency_background=True),
        fields={"heading": "QUALITY_HEADING_2", "caption": "QUALITY_DETAILS"},
    ),
    _use_case(10, "Mockup 8a: Branding & Logo Use Case - Upload Your Own",
              ImageSource.USER_FULL_FRAME, _BRANDING_FRAME, "MOCKUP_1_A", 80, 1680),
    _use_case(11, "Mockup 8b: Branding & Logo Use Case - Pre-Made",
              ImageSource.SELECTED, _BRANDING_FRAME, "MOCKUP_1_B", 80, 1680),
    _use_case(12, "Mockup 9a: POD Use Case - Upload Your Own",
              ImageSource.USER_FULL_FRAME, _POD_FRAME, "MOCKUP_2_A", 110, 1620),
    _use_case(13, "Mockup 9b: POD Use Case - Pre-Made",
              ImageSource.SELECTED, _POD_FRAME, "MOCKUP_2_B", 110, 1620),
    _use_case(14, "Mockup 10a: Crafting Use Case - Upload Your Own",
              ImageSource.USER_FULL_FRAME, _CRAFTING_FRAME, "MOCKUP_3_A", 150, 1640),
    _use_case(15, "Mockup 10b: Crafting Use Case - Pre-Made",
              ImageSource.SELECTED, _CRAFTING_FRAME, "MOCKUP_3_B", 150, 1640),
    MockupDefinition(
        id=16,
        name="Mockup 11: Digital / Canva Example",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(200, 360, 1600, 1200, corner_radius=24),),
        text_boxes=(
            _heading("PROGRAMS_HEADING", 180),
            _body("PROGRAM_DETAILS", 1600),
        ),
        overlay=_logo(100),
        fields={"heading": "PROGRAMS_HEADING", "caption": "PROGRAM_DETAILS"},
    ),
    MockupDefinition(
        id=17,
        name="Mockup 12: Color Palette",
        # slot_count is the swatch budget here, not a frame count.
        image_rule=ImageRule(slot_count=6, source=ImageSource.SELECTED, is_palette=True),
        text_boxes=(
            _heading("COORDINATED_HEADING", 160),
            _body("COORDINATED_DETAILS", 260),
        ),
        overlay=Overlay(palette_strip=Rect(160, 1680, 1680, 160)),
        fields={"heading": "COORDINATED_HEADING", "caption": "COORDINATED_DETAILS"},
    ),
    MockupDefinition(
        id=18,
        name="Mockup 13: License Guide",
        image_rule=ImageRule(slot_count=0, source=ImageSource.NONE),
        text_boxes=(
            _heading("LICENSE_HEADING", 200, Align.CENTER),
            _body("LICENSE_DETAILS", 320, Align.CENTER, max_lines=2),
            _heading("LICENSE_DO", 440, x=160, w=800),
            _body("LICENSE_DO_LIST", 560, max_lines=12, x=160, w=800),
            _heading("LICENSE_DONT", 440, x=1040, w=800),
            _body("LICENSE_DONT_LIST", 560, max_lines=12, x=1040, w=800),
        ),
        fields={
            "heading": "LICENSE_HEADING",
            "leftCol": "LICENSE_DO_LIST",
            "rightCol": "LICENSE_DONT_LIST",
        },
    ),
    MockupDefinition(
        id=19,
        name="Mockup 14: How It Works",
        image_rule=ImageRule(slot_count=0, source=ImageSource.NONE),
        text_boxes=(_heading("HOW_HEADING", 220),),
        fields={"heading": "HOW_HEADING"},
    ),
    MockupDefinition(
        id=20,
        name="Mockup 15: Consistent Characters",
        image_rule=ImageRule(slot_count=3, source=ImageSource.SELECTED),
        frames=_row_of_three(520),
        text_boxes=(
            _heading("CONSISTENCY_HEADING", 220),
            _body("CONSISTENCY_DETAILS", 1200),
        ),
        overlay=_logo(90),
        fields={"heading": "CONSISTENCY_HEADING", "caption": "CONSISTENCY_DETAILS"},
    ),
    MockupDefinition(
        id=21,
        name="Mockup 16: Brand Trust Logo Image",
        image_rule=ImageRule(slot_count=1, source=ImageSource.LOGO_FULL_FRAME),
        frames=(Frame(160, 300, 1680, 1400, corner_radius=24),),
        text_boxes=(_heading("TAGLINE", 200, Align.CENTER),),
        overlay=Overlay(logo=LogoPlacement(size=0, mode=LogoMode.FRAME)),
        fields={"heading": "TAGLINE"},
    ),
    MockupDefinition(
        id=22,
        name="Mockup 17: Shop Promo",
        image_rule=ImageRule(slot_count=3, source=ImageSource.USER_OTHER_COLLECTIONS),
        frames=_row_of_three(480),
        text_boxes=(
            _heading("DISCOUNT_HEADING", 220),
            _body("DISCOUNT_DETAILS", 1100),
            _body("SHOP_LINK", 1300, max_lines=1),
        ),
        overlay=_logo(80),
        fields={"heading": "DISCOUNT_HEADING", "caption": "DISCOUNT_DETAILS"},
    ),
    MockupDefinition(
        id=23,
        name="Mockup 18: Free Gift",
        image_rule=ImageRule(slot_count=1, source=ImageSource.SELECTED),
        frames=(Frame(200, 540, 1600, 920, corner_radius=24),),
        text_boxes=(
            _heading("FREE_GIFT_HEADING", 220),
            _body("FREE_GIFT_SUBHEADING", 340, max_lines=2, line_height=1.2),
            _body("FREE_GIFT_NAME", 1540, max_lines=2),
        ),
        overlay=_logo(90),
        fields={"heading": "FREE_GIFT_HEADING", "subhead": "FREE_GIFT_SUBHEADING"},
    ),
    MockupDefinition(
        id=24,
        name="Mockup 19: Customer Reviews",
        image_rule=ImageRule(slot_count=0, source=ImageSource.NONE),
        text_boxes=(
            _heading("REVIEWS_HEADING", 220, Align.CENTER),
            _body("REVIEW_1", 520),
            _body("REVIEW_2", 820),
            _body("REVIEW_3", 1120),
        ),
        overlay=_logo(70),
        fields={"heading": "REVIEWS_HEADING"},
    ),
    MockupDefinition(
        id=25,
        name="Mockup 20: Inspirational Moodboard",
        image_rule=ImageRule(slot_count=6, source=ImageSource.SELECTED),
        frames=_grid(3, 2, 160, 360, 520, 20, 20),
        text_boxes=(
            _heading("INSPIRATION_HEADING", 200),
            _body("INSPIRATION_DETAILS", 1500),
        ),
        overlay=_logo(90),
        fields={"heading": "INSPIRATION_HEADING", "caption": "INSPIRATION_DETAILS"},
    ),
    MockupDefinition(
        id=26,
        name="Mockup 21: Final CTA",
        image_rule=ImageRule(slot_count=12, source=ImageSource.SELECTED),
        frames=_grid(4, 3, 160, 420, 420, 20, 16),
        text_boxes=(
            _heading("FINAL_CTA_HEADING", 180, Align.CENTER),
            _body("FINAL_CTA_DETAILS", 1760, Align.CENTER),
            _body("FINAL_CTA_FOOTER", 1900, Align.CENTER, max_lines=1, line_height=1.1),
        ),
        overlay=_logo(80),
        fields={"heading": "FINAL_CTA_HEADING", "caption": "FINAL_CTA_DETAILS"},
    ),
)

MOCKUP_CATALOG: Dict[int, MockupDefinition] = {m.id: m for m in _MOCKUPS}


def get_mockup(mockup_id: int, catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG) -> MockupDefinition:
    try:
        return catalog[mockup_id]
    except KeyError:
        raise UnknownMockupError(f"Mockup {mockup_id!r} is not in the layout catalog") from None


# Stock copy for every token, used when a job opts into default text.
DEFAULT_COPY: Dict[str, str] = {
    "clipart_title": "",
    "clipart_number": "24",
    "CLIPART_DETAILS": "Instant Download | High-Resolution | Commercial Use",
    "INCLUDED_HEADING": "Included in Your Download!",
    "INCLUDED_DETAILS": "High-Resolution Transparent PNG Files | 300 DPI",
    "QUALITY_HEADING_1": "Beautifully Detailed Graphics",
    "QUALITY_DETAILS_1": "Crisp Quality • Perfect for Print or Digital Projects • 300 DPI",
    "TRANSPARENT_HEADING": "Transparent Backgrounds",
    "TRANSPARENT_DETAILS": "Ready to Use • High Quality • Crisp, Clean Edges",
    "QUALITY_HEADING_2": "High Resolution for Every Size",
    "QUALITY_DETAILS": "Scale Up or Down Without Losing Quality",
    "MOCKUP_1_A_HEADING": "Styled Scene Mockup",
    "MOCKUP_1_A_DETAILS": "Showcase your clipart in real-life compositions for instant context.",
    "MOCKUP_1_B_HEADING": "Styled Scene Mockup (Alt)",
    "MOCKUP_1_B_DETAILS": "A complementary layout to highlight versatility and detail.",
    "MOCKUP_2_A_HEADING": "Close-Up Detail",
    "MOCKUP_2_A_DETAILS": "Zoomed view to emphasize brush texture, edges and color depth.",
    "MOCKUP_2_B_HEADING": "Close-Up Detail (Alt)",
    "MOCKUP_2_B_DETAILS": "Alternative crop to spotlight additional elements and finishes.",
    "MOCKUP_3_A_HEADING": "Use Case Examples",
    "MOCKUP_3_A_DETAILS": "Branding • Stationery • Print on Demand • Social Templates",
    "MOCKUP_3_B_HEADING": "Use Case Examples (Alt)",
    "MOCKUP_3_B_DETAILS": "Invitations • Packaging • Wall Art • Sublimation & Crafts",
    "PROGRAMS_HEADING": "Easy to Use in Any Program",
    "PROGRAM_DETAILS": "Drag & Drop in Canva, Photoshop, or Procreate",
    "COORDINATED_HEADING": "Perfectly Coordinated Elements",
    "COORDINATED_DETAILS": "Designed to work seamlessly together",
    "LICENSE_HEADING": "Commercial License Included",
    "LICENSE_DETAILS": "Summary of what’s allowed and what isn’t.",
    "LICENSE_DO": "You Can Use This Clipart To:",
    "LICENSE_DONT": "You Can’t Use This Clipart To:",
    "LICENSE_DO_LIST": (
        "• End products for sale (POD, small business)\n"
        "• Branding, social, printables\n"
        "• Unlimited personal use"
    ),
    "LICENSE_DONT_LIST": (
        "• Resell as-is, redistribute files\n"
        "• Trademark the artwork\n"
        "• Use in logos without significant change"
    ),
    "HOW_HEADING": "How It Works",
    "CONSISTENCY_HEADING": "Consistent Characters",
    "CONSISTENCY_DETAILS": "Shared style & color palette for cohesive scenes and collections.",
    "TAGLINE": "Designed for Creators, Loved by Designers",
    "DISCOUNT_HEADING": "Special Offer",
    "DISCOUNT_DETAILS": "Buy 3+ items & get 50% off with code SAVE50",
    "SHOP_LINK": "",
    "FREE_GIFT_HEADING": "FREE GIFT",
    "FREE_GIFT_SUBHEADING": "With Every Purchase",
    "FREE_GIFT_NAME": "Clipart Club Monthly Freebie",
    "REVIEWS_HEADING": "What Our Customers Say",
    "REVIEW_1": "“Exactly what I needed, beautiful quality!”",
    "REVIEW_2": "“So easy to use in Canva and Procreate.”",
    "REVIEW_3": "“My listings look so professional now!”",
    "INSPIRATION_HEADING": "Endless Creative Possibilities",
    "INSPIRATION_DETAILS": "From branding to print-on-demand, let your imagination guide you.",
    "FINAL_CTA_HEADING": "Instant Download",
    "FINAL_CTA_DETAILS": "Start Creating Today",
    "FINAL_CTA_FOOTER": "Commercial License Included • Lifetime Access",
}
