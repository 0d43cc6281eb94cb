import pytest

from mocktsy.catalog import (
    DEFAULT_COPY,
    MOCKUP_CATALOG,
    ImageSource,
    LogoMode,
    UnknownMockupError,
    get_mockup,
)


def test_catalog_has_26_mockups_keyed_by_id():
    assert sorted(MOCKUP_CATALOG) == list(range(1, 27))
    for mid, definition in MOCKUP_CATALOG.items():
        assert definition.id == mid
        assert definition.name


def test_frame_count_matches_slot_count():
    for definition in MOCKUP_CATALOG.values():
        rule = definition.image_rule
        if rule.is_palette or rule.source is ImageSource.NONE:
            assert definition.frames == ()
        else:
            assert len(definition.frames) == rule.slot_count, definition.name


def test_only_mockup_17_is_a_palette():
    palettes = [d.id for d in MOCKUP_CATALOG.values() if d.image_rule.is_palette]
    assert palettes == [17]
    palette = MOCKUP_CATALOG[17]
    assert palette.image_rule.slot_count == 6
    assert palette.overlay.palette_strip is not None


def test_collection_overviews_share_one_symmetric_group():
    for mid in (3, 4, 5, 6):
        group = MOCKUP_CATALOG[mid].image_rule.uniqueness_group
        assert group == frozenset({3, 4, 5, 6}) - {mid}
        for other in group:
            assert mid in MOCKUP_CATALOG[other].image_rule.uniqueness_group


def test_overview_grid_sizes():
    assert [MOCKUP_CATALOG[m].image_rule.slot_count for m in (3, 4, 5, 6)] == [9, 16, 9, 16]


def test_image_sources():
    sources = {mid: d.image_rule.source for mid, d in MOCKUP_CATALOG.items()}
    assert [m for m, s in sources.items() if s is ImageSource.USER_FULL_FRAME] == [10, 12, 14]
    assert [m for m, s in sources.items() if s is ImageSource.LOGO_FULL_FRAME] == [21]
    assert [m for m, s in sources.items() if s is ImageSource.USER_OTHER_COLLECTIONS] == [22]
    assert [m for m, s in sources.items() if s is ImageSource.NONE] == [18, 19, 24]


def test_repeat_all_only_on_mockup_9():
    assert [d.id for d in MOCKUP_CATALOG.values() if d.image_rule.repeat_all] == [9]


def test_logo_placement():
    for mid in (17, 18, 19):
        assert MOCKUP_CATALOG[mid].overlay.logo is None
    assert MOCKUP_CATALOG[21].overlay.logo.mode is LogoMode.FRAME
    assert MOCKUP_CATALOG[1].overlay.logo.mode is LogoMode.CORNER


def test_geometry_is_non_negative():
    for definition in MOCKUP_CATALOG.values():
        for frame in definition.frames:
            assert frame.x >= 0 and frame.y >= 0
            assert frame.w > 0 and frame.h > 0
        for box in definition.text_boxes:
            assert box.w > 0
            assert box.max_lines >= 1


def test_tokens_list_field_bindings_first_without_repeats():
    hero = MOCKUP_CATALOG[1]
    assert hero.tokens == ["clipart_title", "CLIPART_DETAILS"]

    license_guide = MOCKUP_CATALOG[18]
    assert license_guide.tokens[:3] == ["LICENSE_HEADING", "LICENSE_DO_LIST", "LICENSE_DONT_LIST"]
    assert len(license_guide.tokens) == len(set(license_guide.tokens)) == 6


def test_default_copy_covers_every_token():
    missing = {
        token
        for definition in MOCKUP_CATALOG.values()
        for token in definition.tokens
        if token not in DEFAULT_COPY
    }
    assert missing == set()


def test_get_mockup_unknown_id():
    assert get_mockup(7).name == "Mockup 5: Close Up Detail"
    with pytest.raises(UnknownMockupError):
        get_mockup(99)
    with pytest.raises(KeyError):
        get_mockup(0)
