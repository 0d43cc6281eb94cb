from mocktsy.allocator import (
    EMPTY_SLOT,
    ImagePools,
    UniquenessState,
    allocate,
    allocate_group,
    pick_images_for_mockup,
    uniqueness_groups,
)
from mocktsy.catalog import MOCKUP_CATALOG


def refs(n, prefix="img"):
    return [f"{prefix}-{i:02d}.png" for i in range(n)]


def test_overview_group_never_repeats_an_image():
    pools = ImagePools(selected=refs(20))
    allocation = allocate([3, 4, 5, 6], pools)

    assert [len(allocation[m]) for m in (3, 4, 5, 6)] == [9, 16, 9, 16]
    filled = [ref for m in (3, 4, 5, 6) for ref in allocation[m] if ref]
    empty = [ref for m in (3, 4, 5, 6) for ref in allocation[m] if ref == EMPTY_SLOT]
    assert len(filled) == 20
    assert len(set(filled)) == 20
    assert len(empty) == 30


def test_group_shortfall_becomes_empty_slots_not_repeats():
    pool = refs(5) + refs(2)
    allocation = allocate([3, 5], ImagePools(selected=pool))
    filled = [ref for m in (3, 5) for ref in allocation[m] if ref]
    assert sorted(filled) == refs(5)
    assert sum(ref == EMPTY_SLOT for m in (3, 5) for ref in allocation[m]) == 13


def test_group_deals_round_robin():
    allocation = allocate([3, 4], ImagePools(selected=refs(4)))
    assert allocation[3][:2] == ["img-00.png", "img-02.png"]
    assert allocation[4][:2] == ["img-01.png", "img-03.png"]


def test_group_skips_blank_pool_entries():
    allocation = allocate([3], ImagePools(selected=["", "a.png", "", "b.png"]))
    assert allocation[3][:2] == ["a.png", "b.png"]
    assert allocation[3][2:] == [EMPTY_SLOT] * 7


def test_single_selected_overview_still_allocates():
    allocation = allocate([4], ImagePools(selected=refs(10)))
    assert allocation[4][:10] == refs(10)
    assert allocation[4][10:] == [EMPTY_SLOT] * 6


def test_allocate_group_records_usage():
    state = UniquenessState()
    allocation = allocate_group([3, 4], ImagePools(selected=refs(3)), state=state)
    assert state.used_by([3, 4]) == set(refs(3))
    assert EMPTY_SLOT not in state.used_by([3])
    assert len(allocation[3]) == 9


def test_repeat_all_uses_first_image_everywhere():
    allocation = allocate([9], ImagePools(selected=["", "star.png", "moon.png"]))
    assert allocation[9] == ["star.png"] * 3


def test_repeat_all_with_empty_pool():
    assert allocate([9], ImagePools())[9] == [EMPTY_SLOT] * 3


def test_none_source_gets_no_images():
    allocation = allocate([18, 19, 24], ImagePools(selected=refs(5)))
    assert allocation == {18: [], 19: [], 24: []}


def test_palette_mockup_gets_no_frame_images():
    assert allocate([17], ImagePools(selected=refs(5)))[17] == []


def test_ordinary_mockup_reuses_its_own_picks_cyclically():
    images = allocate([26], ImagePools(selected=refs(5)))[26]
    assert len(images) == 12
    assert images[:5] == refs(5)
    assert images[5:] == [refs(5)[i % 5] for i in range(5, 12)]


def test_ordinary_mockup_with_empty_pool():
    assert allocate([25], ImagePools())[25] == [EMPTY_SLOT] * 6


def test_source_pools_are_respected():
    pools = ImagePools(
        selected=["sel.png"],
        user_fullframe=["scene.png"],
        logo_fullframe=["brand.png"],
        user_other_collections=["a.png", "b.png", "c.png"],
    )
    allocation = allocate([10, 11, 21, 22], pools)
    assert allocation[10] == ["scene.png"]
    assert allocation[11] == ["sel.png"]
    assert allocation[21] == ["brand.png"]
    assert allocation[22] == ["a.png", "b.png", "c.png"]


def test_pick_images_for_mockup_avoids_group_usage():
    state = UniquenessState()
    state.record(4, ["img-00.png", "img-01.png"])
    picked = pick_images_for_mockup(MOCKUP_CATALOG[3], ImagePools(selected=refs(4)), state)
    assert picked[:2] == ["img-02.png", "img-03.png"]
    assert "img-00.png" not in picked


def test_unknown_and_duplicate_ids_are_dropped_in_order():
    allocation = allocate([99, 1, 3, 1, 0], ImagePools(selected=refs(12)))
    assert list(allocation) == [1, 3]


def test_pools_are_not_mutated():
    pools = ImagePools(selected=refs(6))
    before = pools.to_dict()
    allocate([3, 4, 1, 26], pools)
    assert pools.to_dict() == before


def test_uniqueness_groups_connects_selected_members():
    assert uniqueness_groups([1, 5, 7, 3, 5]) == [[5, 3]]
    assert uniqueness_groups([1, 2, 7]) == []


def test_pools_from_dict_fills_missing_sources():
    pools = ImagePools.from_dict({"selected": ["a.png"], "logo_fullframe": None})
    assert pools.selected == ["a.png"]
    assert pools.user_fullframe == []
    assert pools.logo_fullframe == []
