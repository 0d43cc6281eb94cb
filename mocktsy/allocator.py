from collections import deque
from dataclasses import asdict, dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .catalog import MOCKUP_CATALOG, ImageSource, MockupDefinition


EMPTY_SLOT = ""


@dataclass
class ImagePools:
    """
    Candidate image references, one ordered pool per image source.

    Pools are snapshots: allocation reads them but never mutates them.
    """

    selected: List[str] = field(default_factory=list)
    user_fullframe: List[str] = field(default_factory=list)
    logo_fullframe: List[str] = field(default_factory=list)
    user_other_collections: List[str] = field(default_factory=list)

    def for_source(self, source: ImageSource) -> List[str]:
        if source is ImageSource.NONE:
            return []
        return list(getattr(self, source.value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Iterable[str]]) -> "ImagePools":
        return cls(
            selected=list(data.get("selected") or []),
            user_fullframe=list(data.get("user_fullframe") or []),
            logo_fullframe=list(data.get("logo_fullframe") or []),
            user_other_collections=list(data.get("user_other_collections") or []),
        )

    def to_dict(self) -> Dict[str, List[str]]:
        return asdict(self)


@dataclass
class UniquenessState:
    """Images already consumed per mockup id, scoped to a single plan build."""

    used_by_mockup: Dict[int, Set[str]] = field(default_factory=dict)

    def record(self, mockup_id: int, images: Iterable[str]) -> None:
        self.used_by_mockup[mockup_id] = {img for img in images if img}

    def used_by(self, mockup_ids: Iterable[int]) -> Set[str]:
        used: Set[str] = set()
        for mockup_id in mockup_ids:
            used |= self.used_by_mockup.get(mockup_id, set())
        return used


def uniqueness_groups(
    selected_ids: Iterable[int],
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
) -> List[List[int]]:
    """
    Partition the selected, grouped mockups into jointly-allocated groups.

    Two selected ids end up in the same group when either lists the other in
    its uniqueness group (transitively). Members keep selection order, and
    groups are ordered by their first member.
    """
    grouped = [
        mid for mid in _dedupe(selected_ids)
        if mid in catalog and catalog[mid].image_rule.uniqueness_group
    ]
    groups: List[List[int]] = []
    assigned: Set[int] = set()
    for root in grouped:
        if root in assigned:
            continue
        members = [root]
        assigned.add(root)
        frontier = [root]
        while frontier:
            current = frontier.pop()
            for other in grouped:
                if other in assigned:
                    continue
                if (
                    other in catalog[current].image_rule.uniqueness_group
                    or current in catalog[other].image_rule.uniqueness_group
                ):
                    members.append(other)
                    assigned.add(other)
                    frontier.append(other)
        members.sort(key=grouped.index)
        groups.append(members)
    return groups


def allocate_group(
    member_ids: List[int],
    pools: ImagePools,
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    state: Optional[UniquenessState] = None,
) -> Dict[int, List[str]]:
    """
    Fill the frames of a whole uniqueness group in one pass.

    Candidates are dealt round-robin across members that still have open
    slots; a candidate already consumed by any member is skipped. Slots left
    open once the pool runs dry become EMPTY_SLOT, never a repeat.
    """
    state = state if state is not None else UniquenessState()
    if not member_ids:
        return {}

    source = catalog[member_ids[0]].image_rule.source
    candidates = deque(pools.for_source(source))
    pending = {mid: catalog[mid].image_rule.slot_count for mid in member_ids}
    assigned: Dict[int, List[str]] = {mid: [] for mid in member_ids}
    consumed = state.used_by(member_ids)

    turn = 0
    while candidates and any(n > 0 for n in pending.values()):
        mid = member_ids[turn % len(member_ids)]
        if pending[mid] > 0:
            candidate = candidates.popleft()
            if candidate and candidate not in consumed:
                assigned[mid].append(candidate)
                consumed.add(candidate)
                pending[mid] -= 1
        turn += 1

    for mid in member_ids:
        assigned[mid].extend([EMPTY_SLOT] * pending[mid])
        state.record(mid, assigned[mid])
    return assigned


def pick_images_for_mockup(
    definition: MockupDefinition,
    pools: ImagePools,
    state: Optional[UniquenessState] = None,
) -> List[str]:
    """
    Pick frame images for a single mockup outside any joint group.

    - `none` sources and palette mockups get no frame images
    - repeat_all puts the first usable image in every frame
    - otherwise each frame takes the next image this mockup has not used;
      once the pool is exhausted, the mockup's own picks repeat cyclically
    """
    state = state if state is not None else UniquenessState()
    rule = definition.image_rule
    if rule.source is ImageSource.NONE or rule.slot_count == 0 or rule.is_palette:
        return []

    pool = pools.for_source(rule.source)

    if rule.repeat_all:
        first = next((ref for ref in pool if ref), EMPTY_SLOT)
        picked = [first] * rule.slot_count
    else:
        avoid = state.used_by(rule.uniqueness_group)
        distinct: List[str] = []
        picked = []
        for i in range(rule.slot_count):
            nxt = next((ref for ref in pool if ref and ref not in avoid and ref not in distinct), None)
            if nxt is not None:
                distinct.append(nxt)
                picked.append(nxt)
            elif distinct:
                picked.append(distinct[i % len(distinct)])
            else:
                picked.append(EMPTY_SLOT)

    state.record(definition.id, picked)
    return picked


def allocate(
    selected_ids: Iterable[int],
    pools: ImagePools,
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    state: Optional[UniquenessState] = None,
) -> Dict[int, List[str]]:
    """
    Assign frame images for every selected mockup.

    Unknown ids are ignored. Grouped ids are allocated together at the
    position of their first member; the result preserves selection order.
    """
    state = state if state is not None else UniquenessState()
    ordered = [mid for mid in _dedupe(selected_ids) if mid in catalog]
    group_of: Dict[int, List[int]] = {}
    for group in uniqueness_groups(ordered, catalog):
        for mid in group:
            group_of[mid] = group

    allocation: Dict[int, List[str]] = {}
    for mid in ordered:
        if mid in allocation:
            continue
        if mid in group_of:
            allocation.update(allocate_group(group_of[mid], pools, catalog, state))
        else:
            allocation[mid] = pick_images_for_mockup(catalog[mid], pools, state)

    return {mid: allocation[mid] for mid in ordered}


def _dedupe(ids: Iterable[int]) -> List[int]:
    seen: List[int] = []
    for mid in ids:
        if mid not in seen:
            seen.append(mid)
    return seen
