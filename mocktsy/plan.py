import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .allocator import ImagePools, UniquenessState, allocate
from .catalog import DEFAULT_COPY, MOCKUP_CATALOG, MockupDefinition
from .images import ImageLoader
from .palette import MAX_IMAGES, extract_palette


@dataclass(frozen=True)
class BuildPlanItem:
    id: int
    name: str
    # token -> resolved text, read-only once built
    fields: Mapping[str, str] = field(default_factory=dict)
    # one entry per frame, "" where the frame stays empty
    images: Tuple[str, ...] = ()
    palette: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))
        object.__setattr__(self, "images", tuple(self.images))
        if self.palette is not None:
            object.__setattr__(self, "palette", tuple(self.palette))

    def __hash__(self) -> int:
        return hash((self.id, self.name, tuple(sorted(self.fields.items())), self.images, self.palette))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "fields": dict(self.fields),
            "images": list(self.images),
        }
        if self.palette is not None:
            data["palette"] = list(self.palette)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildPlanItem":
        palette = data.get("palette")
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            fields={str(k): str(v) for k, v in (data.get("fields") or {}).items()},
            images=tuple(str(i) for i in data.get("images") or []),
            palette=tuple(palette) if palette is not None else None,
        )


@dataclass(frozen=True)
class BuildPlan:
    """
    Fully resolved description of one export: what every selected mockup
    will contain. It is the only input the renderer needs.
    """

    items: Tuple[BuildPlanItem, ...]
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "createdAt": self.created_at,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildPlan":
        return cls(
            items=tuple(BuildPlanItem.from_dict(item) for item in data.get("items") or []),
            created_at=str(data.get("createdAt", "")),
        )

    @classmethod
    def from_json(cls, text: str) -> "BuildPlan":
        return cls.from_dict(json.loads(text))


def with_default_copy(field_values: Mapping[str, str]) -> Dict[str, str]:
    """Layer user-supplied values over the stock copy; blank values keep the stock text."""
    merged = dict(DEFAULT_COPY)
    merged.update({k: v for k, v in field_values.items() if v})
    return merged


def resolve_fields(definition: MockupDefinition, field_values: Mapping[str, str]) -> Dict[str, str]:
    return {token: str(field_values.get(token, "") or "") for token in definition.tokens}


def build_plan(
    selected_ids: Iterable[int],
    pools: ImagePools,
    field_values: Mapping[str, str],
    catalog: Mapping[int, MockupDefinition] = MOCKUP_CATALOG,
    loader: Optional[ImageLoader] = None,
    now: Optional[datetime] = None,
) -> BuildPlan:
    """
    Resolve images, palette and text for every selected mockup.

    Unknown ids are dropped; duplicates keep their first position. The
    allocation and the palette depend only on the order of the inputs, so
    identical inputs (and an identical `now`) give identical plans.
    """
    loader = loader or ImageLoader()
    selected = [mid for mid in dict.fromkeys(selected_ids) if mid in catalog]
    allocation = allocate(selected, pools, catalog, UniquenessState())

    items: List[BuildPlanItem] = []
    for mid in selected:
        definition = catalog[mid]
        palette = None
        if definition.image_rule.is_palette:
            palette = tuple(
                extract_palette(
                    pools.selected[:MAX_IMAGES],
                    k=definition.image_rule.slot_count,
                    loader=loader,
                )
            )
        items.append(
            BuildPlanItem(
                id=definition.id,
                name=definition.name,
                fields=resolve_fields(definition, field_values),
                images=tuple(allocation.get(mid, [])),
                palette=palette,
            )
        )

    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return BuildPlan(items=tuple(items), created_at=stamp)
