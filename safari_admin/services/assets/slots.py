"""Experience categories and the slot filenames the website expects.

The marketing site imports its images by fixed names (``b3.jpg``,
``ac1.webp``...), so an upload is renamed from its category and slot rather
than keeping the operator's filename.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Tuple

from .errors import InvalidCategory

DEFAULT_EXTENSION = ".jpg"
DEFAULT_SLOTS = tuple(range(1, 11))


@dataclass(frozen=True)
class SlotMapping:
    key: str
    prefix: str
    display_name: str
    description: str
    numbers: Tuple[int, ...] = DEFAULT_SLOTS
    extension_overrides: Dict[int, str] = field(default_factory=dict)

    def is_valid_slot(self, slot: int) -> bool:
        return slot in self.numbers

    def extension_for(self, slot: int) -> str:
        return self.extension_overrides.get(slot, DEFAULT_EXTENSION)

    def filename_for(self, slot: int) -> str:
        return f"{self.prefix}{slot}{self.extension_for(slot)}"

    def to_dict(self):
        return {
            "key": self.key,
            "prefix": self.prefix,
            "displayName": self.display_name,
            "description": self.description,
            "numbers": list(self.numbers),
            "filenames": {n: self.filename_for(n) for n in self.numbers},
        }


_MAPPINGS = [
    SlotMapping("balloon", "b", "Balloon Flight",
                "Hot air balloon safari images (b1.jpg - b10.jpg)"),
    SlotMapping("breakfast", "r", "Bush Breakfast",
                "Bush breakfast images (r1.jpg - r10.jpg)"),
    SlotMapping("accommodation", "ac", "Luxury Accommodation",
                "Accommodation images (ac1.webp, ac2.jpg - ac10.jpg)",
                extension_overrides={1: ".webp"}),
    SlotMapping("vehicle", "v", "Safari Vehicle",
                "Vehicle transport images (v1.jpg - v10.jpg)"),
    SlotMapping("meals", "m", "All-Inclusive Meals",
                "Meal images (m1.jpg - m10.jpg)"),
    SlotMapping("wildlife", "w", "Wildlife Safari",
                "Wildlife photography (w1.jpg - w10.jpg)"),
    SlotMapping("landscape", "l", "Landscape Views",
                "Scenic landscapes (l1.jpg - l10.jpg)"),
    SlotMapping("activities", "a", "Safari Activities",
                "Adventure activities (a1.jpg - a10.jpg)"),
    SlotMapping("sunset", "s", "Sunset & Sunrise",
                "Golden hour moments (s1.jpg - s10.jpg)"),
    SlotMapping("guides", "g", "Safari Guides",
                "Professional guides (g1.jpg - g10.jpg)"),
]

EXPERIENCE_MAPPINGS = MappingProxyType({m.key: m for m in _MAPPINGS})


def categories():
    return list(EXPERIENCE_MAPPINGS.values())


def get_mapping(key) -> SlotMapping:
    try:
        return EXPERIENCE_MAPPINGS[key]
    except (KeyError, TypeError):
        raise InvalidCategory(key, list(EXPERIENCE_MAPPINGS)) from None


def target_filename(key, slot: int) -> str:
    return get_mapping(key).filename_for(slot)
