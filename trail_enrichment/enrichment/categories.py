"""Waypoint category inference from CalTopo-style names."""

from __future__ import annotations

from typing import Tuple

# Checked in order; longer prefixes sharing a first letter come first.
WAYPOINT_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("WT:", "water-tank"),
    ("WT ", "water-tank"),
    ("ST:", "side-trip"),
    ("ST ", "side-trip"),
    ("C ", "campsite"),
    ("W ", "water"),
    ("H ", "hut"),
    ("M ", "mountain"),
)

KNOWN_TOWNS = frozenset(
    {
        "mt hotham",
        "adaminaby",
        "falls creek",
        "omeo",
        "thredbo",
        "glengarry",
        "rawson",
        "walhalla",
        "jindabyne",
        "khancoban",
    }
)

DEFAULT_CATEGORY = "waypoint"


def infer_category(name: str) -> str:
    """Guess a waypoint category from its raw name."""

    lowered = name.lower()
    if lowered in KNOWN_TOWNS:
        return "town"
    for prefix, category in WAYPOINT_PREFIXES:
        if name.startswith(prefix):
            return category
    if "hut" in lowered or "shelter" in lowered:
        return "hut"
    if "camp" in lowered:
        return "campsite"
    if any(word in lowered for word in ("water", "creek", "river", "spring")):
        return "water"
    if "tank" in lowered:
        return "water-tank"
    if "mt " in lowered or "mount" in lowered or "peak" in lowered:
        return "mountain"
    return DEFAULT_CATEGORY


def clean_name(name: str) -> str:
    """Strip a category prefix from a display name."""

    for prefix, _ in WAYPOINT_PREFIXES:
        if name.startswith(prefix):
            return name[len(prefix) :].strip()
    return name
