# Catalog Service — filter + sort the location catalog
#
# Filters (all must pass):
#   islands  : excluded only when the resolved island is known AND not selected
#   search   : case-insensitive substring of name + brief + slug
#   mood     : exact membership in moods, "all" = no filter
#   category : exact equality, "all" = no filter
#   bundle   : curated predicate from data.bundles
#
# Sorts: recommended (island order → hero boost → name), name, duration.
# Every key ends in the name and then the id, so output is deterministic.

from typing import Callable, Dict, List, Optional, Sequence

from data.bundles import CURATED_BUNDLES
from data.islands import ISLAND_ORDER, HERO_LOCATION_BOOSTS
from models.schemas import FilterCriteria
from services.index_service import Indexes
from services.money import safe_num

SORT_MODES = ("recommended", "name", "duration")


# ── Helpers ─────────────────────────────────────────────────────────────────

def _to_list(value) -> List[str]:
    """Normalise a tag field (list or comma-string) to a list."""
    if not value:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [s.strip() for s in str(value).split(",") if s.strip()]


def location_name(loc: dict) -> str:
    """Display name; older datasets keep it under "location"."""
    return str(loc.get("name") or loc.get("location") or "")


def _name_key(loc: dict):
    name = location_name(loc)
    return (name.casefold(), name, str(loc.get("id", "")))


def _is_all(value: Optional[str]) -> bool:
    return not value or value == "all"


def matches_bundle(loc: dict, bundle: str) -> bool:
    """
    Curated predicate over {moods, category}.
    Unknown bundle names behave like "all".
    """
    rule = CURATED_BUNDLES.get(bundle or "all")
    if rule is None or (not rule["moods"] and not rule["categories"]):
        return True
    moods = set(_to_list(loc.get("moods")))
    return bool(moods.intersection(rule["moods"])) or loc.get("category") in rule["categories"]


def matches_search(loc: dict, search: str) -> bool:
    needle = (search or "").strip().lower()
    if not needle:
        return True
    haystack = " ".join([
        location_name(loc),
        str(loc.get("brief") or ""),
        str(loc.get("slug") or ""),
    ]).lower()
    return needle in haystack


# ── Sorting ─────────────────────────────────────────────────────────────────

def _hero_score(loc: dict) -> int:
    name = location_name(loc).lower()
    for needle, score in HERO_LOCATION_BOOSTS:
        if needle in name:
            return score
    return 0


def _island_rank(island_id: Optional[str]) -> int:
    if island_id in ISLAND_ORDER:
        return ISLAND_ORDER.index(island_id)
    return len(ISLAND_ORDER) + 999


def sort_key(mode: str, indexes: Indexes) -> Callable[[dict], tuple]:
    """Sort key for a mode; unknown modes fall back to recommended."""
    if mode == "name":
        return _name_key
    if mode == "duration":
        return lambda loc: (safe_num(loc.get("typicalHours")),) + _name_key(loc)
    return lambda loc: (
        _island_rank(indexes.location_island_id(loc)),
        _hero_score(loc),
    ) + _name_key(loc)


def sort_locations(locations: Sequence[dict], mode: str, indexes: Indexes) -> List[dict]:
    return sorted(locations, key=sort_key(mode, indexes))


# ── Public API ──────────────────────────────────────────────────────────────

def filter_locations(
    locations: Sequence[dict],
    criteria: FilterCriteria,
    indexes: Indexes
) -> List[dict]:
    """Apply every filter in criteria, then sort by criteria.sort."""
    selected = set(criteria.island_ids)
    out      = []

    for loc in locations:
        if not isinstance(loc, dict):
            continue

        if selected:
            island_id = indexes.location_island_id(loc)
            if island_id is not None and island_id not in selected:
                continue

        if not matches_search(loc, criteria.search):
            continue

        if not _is_all(criteria.mood) and criteria.mood not in _to_list(loc.get("moods")):
            continue

        if not _is_all(criteria.category) and loc.get("category") != criteria.category:
            continue

        if not matches_bundle(loc, criteria.bundle):
            continue

        out.append(loc)

    return sort_locations(out, criteria.sort, indexes)


def available_moods(locations: Sequence[dict]) -> List[str]:
    moods = set()
    for loc in locations:
        if isinstance(loc, dict):
            moods.update(_to_list(loc.get("moods")))
    return ["all"] + sorted(moods)


def available_categories(locations: Sequence[dict]) -> List[str]:
    cats = {
        str(loc["category"])
        for loc in locations
        if isinstance(loc, dict) and loc.get("category")
    }
    return ["all"] + sorted(cats)


def bundle_names() -> Dict[str, str]:
    return {key: rule["name"] for key, rule in CURATED_BUNDLES.items()}
