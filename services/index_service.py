# Index Service — lookup structures over the raw reference tables
#
# One pass per table. Rows with missing or malformed fields are skipped
# (logged at DEBUG) and never abort the build: a usable partial index is
# always preferred over a failure.
#
# Island names on locations are free text ("Havelock (Swaraj Dweep)"),
# so resolving them to an island id goes exact name → alias substring,
# memoized per Indexes instance.

import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from data.islands import ISLAND_NAME_ALIASES
from services.money import median, positive

logger = logging.getLogger(__name__)


class IndexesNotBuiltError(RuntimeError):
    """Raised when pricing is requested before indexes exist."""


def _rows(tables: dict, name: str) -> List[dict]:
    rows = tables.get(name) or []
    if not isinstance(rows, list):
        logger.debug("Table %s is not a list, ignoring", name)
        return []
    return [r for r in rows if isinstance(r, dict)]


def _str(value) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


class Indexes:
    """Read-only lookups built from one set of reference tables."""

    def __init__(self):
        self.island_by_id:             Dict[str, dict] = {}
        self.island_id_by_name:        Dict[str, str] = {}
        self.aliases:                  List[Tuple[str, str]] = list(ISLAND_NAME_ALIASES)
        self.locations:                List[dict] = []
        self.location_by_id:           Dict[str, dict] = {}
        self.location_to_activity_ids: Dict[str, List[str]] = {}
        self.activity_by_id:           Dict[str, dict] = {}
        self.ferry_routes:             List[dict] = []
        self.cab_legs:                 List[dict] = []
        self.cab_leg_by_id:            Dict[str, dict] = {}
        self.cab_daily_rate_table:     Dict[str, Dict[str, Dict[str, float]]] = {}
        self.hotels_by_island:         Dict[str, List[dict]] = {}
        self.hotel_by_id:              Dict[str, dict] = {}
        self.scooter_plans:            List[dict] = []
        self.bicycle_plans:            List[dict] = []
        self._island_cache:            Dict[str, Optional[str]] = {}

    def resolve_island_id(self, island_name) -> Optional[str]:
        """
        Island display name → island id.
          1. exact match against the island table
          2. first alias whose needle is a substring (case-insensitive)
        Returns None when nothing matches.
        """
        name = _str(island_name)
        if name is None:
            return None
        if name in self._island_cache:
            return self._island_cache[name]

        resolved = self.island_id_by_name.get(name)
        if resolved is None:
            lowered = name.lower()
            for needle, island_id in self.aliases:
                if needle in lowered:
                    resolved = island_id
                    break

        if resolved is None:
            logger.debug("Unresolved island name %r", name)
        self._island_cache[name] = resolved
        return resolved

    def location_island_id(self, location: dict) -> Optional[str]:
        if not isinstance(location, dict):
            return None
        return self.resolve_island_id(location.get("island"))

    def activities_for_location(self, location_id: str) -> List[dict]:
        return [
            self.activity_by_id[a]
            for a in self.location_to_activity_ids.get(location_id, [])
            if a in self.activity_by_id
        ]

    def snapshot(self) -> dict:
        """Plain-dict view of the built indexes (cache excluded)."""
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}


# ── Per-table builders ──────────────────────────────────────────────────────

def _index_islands(ix: Indexes, rows: List[dict]) -> None:
    extra_aliases = []
    for island in rows:
        island_id = _str(island.get("id"))
        if island_id is None:
            logger.debug("Skipping island without id: %r", island)
            continue
        ix.island_by_id[island_id] = island
        name = _str(island.get("name"))
        if name is not None:
            ix.island_id_by_name[name] = island_id
        aliases = island.get("aliases")
        for alias in aliases if isinstance(aliases, list) else []:
            alias = _str(alias)
            if alias:
                extra_aliases.append((alias.lower(), island_id))
    ix.aliases.extend(extra_aliases)


def _index_locations(ix: Indexes, rows: List[dict]) -> None:
    for loc in rows:
        loc_id = _str(loc.get("id"))
        if loc_id is None:
            logger.debug("Skipping location without id: %r", loc)
            continue
        ix.locations.append(loc)
        ix.location_by_id[loc_id] = loc


def _index_location_activities(ix: Indexes, rows: List[dict]) -> None:
    for link in rows:
        loc_id = _str(link.get("locationId"))
        acts   = link.get("activityIds", link.get("activities"))
        if loc_id is None or not isinstance(acts, list):
            logger.debug("Skipping malformed location-activity link: %r", link)
            continue
        ix.location_to_activity_ids[loc_id] = [str(a) for a in acts if _str(a)]


def _index_activities(ix: Indexes, rows: List[dict]) -> None:
    # slugs first so an id can never be shadowed by another activity's slug
    for act in rows:
        slug = _str(act.get("slug"))
        if slug and _str(act.get("id")):
            ix.activity_by_id[slug] = act
    for act in rows:
        act_id = _str(act.get("id"))
        if act_id is None:
            logger.debug("Skipping activity without id: %r", act)
            continue
        ix.activity_by_id[act_id] = act


def _index_ferry_routes(ix: Indexes, rows: List[dict]) -> None:
    for route in rows:
        if not _str(route.get("originId")) or not _str(route.get("destinationId")):
            logger.debug("Skipping ferry route without endpoints: %r", route)
            continue
        ix.ferry_routes.append(route)


def _index_cab_legs(ix: Indexes, rows: List[dict]) -> None:
    day_fares   = defaultdict(list)
    night_fares = defaultdict(list)

    for leg in rows:
        island_id = _str(leg.get("islandId"))
        if island_id is None:
            logger.debug("Skipping cab leg without island: %r", leg)
            continue
        ix.cab_legs.append(leg)
        leg_id = _str(leg.get("id"))
        if leg_id is not None:
            ix.cab_leg_by_id[leg_id] = leg

        vehicle = _str(leg.get("vehicleClass"))
        if vehicle is None:
            continue
        key = (island_id, vehicle.upper())
        day_fares.setdefault(key, [])
        night_fares.setdefault(key, [])
        if positive(leg.get("dayFareINR")):
            day_fares[key].append(leg["dayFareINR"])
        if positive(leg.get("nightFareINR")):
            night_fares[key].append(leg["nightFareINR"])

    for (island_id, vehicle), fares in day_fares.items():
        ix.cab_daily_rate_table.setdefault(island_id, {})[vehicle] = {
            "day":   median(fares),
            "night": median(night_fares[(island_id, vehicle)]),
        }


def _index_hotels(ix: Indexes, rows: List[dict]) -> None:
    for hotel in rows:
        hotel_id  = _str(hotel.get("id"))
        island_id = _str(hotel.get("islandId"))
        if hotel_id is None:
            logger.debug("Skipping hotel without id: %r", hotel)
            continue
        ix.hotel_by_id[hotel_id] = hotel
        if island_id is not None:
            ix.hotels_by_island.setdefault(island_id, []).append(hotel)


def build_indexes(tables: dict) -> Indexes:
    """
    Build every lookup from a dict of raw tables:
      islands, locations, activities, location_activities, ferry_routes,
      cab_legs, hotels, scooters, bicycles
    Missing tables are treated as empty.
    """
    tables = tables if isinstance(tables, dict) else {}
    ix = Indexes()

    _index_islands(ix, _rows(tables, "islands"))
    _index_locations(ix, _rows(tables, "locations"))
    _index_location_activities(ix, _rows(tables, "location_activities"))
    _index_activities(ix, _rows(tables, "activities"))
    _index_ferry_routes(ix, _rows(tables, "ferry_routes"))
    _index_cab_legs(ix, _rows(tables, "cab_legs"))
    _index_hotels(ix, _rows(tables, "hotels"))
    ix.scooter_plans = _rows(tables, "scooters")
    ix.bicycle_plans = _rows(tables, "bicycles")

    logger.debug(
        "Indexes built: %d islands, %d locations, %d activities, %d cab legs, %d hotels",
        len(ix.island_by_id), len(ix.locations), len(ix.activity_by_id),
        len(ix.cab_legs), len(ix.hotel_by_id),
    )
    return ix

