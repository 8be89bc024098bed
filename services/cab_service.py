# Cab Service — ground transport pricing
#
# Two strategies, selected by PricingConfig.cab_pricing_mode:
#   legs       : point-to-point legs matched against the cab leg table
#   daily_hire : flat per-day hire from the median rate table (index_service)
#                keyed by upper-cased vehicle class
#
# Leg matching relaxes one layer at a time; the first layer with a hit wins.
# All comparisons are on trimmed, upper-cased strings.

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from models.schemas import CabFareOptions, CabLegRequest
from services.money import positive, safe_num

logger = logging.getLogger(__name__)

# (layer name, ((request field, leg field), ...)), strictest first
MATCH_LAYERS: List[Tuple[str, Tuple[Tuple[str, str], ...]]] = [
    ("exact", (
        ("island_id", "islandId"), ("from_zone", "fromZone"), ("to_zone", "toZone"),
        ("trip_type", "tripType"), ("vehicle_class", "vehicleClass"), ("service_class", "serviceClass"),
    )),
    ("any_service", (
        ("island_id", "islandId"), ("from_zone", "fromZone"), ("to_zone", "toZone"),
        ("trip_type", "tripType"), ("vehicle_class", "vehicleClass"),
    )),
    ("any_trip_type", (
        ("island_id", "islandId"), ("from_zone", "fromZone"), ("to_zone", "toZone"),
        ("vehicle_class", "vehicleClass"),
    )),
    ("zones_only", (
        ("island_id", "islandId"), ("from_zone", "fromZone"), ("to_zone", "toZone"),
    )),
]


def _norm(value) -> str:
    return str(value).strip().upper() if value is not None else ""


def _layer_matches(leg: dict, wanted: Dict[str, str], fields) -> bool:
    return all(_norm(leg.get(leg_key)) == wanted[req_key] for req_key, leg_key in fields)


def match_cab_leg(
    request: CabLegRequest,
    cab_legs: Sequence[dict]
) -> Tuple[Optional[dict], Optional[str]]:
    """Return (leg, layer name) for the first matching layer, or (None, None)."""
    wanted = {key: _norm(value) for key, value in request.model_dump().items()}
    legs   = [leg for leg in cab_legs or [] if isinstance(leg, dict)]

    for layer, fields in MATCH_LAYERS:
        for leg in legs:
            if _layer_matches(leg, wanted, fields):
                return leg, layer

    logger.debug("No cab leg for %s", request.model_dump())
    return None, None


def find_cab_leg(request: CabLegRequest, cab_legs: Sequence[dict]) -> Optional[dict]:
    leg, _ = match_cab_leg(request, cab_legs)
    return leg


def estimate_cab_leg_fare(leg: Optional[dict], options: Optional[CabFareOptions] = None) -> float:
    """
    Per-vehicle fare for a leg (per person when options.per_person).
    Night pricing uses the night fare when positive, else the day fare;
    day pricing uses the day fare when positive, else the night fare.
    """
    if not leg:
        return 0
    options = options or CabFareOptions()

    day   = positive(leg.get("dayFareINR"))
    night = positive(leg.get("nightFareINR"))

    if options.time_of_day == "night":
        fare = night or day
    else:
        fare = day or night

    multiplier = positive(options.multiplier) or 1
    fare       = fare * multiplier

    if options.per_person:
        fare = fare / max(1, int(options.traveler_count or 1))
    return fare


def daily_hire_rate(
    rate_table: Dict[str, Dict[str, Dict[str, float]]],
    island_id: str,
    vehicle_class: str,
    night: bool = False,
    per_day_base: Optional[float] = None
) -> float:
    """
    Median day/night rate for (island, vehicle class), preferring the asked-for
    rate and falling back to the other. per_day_base covers islands with no data.
    """
    rates = (rate_table.get(island_id) or {}).get(_norm(vehicle_class))

    base = 0
    if rates:
        day_rate   = positive(rates.get("day"))
        night_rate = positive(rates.get("night"))
        base       = (night_rate or day_rate) if night else (day_rate or night_rate)

    return base or positive(per_day_base)


def estimate_daily_hire(
    rate_table: Dict[str, Dict[str, Dict[str, float]]],
    island_id: str,
    vehicle_class: str,
    days,
    night: bool = False,
    per_day_base: Optional[float] = None,
    vehicles=1
) -> float:
    days     = max(0, safe_num(days))
    vehicles = max(1, safe_num(vehicles))
    return daily_hire_rate(rate_table, island_id, vehicle_class, night, per_day_base) * days * vehicles


def group_cab_legs_by_island(cab_legs: Sequence[dict]) -> Dict[str, List[dict]]:
    out: Dict[str, List[dict]] = {}
    for leg in cab_legs or []:
        if not isinstance(leg, dict):
            continue
        key = str(leg.get("islandId") or "UNKNOWN")
        out.setdefault(key, []).append(leg)
    return out


def format_cab_leg_label(leg: Optional[dict]) -> str:
    if not leg:
        return ""
    origin    = leg.get("fromZone") or leg.get("from") or "?"
    dest      = leg.get("toZone") or leg.get("to") or "?"
    trip_type = leg.get("tripType") or ""
    vehicle   = leg.get("vehicleClass") or ""
    return f"{origin} → {dest} ({trip_type}, {vehicle})"
