# Cost Service — trip-level price aggregation
# Prices every selected hotel, cab, activity, ferry leg and optional rental,
# applies each category's markup once per line, then tax and service fee.
# Lines that could not be priced stay in the breakdown at 0 and are flagged
# in warnings as "price unavailable" instead of failing the estimate.

import copy
import logging
import math
from typing import Dict, List, Optional, Tuple

from config import (
    CAB_CAPACITY, CAB_PRICING_MODE, DEFAULT_PRICING, LOCATIONS_PER_DAY, MARKUPS,
    ROOM_CAPACITY, SCOOTER_CAPACITY,
)
from models.schemas import (
    Breakdown, CabFareOptions, CabLegRequest, CategoryTotal, LineItem,
    Markups, PricingConfig, TripSelections,
)
from services.cab_service import (
    daily_hire_rate, estimate_cab_leg_fare, estimate_daily_hire, find_cab_leg, format_cab_leg_label,
)
from services.ferry_service import ferry_lines
from services.index_service import Indexes, IndexesNotBuiltError
from services.money import positive, round_money, safe_num

logger = logging.getLogger(__name__)

# unit → (traveler_count → multiplier)
UNIT_MULTIPLIERS = {
    "per_person":  lambda travelers: travelers,
    "per_group":   lambda travelers: 1,
    "per_boat":    lambda travelers: 1,
    "per_vehicle": lambda travelers: 1,
    "per_trip":    lambda travelers: 1,
}
DEFAULT_UNIT = "per_person"

HOTEL_RATE_FIELDS = (
    "typicalCoupleINR",
    "minNightlyINR",
    "maxNightlyINR",
    "basePricePerNightINR",
    "basePriceINR",
)


# ── Pricing config ──────────────────────────────────────────────────────────

def load_pricing_config(raw: Optional[dict] = None) -> PricingConfig:
    """
    Merge a raw pricing_config record over the defaults.
    Numeric fields go through safe_num; bad values fall back, never raise.
    """
    merged = copy.deepcopy(DEFAULT_PRICING)
    merged["markups"]        = dict(MARKUPS)
    merged["cabPricingMode"] = CAB_PRICING_MODE
    merged["roomCapacity"]   = ROOM_CAPACITY
    merged["roomScaling"]    = True

    raw = raw if isinstance(raw, dict) else {}
    for key, value in raw.items():
        if key in ("cab", "markups"):
            if isinstance(value, dict):
                merged[key].update(value)
        elif key in merged:
            merged[key] = value

    markups = merged["markups"]
    mode    = merged["cabPricingMode"]

    return PricingConfig(
        currency                = str(merged["currency"] or "INR"),
        tax_percent             = max(0, safe_num(merged["taxPercent"])),
        service_fee             = max(0, safe_num(merged["serviceFee"])),
        cab_per_day_base_inr    = positive(merged["cab"].get("perDayBaseINR")) or None,
        min_cab_fare_multiplier = positive(merged["minCabFareMultiplier"]) or 1,
        markups                 = Markups(
            cab      = max(0, safe_num(markups.get("cab"))),
            hotel    = max(0, safe_num(markups.get("hotel"))),
            activity = max(0, safe_num(markups.get("activity"))),
        ),
        cab_pricing_mode        = mode if mode in ("legs", "daily_hire") else "legs",
        room_scaling            = bool(merged["roomScaling"]),
        room_capacity           = max(1, int(safe_num(merged["roomCapacity"]) or ROOM_CAPACITY)),
    )


# ── Trip length ─────────────────────────────────────────────────────────────

def trip_days(location_count: int) -> int:
    """Rough days needed: LOCATIONS_PER_DAY stops a day, 0 when nothing is picked."""
    if not location_count:
        return 0
    return max(1, math.ceil(location_count / LOCATIONS_PER_DAY))


def trip_nights(days: int) -> int:
    if not days:
        return 0
    return max(1, days - 1)


def trip_length(selections: TripSelections) -> Tuple[int, int]:
    """(days, nights); explicit trip_nights wins over the location heuristic."""
    if selections.trip_nights is not None:
        nights = max(0, int(safe_num(selections.trip_nights)))
        return nights + 1, nights
    days = trip_days(len(set(selections.location_ids)))
    return days, trip_nights(days)


# ── Categories ──────────────────────────────────────────────────────────────

def _category(lines: List[LineItem]) -> CategoryTotal:
    return CategoryTotal(total=round_money(sum(l.total for l in lines)), lines=lines)


def nightly_rate(hotel: dict) -> float:
    """First positive of typical couple → min nightly → max nightly, else 0."""
    for field in HOTEL_RATE_FIELDS:
        rate = positive(hotel.get(field))
        if rate:
            return rate
    return 0


def hotel_lines(
    selections: TripSelections,
    indexes: Indexes,
    config: PricingConfig,
    default_nights: int
) -> List[LineItem]:
    travelers = selections.traveler_count
    rooms     = math.ceil(travelers / config.room_capacity) if config.room_scaling else 1
    markup    = config.markups.hotel
    lines     = []

    for hotel_id, nights in selections.hotel_nights.items():
        nights = default_nights if nights is None else max(0, safe_num(nights))
        if not nights:
            continue

        hotel = indexes.hotel_by_id.get(hotel_id)
        if hotel is None:
            lines.append(LineItem(ref_id=hotel_id, label=hotel_id, quantity=nights, price_available=False))
            continue

        nightly = nightly_rate(hotel)
        lines.append(LineItem(
            ref_id          = hotel_id,
            label           = str(hotel.get("displayName") or hotel.get("name") or hotel_id),
            quantity        = nights,
            unit_price      = nightly,
            markup          = markup,
            total           = round_money(nightly * nights * rooms * (1 + markup)),
            price_available = nightly > 0,
            details         = {"rooms": rooms, "island_id": hotel.get("islandId")},
        ))

    return lines


def _resolve_leg(sel, indexes: Indexes) -> Optional[dict]:
    if sel.leg_id:
        return indexes.cab_leg_by_id.get(sel.leg_id)
    if not (sel.island_id and sel.from_zone and sel.to_zone):
        return None
    return find_cab_leg(CabLegRequest(
        island_id     = sel.island_id,
        from_zone     = sel.from_zone,
        to_zone       = sel.to_zone,
        trip_type     = sel.trip_type,
        vehicle_class = sel.vehicle_class,
        service_class = sel.service_class,
    ), indexes.cab_legs)


def cab_leg_lines(selections: TripSelections, indexes: Indexes, config: PricingConfig) -> List[LineItem]:
    travelers = selections.traveler_count
    markup    = config.markups.cab
    lines     = []

    for sel in selections.cab_legs:
        count = max(0, sel.count)
        leg   = _resolve_leg(sel, indexes)
        ref   = sel.leg_id or f"{sel.island_id}:{sel.from_zone}-{sel.to_zone}"
        if leg is None:
            lines.append(LineItem(ref_id=ref, label=ref, quantity=count, price_available=False))
            continue

        fare = estimate_cab_leg_fare(leg, CabFareOptions(
            time_of_day = sel.time_of_day,
            multiplier  = config.min_cab_fare_multiplier,
        ))
        lines.append(LineItem(
            ref_id          = str(leg.get("id") or ref),
            label           = format_cab_leg_label(leg),
            quantity        = count,
            unit_price      = fare,
            markup          = markup,
            total           = round_money(fare * count * (1 + markup)),
            price_available = fare > 0,
            details         = {
                "time_of_day":      sel.time_of_day,
                "per_person":       round_money(fare / travelers),
                "included_wait_min": leg.get("includedWaitMin"),
            },
        ))

    return lines


def vehicles_needed(traveler_count: int) -> int:
    """Cabs to seat the whole party, CAB_CAPACITY per vehicle."""
    return max(1, math.ceil(max(1, traveler_count) / CAB_CAPACITY))


def cab_hire_lines(selections: TripSelections, indexes: Indexes, config: PricingConfig) -> List[LineItem]:
    markup = config.markups.cab
    lines  = []

    for sel in selections.cab_hires:
        days     = max(0, sel.days)
        vehicles = vehicles_needed(selections.traveler_count) if sel.vehicles is None else max(1, sel.vehicles)
        table    = indexes.cab_daily_rate_table
        base     = config.cab_per_day_base_inr
        rate     = daily_hire_rate(table, sel.island_id, sel.vehicle_class, night=sel.night, per_day_base=base)
        cost     = estimate_daily_hire(
            table, sel.island_id, sel.vehicle_class, days,
            night=sel.night, per_day_base=base, vehicles=vehicles,
        )
        lines.append(LineItem(
            ref_id          = f"{sel.island_id}:{sel.vehicle_class}",
            label           = f"{sel.vehicle_class} hire on {sel.island_id}",
            quantity        = days * vehicles,
            unit_price      = rate,
            markup          = markup,
            total           = round_money(cost * (1 + markup)),
            price_available = rate > 0,
            details         = {"days": days, "vehicles": vehicles, "night": sel.night},
        ))

    return lines


def activity_lines(selections: TripSelections, indexes: Indexes, config: PricingConfig) -> List[LineItem]:
    travelers = selections.traveler_count
    markup    = config.markups.activity
    seen      = set()
    lines     = []

    for activity_id in selections.activity_ids:
        act = indexes.activity_by_id.get(activity_id)
        key = str(act.get("id")) if act else activity_id
        if key in seen:
            continue
        seen.add(key)

        if act is None:
            lines.append(LineItem(ref_id=activity_id, label=activity_id, price_available=False))
            continue

        unit       = act.get("unit") if act.get("unit") in UNIT_MULTIPLIERS else DEFAULT_UNIT
        multiplier = UNIT_MULTIPLIERS[unit](travelers)
        base       = positive(act.get("basePriceINR"))
        lines.append(LineItem(
            ref_id          = key,
            label           = str(act.get("name") or key),
            quantity        = multiplier,
            unit_price      = base,
            markup          = markup,
            total           = round_money(base * multiplier * (1 + markup)),
            price_available = base > 0,
            details         = {"unit": unit, "duration_min": act.get("durationMin")},
        ))

    return lines


def _average_daily_rate(plans: List[dict]) -> float:
    if not plans:
        return 0
    return sum(safe_num(p.get("dailyRateINR")) for p in plans) / len(plans)


def rental_lines(selections: TripSelections, indexes: Indexes, days: int) -> List[LineItem]:
    travelers = selections.traveler_count
    lines     = []

    if selections.include_scooters and days:
        rate  = _average_daily_rate(indexes.scooter_plans)
        units = max(1, math.ceil(travelers / SCOOTER_CAPACITY))
        lines.append(LineItem(
            ref_id="scooters", label="Scooters", quantity=days * units, unit_price=rate,
            total=round_money(rate * days * units), price_available=rate > 0,
            details={"days": days, "units": units},
        ))

    if selections.include_bicycles and days:
        rate = _average_daily_rate(indexes.bicycle_plans)
        lines.append(LineItem(
            ref_id="bicycles", label="Bicycles", quantity=days * travelers, unit_price=rate,
            total=round_money(rate * days * travelers), price_available=rate > 0,
            details={"days": days, "units": travelers},
        ))

    return lines


# ── Public API ──────────────────────────────────────────────────────────────

def compute_trip_cost(
    selections: TripSelections,
    indexes: Optional[Indexes],
    config: Optional[PricingConfig] = None
) -> Breakdown:
    """
    Full estimate for one selection state:
      hotels + cabs + activities + ferries (+ rentals when opted in)
      → tax on the subtotal → service fee → grand total and per person.
    """
    if not isinstance(indexes, Indexes):
        raise IndexesNotBuiltError("build_indexes() must run before compute_trip_cost()")
    config    = config or load_pricing_config()
    travelers = selections.traveler_count
    days, nights = trip_length(selections)
    warnings  = []

    if config.cab_pricing_mode == "daily_hire":
        cab_lines = cab_hire_lines(selections, indexes, config)
        if selections.cab_legs:
            warnings.append("Cab legs ignored: pricing mode is daily hire")
    else:
        cab_lines = cab_leg_lines(selections, indexes, config)
        if selections.cab_hires:
            warnings.append("Cab hires ignored: pricing mode is point-to-point legs")

    categories: Dict[str, CategoryTotal] = {
        "hotels":     _category(hotel_lines(selections, indexes, config, nights)),
        "cabs":       _category(cab_lines),
        "activities": _category(activity_lines(selections, indexes, config)),
        "ferries":    _category(ferry_lines(selections.island_ids, indexes.ferry_routes, travelers)),
        "rentals":    _category(rental_lines(selections, indexes, days)),
    }

    for name, cat in categories.items():
        for line in cat.lines:
            if not line.price_available:
                warnings.append(f"{name.capitalize()}: price unavailable for {line.label}")

    subtotal    = sum(cat.total for cat in categories.values())
    tax         = subtotal * safe_num(config.tax_percent) / 100
    service_fee = safe_num(config.service_fee)
    grand_total = subtotal + tax + service_fee

    logger.debug("Trip estimate: subtotal=%.2f tax=%.2f total=%.2f", subtotal, tax, grand_total)

    return Breakdown(
        currency       = config.currency,
        traveler_count = travelers,
        subtotal       = round_money(subtotal),
        tax            = round_money(tax),
        service_fee    = round_money(service_fee),
        grand_total    = round_money(grand_total),
        per_person     = round_money(grand_total / max(1, travelers)),
        warnings       = warnings,
        **categories,
    )
