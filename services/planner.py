# Planner — main orchestrator
# Fills in selection state the caller left implicit (islands, trip length),
# then runs the cost aggregation and formats the headline figure.

from typing import List, Optional

from config import HUB_ISLAND_ID
from data.bundles import TRAVELER_PRESETS
from models.schemas import EstimateRequest, EstimateResponse, TripSelections
from services.cost_service import compute_trip_cost, load_pricing_config, trip_length
from services.index_service import Indexes
from services.money import format_inr, safe_num

EMPTY_HEADLINE = "Select locations & adventures"


def derive_island_ids(location_ids: List[str], indexes: Indexes) -> List[str]:
    """
    Distinct islands of the chosen locations, in selection order.
    The hub is added as the gateway whenever another island is visited.
    """
    ids = []
    for loc_id in location_ids:
        loc = indexes.location_by_id.get(loc_id)
        island_id = indexes.location_island_id(loc) if loc else None
        if island_id and island_id not in ids:
            ids.append(island_id)

    if any(i != HUB_ISLAND_ID for i in ids) and HUB_ISLAND_ID not in ids:
        ids.append(HUB_ISLAND_ID)
    return ids


def suggest_activity_ids(location_id: str, selected: List[str], indexes: Indexes) -> List[str]:
    """Selected activities plus the ones linked to a newly added location."""
    out = list(dict.fromkeys(selected))
    for act_id in indexes.location_to_activity_ids.get(location_id, []):
        if act_id not in out:
            out.append(act_id)
    return out


def traveler_preset(name: str) -> Optional[dict]:
    preset = TRAVELER_PRESETS.get(name)
    return dict(preset) if preset else None


def merge_pricing(base: Optional[dict], overrides: Optional[dict]) -> dict:
    """Shallow merge, except nested "cab" and "markups" blocks merge key by key."""
    out = dict(base or {})
    for key, value in (overrides or {}).items():
        if key in ("cab", "markups") and isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = {**out[key], **value}
        else:
            out[key] = value
    return out


def headline(grand_total) -> str:
    total = safe_num(grand_total)
    return format_inr(total) if total > 0 else EMPTY_HEADLINE


def estimate(req: EstimateRequest, indexes: Indexes, pricing_raw: Optional[dict] = None) -> EstimateResponse:
    """
    Pipeline:
      1. Islands from the explicit selection, else from chosen locations
      2. Trip length from trip_nights, else the stops-per-day heuristic
      3. Pricing config: reference config, then request overrides
      4. Aggregate cost breakdown
    """
    sel = req.selections
    island_ids = sel.island_ids or derive_island_ids(sel.location_ids, indexes)
    days, nights = trip_length(sel)

    selections = sel.model_copy(update={"island_ids": island_ids})
    config     = load_pricing_config(merge_pricing(pricing_raw, req.pricing))

    breakdown = compute_trip_cost(selections, indexes, config)

    return EstimateResponse(
        island_ids  = island_ids,
        trip_days   = days,
        trip_nights = nights,
        breakdown   = breakdown,
        headline    = headline(breakdown.grand_total),
    )
