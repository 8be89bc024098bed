from fastapi import APIRouter, Depends, HTTPException
from data.bundles import TRAVELER_PRESETS
from models.schemas import CabFareOptions, CabLegQuote, CabLegRequest, EstimateRequest, TimeOfDay
from services.cab_service import (
    estimate_cab_leg_fare, find_cab_leg, format_cab_leg_label, group_cab_legs_by_island,
)
from services.cost_service import load_pricing_config
from services.data_loader import ReferenceData, get_reference
from services.planner import estimate, traveler_preset

router = APIRouter(prefix="/estimate", tags=["estimate"])


@router.get("/presets")
def presets():
    """Traveler count presets (adults + children)."""
    return {name: traveler_preset(name) for name in TRAVELER_PRESETS}


@router.get("/presets/{name}")
def preset(name: str):
    found = traveler_preset(name)
    if found is None:
        raise HTTPException(status_code=404, detail=f"Preset '{name}' not found")
    return found


@router.post("")
def create_estimate(req: EstimateRequest, ref: ReferenceData = Depends(get_reference)):
    """
    Price a selection state: hotels, cabs, activities, ferries, optional rentals,
    plus tax and service fee. Unpriceable lines come back flagged, not as errors.
    """
    return estimate(req, ref.indexes, ref.pricing_raw)


@router.get("/cab-legs")
def cab_legs(ref: ReferenceData = Depends(get_reference)):
    """Known cab legs grouped by island, each with a display label."""
    return {
        island_id: [{**leg, "label": format_cab_leg_label(leg)} for leg in legs]
        for island_id, legs in group_cab_legs_by_island(ref.indexes.cab_legs).items()
    }


@router.post("/cab-leg", response_model=CabLegQuote)
def quote_cab_leg(
    req: CabLegRequest,
    time_of_day: TimeOfDay = "day",
    travelers: int = 1,
    ref: ReferenceData = Depends(get_reference),
):
    """Resolve a zone-to-zone request to a leg and quote it."""
    leg = find_cab_leg(req, ref.indexes.cab_legs)
    if leg is None:
        raise HTTPException(status_code=404, detail="No cab leg matches this request")

    multiplier = load_pricing_config(ref.pricing_raw).min_cab_fare_multiplier
    fare = estimate_cab_leg_fare(leg, CabFareOptions(time_of_day=time_of_day, multiplier=multiplier))
    per_person = estimate_cab_leg_fare(leg, CabFareOptions(
        time_of_day=time_of_day, multiplier=multiplier,
        traveler_count=travelers, per_person=True,
    ))
    return CabLegQuote(
        leg=leg,
        label=format_cab_leg_label(leg),
        fare=round(fare, 2),
        per_person=round(per_person, 2),
    )
