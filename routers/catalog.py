from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from models.schemas import FilterCriteria, SortMode
from services.catalog_service import (
    SORT_MODES, available_categories, available_moods, bundle_names, filter_locations,
)
from services.data_loader import ReferenceData, get_reference
from services.planner import suggest_activity_ids

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/facets")
def facets(ref: ReferenceData = Depends(get_reference)):
    """Filter options present in the loaded catalog."""
    locations = ref.indexes.locations
    return {
        "islands":    [
            {"id": island_id, "name": island.get("name")}
            for island_id, island in ref.indexes.island_by_id.items()
        ],
        "moods":      available_moods(locations),
        "categories": available_categories(locations),
        "bundles":    bundle_names(),
        "sort_modes": list(SORT_MODES),
    }


@router.get("/locations")
def list_locations(
    islands:  Optional[List[str]] = Query(None),
    search:   str = "",
    mood:     str = "all",
    category: str = "all",
    bundle:   str = "all",
    sort:     SortMode = "recommended",
    ref: ReferenceData = Depends(get_reference),
):
    """Filtered + sorted locations, each tagged with its resolved island id."""
    criteria = FilterCriteria(
        island_ids=islands or [], search=search, mood=mood,
        category=category, bundle=bundle, sort=sort,
    )
    ix = ref.indexes
    return [
        {**loc, "island_id": ix.location_island_id(loc)}
        for loc in filter_locations(ix.locations, criteria, ix)
    ]


@router.get("/locations/{location_id}/activities")
def location_activities(location_id: str, ref: ReferenceData = Depends(get_reference)):
    """Activities linked to a location."""
    if location_id not in ref.indexes.location_by_id:
        raise HTTPException(status_code=404, detail=f"Location '{location_id}' not found")
    return ref.indexes.activities_for_location(location_id)


@router.get("/locations/{location_id}/suggested-activities")
def suggested_activities(
    location_id: str,
    selected: Optional[List[str]] = Query(None),
    ref: ReferenceData = Depends(get_reference),
):
    """Activity ids to pre-select when a location is added: current picks + its linked activities."""
    if location_id not in ref.indexes.location_by_id:
        raise HTTPException(status_code=404, detail=f"Location '{location_id}' not found")
    return suggest_activity_ids(location_id, selected or [], ref.indexes)
