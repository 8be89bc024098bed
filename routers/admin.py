from fastapi import APIRouter
from services.data_loader import reload_reference

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reload")
def reload():
    """Drop the cached reference data and load it again from the configured source."""
    ix = reload_reference().indexes
    return {
        "status":     "reloaded",
        "islands":    len(ix.island_by_id),
        "locations":  len(ix.locations),
        "activities": len(ix.activity_by_id),
        "cab_legs":   len(ix.cab_legs),
        "hotels":     len(ix.hotel_by_id),
    }
