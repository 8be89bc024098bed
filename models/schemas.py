from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Literal, Dict, Any


SortMode    = Literal["recommended", "name", "duration"]
TimeOfDay   = Literal["day", "night"]
CabMode     = Literal["legs", "daily_hire"]


# ── Selection state (owned by the caller) ────────────────────────

class CabHireSelection(BaseModel):
    island_id:     str
    vehicle_class: str
    days:          int = 1
    vehicles:      Optional[int] = None  # None: sized to the party
    night:         bool = False


class CabLegSelection(BaseModel):
    """Either a known leg_id, or zones to be matched against the leg table."""
    leg_id:        Optional[str] = None
    island_id:     Optional[str] = None
    from_zone:     Optional[str] = None
    to_zone:       Optional[str] = None
    trip_type:     Optional[str] = None
    vehicle_class: Optional[str] = None
    service_class: Optional[str] = None
    time_of_day:   TimeOfDay = "day"
    count:         int = 1


class TripSelections(BaseModel):
    island_ids:        List[str] = []
    location_ids:      List[str] = []
    activity_ids:      List[str] = []
    hotel_nights:      Dict[str, Optional[int]] = {}
    cab_hires:         List[CabHireSelection] = []
    cab_legs:          List[CabLegSelection] = []
    adults:            int = 2
    children:          int = 0
    trip_nights:       Optional[int] = None
    include_scooters:  bool = False
    include_bicycles:  bool = False

    @property
    def traveler_count(self) -> int:
        return max(1, max(self.adults, 0) + max(self.children, 0))


class FilterCriteria(BaseModel):
    island_ids: List[str] = []
    search:     str = ""
    mood:       str = "all"
    category:   str = "all"
    bundle:     str = "all"
    sort:       SortMode = "recommended"


class CabLegRequest(BaseModel):
    island_id:     str
    from_zone:     str
    to_zone:       str
    trip_type:     Optional[str] = None
    vehicle_class: Optional[str] = None
    service_class: Optional[str] = None


class CabFareOptions(BaseModel):
    time_of_day:    TimeOfDay = "day"
    multiplier:     float = 1.0
    traveler_count: int = 1
    per_person:     bool = False


# ── Pricing configuration ────────────────────────────────────────

class Markups(BaseModel):
    cab:      float = 0.10
    hotel:    float = 0.20
    activity: float = 0.15


class PricingConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    currency:                 str = "INR"
    tax_percent:              float = Field(5, alias="taxPercent")
    service_fee:              float = Field(0, alias="serviceFee")
    cab_per_day_base_inr:     Optional[float] = Field(None, alias="perDayBaseINR")
    min_cab_fare_multiplier:  float = Field(1, alias="minCabFareMultiplier")
    markups:                  Markups = Markups()
    cab_pricing_mode:         CabMode = Field("legs", alias="cabPricingMode")
    room_scaling:             bool = Field(True, alias="roomScaling")
    room_capacity:            int = Field(2, alias="roomCapacity")


# ── Breakdown (output) ───────────────────────────────────────────

class LineItem(BaseModel):
    ref_id:          str
    label:           str
    quantity:        float = 1
    unit_price:      float = 0
    markup:          float = 0
    total:           float = 0
    price_available: bool = True
    details:         Dict[str, Any] = {}


class CategoryTotal(BaseModel):
    total: float = 0
    lines: List[LineItem] = []


class Breakdown(BaseModel):
    currency:       str
    traveler_count: int
    hotels:         CategoryTotal
    cabs:           CategoryTotal
    activities:     CategoryTotal
    ferries:        CategoryTotal
    rentals:        CategoryTotal = CategoryTotal()
    subtotal:       float
    tax:            float
    service_fee:    float
    grand_total:    float
    per_person:     float
    warnings:       List[str] = []


# ── API payloads ─────────────────────────────────────────────────

class EstimateRequest(BaseModel):
    selections: TripSelections = TripSelections()
    pricing:    Optional[Dict[str, Any]] = None


class EstimateResponse(BaseModel):
    island_ids:  List[str]
    trip_days:   int
    trip_nights: int
    breakdown:   Breakdown
    headline:    str


class CabLegQuote(BaseModel):
    leg:        Dict[str, Any]
    label:      str
    fare:       float
    per_person: float
