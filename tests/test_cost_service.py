import pytest

from models.schemas import CabHireSelection, CabLegSelection, PricingConfig, TripSelections
from services.cost_service import (
    compute_trip_cost, load_pricing_config, nightly_rate, trip_days, trip_length, trip_nights,
    vehicles_needed,
)
from services.index_service import IndexesNotBuiltError, build_indexes


@pytest.fixture
def config():
    return load_pricing_config({"taxPercent": 5, "serviceFee": 250})


def test_pricing_config_defaults():
    cfg = load_pricing_config()
    assert cfg.currency == "INR"
    assert cfg.tax_percent == 5
    assert cfg.service_fee == 0
    assert cfg.min_cab_fare_multiplier == 1
    assert cfg.cab_per_day_base_inr is None
    assert (cfg.markups.cab, cfg.markups.hotel, cfg.markups.activity) == (0.10, 0.20, 0.15)
    assert cfg.cab_pricing_mode == "legs"
    assert cfg.room_capacity == 2


def test_pricing_config_coerces_bad_values():
    cfg = load_pricing_config({
        "taxPercent": "eighteen",
        "serviceFee": -10,
        "minCabFareMultiplier": None,
        "cab": {"perDayBaseINR": 2200},
        "markups": {"hotel": 0.3, "cab": "lots"},
        "cabPricingMode": "teleport",
        "unknown": 1,
    })
    assert cfg.tax_percent == 0
    assert cfg.service_fee == 0
    assert cfg.min_cab_fare_multiplier == 1
    assert cfg.cab_per_day_base_inr == 2200
    assert cfg.markups.hotel == 0.3
    assert cfg.markups.cab == 0
    assert cfg.markups.activity == 0.15
    assert cfg.cab_pricing_mode == "legs"


def test_nightly_rate_fallback_chain():
    assert nightly_rate({"typicalCoupleINR": 6500, "minNightlyINR": 5000}) == 6500
    assert nightly_rate({"typicalCoupleINR": "?", "minNightlyINR": 5000, "maxNightlyINR": 9000}) == 5000
    assert nightly_rate({"minNightlyINR": None, "maxNightlyINR": 2500}) == 2500
    assert nightly_rate({}) == 0


def test_trip_length_heuristic():
    assert trip_days(0) == 0
    assert trip_days(1) == 1
    assert trip_days(7) == 3
    assert trip_nights(0) == 0
    assert trip_nights(1) == 1
    assert trip_nights(3) == 2
    assert trip_length(TripSelections(location_ids=["a", "b", "c", "d"])) == (2, 1)
    assert trip_length(TripSelections(location_ids=["a"], trip_nights=4)) == (5, 4)


def test_end_to_end_hotel_only(indexes, config):
    sel = TripSelections(island_ids=["PB", "HL"], hotel_nights={"H1": 3}, adults=2)
    out = compute_trip_cost(sel, build_indexes({"hotels": [indexes.hotel_by_id["H1"]]}), config)

    assert out.hotels.total == 23400
    assert out.subtotal == 23400
    assert out.tax == pytest.approx(23400 * 0.05)
    assert out.grand_total == pytest.approx(23400 * 1.05 + 250)
    assert out.per_person == pytest.approx((23400 * 1.05 + 250) / 2)
    assert out.cabs.total == out.activities.total == out.ferries.total == 0


def test_hotel_rooms_scale_with_travelers(indexes, config):
    sel = TripSelections(hotel_nights={"H1": 2}, adults=2, children=1)
    out = compute_trip_cost(sel, indexes, config)
    line = out.hotels.lines[0]
    assert line.details["rooms"] == 2
    assert line.total == pytest.approx(6500 * 2 * 2 * 1.2)


def test_hotel_single_rate_mode(indexes):
    cfg = load_pricing_config({"roomScaling": False})
    out = compute_trip_cost(TripSelections(hotel_nights={"H1": 2}, adults=5), indexes, cfg)
    assert out.hotels.total == pytest.approx(6500 * 2 * 1.2)


def test_hotel_nights_default_to_trip_length(indexes, config):
    sel = TripSelections(hotel_nights={"H2": None, "H1": 0}, trip_nights=2)
    out = compute_trip_cost(sel, indexes, config)
    assert [l.ref_id for l in out.hotels.lines] == ["H2"]
    assert out.hotels.total == pytest.approx(2500 * 2 * 1.2)


def test_unpriced_and_unknown_hotels_are_flagged(indexes, config):
    out = compute_trip_cost(TripSelections(hotel_nights={"H3": 2, "NOPE": 1}), indexes, config)
    assert out.hotels.total == 0
    assert all(not l.price_available for l in out.hotels.lines)
    assert "Hotels: price unavailable for Ghost Lodge" in out.warnings
    assert "Hotels: price unavailable for NOPE" in out.warnings


def test_activity_unit_pricing(indexes, config):
    sel = TripSelections(activity_ids=["ADV001", "ADV002"], adults=2, children=1)
    out = compute_trip_cost(sel, indexes, config)
    totals = {l.ref_id: l.total for l in out.activities.lines}
    assert totals["ADV001"] == pytest.approx(1200 * 3 * 1.15)
    assert totals["ADV002"] == pytest.approx(1200 * 1.15)


def test_activity_selected_by_id_and_slug_counted_once(indexes, config):
    out = compute_trip_cost(TripSelections(activity_ids=["ADV001", "scuba"], adults=1), indexes, config)
    assert len(out.activities.lines) == 1


def test_activity_with_bad_price_contributes_zero(indexes, config):
    out = compute_trip_cost(TripSelections(activity_ids=["ADV003", "ADV999"]), indexes, config)
    assert out.activities.total == 0
    assert len(out.warnings) == 2


def test_cab_legs_markup_applied_per_line(indexes, config):
    sel = TripSelections(cab_legs=[
        CabLegSelection(leg_id="C1", count=2),
        CabLegSelection(island_id="HL", from_zone="jetty", to_zone="radhanagar",
                        vehicle_class="Sedan", service_class="Deluxe", time_of_day="night"),
    ])
    out = compute_trip_cost(sel, indexes, config)
    totals = [l.total for l in out.cabs.lines]
    assert totals == [pytest.approx(1000 * 2 * 1.1), pytest.approx(1000 * 1.1)]
    assert out.cabs.lines[0].details["per_person"] == 500


def test_cab_global_multiplier(indexes):
    cfg = load_pricing_config({"minCabFareMultiplier": 2})
    out = compute_trip_cost(TripSelections(cab_legs=[CabLegSelection(leg_id="C4")]), indexes, cfg)
    assert out.cabs.total == pytest.approx(800 * 2 * 1.1)


def test_unmatched_cab_leg_is_price_unavailable(indexes, config):
    sel = TripSelections(cab_legs=[CabLegSelection(island_id="LA", from_zone="Hut Bay", to_zone="Butler Bay")])
    out = compute_trip_cost(sel, indexes, config)
    assert out.cabs.total == 0
    assert out.warnings == ["Cabs: price unavailable for LA:Hut Bay-Butler Bay"]


def test_daily_hire_mode(indexes):
    cfg = load_pricing_config({"cabPricingMode": "daily_hire", "cab": {"perDayBaseINR": 2000}})
    sel = TripSelections(
        cab_hires=[
            CabHireSelection(island_id="PB", vehicle_class="Sedan", days=2),
            CabHireSelection(island_id="LA", vehicle_class="Sedan", days=1),
        ],
        cab_legs=[CabLegSelection(leg_id="C1")],
    )
    out = compute_trip_cost(sel, indexes, cfg)
    assert [l.total for l in out.cabs.lines] == [pytest.approx(1100 * 2 * 1.1), pytest.approx(2000 * 1.1)]
    assert "Cab legs ignored: pricing mode is daily hire" in out.warnings


def test_daily_hire_vehicles_sized_to_party(indexes):
    cfg = load_pricing_config({"cabPricingMode": "daily_hire"})
    sel = TripSelections(
        adults=6, children=2,
        cab_hires=[CabHireSelection(island_id="PB", vehicle_class="Sedan", days=2)],
    )
    line = compute_trip_cost(sel, indexes, cfg).cabs.lines[0]
    assert line.details["vehicles"] == 2
    assert line.quantity == 4
    assert line.total == pytest.approx(1100 * 2 * 2 * 1.1)


def test_daily_hire_explicit_vehicle_count_wins(indexes):
    cfg = load_pricing_config({"cabPricingMode": "daily_hire"})
    sel = TripSelections(
        adults=6, children=2,
        cab_hires=[CabHireSelection(island_id="PB", vehicle_class="Sedan", days=1, vehicles=1)],
    )
    assert compute_trip_cost(sel, indexes, cfg).cabs.lines[0].details["vehicles"] == 1


def test_vehicles_needed():
    assert [vehicles_needed(n) for n in (0, 1, 4, 5, 8, 9)] == [1, 1, 1, 2, 2, 3]


def test_ferries_have_no_markup(indexes, config):
    out = compute_trip_cost(TripSelections(island_ids=["PB", "HL", "NL"], adults=2), indexes, config)
    assert out.ferries.total == (500 + 1000 + 1300) * 2
    assert out.subtotal == out.ferries.total


def test_rentals_only_when_opted_in(indexes, config):
    base = TripSelections(trip_nights=2, adults=3)
    assert compute_trip_cost(base, indexes, config).rentals.lines == []

    out = compute_trip_cost(base.model_copy(update={"include_scooters": True, "include_bicycles": True}), indexes, config)
    totals = {l.ref_id: l.total for l in out.rentals.lines}
    assert totals["scooters"] == 500 * 3 * 2
    assert totals["bicycles"] == 200 * 3 * 3
    assert out.subtotal == totals["scooters"] + totals["bicycles"]


def test_grand_total_composition(indexes, config):
    sel = TripSelections(
        island_ids=["PB", "HL"],
        activity_ids=["ADV002"],
        hotel_nights={"H1": 1},
        cab_legs=[CabLegSelection(leg_id="C1")],
        adults=2,
    )
    out = compute_trip_cost(sel, indexes, config)
    subtotal = 6500 * 1.2 + 1000 * 1.1 + 1200 * 1.15 + 500 * 2 * 2
    assert out.subtotal == pytest.approx(subtotal)
    assert out.grand_total == pytest.approx(subtotal * 1.05 + 250)


def test_empty_selection_is_service_fee_only(indexes, config):
    out = compute_trip_cost(TripSelections(), indexes, config)
    assert out.subtotal == 0
    assert out.grand_total == 250
    assert out.warnings == []


def test_requires_built_indexes(config):
    with pytest.raises(IndexesNotBuiltError):
        compute_trip_cost(TripSelections(), None, config)


def test_default_config_when_none_given(indexes):
    out = compute_trip_cost(TripSelections(activity_ids=["ADV002"]), indexes)
    assert isinstance(out.currency, str)
    assert out.activities.total == pytest.approx(1380)
    assert PricingConfig().tax_percent == 5
