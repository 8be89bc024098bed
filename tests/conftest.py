import pytest

from services.index_service import build_indexes


@pytest.fixture
def tables():
    return {
        "islands": [
            {"id": "PB", "name": "Port Blair", "region": "South Andaman"},
            {"id": "HL", "name": "Swaraj Dweep (Havelock)"},
            {"id": "NL", "name": "Shaheed Dweep (Neil)"},
            {"id": "BT", "name": "Baratang"},
        ],
        "locations": [
            {"id": "PB001", "location": "Cellular Jail", "island": "Port Blair", "category": "attraction",
             "moods": ["history", "family"], "brief": "Colonial-era prison and light show", "typicalHours": 2,
             "slug": "cellular-jail"},
            {"id": "PB002", "location": "Corbyn's Cove", "island": "Port Blair", "category": "beach",
             "moods": ["relax"], "brief": "City beach", "typicalHours": 1.5, "slug": "corbyns-cove"},
            {"id": "HL001", "location": "Radhanagar Beach", "island": "Havelock Island", "category": "beach",
             "moods": ["family", "nature"], "brief": "Sunset beach", "typicalHours": 3, "slug": "radhanagar"},
            {"id": "HL002", "location": "Kalapathar Beach", "island": "Havelock Island", "category": "beach",
             "moods": ["offbeat"], "brief": "Quiet black-rock beach", "typicalHours": 1, "slug": "kalapathar"},
            {"id": "HL003", "location": "Elephant Beach", "island": "Havelock Island", "category": "dive_site",
             "moods": ["adventure"], "brief": "Snorkelling reef", "typicalHours": 4, "slug": "elephant-beach"},
            {"id": "NL001", "location": "Natural Bridge", "island": "Neil Island", "category": "attraction",
             "moods": ["nature"], "brief": "Rock formation at low tide", "slug": "natural-bridge"},
            {"id": "XX001", "location": "Mystery Cove", "island": "Atlantis", "category": "beach",
             "moods": ["offbeat"], "brief": "Nobody knows", "typicalHours": 2, "slug": "mystery"},
        ],
        "activities": [
            {"id": "ADV001", "name": "Scuba Dive", "category": "water", "durationMin": 180,
             "basePriceINR": 1200, "unit": "per_person", "operatedIn": ["HL"], "slug": "scuba"},
            {"id": "ADV002", "name": "Glass-bottom Boat", "category": "water", "durationMin": 60,
             "basePriceINR": 1200, "unit": "per_boat", "operatedIn": ["HL", "NL"]},
            {"id": "ADV003", "name": "Light & Sound Show", "category": "culture", "durationMin": 60,
             "basePriceINR": "free", "unit": "per_person", "operatedIn": ["PB"]},
        ],
        "location_activities": [
            {"locationId": "HL003", "activityIds": ["ADV001", "ADV002"]},
            {"locationId": "PB001", "activities": ["ADV003"]},
            {"activityIds": ["ADV001"]},
            {"locationId": "NL001", "activityIds": "ADV002"},
        ],
        "ferry_routes": [
            {"id": "F1", "originId": "PB", "destinationId": "HL", "typicalDurationMin": 120,
             "operators": [{"operator": "Makruzz", "sampleFareINR": 1500},
                           {"operator": "Govt", "sampleFareINR": 500},
                           {"operator": "Ghost", "sampleFareINR": 0}]},
            {"id": "F2", "originId": "NL", "destinationId": "HL", "typicalDurationMin": 60,
             "operators": [{"operator": "Green Ocean", "sampleFareINR": 1000}]},
            {"id": "F3", "originId": "PB", "destinationId": "NL", "typicalDurationMin": 110,
             "operators": [{"operator": "Nautika", "sampleFareINR": 1300},
                           {"operator": "Govt", "sampleFareINR": None}]},
        ],
        "cab_legs": [
            {"id": "C1", "islandId": "PB", "fromZone": "Airport", "toZone": "Aberdeen Bazaar",
             "tripType": "drop", "vehicleClass": "Sedan", "serviceClass": "AC",
             "dayFareINR": 1000, "nightFareINR": 1300, "includedWaitMin": 15},
            {"id": "C2", "islandId": "PB", "fromZone": "Airport", "toZone": "Aberdeen Bazaar",
             "tripType": "round", "vehicleClass": "SUV", "serviceClass": "AC",
             "dayFareINR": 1400, "nightFareINR": 0},
            {"id": "C3", "islandId": "PB", "fromZone": "Jetty", "toZone": "Corbyns Cove",
             "tripType": "drop", "vehicleClass": "Sedan", "serviceClass": "NON-AC",
             "dayFareINR": 1200, "nightFareINR": "n/a"},
            {"id": "C4", "islandId": "HL", "fromZone": "Jetty", "toZone": "Radhanagar",
             "tripType": "drop", "vehicleClass": "Sedan", "serviceClass": "AC",
             "dayFareINR": 800, "nightFareINR": 1000},
            {"id": "C5", "islandId": "HL", "fromZone": "Jetty", "toZone": "Kalapathar",
             "tripType": "drop", "vehicleClass": "Sedan", "serviceClass": "AC",
             "dayFareINR": 1200, "nightFareINR": 1400},
            {"id": "C6", "fromZone": "Nowhere", "toZone": "Elsewhere", "dayFareINR": 5000},
        ],
        "hotels": [
            {"id": "H1", "islandId": "HL", "displayName": "Sea Shell", "starRating": 4,
             "minNightlyINR": 5000, "maxNightlyINR": 9000, "typicalCoupleINR": 6500, "isBeachfront": True},
            {"id": "H2", "islandId": "PB", "displayName": "Budget Inn",
             "minNightlyINR": None, "maxNightlyINR": 2500},
            {"id": "H3", "islandId": "PB", "displayName": "Ghost Lodge"},
        ],
        "scooters": [{"id": "S1", "dailyRateINR": 400}, {"id": "S2", "dailyRateINR": 600}],
        "bicycles": [{"id": "B1", "dailyRateINR": 200}],
    }


@pytest.fixture
def indexes(tables):
    return build_indexes(tables)
