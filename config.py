import os
from dotenv import load_dotenv

load_dotenv()

REFERENCE_DATA_SOURCE = os.getenv("REFERENCE_DATA_SOURCE", "local")
REFERENCE_DATA_DIR    = os.getenv("REFERENCE_DATA_DIR", "reference_data")
FIREBASE_CREDENTIALS  = os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")
CAB_PRICING_MODE      = os.getenv("CAB_PRICING_MODE", "legs")

_db = None


def get_db():
    """Firestore client, initialised on first use only."""
    global _db
    if _db is None:
        import firebase_admin
        from firebase_admin import credentials, firestore

        if not firebase_admin._apps:
            cred = credentials.Certificate(FIREBASE_CREDENTIALS)
            firebase_admin.initialize_app(cred)
        _db = firestore.client()
    return _db


# ── Gateway island for ferry sequencing ──────────────────────────
HUB_ISLAND_ID = "PB"

# ── Pricing defaults (INR) ───────────────────────────────────────
DEFAULT_PRICING = {
    "currency":             "INR",
    "taxPercent":           5,
    "serviceFee":           0,
    "cab":                  {"perDayBaseINR": None},
    "minCabFareMultiplier": 1,
}

# Margins applied once per line item on top of vendor rates
MARKUPS = {
    "cab":      0.10,
    "hotel":    0.20,
    "activity": 0.15,
}

# ── Capacities (persons per unit) ────────────────────────────────
ROOM_CAPACITY    = 2
CAB_CAPACITY     = 4
SCOOTER_CAPACITY = 2

# ── Trip length heuristic ────────────────────────────────────────
LOCATIONS_PER_DAY = 3
