# Data Loader — reference tables from a local JSON directory or Firestore
#
# Local layout (REFERENCE_DATA_DIR):
#   islands.json, locations.json, activities.json, location_activities_map.json,
#   ferry_routes.json                 : required, JSON arrays
#   cab_legs.json, hotel_prices.json, ground_scooters.json,
#   ground_bicycles.json              : optional arrays
#   pricing_config.json               : optional object
#
# Firestore layout: reference/{table}/rows/*  and  reference/pricing_config

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

import config
from services.index_service import Indexes, build_indexes

logger = logging.getLogger(__name__)

TABLE_FILES = {
    "islands":             "islands.json",
    "locations":           "locations.json",
    "activities":          "activities.json",
    "location_activities": "location_activities_map.json",
    "ferry_routes":        "ferry_routes.json",
    "cab_legs":            "cab_legs.json",
    "hotels":              "hotel_prices.json",
    "scooters":            "ground_scooters.json",
    "bicycles":            "ground_bicycles.json",
}
REQUIRED_TABLES = ("islands", "locations", "activities", "location_activities", "ferry_routes")
PRICING_FILE    = "pricing_config.json"


class ReferenceDataError(Exception):
    """A required reference table is missing or unreadable."""


class ReferenceData:
    """Loaded tables plus the indexes built from them."""

    def __init__(self, tables: Dict[str, List[dict]], pricing_raw: Optional[dict] = None):
        self.tables      = tables
        self.pricing_raw = pricing_raw or {}
        self.indexes: Indexes = build_indexes(tables)


def _read_json(path: Path):
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def load_local_tables(data_dir) -> Dict[str, List[dict]]:
    data_dir = Path(data_dir)
    tables   = {}

    for name, filename in TABLE_FILES.items():
        path = data_dir / filename
        try:
            rows = _read_json(path)
        except (OSError, ValueError) as e:
            if name in REQUIRED_TABLES:
                raise ReferenceDataError(f"Could not load {filename}: {e}") from e
            logger.warning("Optional table %s not loaded (%s)", filename, e)
            rows = []

        if not isinstance(rows, list):
            if name in REQUIRED_TABLES:
                raise ReferenceDataError(f"{filename} must contain a JSON array")
            logger.warning("Optional table %s is not an array, ignoring", filename)
            rows = []

        tables[name] = rows
        logger.info("Loaded %s: %d rows", name, len(rows))

    return tables


def load_local_pricing(data_dir) -> dict:
    path = Path(data_dir) / PRICING_FILE
    try:
        cfg = _read_json(path)
    except (OSError, ValueError) as e:
        logger.warning("Pricing config not loaded (%s), using defaults", e)
        return {}
    return cfg if isinstance(cfg, dict) else {}


def load_firestore_tables(db) -> Dict[str, List[dict]]:
    tables = {}
    ref    = db.collection("reference")

    for name in TABLE_FILES:
        rows = []
        for doc in ref.document(name).collection("rows").stream():
            row = doc.to_dict() or {}
            row.setdefault("id", doc.id)
            rows.append(row)
        if not rows and name in REQUIRED_TABLES:
            raise ReferenceDataError(f"Firestore table '{name}' is empty")
        tables[name] = rows
        logger.info("Loaded %s from Firestore: %d rows", name, len(rows))

    return tables


def load_firestore_pricing(db) -> dict:
    doc = db.collection("reference").document("pricing_config").get()
    return doc.to_dict() if doc.exists else {}


def load_reference(source: Optional[str] = None, data_dir=None) -> ReferenceData:
    source = source or config.REFERENCE_DATA_SOURCE
    if source == "firestore":
        db = config.get_db()
        return ReferenceData(load_firestore_tables(db), load_firestore_pricing(db))

    data_dir = data_dir or config.REFERENCE_DATA_DIR
    return ReferenceData(load_local_tables(data_dir), load_local_pricing(data_dir))


@lru_cache(maxsize=1)
def get_reference() -> ReferenceData:
    """Process-wide reference data, loaded once."""
    return load_reference()


def reload_reference() -> ReferenceData:
    get_reference.cache_clear()
    return get_reference()
