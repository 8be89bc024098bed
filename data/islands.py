# Island reference data for the Andaman planner
# Canonical display order, name aliases used to resolve free-text
# island names on locations, and the "hero" boosts used by the
# recommended catalog ordering.
# Extra aliases can also be supplied per island in the reference
# tables (island["aliases"]) without touching this file.

ISLAND_ORDER = ["PB", "HL", "NL", "LI", "NA", "LA", "BT", "MB", "RG", "DG", "RX"]

# Checked in order, case-insensitive substring match on the location's island name
ISLAND_NAME_ALIASES = [
    ("port blair",     "PB"),
    ("havelock",       "HL"),
    ("swaraj",         "HL"),
    ("neil",           "NL"),
    ("shaheed",        "NL"),
    ("long island",    "LI"),
    ("little andaman", "LA"),
    ("mayabunder",     "MB"),
    ("rangat",         "RG"),
    ("diglipur",       "DG"),
    ("baratang",       "BT"),
]

# Lower score sorts earlier within an island
HERO_LOCATION_BOOSTS = [
    ("radhanagar",     -3),
    ("cellular",       -3),
    ("elephant beach", -2),
    ("bharatpur",      -2),
]
