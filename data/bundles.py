# Curated quick-pick bundles over location tags
# A location matches a bundle when it carries any listed mood
# OR its category is one of the listed categories.
# A bundle with neither list matches everything.

CURATED_BUNDLES = {
    "all": {
        "name":       "Everything",
        "moods":      [],
        "categories": [],
    },
    "must_see": {
        "name":       "Must-see",
        "moods":      [],
        "categories": ["beach", "island", "attraction", "park"],
    },
    "family_pack": {
        "name":       "Family pack",
        "moods":      ["family"],
        "categories": [],
    },
    "adventure_heavy": {
        "name":       "Adventure heavy",
        "moods":      ["adventure"],
        "categories": ["trek", "dive_site"],
    },
    "offbeat_gems": {
        "name":       "Offbeat gems",
        "moods":      ["offbeat"],
        "categories": [],
    },
}

TRAVELER_PRESETS = {
    "romantic": {"adults": 2, "children": 0},
    "family":   {"adults": 2, "children": 2},
    "group":    {"adults": 4, "children": 2},
}
