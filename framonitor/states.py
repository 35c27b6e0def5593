"""
Indian state names and map positions.
"""

import re
from typing import Dict, Optional, Tuple

INDIAN_STATES = [
    "Andhra Pradesh",
    "Arunachal Pradesh",
    "Assam",
    "Bihar",
    "Chhattisgarh",
    "Goa",
    "Gujarat",
    "Haryana",
    "Himachal Pradesh",
    "Jharkhand",
    "Karnataka",
    "Kerala",
    "Madhya Pradesh",
    "Maharashtra",
    "Manipur",
    "Meghalaya",
    "Mizoram",
    "Nagaland",
    "Odisha",
    "Punjab",
    "Rajasthan",
    "Sikkim",
    "Tamil Nadu",
    "Telangana",
    "Tripura",
    "Uttar Pradesh",
    "Uttarakhand",
    "West Bengal",
    "Jammu & Kashmir",
    "Ladakh",
]

# Approximate centroids as (lat, lng), keyed by state_key()
STATE_CENTROIDS: Dict[str, Tuple[float, float]] = {
    "andhra-pradesh": (15.9129, 79.7400),
    "assam": (26.2006, 92.9376),
    "bihar": (25.0961, 85.3131),
    "chhattisgarh": (21.2787, 81.8661),
    "goa": (15.2993, 74.1240),
    "gujarat": (23.0225, 72.5714),
    "himachal-pradesh": (31.1048, 77.1734),
    "jammu-&-kashmir": (33.7782, 76.5762),
    "jharkhand": (23.6102, 85.2799),
    "karnataka": (15.3173, 75.7139),
    "kerala": (10.8505, 76.2711),
    "madhya-pradesh": (22.9734, 78.6569),
    "maharashtra": (19.7515, 75.7139),
    "odisha": (20.9517, 85.0985),
    "rajasthan": (27.0238, 74.2179),
    "tamil-nadu": (11.1271, 78.6569),
    "telangana": (18.1124, 79.0193),
    "tripura": (23.9408, 91.9882),
    "uttar-pradesh": (26.8467, 80.9462),
    "uttarakhand": (30.0668, 79.0193),
    "west-bengal": (22.9868, 87.8550),
}

_WHITESPACE = re.compile(r"\s+")


def state_key(name: str) -> str:
    """
    Normalize a state name into a lookup key.

    Lowercases and replaces each run of whitespace with a single hyphen,
    so "Madhya   Pradesh" and "madhya-pradesh" share the key "madhya-pradesh".

    Args:
        name: State name or key

    Returns:
        Normalized key
    """
    return _WHITESPACE.sub("-", name.strip().lower())


_CANONICAL = {state_key(name): name for name in INDIAN_STATES}


def canonical_state_name(name: str) -> str:
    """
    Return the proper-case spelling of a state name.

    Known states map to their canonical spelling; anything else is
    whitespace-collapsed and title-cased.
    """
    cleaned = _WHITESPACE.sub(" ", name.strip())
    known = _CANONICAL.get(state_key(cleaned))
    if known:
        return known
    return cleaned.title()


def state_centroid(name: str) -> Optional[Tuple[float, float]]:
    """Return the map centroid for a state, or None when unknown."""
    return STATE_CENTROIDS.get(state_key(name))
