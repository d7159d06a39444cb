"""Fixed category list and normalisation of classifier fields."""

import math
from typing import Any, Optional

from ..models import ACCESS_STATUSES

DEFAULT_CATEGORY = "Tous les sports"
DEFAULT_ACCESS_STATUS = "free"

VALID_CATEGORIES = (
    "Activation",
    "Alpes 2030",
    "Ambush",
    "Athlétisme",
    "Aviron",
    "Badminton",
    "Basketball",
    "Boxe",
    "Branding",
    "Campagne",
    "Catch",
    "Chiffre",
    "Cyclisme",
    "Emploi",
    "Equitation",
    "Escalade",
    "Escrime",
    "eSport",
    "Fitness",
    "Football",
    "Football US",
    "Golf",
    "Gymnastique",
    "Handball",
    "Hippisme",
    "Hockey-sur-Glace",
    "Hommes & Femmes",
    "Insolite",
    "Institutions",
    "International",
    "Judo",
    "Karate",
    "LA28",
    "Marques & Entreprises",
    "Médias",
    "Merchandising",
    "Milan Cortina 2026",
    "MMA",
    "Natation",
    "Paris 2024",
    "Patinage artistique",
    "Podcast",
    "RSE",
    "Rugby",
    "Ski",
    "Sponsoring",
    "Sports de combat",
    "Sports de glisse",
    "Sports mécaniques",
    "Stades & Arenas",
    "Sumo",
    "Tennis / Padel",
    "Tennis de table",
    "Tir",
    "Tous les sports",
    "Trail",
    "Triathlon",
    "Vidéo",
    "Voile",
    "Volleyball",
)

_CATEGORY_LOOKUP = {c.casefold(): c for c in VALID_CATEGORIES}


def match_category(category: Optional[str]) -> Optional[str]:
    """Canonical spelling of ``category``, or None if it is not in the list."""
    if not category:
        return None
    return _CATEGORY_LOOKUP.get(category.strip().casefold())


def normalize_category(category: Optional[str]) -> str:
    """Canonical category; anything unknown becomes the catch-all."""
    return match_category(category) or DEFAULT_CATEGORY


def normalize_score(value: Any) -> int:
    """Round half up and clamp to [0, 10]. Non-finite input scores 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        # Python ints are unbounded; float() would overflow on huge values
        return max(0, min(10, value))
    try:
        score = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(score):
        return 0
    return max(0, min(10, math.floor(score + 0.5)))


def normalize_access_status(status: Optional[str]) -> str:
    """One of ACCESS_STATUSES; unknown values are treated as free."""
    value = (status or "").strip().lower()
    if value in ACCESS_STATUSES:
        return value
    return DEFAULT_ACCESS_STATUS
