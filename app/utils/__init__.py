"""Utility functions."""

from app.utils.date_helpers import parse_date
from app.utils.player_names import normalize_player_name
from app.utils.surfaces import guess_surface_from_tournament

__all__ = [
    "parse_date",
    "normalize_player_name",
    "guess_surface_from_tournament",
]
