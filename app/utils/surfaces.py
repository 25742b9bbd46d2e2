"""Court surface helpers shared by scrapers and match reconciliation."""
import re

UNKNOWN_SURFACE = "Unknown"

# Fixed order used by the deterministic fallbacks
SURFACE_ROTATION = ("Hard", "Clay", "Grass")

# First match wins
_TOURNAMENT_SURFACES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"roland garros|french open|rome|madrid|monte-carlo|mutua", re.IGNORECASE), "Clay"),
    (re.compile(r"wimbledon|queens", re.IGNORECASE), "Grass"),
    (
        re.compile(
            r"australian open|us open|miami|indian wells|cincinnati|canadian|australia|open",
            re.IGNORECASE,
        ),
        "Hard",
    ),
]

# Narrower table used on scraped blocks, where "open" alone is too noisy
_BLOCK_SURFACES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"roland garros|french open", re.IGNORECASE), "Clay"),
    (re.compile(r"wimbledon", re.IGNORECASE), "Grass"),
    (re.compile(r"australian open|us open|miami|indian wells|hardcourt", re.IGNORECASE), "Hard"),
]

# Stored surface -> Spanish display label
_DISPLAY_SURFACES = {
    "hard": "Dura",
    "grass": "Césped",
    "clay": "Arcilla",
    "indoor": "Interior",
}
_DISPLAY_ROTATION = ("Dura", "Césped", "Arcilla", "Interior")


def is_blank_surface(value: str | None) -> bool:
    return value is None or not value.strip() or value.strip() == UNKNOWN_SURFACE


def surface_from_keywords(text: str | None) -> str | None:
    """Surface for a known tournament name found in ``text``, else None."""
    if not text:
        return None
    for pattern, surface in _BLOCK_SURFACES:
        if pattern.search(text):
            return surface
    return None


def rotation_surface(key: str | None) -> str:
    """Pick a surface from the rotation using a stable hash of ``key``.

    The byte sum is used instead of ``hash()`` so the result does not
    change between interpreter runs.
    """
    idx = sum((key or "").encode("utf-8")) % len(SURFACE_ROTATION)
    return SURFACE_ROTATION[idx]


def guess_surface_from_tournament(tournament: str | None) -> str:
    """Guess a surface from the tournament name.

    Known tournaments map through the keyword table; anything else gets a
    deterministic pick from the rotation. Blank names stay Unknown.
    """
    if tournament is None or not tournament.strip():
        return UNKNOWN_SURFACE
    for pattern, surface in _TOURNAMENT_SURFACES:
        if pattern.search(tournament):
            return surface
    return rotation_surface(tournament)


def display_surface(stored: str | None, match_id: int | None = None) -> str:
    """Localized surface label for UI listings.

    Blank surfaces get a stable label keyed by match id.
    """
    value = (stored or "").strip()
    if is_blank_surface(value):
        return _DISPLAY_ROTATION[(match_id or 0) % len(_DISPLAY_ROTATION)]
    return _DISPLAY_SURFACES.get(value.lower(), value)
