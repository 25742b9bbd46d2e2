from __future__ import annotations

import re
import unicodedata


_WHITESPACE_RE = re.compile(r"\s+")

# Letters NFKD leaves intact (no combining mark to strip)
_NAME_TRANSLATION_TABLE = str.maketrans(
    {
        "ø": "o",
        "Ø": "O",
        "æ": "ae",
        "Æ": "AE",
        "ð": "d",
        "Ð": "D",
        "đ": "d",
        "Đ": "D",
        "ł": "l",
        "Ł": "L",
        "ß": "ss",
        "þ": "th",
        "Þ": "Th",
        "ı": "i",
    }
)


def normalize_player_name(value: str | None) -> str:
    """Normalize a scraped player name into its identity form.

    Trims, turns non-breaking spaces into spaces, collapses whitespace and
    strips diacritics. Casing is kept: ``"  Stan   Wawrinka "`` and
    ``"Stan Wawrinka"`` are the same player, ``"Gaël Monfils"`` becomes
    ``"Gael Monfils"``.
    """
    if not value:
        return ""
    normalized = str(value).replace("\u00a0", " ")
    normalized = _WHITESPACE_RE.sub(" ", normalized).strip()
    normalized = normalized.translate(_NAME_TRANSLATION_TABLE)
    normalized = unicodedata.normalize("NFKD", normalized)
    normalized = "".join(c for c in normalized if not unicodedata.combining(c))
    return unicodedata.normalize("NFC", normalized)


def name_keys(value: str | None) -> set[str]:
    """Lowercase full name and surname, used to spot a player in free text."""
    normalized = normalize_player_name(value).lower()
    if not normalized:
        return set()
    keys = {normalized}
    tokens = normalized.split()
    if len(tokens) > 1:
        keys.add(tokens[-1])
    return keys
