"""
Mining fixtures out of JSON blobs embedded in page markup.

Pages such as the ESPN calendar ship their initial state as large JSON
literals inside ``<script>`` tags (``window.__DATA__ = {...};``). A regex
cannot match nested braces, so ``extract_json_blocks`` scans characters,
tracks bracket depth and skips over quoted strings. Parsed blocks are then
walked recursively looking for event-shaped objects.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterator

from app.services.sources.records import FixtureRecord, build_fixture

logger = logging.getLogger(__name__)

MIN_SCRIPT_LENGTH = 200
MIN_BLOCK_LENGTH = 200
MAX_DEPTH = 40

# Keys that mark a dict as a possible event/competition
EVENT_KEYS = ("competitions", "competitors", "startDate", "scheduled", "name")

_OPENERS = {"{": "}", "[": "]"}


def extract_json_blocks(text: str) -> list[str]:
    """
    Return every balanced ``{...}`` / ``[...]`` block at the top level of ``text``.

    Brackets inside double-quoted strings (with backslash escapes) are
    ignored. An unbalanced opener is dropped and scanning stops at the end
    of the text.

    Examples:
        >>> extract_json_blocks('var a = {"x": "}"}; f([1, [2]])')
        ['{"x": "}"}', '[1, [2]]']
    """
    blocks: list[str] = []
    i = 0
    length = len(text)

    while i < length:
        if text[i] not in _OPENERS:
            i += 1
            continue

        stack = [text[i]]
        start = i
        i += 1
        in_string = False
        escape = False

        while i < length and stack:
            c = text[i]
            if in_string:
                if escape:
                    escape = False
                elif c == "\\":
                    escape = True
                elif c == '"':
                    in_string = False
            elif c == '"':
                in_string = True
            elif c in _OPENERS:
                stack.append(c)
            elif c == "}" and stack[-1] == "{":
                stack.pop()
            elif c == "]" and stack[-1] == "[":
                stack.pop()
            i += 1

        if not stack:
            blocks.append(text[start:i])

    return blocks


def competitor_name(competitor: Any) -> str | None:
    """Display name of a competitor: athlete, then team, then the node itself."""
    if not isinstance(competitor, dict):
        return None
    for key in ("athlete", "team"):
        nested = competitor.get(key)
        if isinstance(nested, dict) and nested.get("displayName"):
            return str(nested["displayName"])
    name = competitor.get("displayName")
    return str(name) if name else None


def _text_field(value: Any) -> str | None:
    """Tournament-like fields are strings or ``{"name": ...}`` objects."""
    if isinstance(value, dict):
        value = value.get("name") or value.get("displayName")
    if value is None or isinstance(value, (list, dict)):
        return None
    return str(value)


def event_to_fixture(node: dict, source: str) -> FixtureRecord | None:
    """Build a fixture from one event-shaped dict, or None if it has no pair."""
    competitors = None
    competitions = node.get("competitions")
    if isinstance(competitions, list) and competitions and isinstance(competitions[0], dict):
        competitors = competitions[0].get("competitors")
    if not isinstance(competitors, list):
        competitors = node.get("competitors")
    if not isinstance(competitors, list) or len(competitors) < 2:
        return None

    tournament = None
    for key in ("tournament", "shortName", "name", "competition", "league"):
        tournament = _text_field(node.get(key))
        if tournament:
            break

    return build_fixture(
        competitor_name(competitors[0]),
        competitor_name(competitors[1]),
        tournament=tournament,
        date=node.get("date") or node.get("startDate") or node.get("scheduled"),
        surface=_text_field(node.get("surface")),
        status="upcoming",
        source=source,
        external_id=node.get("id") or node.get("uid") or node.get("guid"),
    )


def iter_event_fixtures(node: Any, source: str, depth: int = 0) -> Iterator[FixtureRecord]:
    """Depth-first walk over parsed JSON yielding fixtures from event-like dicts."""
    if depth > MAX_DEPTH:
        return
    if isinstance(node, list):
        for item in node:
            yield from iter_event_fixtures(item, source, depth + 1)
    elif isinstance(node, dict):
        if any(key in node for key in EVENT_KEYS):
            fixture = event_to_fixture(node, source)
            if fixture is not None:
                # Competitions nested under this event describe the same match
                yield fixture
                return
        for value in node.values():
            if isinstance(value, (list, dict)):
                yield from iter_event_fixtures(value, source, depth + 1)


def parse_embedded_fixtures(scripts: list[str], source: str, limit: int) -> list[FixtureRecord]:
    """Extract up to ``limit`` fixtures from the given script bodies."""
    fixtures: list[FixtureRecord] = []
    seen_blocks: set[str] = set()

    for script_text in scripts:
        if len(fixtures) >= limit:
            break
        if len(script_text.strip()) <= MIN_SCRIPT_LENGTH:
            continue
        for block in extract_json_blocks(script_text):
            if len(block) <= MIN_BLOCK_LENGTH or block in seen_blocks:
                continue
            seen_blocks.add(block)
            try:
                parsed = json.loads(block)
            except ValueError:
                logger.debug("Skipping unparseable JSON block (%d chars)", len(block))
                continue
            for fixture in iter_event_fixtures(parsed, source):
                fixtures.append(fixture)
                if len(fixtures) >= limit:
                    break
            if len(fixtures) >= limit:
                break

    return fixtures
