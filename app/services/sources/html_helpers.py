"""Selector helpers shared by the HTML scrapers."""
from __future__ import annotations

import re
from datetime import date

from bs4 import Tag

from app.utils.date_helpers import parse_date

DATE_SELECTORS = ".date, .event__date, .schedule__date, .match-date"
HEADING_SELECTORS = "h2, h3, .headline, .card-header"

# Two or more capitalized tokens, accented letters included
_CAP_WORD = r"[A-ZÀ-Ý][a-zà-ÿ]+"
VS_PATTERN = re.compile(
    rf"({_CAP_WORD}(?:\s+{_CAP_WORD}){{1,2}})\s+(?i:vs)\.?\s+({_CAP_WORD}(?:\s+{_CAP_WORD}){{1,2}}?)\b"
)
NAME_LINE_PATTERN = re.compile(rf"\b{_CAP_WORD}\s+{_CAP_WORD}")
_LINE_SPLIT_RE = re.compile(r"[\n\r\t|]")


def node_text(node: Tag | None) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ", strip=True).split())


def first_text(node: Tag, selectors: str) -> str:
    """Text of the first element matching any of ``selectors``."""
    return node_text(node.select_one(selectors))


def block_lines(node: Tag) -> list[str]:
    """Non-trivial text lines of a block, in document order."""
    text = node.get_text("\n").replace("\u00a0", " ")
    lines = []
    for raw in _LINE_SPLIT_RE.split(text):
        line = " ".join(raw.split())
        if len(line) > 3:
            lines.append(line)
    return lines


def extract_date_from_block(node: Tag, selectors: str = DATE_SELECTORS) -> date | None:
    """Prefer ``time[datetime]``, then the text of common date classes."""
    time_node = node.select_one("time[datetime]")
    if time_node is not None:
        parsed = parse_date(time_node.get("datetime"))
        if parsed:
            return parsed
    date_text = first_text(node, selectors)
    if date_text:
        return parse_date(date_text)
    return None


def nearest_heading(node: Tag, selectors: str = HEADING_SELECTORS) -> str:
    """Heading text of the closest section/div/article ancestor that has one."""
    for ancestor in node.find_parents(["section", "div", "article"]):
        text = first_text(ancestor, selectors)
        if text:
            return text
    return ""


def vs_pair(text: str) -> tuple[str, str] | None:
    """Names from an ``"A vs B"`` phrase, or None."""
    match = VS_PATTERN.search(" ".join(text.split()))
    if match is None:
        return None
    return match.group(1), match.group(2)


def name_line_pair(node: Tag) -> tuple[str, str] | None:
    """First two lines of a block that look like ``Firstname Lastname``."""
    candidates = [line for line in block_lines(node) if NAME_LINE_PATTERN.search(line)]
    if len(candidates) < 2:
        return None
    return candidates[0], candidates[1]
