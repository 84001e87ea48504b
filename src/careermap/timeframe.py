"""Date-range extraction and normalization."""

import logging
import re
from dataclasses import dataclass

from .models import Segment, Timeframe

logger = logging.getLogger(__name__)

MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

_MONTH = (
    r"jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?|"
    r"aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?"
)
_YEAR = r"(?:19|20)\d{2}"
_DATE = rf"(?:\b(?:{_MONTH})\.?,?\s+{_YEAR}|\b\d{{1,2}}/{_YEAR}|\b{_YEAR})"
_OPEN = r"present|current|now|ongoing|today"

RANGE_PATTERN = re.compile(
    rf"(?<![\d/])(?P<start>{_DATE})\s*(?:-|–|—|~|\bto\b|\buntil\b|\bthrough\b)\s*"
    rf"(?P<end>{_DATE}|\b(?:{_OPEN}))(?![\w/])",
    re.IGNORECASE,
)
# A single point date: "(2019)" or "March 2024".
POINT_PATTERN = re.compile(
    rf"\(\s*(?P<paren>{_DATE})\s*\)|(?P<month>\b(?:{_MONTH})\.?,?\s+{_YEAR}\b)",
    re.IGNORECASE,
)
# A line holding nothing but a date range, e.g. "2020 - Present".
_BARE_RANGE = re.compile(rf"^\(?\s*{RANGE_PATTERN.pattern}\s*\)?$", re.IGNORECASE)

# Sorts after every concrete date.
OPEN_END = (9999, 13)


@dataclass
class TimeframeMatch:
    timeframe: Timeframe
    start: int
    end: int
    text: str


def normalize_date(text: str) -> str | None:
    """Normalize one date expression to ``"YYYY"`` or ``"YYYY-MM"``.

    Returns None for open-ended words and anything unparseable.
    """
    text = text.strip().lower().replace(",", "")
    m = re.fullmatch(rf"({_MONTH})\.?\s+({_YEAR})", text)
    if m:
        return f"{m.group(2)}-{MONTHS[m.group(1)[:3]]:02d}"
    m = re.fullmatch(rf"(\d{{1,2}})/({_YEAR})", text)
    if m:
        month = int(m.group(1))
        if not 1 <= month <= 12:
            return None
        return f"{m.group(2)}-{month:02d}"
    m = re.fullmatch(rf"({_YEAR})-(\d{{1,2}})", text)
    if m:
        month = int(m.group(2))
        return f"{m.group(1)}-{month:02d}" if 1 <= month <= 12 else None
    if re.fullmatch(_YEAR, text):
        return text
    return None


def date_ordinal(date: str | None) -> tuple[int, int]:
    """Comparable key for a normalized date; None (ongoing) sorts last."""
    if not date:
        return OPEN_END
    year, _, month = date.partition("-")
    return int(year), int(month) if month else 0


def month_span(timeframe: Timeframe) -> tuple[int, float]:
    """First and last month covered, counting months from year 0.

    A year-only start begins in January, a year-only end finishes in December
    and an ongoing end never finishes.
    """
    y1, m1 = date_ordinal(timeframe.start)
    first = y1 * 12 + (m1 or 1)
    if timeframe.end is None:
        return first, float("inf")
    y2, m2 = date_ordinal(timeframe.end)
    return first, y2 * 12 + (m2 or 12)


def is_open_end(text: str) -> bool:
    """True for words such as "Present" that leave a range open."""
    return bool(re.fullmatch(_OPEN, text.strip(), re.IGNORECASE))


def find_timeframe(text: str) -> TimeframeMatch | None:
    """Find the first date range (or, failing that, a point date) in text.

    Inverted ranges are treated as unparseable and yield None.
    """
    m = RANGE_PATTERN.search(text)
    if m:
        start = normalize_date(m.group("start"))
        raw_end = m.group("end").strip()
        ongoing = is_open_end(raw_end)
        end = None if ongoing else normalize_date(raw_end)
        if start is None or (end is None and not ongoing):
            logger.debug(f"Unparseable date range: {m.group(0)!r}")
            return None
        if end is not None and date_ordinal(start) > date_ordinal(end):
            logger.debug(f"Inverted date range ignored: {m.group(0)!r}")
            return None
        span_start, span_end = m.span()
        # Swallow enclosing parentheses so labels come out clean.
        if span_start > 0 and text[span_start - 1] == "(":
            close = text.find(")", span_end)
            if close != -1 and not text[span_end:close].strip():
                span_start, span_end = span_start - 1, close + 1
        return TimeframeMatch(Timeframe(start, end), span_start, span_end, text[span_start:span_end])

    m = POINT_PATTERN.search(text)
    if m:
        date = normalize_date(m.group("paren") or m.group("month"))
        if date is None:
            return None
        return TimeframeMatch(Timeframe(date, date), m.start(), m.end(), m.group(0))
    return None


def is_bare_range(text: str) -> bool:
    return bool(_BARE_RANGE.match(text.strip()))


def remove_span(text: str, match: TimeframeMatch | None) -> str:
    """Text with the matched date expression cut out and edges tidied."""
    if match is None:
        return text
    cut = text[:match.start] + " " + text[match.end:]
    cut = re.sub(r"\(\s*\)", " ", cut)
    return " ".join(cut.split()).strip(" ,;:-–—|•·")


def resolve_timeframe(segment: Segment, lines: list[Segment], lookahead: int = 1) -> TimeframeMatch | None:
    """Timeframe for a segment, taken from its own text or a following bare date line.

    Args:
        segment: The classified segment.
        lines: All line segments of the same document, by line number.
        lookahead: How many following lines may supply a bare date range.
    """
    match = find_timeframe(segment.text)
    if match or segment.kind != "line":
        return match

    for offset in range(1, lookahead + 1):
        line_no = segment.line_end + offset
        if line_no >= len(lines):
            break
        neighbour = lines[line_no]
        if not is_bare_range(neighbour.text):
            break
        found = find_timeframe(neighbour.text)
        if found:
            # Span refers to the neighbour; report no span inside this segment.
            return TimeframeMatch(found.timeframe, 0, 0, found.text)
    return None
