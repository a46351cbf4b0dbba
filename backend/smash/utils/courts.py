"""
Canonical parser for tournament court specifications.

Accepted forms:
- "1-4"                -> ["Court 1", "Court 2", "Court 3", "Court 4"]
- "1,2,3"              -> ["Court 1", "Court 2", "Court 3"]
- "Court A, Stadium B" -> ["Court A", "Stadium B"]

Court order is significant: the match scheduler hands courts out in this order.
"""
import re
from typing import Any, List, Sequence

_RANGE_RE = re.compile(r"^(\d+)\s*-\s*(\d+)$")
_DIGITS_RE = re.compile(r"^\d+$")
_COURT_PREFIX_RE = re.compile(r"court\s*", re.IGNORECASE)


def parse_courts(courts_input: Any) -> List[str]:
    """
    Normalize a free-text court specification to an ordered list of court labels.

    - None, non-string, "" or whitespace -> []
    - "<int>-<int>" -> inclusive range, low to high ("5-5" -> ["Court 5"])
    - Otherwise split on commas, strip, drop empties; bare numbers become
      "Court <n>", anything else is kept verbatim
    """
    if not courts_input or not isinstance(courts_input, str):
        return []

    s = courts_input.strip()
    if not s:
        return []

    range_match = _RANGE_RE.match(s)
    if range_match:
        start, end = int(range_match.group(1)), int(range_match.group(2))
        return [f"Court {n}" for n in range(start, end + 1)]

    courts = []
    for part in (x.strip() for x in s.split(",")):
        if not part:
            continue
        if _DIGITS_RE.match(part):
            courts.append(f"Court {part}")
        else:
            # Includes labels already containing "court" in any casing
            courts.append(part)
    return courts


def format_courts_list(courts: Sequence[str]) -> str:
    """
    Short display form for a court list: ["Court 6", "Court 5", "Court 3"] -> "6, 5 & 3".
    """
    labels = [_COURT_PREFIX_RE.sub("", c, count=1) for c in courts]
    if not labels:
        return ""
    if len(labels) == 1:
        return labels[0]
    return ", ".join(labels[:-1]) + " & " + labels[-1]
