# src/analysis/extractors.py - v1
"""Deterministic date and sender-agency extraction from raw document text.

These values take precedence over what the model reports for the same
fields.
"""

from __future__ import annotations

import re
from datetime import date

_DATE_PATTERN = re.compile(
    r"(?<!\d)(?:(?P<d>\d{2})\.(?P<m>\d{2})\.(?P<y>\d{4})|(?P<iy>\d{4})-(?P<im>\d{2})-(?P<id>\d{2}))(?!\d)"
)

# Closed list of known institutions: canonical name -> pattern over the text.
KNOWN_AGENCIES: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (name, re.compile(pattern, re.IGNORECASE))
    for name, pattern in (
        ("ФССП", r"\bФССП\b|судебн\w*\s+пристав|служб\w*\s+судебных\s+приставов"),
        ("Прокуратура", r"прокуратур\w*|\bпрокурор\w*"),
        ("Роспотребнадзор", r"роспотребнадзор\w*"),
        ("Уполномоченный по правам человека", r"омбудсмен\w*|уполномоченн\w*\s+по\s+правам\s+человека"),
        ("ФНС", r"\bФНС\b|налогов\w*\s+(?:инспекци|служб|орган)\w*"),
        ("СФР", r"\bСФР\b|социальн\w*\s+фонд\w*|пенсионн\w*\s+фонд\w*"),
        ("Росреестр", r"росреестр\w*"),
        ("МВД", r"\bМВД\b|\bполици\w*|\bГИБДД\b"),
        ("Суд", r"\bсуд(?:а|у|ом|е|ы|ов|ам|ами|ах)?\b"),
    )
)


def extract_date(text: str) -> date | None:
    """First valid DD.MM.YYYY or YYYY-MM-DD date in the text."""
    for match in _DATE_PATTERN.finditer(text or ""):
        if match.group("d"):
            y, m, d = match.group("y"), match.group("m"), match.group("d")
        else:
            y, m, d = match.group("iy"), match.group("im"), match.group("id")
        try:
            return date(int(y), int(m), int(d))
        except ValueError:
            continue
    return None


def extract_agency(text: str) -> str | None:
    """Known agency mentioned earliest in the text, by canonical name."""
    best: tuple[int, str] | None = None
    for name, pattern in KNOWN_AGENCIES:
        match = pattern.search(text or "")
        if match and (best is None or match.start() < best[0]):
            best = (match.start(), name)
    return best[1] if best else None
