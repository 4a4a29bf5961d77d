from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .labels import resolve_source_id
from .models import Cell, RatingEntry, Row

logger = logging.getLogger(__name__)


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO date or datetime; None when missing or unparseable.

    Naive values are taken as UTC so they compare against offset-aware ones.
    """
    if not value or not isinstance(value, str):
        return None
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(s)
    except ValueError:
        parsed = None
    # reduced precision: "2024-06", "2024"
    for fmt in ("%Y-%m", "%Y"):
        if parsed is not None:
            break
        try:
            parsed = datetime.strptime(s, fmt)
        except ValueError:
            continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def prefer_incoming(existing: Cell, incoming: Cell) -> bool:
    """Decide whether *incoming* replaces *existing* in the same cell.

    - Later parseable date wins.
    - A dated candidate beats an undated (or unparseable) one, either way round.
    - With no parseable date on either side the incoming candidate wins.
    """
    old = parse_date(existing.date)
    new = parse_date(incoming.date)
    if new is not None:
        return old is None or new > old
    return old is None


def merge_ratings(
    rating_files: Iterable[Tuple[str, object]],
    known_sources: Iterable[str],
) -> List[Row]:
    """Fold rating files into rows keyed by (engine id, build).

    *rating_files* yields (file stem, parsed JSON) pairs in processing order;
    that order is the tie-break for undated conflicts.
    """
    known = list(known_sources)
    rows: Dict[Tuple[str, str], Row] = {}

    for stem, data in rating_files:
        source_id = resolve_source_id(stem, known)
        if source_id is None:
            source_id = stem
            logger.warning("source %s (from %s.json) not in sources.json", source_id, stem)
        if not isinstance(data, list):
            logger.warning("Skipping %s.json: not an array", stem)
            continue

        accepted = 0
        for raw in data:
            try:
                entry = RatingEntry.model_validate(raw)
            except ValidationError:
                entry = None
            if entry is None or not entry.engine_id or not entry.build:
                logger.warning("Skipping invalid rating in %s.json: %r", stem, raw)
                continue

            key = (entry.engine_id, entry.build)
            row = rows.get(key)
            if row is None:
                row = rows[key] = Row(engine_id=entry.engine_id, build=entry.build)
            incoming = Cell(elo=entry.elo, date=entry.date)
            existing = row.ratings.get(source_id)
            if existing is None or prefer_incoming(existing, incoming):
                row.ratings[source_id] = incoming
            accepted += 1
        logger.debug("%s: %d ratings merged into %s", stem, accepted, source_id)

    return list(rows.values())
