from __future__ import annotations

import unicodedata
from html import escape
from typing import Any, Dict, List, Sequence, Tuple

from .labels import display_label, render_engine_name, render_source_title
from .models import Column, Descriptor, Engine, Row, Source, Table


IDENTITY_COLUMNS: List[Tuple[str, str]] = [
    ("engine", "Engine"),
    ("build", "Build"),
    ("country", "Nat"),
    ("language", "Lang"),
    ("eval", "Eval"),
    ("search", "Search"),
]

# Row fields that are never rating columns
RESERVED_FIELDS = {"engine-id", "engine-url"} | {f for f, _ in IDENTITY_COLUMNS}


def collation_key(s: str) -> Tuple[str, str]:
    """Sort key approximating locale-aware comparison.

    Accents and case are ignored at the primary level, so "élan" sorts with
    "Elan" rather than after "z"; the raw string breaks remaining ties.
    """
    decomposed = unicodedata.normalize("NFKD", s or "")
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), s or ""


def _lookup_label(labels: Dict[str, Descriptor], ref: str | None) -> str:
    if ref is None:
        return ""
    return display_label(labels.get(ref), ref)


def shape_table(
    rows: Sequence[Row],
    engines: Sequence[Engine],
    sources: Sequence[Source],
    evals: Sequence[Descriptor],
    searches: Sequence[Descriptor],
) -> Table:
    """Turn merged rows into the column/row description the page renders."""
    engines_by_id = {e.id: e for e in engines}
    eval_by_id = {d.id: d for d in evals}
    search_by_id = {d.id: d for d in searches}
    source_ids = [s.id for s in sources]
    known_sources = set(source_ids)

    keyed: List[Tuple[Tuple[str, str], Tuple[str, str], Dict[str, Any]]] = []
    extra: set[str] = set()
    for row in rows:
        em = engines_by_id.get(row.engine_id)
        label = display_label(em, row.engine_id)
        record: Dict[str, Any] = {
            "engine-id": row.engine_id,
            "engine": render_engine_name(em, row.engine_id),
            "engine-url": em.url if em is not None else None,
            "build": row.build,
            "country": (em.country if em is not None else None) or "",
            "language": (em.language if em is not None else None) or "",
            "eval": _lookup_label(eval_by_id, em.eval_id if em is not None else None),
            "search": _lookup_label(search_by_id, em.search_id if em is not None else None),
        }
        for sid in source_ids:
            cell = row.ratings.get(sid)
            record[sid] = cell.elo if cell is not None else None
        for sid, cell in row.ratings.items():
            if sid not in RESERVED_FIELDS and sid not in known_sources:
                record[sid] = cell.elo
                extra.add(sid)
        keyed.append((collation_key(label), collation_key(row.build), record))

    keyed.sort(key=lambda t: (t[0], t[1]))
    out_rows = [record for _, _, record in keyed]

    # Ad-hoc sources must be present (as null) on every row
    extra_sorted = sorted(extra)
    for record in out_rows:
        for sid in extra_sorted:
            record.setdefault(sid, None)

    columns: List[Column] = []
    for field, title in IDENTITY_COLUMNS:
        columns.append(Column(field=field, title=title, formatter="html" if field == "engine" else None))
    for s in sources:
        title = render_source_title(s)
        columns.append(
            Column(
                field=s.id,
                title=title,
                hoz_align="right",
                sorter="number",
                title_formatter="html" if s.url else None,
                header_tooltip=s.overview,
            )
        )
    for sid in extra_sorted:
        columns.append(Column(field=sid, title=escape(sid), hoz_align="right", sorter="number"))

    return Table(columns=columns, rows=out_rows)
