from __future__ import annotations

from html import escape
from typing import Iterable, Optional

from .models import Descriptor, Engine, Source


def display_label(item: Optional[Descriptor], fallback: str = "") -> str:
    if item is None:
        return fallback
    if item.label is not None:
        return item.label
    if item.name is not None:
        return item.name
    return item.id


def resolve_source_id(stem: str, known: Iterable[str]) -> Optional[str]:
    """Map a rating file stem onto a declared source id.

    Exact match wins; otherwise the first case-insensitive match. Returns
    None when the stem names no declared source.
    """
    known = list(known)
    if stem in known:
        return stem
    lower = stem.lower()
    return next((k for k in known if k.lower() == lower), None)


def render_engine_name(engine: Optional[Engine], engine_id: str) -> str:
    label = display_label(engine, engine_id)
    if engine is not None and engine.url:
        return f'<a href="{escape(engine.url)}" target="_blank" rel="noopener">{escape(label)}</a>'
    return escape(label)


def render_source_title(source: Source) -> str:
    label = display_label(source)
    if not source.url:
        return escape(label)
    # stopPropagation keeps the header sort from firing on link clicks
    return (
        f'{escape(label)} <a class="src-link" href="{escape(source.url)}" target="_blank" rel="noopener"'
        f' onclick="event.stopPropagation()">&#8599;</a>'
    )
