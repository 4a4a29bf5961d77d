from __future__ import annotations

import json
import pathlib
from typing import Optional

from ..core.models import BuildError, Table


MARKER = "<!-- DATA -->"


def render_payload(table: Table, indent: Optional[int] = 2) -> str:
    data = json.dumps(table.payload(), indent=indent, ensure_ascii=False)
    # Keep string contents from closing the script element early
    data = data.replace("</", "<\\/")
    return f"<script>window.__TABLE_DATA__ = {data};</script>"


def inject(template: str, payload: str, source: pathlib.Path | str = "template") -> str:
    """Replace the single marker in *template* with *payload*, leaving everything else untouched."""
    if MARKER not in template:
        raise BuildError(f'Template {source} missing marker "{MARKER}"')
    return template.replace(MARKER, payload, 1)


def emit(table: Table, template_path: pathlib.Path, out_path: pathlib.Path, indent: Optional[int] = 2) -> None:
    # newline="" so line endings in the template survive byte-for-byte
    try:
        with open(template_path, "r", encoding="utf-8", newline="") as f:
            template = f.read()
    except (UnicodeDecodeError, OSError) as e:
        raise BuildError(f"Failed to read template {template_path}: {e}") from e
    html = inject(template, render_payload(table, indent), template_path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8", newline="") as f:
            f.write(html)
    except OSError as e:
        raise BuildError(f"Failed to write {out_path}: {e}") from e
