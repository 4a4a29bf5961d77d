from __future__ import annotations

import logging
import pathlib
from typing import Optional

import typer

from .core.merge import merge_ratings
from .core.models import BuildConfig, BuildError, Table
from .core.table import shape_table
from .load.files import check_paths, load_metadata, load_rating_files
from .render.emit import emit


app = typer.Typer(add_completion=False, help="Build the engine ratings table page")


def build_site(cfg: BuildConfig) -> Table:
    """Load, merge, shape and emit. Raises BuildError before anything is written."""
    check_paths(cfg)
    meta = load_metadata(cfg)
    rating_files = load_rating_files(cfg)

    rows = merge_ratings(rating_files, [s.id for s in meta.sources])
    table = shape_table(rows, meta.engines, meta.sources, meta.evals, meta.searches)

    emit(table, cfg.resolve(cfg.template_path), cfg.resolve(cfg.out_path), cfg.indent)
    return table


@app.command("build")
def build(
    root: pathlib.Path = typer.Option(pathlib.Path("."), "--root", help="working directory the paths resolve against"),
    data_dir: pathlib.Path = typer.Option(pathlib.Path("dat"), "--data-dir"),
    ratings_dir: pathlib.Path = typer.Option(pathlib.Path("dat/ratings"), "--ratings-dir"),
    template: pathlib.Path = typer.Option(pathlib.Path("src/template.htm"), "--template"),
    out: pathlib.Path = typer.Option(pathlib.Path("index.htm"), "--out"),
    indent: Optional[int] = typer.Option(2, "--indent", min=0, help="JSON indent for the embedded payload"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Merge dat/ metadata and ratings into the template and write the page."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(levelname)s: %(message)s")

    cfg = BuildConfig(
        root=root,
        data_dir=data_dir,
        ratings_dir=ratings_dir,
        template_path=template,
        out_path=out,
        indent=indent,
    )
    try:
        table = build_site(cfg)
    except BuildError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Wrote {cfg.resolve(cfg.out_path)} ({len(table.rows)} rows, {len(table.columns)} columns)")


if __name__ == "__main__":
    app()
