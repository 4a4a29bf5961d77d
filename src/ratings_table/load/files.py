from __future__ import annotations

import json
import logging
import pathlib
from typing import Any, List, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.models import BuildConfig, BuildError, Descriptor, Engine, Source

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def read_json(path: pathlib.Path) -> Any:
    if not path.is_file():
        raise BuildError(f"Missing file: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (ValueError, OSError) as e:
        raise BuildError(f"Failed to parse {path}: {e}") from e


def ensure_dir(path: pathlib.Path) -> None:
    if not path.is_dir():
        raise BuildError(f"Missing dir: {path}")


def _load_collection(path: pathlib.Path, model: Type[M]) -> List[M]:
    data = read_json(path)
    if not isinstance(data, list):
        raise BuildError(f"Expected a JSON array in {path}")
    try:
        return [model.model_validate(item) for item in data]
    except ValidationError as e:
        raise BuildError(f"Invalid entry in {path}: {e}") from e


class Metadata(BaseModel):
    engines: List[Engine]
    sources: List[Source]
    evals: List[Descriptor]
    searches: List[Descriptor]


def check_paths(cfg: BuildConfig) -> None:
    """Fail before reading anything if a required directory or the template is absent."""
    ensure_dir(cfg.resolve(cfg.data_dir))
    ensure_dir(cfg.resolve(cfg.ratings_dir))
    template = cfg.resolve(cfg.template_path)
    if not template.is_file():
        raise BuildError(f"Missing template: {template}")


def load_metadata(cfg: BuildConfig) -> Metadata:
    data_dir = cfg.resolve(cfg.data_dir)
    return Metadata(
        engines=_load_collection(data_dir / "engines.json", Engine),
        sources=_load_collection(data_dir / "sources.json", Source),
        evals=_load_collection(data_dir / "eval.json", Descriptor),
        searches=_load_collection(data_dir / "search.json", Descriptor),
    )


def load_rating_files(cfg: BuildConfig) -> List[Tuple[str, Any]]:
    """Return (stem, parsed JSON) for every *.json rating file, sorted by file name."""
    ratings_dir = cfg.resolve(cfg.ratings_dir)
    files = sorted(
        (f for f in ratings_dir.iterdir() if f.is_file() and f.name.lower().endswith(".json")),
        key=lambda f: f.name,
    )
    out: List[Tuple[str, Any]] = []
    for f in files:
        out.append((f.name[: -len(".json")], read_json(f)))
    logger.debug("loaded %d rating files from %s", len(out), ratings_dir)
    return out
