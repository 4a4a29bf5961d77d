from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BuildError(Exception):
    """Fatal pipeline error; the message names the offending path."""


class Descriptor(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    label: Optional[str] = None
    name: Optional[str] = None


class Engine(Descriptor):
    country: Optional[str] = None
    language: Optional[str] = None
    eval_id: Optional[str] = Field(default=None, alias="eval-id")
    search_id: Optional[str] = Field(default=None, alias="search-id")
    url: Optional[str] = None


class Source(Descriptor):
    url: Optional[str] = None
    overview: Optional[str] = None


class RatingEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    engine_id: Optional[str] = Field(default=None, alias="engine-id")
    build: Optional[str] = None
    elo: Optional[Union[int, float]] = None
    date: Optional[str] = None


class Cell(BaseModel):
    elo: Optional[Union[int, float]] = None
    date: Optional[str] = None


class Row(BaseModel):
    engine_id: str
    build: str
    ratings: Dict[str, Cell] = Field(default_factory=dict)  # source id -> winning cell


class Column(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    field: str
    title: str
    hoz_align: Optional[str] = Field(default=None, alias="hozAlign")
    sorter: Optional[str] = None
    header_filter: Optional[str] = Field(default="input", alias="headerFilter")
    formatter: Optional[str] = None
    title_formatter: Optional[str] = Field(default=None, alias="titleFormatter")
    header_tooltip: Optional[str] = Field(default=None, alias="headerTooltip")


class Table(BaseModel):
    columns: List[Column]
    rows: List[Dict[str, Any]]

    def payload(self) -> Dict[str, Any]:
        return {
            "columns": [c.model_dump(by_alias=True, exclude_none=True) for c in self.columns],
            "rows": self.rows,
        }


class BuildConfig(BaseModel):
    root: Path = Field(default_factory=Path.cwd)
    data_dir: Path = Path("dat")
    ratings_dir: Path = Path("dat/ratings")
    template_path: Path = Path("src/template.htm")
    out_path: Path = Path("index.htm")
    indent: Optional[int] = 2

    def resolve(self, p: Path) -> Path:
        return p if p.is_absolute() else self.root / p
