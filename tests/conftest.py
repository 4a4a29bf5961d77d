import json
from pathlib import Path

import pytest


TEMPLATE = "<html>\r\n<body>\n<div id=\"t\"></div>\n<!-- DATA -->\n<script>render()</script>\n</body>\n</html>\n"


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def site(tmp_path):
    """A minimal working tree: dat/ metadata, two rating files and a template."""
    dat = tmp_path / "dat"
    write_json(dat / "engines.json", [
        {"id": "zeta", "label": "Zeta", "country": "DE", "language": "C", "eval-id": "hce", "search-id": "ab"},
        {"id": "alpha", "label": "Alpha", "country": "FR", "language": "Rust", "eval-id": "nnue",
         "search-id": "ab", "url": "https://alpha.example/"},
    ])
    write_json(dat / "sources.json", [
        {"id": "mySource", "label": "My Source", "url": "https://ratings.example/", "overview": "Blitz list"},
        {"id": "other", "name": "Other List"},
    ])
    write_json(dat / "eval.json", [{"id": "nnue", "label": "NNUE"}, {"id": "hce", "name": "Handcrafted"}])
    write_json(dat / "search.json", [{"id": "ab", "label": "Alpha-beta"}])
    write_json(dat / "ratings" / "MYSOURCE.json", [
        {"engine-id": "zeta", "build": "1", "elo": 3000, "date": "2024-01-01"},
        {"engine-id": "alpha", "build": "1", "elo": 3100},
    ])
    write_json(dat / "ratings" / "other.json", [
        {"engine-id": "alpha", "build": "1", "elo": 3050, "date": "2024-02-01"},
    ])
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "template.htm").write_bytes(TEMPLATE.encode("utf-8"))
    return tmp_path
