# Shared pytest fixtures
from __future__ import annotations
import tempfile
from pathlib import Path

import pytest

from circle_import.models.item import CandidateItem


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("CIRCLE_IMPORT_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """event_dates: ["1日目", "2日目"]
header_tokens: ["サークル名", "circle"]
file_encoding: utf-8-sig
collation_locale: ja
sheets:
  export_url: https://example.test/spreadsheets/d/{sheet_id}/gviz/tq
  timeout_seconds: 5
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_csv_text() -> str:
    return (
        "サークル名,参加日,ブロック,ナンバー,タイトル,頒布価格,購入状態,備考\n"
        "Circle B,1日目,東1,10,\"Book, Vol.2\",\"¥1,000\",None,\n"
        "Circle A,1日目,東1,2,\"He said \"\"hi\"\"\",500,None,early\n"
        "\n"
        "Circle C,2日目,A,5a,Poster,300,None,\n"
    )


def make_item(**kwargs) -> CandidateItem:
    defaults = dict(circle="c", event_date="1日目", block="A", number="1", title="t")
    defaults.update(kwargs)
    return CandidateItem(**defaults)


@pytest.fixture()
def item_factory():
    return make_item
