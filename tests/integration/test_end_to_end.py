from __future__ import annotations

import itertools
from pathlib import Path
from unittest.mock import Mock

import pytest

from circle_import.models.import_result import ImportStatus
from circle_import.ordering.engine import OrderingEngine
from circle_import.services.export import export_csv
from circle_import.services.importer import import_file, import_paste, import_sheets, import_text
from circle_import.services.shopping_list import ShoppingList

ROWS = [
    ("B", "1日目", "東1", "2", "Foo", "500"),
    ("A", "1日目", "東1", "10", "Bar", "300"),
]


def _paste(rows) -> str:
    return "".join("\t".join(r) + "\n" for r in rows)


@pytest.mark.parametrize("rows", [ROWS, list(reversed(ROWS))])
def test_numbers_ordered_numerically_regardless_of_insertion_order(rows):
    result = import_paste(_paste(rows))
    engine = OrderingEngine()
    ordered: list = []
    for item in result.items:
        ordered = engine.insert_sorted(ordered, item)
    assert [(i.number, i.title) for i in ordered] == [("2", "Foo"), ("10", "Bar")]


def test_blank_line_among_valid_lines_yields_two_items():
    text = "A,1日目,東1,1,x,100\n , , , , , \nB,1日目,東1,2,y,200\n"
    result = import_text(text)
    assert result.status == ImportStatus.SUCCESS
    assert len(result.items) == 2


def test_import_merge_export_reimport(tmp_path: Path, sample_csv_text: str):
    src = tmp_path / "in.csv"
    src.write_text(sample_csv_text, encoding="utf-8")

    counter = itertools.count(1)
    shopping_list = ShoppingList("C105", id_factory=lambda: f"id-{next(counter)}")
    first = import_file(src)
    shopping_list.bulk_add(first.items)

    # 同じ内容の再取込は重複扱い、タイトル違いは上書き
    again = import_paste("Circle A\t1日目\t東1\t2\tNew title\t600\nCircle A\t1日目\t東1\t2\tNew title\t600\n")
    report = shopping_list.bulk_add(first.items + again.items)
    assert report.duplicates == 4
    assert len(report.updated) == 1
    assert len(shopping_list) == 3

    out = tmp_path / "out.csv"
    export_csv(shopping_list.items, out)
    reimported = import_file(out)
    assert [(i.circle, i.number, i.title, i.price) for i in reimported.items] == [
        ("Circle A", "2", "New title", 600),
        ("Circle B", "10", "Book, Vol.2", 1000),
        ("Circle C", "5a", "Poster", 300),
    ]


def test_sheets_import_into_list():
    session = Mock()
    session.get.return_value = Mock(
        ok=True,
        status_code=200,
        text='"サークル名","参加日","ブロック","ナンバー","タイトル","頒布価格"\n'
        '"X","1日目","西1","3","T3","0"\n"Y","1日目","西1","1","T1","100"\n',
    )
    result = import_sheets("https://docs.google.com/spreadsheets/d/sheet123/edit", session=session)
    shopping_list = ShoppingList("C105")
    shopping_list.bulk_add(result.items)
    assert [i.circle for i in shopping_list.items] == ["Y", "X"]
