import csv
import io
import json

import pytest

from pm_toolkit.core.collection import ItemCollection
from pm_toolkit.core.export import (
    export_items,
    format_fixed,
    format_number,
    import_json,
    parse_import,
    to_csv,
    to_json,
    to_markdown,
)
from pm_toolkit.core.models import ScoredItem, ScoreMode
from pm_toolkit.core.scoring import score_items


class TestMarkdown:
    def test_empty_list_is_three_lines(self):
        md = to_markdown([], ScoreMode.RICE)
        assert md.split("\n") == [
            "# Prioritization (RICE)",
            "| # | Title | Owner | Reach | Impact | Confidence | Effort | RICE |",
            "|---:|---|---|---:|---:|---:|---:|---:|",
        ]

    def test_rows(self, sample_records):
        md = to_markdown(score_items(sample_records, ScoreMode.RICE), ScoreMode.RICE)
        lines = md.split("\n")
        assert len(lines) == 5
        assert lines[3] == "| 1 | Global search bar | You | 120 | 2 | 85% | 1 | 204.00 |"
        assert lines[4] == "| 2 | Dark mode support | You | 200 | 2 | 80% | 2 | 160.00 |"

    def test_empty_text_placeholder(self):
        row = ScoredItem(title="", owner="", reach=10, impact=0.25, confidence=50, effort=0.5, score=2.5)
        md = to_markdown([row], "ICE")
        assert md.split("\n")[0] == "# Prioritization (ICE)"
        assert md.split("\n")[-1] == "| 1 | - | - | 10 | 0.25 | 50% | 0.5 | 2.50 |"


class TestCSV:
    def test_header(self):
        assert to_csv([], ScoreMode.ICE) == "Title,Owner,Reach,Impact,Confidence,Effort,ICE"

    def test_plain_fields_unquoted(self, sample_records):
        csv_text = to_csv(score_items(sample_records, ScoreMode.ICE), ScoreMode.ICE)
        assert csv_text.split("\n")[1] == "Global search bar,You,120,2,85,1,1.70"

    def test_empty_strings_stay_empty(self):
        row = ScoredItem(reach=1, impact=1, confidence=100, effort=1, score=1)
        assert to_csv([row], "RICE").split("\n")[1] == ",,1,1,100,1,1.00"

    def test_quoting(self):
        row = ScoredItem(title='Say "hi"', owner="Ann, Bob", reach=1, impact=1, confidence=1, effort=1, score=0.01)
        assert to_csv([row], "RICE").split("\n")[1] == '"Say ""hi""","Ann, Bob",1,1,1,1,0.01'

    def test_round_trip_through_csv_reader(self):
        title = 'A, "B"\nC'
        records = [{"id": "q", "title": title, "owner": "line1\nline2", "reach": 5, "impact": 1, "confidence": 50, "effort": 1}]
        text = to_csv(score_items(records, ScoreMode.RICE), ScoreMode.RICE)
        rows = list(csv.reader(io.StringIO(text, newline="")))
        assert len(rows) == 2
        assert rows[1][0] == title
        assert rows[1][1] == "line1\nline2"
        assert rows[1][6] == "2.50"


class TestJSON:
    def test_export_preserves_fields_and_order(self):
        records = [{"effort": 1, "id": "z", "title": "T", "extra": {"k": [1, 2]}}]
        text = to_json(records)
        assert text.startswith("[\n  {\n    \"effort\": 1")
        assert json.loads(text) == records
        assert list(json.loads(text)[0].keys()) == ["effort", "id", "title", "extra"]

    def test_export_import_round_trip(self, sample_records):
        collection = ItemCollection()
        assert import_json(collection, to_json(sample_records))
        assert collection.records == sample_records

    @pytest.mark.parametrize("text", [
        '{"not":"an array"}',
        "42",
        '"text"',
        "null",
        "[1, 2",
        "",
        "[NaN]",
    ])
    def test_non_array_import_is_ignored(self, text, sample_records):
        collection = ItemCollection(sample_records)
        assert import_json(collection, text) is False
        assert collection.records == sample_records
        assert parse_import(text) is None

    def test_import_trusts_records(self):
        collection = ItemCollection.with_defaults()
        data = [{"id": "dup", "confidence": 500}, {"id": "dup", "effort": -1}]
        assert import_json(collection, json.dumps(data))
        assert collection.records == data

    def test_non_object_records_still_export(self):
        collection = ItemCollection()
        assert import_json(collection, '[1, null, "x"]')
        scored = score_items(collection.records, ScoreMode.RICE)
        assert [s.score for s in scored] == [0.0, 0.0, 0.0]

        md = to_markdown(scored, ScoreMode.RICE).split("\n")
        assert md[3:] == ["| {} | - | - | 0 | 0 | 0% | 0 | 0.00 |".format(n) for n in (1, 2, 3)]
        assert to_csv(scored, ScoreMode.ICE).split("\n")[1:] == [",,0,0,0,0,0.00"] * 3
        assert json.loads(to_json(collection.records)) == [1, None, "x"]

    def test_non_finite_values_written_as_null(self):
        records = [{"id": "n", "reach": float("nan"), "effort": float("inf"), "tags": [float("-inf"), 1]}]
        text = to_json(records)
        assert "NaN" not in text and "Infinity" not in text
        collection = ItemCollection()
        assert import_json(collection, text)
        assert collection.records == [{"id": "n", "reach": None, "effort": None, "tags": [None, 1]}]

    def test_empty_array_clears(self, sample_records):
        collection = ItemCollection(sample_records)
        assert import_json(collection, "[]")
        assert len(collection) == 0


class TestArtifacts:
    def test_filenames_and_types(self, sample_records):
        collection = ItemCollection(sample_records)
        md = export_items(collection, "markdown", "RICE")
        assert md.filename == "prioritization-rice.md"
        assert md.content_type == "text/markdown;charset=utf-8"

        csv_artifact = export_items(collection, "csv", "ICE")
        assert csv_artifact.filename == "prioritization-ice.csv"
        assert csv_artifact.content_type == "text/csv;charset=utf-8"
        assert csv_artifact.content.split("\n")[0].endswith(",ICE")

        backup = export_items(collection, "json", "ICE")
        assert backup.filename == "prioritization.json"
        assert backup.content_type == "application/json"
        assert json.loads(backup.content) == sample_records

    def test_md_alias(self, sample_records):
        assert export_items(ItemCollection(sample_records), "md").filename == "prioritization-rice.md"

    def test_unknown_format(self, sample_records):
        with pytest.raises(ValueError):
            export_items(ItemCollection(sample_records), "xlsx")


class TestFormatting:
    @pytest.mark.parametrize("value,expected", [
        (160.0, "160.00"),
        (0.8, "0.80"),
        (0.125, "0.13"),
        (-0.001, "-0.00"),
        (-0.0, "0.00"),
        (1e30, "1000000000000000019884624838656.00"),
    ])
    def test_format_fixed(self, value, expected):
        assert format_fixed(value) == expected

    @pytest.mark.parametrize("value,expected", [(200, "200"), (200.0, "200"), (0.25, "0.25"), (1.5, "1.5")])
    def test_format_number(self, value, expected):
        assert format_number(value) == expected
