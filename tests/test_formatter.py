import json
import os

import pytest

from bias_meter.news.models import RunResult
from bias_meter.output.formatter import OutputFormatter, format_number


def _run(**overrides) -> RunResult:
    fields = {
        "date": "2024-01-01",
        "generated_at": "2024-01-01T06:00:00.000Z",
        "lovable_generated_at": "2024-01-01T05:00:00.000Z",
        "articles": [{"title": "A", "political_score": -0.2, "tech_score": 0.4, "trust_score": 9}],
    }
    fields.update(overrides)
    return RunResult(**fields)


def test_save_creates_directory_and_writes_document(output_path):
    formatter = OutputFormatter(output_path)

    path = formatter.save_run(_run())

    assert path == output_path
    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert list(data) == ["date", "count", "generated_at", "lovable_generated_at", "articles"]
    assert data["count"] == 1
    assert data["articles"][0]["trust_score"] == 9


def test_document_is_pretty_printed_without_ascii_escapes(output_path):
    OutputFormatter(output_path).save_run(_run(articles=[{"title": "Café déjà vu"}]))

    text = output_path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "date": "2024-01-01",\n  "count": 1,')
    assert "Café déjà vu" in text


def test_missing_upstream_timestamp_is_omitted(output_path):
    OutputFormatter(output_path).save_run(_run(lovable_generated_at=None))

    text = output_path.read_text(encoding="utf-8")
    assert "lovable_generated_at" not in text
    assert list(json.loads(text)) == ["date", "count", "generated_at", "articles"]


def test_save_replaces_previous_document(output_path):
    formatter = OutputFormatter(output_path)
    formatter.save_run(_run(articles=[{"title": "old"}, {"title": "older"}]))

    formatter.save_run(_run(articles=[{"title": "new"}]))

    data = json.loads(output_path.read_text(encoding="utf-8"))
    assert [a["title"] for a in data["articles"]] == ["new"]
    assert os.listdir(output_path.parent) == [output_path.name]


def test_serialization_failure_keeps_previous_document(output_path):
    formatter = OutputFormatter(output_path)
    formatter.save_run(_run())
    before = output_path.read_text(encoding="utf-8")

    with pytest.raises(ValueError):
        formatter.save_run(_run(articles=[{"title": "bad", "score": float("nan")}]))

    assert output_path.read_text(encoding="utf-8") == before


def test_replace_failure_keeps_previous_document_and_cleans_up(output_path, monkeypatch):
    formatter = OutputFormatter(output_path)
    formatter.save_run(_run())
    before = output_path.read_text(encoding="utf-8")

    def failing_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("bias_meter.output.formatter.os.replace", failing_replace)

    with pytest.raises(OSError, match="disk full"):
        formatter.save_run(_run(articles=[]))

    assert output_path.read_text(encoding="utf-8") == before
    assert os.listdir(output_path.parent) == [output_path.name]


@pytest.mark.parametrize(
    "value, expected",
    [
        (7.0, "7"),
        (-0.0, "0"),
        (-0.2, "-0.2"),
        (0.1 + 0.2, "0.30000000000000004"),
        (1e-05, "0.00001"),
        (-1.5e-05, "-0.000015"),
        (1.234e-06, "0.000001234"),
        (1e-07, "1e-7"),
        (-2.5e-10, "-2.5e-10"),
        (1e16, "10000000000000000"),
        (1e21, "1e+21"),
    ],
)
def test_format_number_matches_javascript(value, expected):
    assert format_number(value) == expected


def test_scores_are_written_like_json_stringify(output_path):
    article = {"title": "A", "political_score": 1e-05, "tech_score": 0.0, "trust_score": 9.0}

    OutputFormatter(output_path).save_run(_run(articles=[article]))

    text = output_path.read_text(encoding="utf-8")
    assert '"political_score": 0.00001,' in text
    assert '"tech_score": 0,' in text
    assert '"trust_score": 9\n' in text
    assert json.loads(text)["articles"][0]["political_score"] == 1e-05
