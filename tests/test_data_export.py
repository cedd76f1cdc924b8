"""JSON and text export of reports."""

import json
from datetime import timedelta

import pytest

from dailyinsight.services.data_export import ExportError, export_report, export_to_file, render_text

from conftest import SAMPLE_WEEK_START


@pytest.fixture
def weekly(generator):
    return generator.generate_weekly(SAMPLE_WEEK_START)


def test_json_contains_period_type(weekly):
    data = json.loads(export_report(weekly, "json"))
    assert data["period_type"] == "weekly"
    assert data["week_start"] == "2025-06-09"
    assert data["summary"]["total_focus_minutes"] == 350


def test_text_is_deterministic(weekly):
    assert render_text(weekly) == render_text(weekly)
    assert export_report(weekly, "text") == render_text(weekly)


def test_text_sections_in_order(weekly):
    text = render_text(weekly)
    headings = [line for line in text.splitlines() if line.startswith("#")]
    assert headings == ["# Недельный отчет", "## Итоги", "## Достижения", "## Зоны роста",
                        "## Мотивация", "## Рекомендации"]
    assert "Период: 09.06.2025 - 15.06.2025" in text
    assert "- Выполнено задач: 21 из 28 (75%)" in text
    assert "- Время в фокусе: 5 ч 50 мин" in text
    assert weekly.motivational_message in text


def test_empty_report_skips_optional_sections(generator):
    empty = generator.generate_weekly(SAMPLE_WEEK_START - timedelta(days=14))
    text = render_text(empty)
    assert "## Достижения" not in text
    assert "## Зоны роста" not in text
    assert "## Мотивация" in text
    assert "Достоверность данных: 0%" in text


def test_monthly_text_has_streaks(generator):
    text = render_text(generator.generate_monthly(6, 2025))
    assert text.startswith("# Месячный отчет")
    assert "Период: 06.2025" in text
    assert "Текущая серия" in text


def test_invalid_format(weekly):
    with pytest.raises(ExportError):
        export_report(weekly, "pdf")


def test_export_to_file(weekly, tmp_path):
    path = export_to_file(weekly, tmp_path / "reports", "json")
    assert path == tmp_path / "reports" / f"report-{weekly.report_id}.json"
    assert json.loads(path.read_text(encoding="utf-8"))["report_id"] == weekly.report_id


def test_write_failure_is_export_error(weekly, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")
    with pytest.raises(ExportError):
        export_to_file(weekly, blocker / "reports", "text")
