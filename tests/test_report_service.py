"""Report caching, scheduled generation, comparison and analysis."""

import threading
import time
from datetime import date, timedelta

import pytest

from dailyinsight.core.models import ValidationError
from dailyinsight.core.schemas import ReportComparison, ReportSummary, WeeklyReport, load_report
from dailyinsight.services.report_history import ReportHistory
from dailyinsight.services.report_service import LOCK_STRIPES, ReportService, create_report_service

from conftest import SAMPLE_WEEK_START, at


def count_calls(generator, name):
    """Подменить метод генератора счетчиком вызовов"""
    calls = []
    original = getattr(generator, name)

    def wrapper(*args, **kwargs):
        calls.append(args)
        time.sleep(0.01)
        return original(*args, **kwargs)

    setattr(generator, name, wrapper)
    return calls


def weekly_with(**summary):
    return WeeklyReport(
        report_id="r",
        generated_at=at(2025, 6, 16),
        week_start=SAMPLE_WEEK_START,
        week_end=SAMPLE_WEEK_START + timedelta(days=6),
        summary=ReportSummary(**summary),
    )


class TestCaching:
    def test_same_period_returns_cached_report(self, service, generator):
        calls = count_calls(generator, "generate_weekly")
        first = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        second = service.get_or_generate("weekly", SAMPLE_WEEK_START + timedelta(days=4))
        assert first is second
        assert len(calls) == 1

    def test_concurrent_requests_generate_once(self, service, generator):
        calls = count_calls(generator, "generate_weekly")
        results = []
        barrier = threading.Barrier(8)

        def request():
            barrier.wait()
            results.append(service.get_or_generate("weekly", SAMPLE_WEEK_START))

        threads = [threading.Thread(target=request) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)
        assert len(service.history("weekly")) == 1

    def test_weekly_and_monthly_are_separate(self, service):
        weekly = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        monthly = service.get_or_generate("monthly", SAMPLE_WEEK_START)
        assert weekly.period_type == "weekly"
        assert monthly.period_type == "monthly"
        assert len(service.report_history) == 2

    def test_regenerate_replaces_stored_report(self, service):
        first = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        second = service.regenerate("weekly", SAMPLE_WEEK_START)
        assert second.report_id != first.report_id
        assert service.history("weekly") == [second]
        assert service.get_or_generate("weekly", SAMPLE_WEEK_START) is second

    def test_lookup_without_generation(self, service):
        assert service.get_report_for_period("weekly", SAMPLE_WEEK_START) is None
        report = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        assert service.get_report_for_period("weekly", date(2025, 6, 15)) is report

    def test_unknown_period_type(self, service):
        with pytest.raises(ValidationError):
            service.get_or_generate("daily")

    def test_previous_report(self, service):
        older = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        newer = service.get_or_generate("weekly", SAMPLE_WEEK_START + timedelta(days=7))
        assert service.previous_report(newer) is older
        assert service.previous_report(older) is None

        june = service.get_or_generate("monthly", date(2025, 6, 1))
        assert service.previous_report(june) is None
        may = service.get_or_generate("monthly", date(2025, 5, 1))
        assert service.previous_report(june) is may


class TestHistoryLimits:
    def test_oldest_report_is_evicted(self, generator, settings):
        service = ReportService(generator, report_history=ReportHistory(weekly_limit=3), settings=settings)
        mondays = [SAMPLE_WEEK_START + timedelta(days=7 * n) for n in range(4)]
        for monday in mondays:
            service.get_or_generate("weekly", monday)

        stored = [r.week_start for r in service.history("weekly")]
        assert stored == mondays[1:]
        assert service.get_report_for_period("weekly", mondays[0]) is None

    def test_limits_come_from_settings(self, generator, settings):
        service = ReportService(generator, settings=settings.model_copy(update={"WEEKLY_HISTORY_LIMIT": 2}))
        assert service.report_history.limit("weekly") == 2
        assert service.report_history.limit("monthly") == 12

    def test_store_returns_evicted(self, generator):
        history = ReportHistory(weekly_limit=1)
        first = generator.generate_weekly(SAMPLE_WEEK_START)
        second = generator.generate_weekly(SAMPLE_WEEK_START + timedelta(days=7))
        assert history.store(first) is None
        assert history.store(second) is first
        assert history.latest("weekly") is second

    def test_invalid_limit(self):
        with pytest.raises(ValidationError):
            ReportHistory(weekly_limit=0)

    def test_empty_injected_history_is_kept(self, generator, settings):
        shared = ReportHistory(weekly_limit=3)
        first = ReportService(generator, report_history=shared, settings=settings)
        second = ReportService(generator, report_history=shared, settings=settings)
        assert first.report_history is shared
        assert first.report_history.limit("weekly") == 3

        report = first.get_or_generate("weekly", SAMPLE_WEEK_START)
        assert len(shared) == 1
        assert second.get_report_for_period("weekly", SAMPLE_WEEK_START) is report

    def test_lock_pool_does_not_grow(self, service):
        for n in range(100):
            service.get_or_generate("weekly", SAMPLE_WEEK_START + timedelta(days=7 * n))
        assert len(service._locks) == LOCK_STRIPES
        key = service.period_key("weekly", SAMPLE_WEEK_START)
        assert service._lock_for(key) is service._lock_for(key)


class TestScheduledCheck:
    def test_sunday_evening_creates_weekly_report(self, service):
        [report] = service.run_scheduled_check(at(2025, 6, 22, 21))
        assert report.period_type == "weekly"
        assert report.week_start == date(2025, 6, 16)
        # already stored, the next hourly check does nothing
        assert service.run_scheduled_check(at(2025, 6, 22, 22)) == []

    @pytest.mark.parametrize("now", [at(2025, 6, 21, 21), at(2025, 6, 22, 19, 59)])
    def test_not_due(self, service, now):
        assert service.run_scheduled_check(now) == []
        assert len(service.report_history) == 0

    def test_last_day_of_month_creates_monthly_report(self, service):
        [report] = service.run_scheduled_check(at(2025, 6, 30, 20, 30))
        assert report.period_type == "monthly"
        assert (report.year, report.month) == (2025, 6)

    def test_sunday_on_last_day_of_month_creates_both(self, service):
        reports = service.run_scheduled_check(at(2025, 8, 31, 20))
        assert [r.period_type for r in reports] == ["weekly", "monthly"]

    def test_disabled(self, generator, settings):
        service = ReportService(generator, settings=settings.model_copy(update={"AUTO_REPORTS_ENABLED": False}))
        assert service.run_scheduled_check(at(2025, 6, 22, 21)) == []

    def test_custom_hour(self, generator, settings):
        service = ReportService(generator, settings=settings.model_copy(update={"AUTO_REPORT_HOUR": 8}))
        assert len(service.run_scheduled_check(at(2025, 6, 22, 9))) == 1


class TestComparison:
    def test_without_previous_report(self, generator):
        comparison = ReportService.compare(generator.generate_weekly(SAMPLE_WEEK_START), None)
        assert comparison == ReportComparison()
        assert not comparison.has_improvement

    def test_against_empty_week(self, generator):
        current = generator.generate_weekly(SAMPLE_WEEK_START)
        previous = generator.generate_weekly(SAMPLE_WEEK_START - timedelta(days=7))
        comparison = ReportService.compare(current, previous)
        assert comparison.completion_rate_change == 75
        assert comparison.focus_time_change == 350
        assert comparison.tasks_completed_change == 21
        assert comparison.energy_level_change == 4.0
        assert comparison.achievement_change == 3
        assert comparison.has_improvement

    def test_decline_is_not_improvement(self, generator):
        current = generator.generate_weekly(SAMPLE_WEEK_START - timedelta(days=7))
        previous = generator.generate_weekly(SAMPLE_WEEK_START)
        comparison = ReportService.compare(current, previous)
        assert comparison.focus_time_change == -350
        assert not comparison.has_improvement

    @pytest.mark.parametrize("current,previous,expected", [(52.5, 50.0, 3), (50.0, 52.5, -2), (51.5, 50.0, 2)])
    def test_halves_round_up(self, current, previous, expected):
        comparison = ReportService.compare(weekly_with(completion_rate=current, average_energy_level=3.25),
                                           weekly_with(completion_rate=previous, average_energy_level=3.0))
        assert comparison.completion_rate_change == expected
        assert comparison.energy_level_change == 0.3


class TestExport:
    def test_json_round_trip(self, service):
        report = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        restored = load_report(service.export_report(report, "json"))
        assert restored.model_dump() == report.model_dump()
        assert restored.period_key == report.period_key

    def test_monthly_round_trip(self, service):
        report = service.get_or_generate("monthly", SAMPLE_WEEK_START)
        assert load_report(service.export_report(report)).model_dump() == report.model_dump()

    def test_save_to_export_dir(self, service, settings):
        report = service.get_or_generate("weekly", SAMPLE_WEEK_START)
        path = service.save_report(report, "text")
        assert path.parent == settings.EXPORT_DIR
        assert path.name == f"report-{report.report_id}.txt"
        assert path.read_text(encoding="utf-8").startswith("# Недельный отчет")


class TestAnalysis:
    @pytest.fixture
    def report(self, generator):
        return generator.generate_weekly(SAMPLE_WEEK_START)

    def test_report_summary(self, report):
        summary = ReportService.report_summary(report)
        assert summary["completion_rate"] == 75.0
        assert summary["achievement_count"] == 3
        assert summary["improvement_count"] == 1
        assert summary["goal_count"] == 3
        assert summary["confidence_level"] == 100

    def test_achievements(self, report):
        stats = ReportService.analyze_achievements(report.achievements)
        assert stats["total"] == 3
        assert stats["by_type"] == {"completion": 1, "focus": 1, "consistency": 1}
        assert stats["new_count"] == 3
        assert stats["total_value"] == 75 + 350 + 100
        assert ReportService.analyze_achievements([])["most_common_type"] is None

    def test_improvements(self, report):
        stats = ReportService.analyze_improvements(report.improvements)
        assert stats["total"] == 1
        assert stats["low_priority"] == 1
        assert stats["improvement_gap"] == 5
        assert stats["top_improvement"].area == "planning"
        assert ReportService.analyze_improvements([])["top_improvement"] is None

    def test_goals(self, report):
        stats = ReportService.analyze_goals(report.next_period_goals)
        assert stats["total"] == 3
        assert stats["achievable"] == 0
        assert stats["challenging"] == 3
        assert stats["average_progress"] == 91
        assert stats["by_type"] == {"completion": 1, "focus": 1, "planning": 1}


def test_create_report_service(sample_history, settings):
    service = create_report_service(sample_history, settings=settings)
    assert service.generator.daily_focus_target_minutes == settings.DAILY_FOCUS_TARGET_MINUTES
    report = service.get_or_generate("weekly", SAMPLE_WEEK_START)
    assert report.summary.total_focus_minutes == 350
