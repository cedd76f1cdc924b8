#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Report Service
Кэш отчетов, автоматическая генерация, сравнение и экспорт

Отчет за период создается один раз и дальше берется из истории. Проверка
кэша, генерация и сохранение выполняются под замком, который выбирается по
ключу периода из фиксированного набора, поэтому одновременные запросы не
создают дубликатов.

Версия: 1.0.0
Дата: 2025-06-20
"""

import math
import random
import threading
from collections import Counter
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union, Any, Callable, Iterable
import logging

from dailyinsight.config import InsightSettings, get_settings
from dailyinsight.core.models import ExportFormat, PeriodType, validate_enum_value
from dailyinsight.core.schemas import (
    Goal, ImprovementArea, MonthlyReport, PeriodAchievement, ReportComparison, WeeklyReport
)
from dailyinsight.services.data_export import export_report, export_to_file
from dailyinsight.services.report_generator import HistorySource, ReportGenerator
from dailyinsight.services.report_history import ReportHistory
from dailyinsight.utils.datetime_utils import SystemClock, is_last_day_of_month, previous_month, week_start

logger = logging.getLogger(__name__)

AnyReport = Union[WeeklyReport, MonthlyReport]
PeriodKey = Tuple

LOCK_STRIPES = 64  # замков на сервис, ключ периода выбирает замок по хешу

def _round_half_up(value: float, digits: int = 0) -> float:
    """Округление с половиной вверх: 2.5 -> 3, -2.5 -> -2"""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale

class ReportService:
    """Выдача отчетов по периодам с кэшированием"""

    def __init__(self, generator: ReportGenerator, report_history: Optional[ReportHistory] = None,
                 settings: Optional[InsightSettings] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings or get_settings()
        self.generator = generator
        if report_history is None:
            report_history = ReportHistory(
                weekly_limit=self.settings.WEEKLY_HISTORY_LIMIT,
                monthly_limit=self.settings.MONTHLY_HISTORY_LIMIT,
            )
        self.report_history = report_history
        self.clock = clock or generator.clock
        self._locks: Tuple[threading.Lock, ...] = tuple(threading.Lock() for _ in range(LOCK_STRIPES))

    # ===== PERIOD KEYS =====

    def period_key(self, period_type: Union[str, PeriodType], anchor: Optional[date] = None) -> PeriodKey:
        """Ключ периода: ("weekly", понедельник) или ("monthly", год, месяц)"""
        period_type = validate_enum_value(period_type, PeriodType, "period_type")
        day = anchor if anchor is not None else self.clock()
        if isinstance(day, datetime):
            day = day.date()
        if period_type == PeriodType.WEEKLY.value:
            return (period_type, week_start(day))
        return (period_type, day.year, day.month)

    def _lock_for(self, key: PeriodKey) -> threading.Lock:
        # Один и тот же ключ всегда получает один замок, число замков не растет
        return self._locks[hash(key) % len(self._locks)]

    def _generate_for_key(self, key: PeriodKey) -> AnyReport:
        if key[0] == PeriodType.WEEKLY.value:
            return self.generator.generate_weekly(key[1])
        return self.generator.generate_monthly(month=key[2], year=key[1])

    def _get_or_generate(self, key: PeriodKey, force: bool = False) -> Tuple[AnyReport, bool]:
        with self._lock_for(key):
            if not force:
                cached = self.report_history.find(key)
                if cached is not None:
                    logger.debug(f"Report cache hit for {key}")
                    return cached, False

            report = self._generate_for_key(key)
            self.report_history.store(report)
            return report, True

    # ===== PUBLIC API =====

    def get_or_generate(self, period_type: Union[str, PeriodType], anchor: Optional[date] = None) -> AnyReport:
        """Отчет из истории или новый, если за этот период его еще нет"""
        report, _ = self._get_or_generate(self.period_key(period_type, anchor))
        return report

    def regenerate(self, period_type: Union[str, PeriodType], anchor: Optional[date] = None) -> AnyReport:
        """Создать отчет заново и заменить им сохраненный"""
        report, _ = self._get_or_generate(self.period_key(period_type, anchor), force=True)
        logger.info(f"🔄 Отчет за {report.period_label} пересоздан")
        return report

    def get_report_for_period(self, period_type: Union[str, PeriodType], day: date) -> Optional[AnyReport]:
        """Сохраненный отчет за период, содержащий day (без генерации)"""
        return self.report_history.find(self.period_key(period_type, day))

    def history(self, period_type: Union[str, PeriodType]) -> List[AnyReport]:
        return self.report_history.all(period_type)

    def previous_report(self, report: AnyReport) -> Optional[AnyReport]:
        """Сохраненный отчет за предыдущий период того же типа"""
        if isinstance(report, WeeklyReport):
            return self.report_history.find((report.period_type, report.week_start - timedelta(days=7)))
        year, month = previous_month(report.year, report.month)
        return self.report_history.find((report.period_type, year, month))

    def run_scheduled_check(self, now: Optional[datetime] = None) -> List[AnyReport]:
        """Создать недельный отчет в воскресенье вечером и месячный в последний день месяца"""
        if not self.settings.AUTO_REPORTS_ENABLED:
            return []

        now = now or self.clock()
        if now.hour < self.settings.AUTO_REPORT_HOUR:
            return []

        today = now.date()
        due: List[PeriodKey] = []
        if today.weekday() == 6:
            due.append((PeriodType.WEEKLY.value, week_start(today)))
        if is_last_day_of_month(today):
            due.append((PeriodType.MONTHLY.value, today.year, today.month))

        generated = []
        for key in due:
            report, created = self._get_or_generate(key)
            if created:
                logger.info(f"⏰ Автоматически создан отчет за {report.period_label}")
                generated.append(report)
        return generated

    # ===== COMPARISON =====

    @staticmethod
    def compare(current: AnyReport, previous: Optional[AnyReport]) -> ReportComparison:
        """Изменения относительно предыдущего отчета"""
        if previous is None:
            return ReportComparison()

        completion_change = current.summary.completion_rate - previous.summary.completion_rate
        focus_change = current.summary.total_focus_minutes - previous.summary.total_focus_minutes
        energy_change = current.summary.average_energy_level - previous.summary.average_energy_level

        return ReportComparison(
            completion_rate_change=int(_round_half_up(completion_change)),
            focus_time_change=int(_round_half_up(focus_change)),
            tasks_completed_change=current.summary.tasks_completed - previous.summary.tasks_completed,
            energy_level_change=_round_half_up(energy_change, 1),
            achievement_change=len(current.achievements) - len(previous.achievements),
            has_improvement=completion_change > 0 or focus_change > 0 or energy_change > 0,
        )

    # ===== EXPORT =====

    @staticmethod
    def export_report(report: AnyReport, fmt: Union[str, ExportFormat] = ExportFormat.JSON) -> str:
        return export_report(report, fmt)

    def save_report(self, report: AnyReport, fmt: Union[str, ExportFormat] = ExportFormat.JSON,
                    export_dir: Optional[Path] = None) -> Path:
        """Сохранить отчет в файл report-<id>.json / report-<id>.txt"""
        return export_to_file(report, export_dir or self.settings.EXPORT_DIR, fmt)

    # ===== ANALYSIS =====

    @staticmethod
    def report_summary(report: AnyReport) -> Dict[str, Any]:
        return {
            "completion_rate": report.summary.completion_rate,
            "total_focus_minutes": report.summary.total_focus_minutes,
            "tasks_completed": report.summary.tasks_completed,
            "pomodoros_completed": report.summary.pomodoros_completed,
            "average_energy_level": report.summary.average_energy_level,
            "achievement_count": len(report.achievements),
            "improvement_count": len(report.improvements),
            "goal_count": len(report.next_period_goals),
            "confidence_level": report.confidence_level,
        }

    @staticmethod
    def analyze_achievements(achievements: Iterable[PeriodAchievement]) -> Dict[str, Any]:
        achievements = list(achievements)
        by_type = Counter(a.achievement_type for a in achievements)
        most_common = by_type.most_common(1)
        return {
            "total": len(achievements),
            "by_type": dict(by_type),
            "new_count": sum(1 for a in achievements if a.is_new),
            "total_value": sum(a.value or 0 for a in achievements),
            "most_common_type": most_common[0][0] if most_common else None,
        }

    @staticmethod
    def analyze_improvements(improvements: Iterable[ImprovementArea]) -> Dict[str, Any]:
        improvements = list(improvements)
        priorities = Counter(i.priority for i in improvements)
        average_current = sum(i.current_score for i in improvements) / len(improvements) if improvements else 0
        average_target = sum(i.target_score for i in improvements) / len(improvements) if improvements else 0
        return {
            "total": len(improvements),
            "high_priority": priorities["high"],
            "medium_priority": priorities["medium"],
            "low_priority": priorities["low"],
            "average_current_score": round(average_current),
            "average_target_score": round(average_target),
            "improvement_gap": round(average_target - average_current),
            "top_improvement": improvements[0] if improvements else None,
        }

    @staticmethod
    def analyze_goals(goals: Iterable[Goal]) -> Dict[str, Any]:
        goals = list(goals)
        progress = [
            min(100.0, g.current_value / g.target_value * 100) if g.target_value > 0 else 0.0
            for g in goals
        ]
        return {
            "total": len(goals),
            "achievable": sum(1 for g in goals if g.is_achievable),
            "challenging": sum(1 for g in goals if not g.is_achievable),
            "average_progress": round(sum(progress) / len(progress)) if progress else 0,
            "by_type": dict(Counter(g.goal_type for g in goals)),
        }

# ===== CONVENIENCE FUNCTIONS =====

def create_report_service(history: HistorySource, settings: Optional[InsightSettings] = None,
                          rng: Optional[random.Random] = None) -> ReportService:
    """Сервис отчетов с генератором, настроенным по settings"""
    settings = settings or get_settings()
    generator = ReportGenerator(
        history,
        clock=SystemClock(settings.TIMEZONE),
        rng=rng,
        daily_focus_target_minutes=settings.DAILY_FOCUS_TARGET_MINUTES,
        timezone=settings.tzinfo,
    )
    return ReportService(generator, settings=settings)

__all__ = [
    'ReportService',
    'create_report_service',
]
