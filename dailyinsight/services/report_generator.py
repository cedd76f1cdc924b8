#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Report Generator
Недельные и месячные отчеты по истории активности

Генератор читает задачи, сессии и дневную статистику за период и собирает
документ отчета: сводку, достижения периода, зоны роста, цели на следующий
период, мотивирующее сообщение, наблюдения и уровень доверия к данным.
Пустая история не считается ошибкой: отчет получается нулевым, с
confidence_level = 0.

Версия: 1.0.0
Дата: 2025-06-20
"""

import random
import uuid
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Set, Tuple, Union, Any, Callable
import logging

from dailyinsight.core.models import (
    ActivityHistory, DailyStats, Session, StreakData, Task,
    PeriodType, ValidationError, validate_enum_value
)
from dailyinsight.core.schemas import (
    Goal, ImprovementArea, Insights, MonthlyReport, MonthlySummary,
    PeriodAchievement, ReportSummary, WeeklyProgress, WeeklyReport
)
from dailyinsight.utils.datetime_utils import (
    SystemClock, month_bounds, next_month, previous_month,
    to_local_date, to_local_hour, week_end, week_start
)

logger = logging.getLogger(__name__)

HistorySource = Union[ActivityHistory, Callable[[], ActivityHistory]]

# ===== CONSTANTS =====

WEEKS_PER_MONTH = 4
STREAK_DAY_COMPLETION = 70  # процент выполнения, при котором день идет в серию
STREAK_GOAL_DAYS = 7
MAX_WEEKLY_GOALS = 3
MAX_MONTHLY_GOALS = 4
MAX_RECOMMENDATIONS = 5
LOW_CONFIDENCE = 30

# Целевые баллы (0-100) по зонам роста, порядок задает порядок при равном отставании
AREA_TARGETS: Dict[str, int] = {
    "planning": 80,
    "focus": 70,
    "consistency": 80,
    "energy": 70,
    "distractions": 80,
}

AREA_COPY: Dict[str, Tuple[str, str, Tuple[str, ...]]] = {
    "planning": (
        "Реалистичное планирование",
        "Выполняется меньшая часть запланированного. Ставьте цели, которые реально закрыть.",
        (
            "Разбивайте задачи на шаги поменьше",
            "Сократите список задач на день",
            "Закладывайте на задачи больше времени",
        ),
    ),
    "focus": (
        "Больше времени в фокусе",
        "Времени в фокусе меньше, чем хотелось бы. Наращивайте его постепенно.",
        (
            "Начните с 15 минут и понемногу увеличивайте",
            "Уберите отвлекающее из рабочего места",
            "Не пропускайте перерывы между сессиями",
        ),
    ),
    "consistency": (
        "Постоянство",
        "Активных дней меньше цели. Старайтесь делать хоть что-то каждый день.",
        (
            "Ставьте маленькую цель даже на трудный день",
            "Работайте в одно и то же время",
            "Не ругайте себя за пропущенные дни",
        ),
    ),
    "energy": (
        "Управление энергией",
        "Средний уровень энергии низкий. Позаботьтесь об отдыхе.",
        (
            "Высыпайтесь",
            "Добавьте регулярную физическую активность",
            "Делайте важное в часы, когда энергии больше",
        ),
    ),
    "distractions": (
        "Меньше отвлечений",
        "Сессии фокуса часто прерываются. Уберите то, что мешает сосредоточиться.",
        (
            "Чаще включайте режим фокуса",
            "Отключите уведомления на время сессии",
            "Наведите порядок на рабочем месте",
        ),
    ),
}

MOTIVATIONAL_MESSAGES: Dict[str, Tuple[str, ...]] = {
    "high": (
        "Потрясающий результат! Сохраняйте этот ритм.",
        "Вы показываете отличную концентрацию и постоянство. Гордитесь собой!",
        "Цели достигаются одна за другой. Так держать!",
    ),
    "medium": (
        "Вы уверенно движетесь вперед! Маленькие улучшения складываются в большие перемены.",
        "Направление верное. Еще немного усилий, и цель будет достигнута.",
        "Прогресс есть! Не обязательно быть идеальным, главное продолжать.",
    ),
    "low": (
        "Начало - половина дела! Даже маленькие победы важны.",
        "Сейчас может быть непросто, но не сдавайтесь. Завтра будет новый шанс.",
        "Неидеально - это нормально. Вы продолжаете, и это уже смелость.",
    ),
}

NO_DATA_RECOMMENDATION = "Данных пока мало: отмечайте задачи и сессии каждый день, чтобы отчет стал точнее."

# ===== PERIOD DATA =====

@dataclass
class PeriodWindow:
    """Данные истории, попавшие в период [start, end]"""
    start: date
    end: date
    tasks_completed: List[Task] = field(default_factory=list)
    tasks_created: List[Task] = field(default_factory=list)
    daily_stats: List[DailyStats] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    session_hours: List[int] = field(default_factory=list)
    observed_days: Set[date] = field(default_factory=set)

    @property
    def period_days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def is_empty(self) -> bool:
        return not self.observed_days

    @property
    def focus_sessions(self) -> List[Session]:
        return [s for s in self.sessions if s.is_focus]

    @property
    def completed_focus_sessions(self) -> List[Session]:
        return [s for s in self.sessions if s.is_focus and s.is_completed]

    @property
    def energy_samples(self) -> List[float]:
        return [s.energy_level for s in self.daily_stats if s.energy_level is not None]

@dataclass
class PeriodMetrics:
    """Сводка и баллы зон роста за период"""
    summary: Dict[str, Any]
    scores: Dict[str, int]

# ===== HELPERS =====

def _completion_rate(completed: int, planned: int) -> float:
    if planned <= 0:
        return 0.0
    return round(min(100.0, completed / planned * 100), 1)

def _average_energy(samples: List[float]) -> float:
    if not samples:
        return 0.0
    return round(sum(samples) / len(samples), 1)

def _priority_for_gap(gap: int) -> str:
    if gap >= 30:
        return "high"
    if gap >= 15:
        return "medium"
    return "low"

def _project(current: float, previous: Optional[float]) -> float:
    """Линейная экстраполяция по двум периодам, без прошлых данных - текущий уровень"""
    if previous is None:
        return current
    return current + (current - previous)

def _format_minutes(total_minutes: int) -> str:
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours} ч {minutes} мин"

# ===== GENERATOR =====

class ReportGenerator:
    """Сборка недельных и месячных отчетов"""

    def __init__(self, history: HistorySource,
                 clock: Optional[Callable[[], datetime]] = None,
                 rng: Optional[random.Random] = None,
                 id_factory: Optional[Callable[[], str]] = None,
                 daily_focus_target_minutes: int = 60,
                 timezone: Optional[tzinfo] = None):
        if daily_focus_target_minutes <= 0:
            raise ValidationError("daily_focus_target_minutes должен быть положительным числом")
        self.history = history
        self.clock = clock or SystemClock()
        self.rng = rng or random.Random()
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.daily_focus_target_minutes = daily_focus_target_minutes
        self.timezone = timezone

    # ===== PUBLIC API =====

    def generate_weekly(self, week_start_day: Optional[date] = None) -> WeeklyReport:
        """Отчет за неделю (понедельник - воскресенье)"""
        now = self.clock()
        anchor = week_start_day if week_start_day is not None else now
        start = week_start(anchor)
        end = week_end(start)

        history = self._load_history()
        window = self._collect(history, start, end, now)
        previous = self._previous_metrics(history, start - timedelta(days=7), start - timedelta(days=1), now)

        metrics = self._metrics(window, history.streaks, now, monthly=False)
        summary = ReportSummary(**metrics.summary)
        parts = self._build_parts(PeriodType.WEEKLY.value, window, metrics, previous, now,
                                  deadline=end + timedelta(days=7))

        report = WeeklyReport(
            report_id=self.id_factory(),
            generated_at=now,
            week_start=start,
            week_end=end,
            summary=summary,
            **parts,
        )
        logger.info(f"📊 Недельный отчет за {report.period_label} создан (доверие {report.confidence_level}%)")
        return report

    def generate_monthly(self, month: Optional[int] = None, year: Optional[int] = None) -> MonthlyReport:
        """Отчет за календарный месяц (month: 1-12)"""
        now = self.clock()
        month = now.month if month is None else month
        year = now.year if year is None else year
        if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
            raise ValidationError(f"month должен быть от 1 до 12, получено: {month!r}")
        if isinstance(year, bool) or not isinstance(year, int) or year < 1:
            raise ValidationError(f"year должен быть положительным числом, получено: {year!r}")

        start, end = month_bounds(year, month)
        history = self._load_history()
        window = self._collect(history, start, end, now)

        prev_year, prev_month = previous_month(year, month)
        previous = None
        if prev_year >= 1:
            prev_start, prev_end = month_bounds(prev_year, prev_month)
            previous = self._previous_metrics(history, prev_start, prev_end, now, monthly=True)

        metrics = self._metrics(window, history.streaks, now, monthly=True)
        next_year, next_month_number = next_month(year, month)
        parts = self._build_parts(PeriodType.MONTHLY.value, window, metrics, previous, now,
                                  deadline=month_bounds(next_year, next_month_number)[1])

        report = MonthlyReport(
            report_id=self.id_factory(),
            generated_at=now,
            month=month,
            year=year,
            summary=MonthlySummary(**metrics.summary),
            weekly_progress=self._weekly_progress(history, window, now),
            **parts,
        )
        logger.info(f"📊 Месячный отчет за {report.period_label} создан (доверие {report.confidence_level}%)")
        return report

    def generate(self, period_type: Union[str, PeriodType], anchor: Optional[date] = None):
        """Отчет нужного типа за период, содержащий anchor (по умолчанию - сейчас)"""
        period_type = validate_enum_value(period_type, PeriodType, "period_type")
        if period_type == PeriodType.WEEKLY.value:
            return self.generate_weekly(anchor)
        if anchor is None:
            return self.generate_monthly()
        return self.generate_monthly(anchor.month, anchor.year)

    # ===== DATA COLLECTION =====

    def _load_history(self) -> ActivityHistory:
        history = self.history() if callable(self.history) else self.history
        if not isinstance(history, ActivityHistory):
            raise ValidationError("Источник истории должен возвращать ActivityHistory")
        return history

    def _collect(self, history: ActivityHistory, start: date, end: date, now: datetime) -> PeriodWindow:
        tz = self.timezone or now.tzinfo
        window = PeriodWindow(start=start, end=end)

        for task in history.tasks:
            if task.completed_at is not None:
                completed_day = to_local_date(task.completed_at, tz)
                if start <= completed_day <= end:
                    window.tasks_completed.append(task)
                    window.observed_days.add(completed_day)
            created_day = to_local_date(task.created_at, tz)
            if start <= created_day <= end:
                window.tasks_created.append(task)
                window.observed_days.add(created_day)

        for session in history.sessions:
            session_day = to_local_date(session.started_at, tz)
            if start <= session_day <= end:
                window.sessions.append(session)
                window.session_hours.append(to_local_hour(session.started_at, tz))
                window.observed_days.add(session_day)

        for stats in history.daily_stats:
            if start <= stats.date <= end:
                window.daily_stats.append(stats)
                if stats.has_activity:
                    window.observed_days.add(stats.date)

        return window

    # ===== METRICS =====

    def _summarize(self, window: PeriodWindow) -> Dict[str, Any]:
        completed_focus = window.completed_focus_sessions
        total_focus = sum(s.actual_duration for s in completed_focus)

        if window.daily_stats:
            planned = sum(s.tasks_planned for s in window.daily_stats)
            completed = sum(s.tasks_completed for s in window.daily_stats)
            pomodoros = sum(s.pomodoros_completed for s in window.daily_stats)
        else:
            # Без дневной статистики считаем по самим задачам и сессиям
            completed = len(window.tasks_completed)
            planned = len({t.task_id for t in window.tasks_created} | {t.task_id for t in window.tasks_completed})
            pomodoros = len(completed_focus)

        return {
            "completion_rate": _completion_rate(completed, planned),
            "total_focus_minutes": total_focus,
            "tasks_completed": completed,
            "tasks_planned": planned,
            "pomodoros_completed": pomodoros,
            "average_energy_level": _average_energy(window.energy_samples),
        }

    def _scores(self, window: PeriodWindow, summary: Dict[str, Any]) -> Dict[str, int]:
        """Баллы 0-100 по зонам роста. Зоны без данных пропускаются."""
        scores: Dict[str, int] = {}
        if summary["tasks_planned"] > 0:
            scores["planning"] = round(summary["completion_rate"])

        focus_target = window.period_days * self.daily_focus_target_minutes
        scores["focus"] = min(100, round(summary["total_focus_minutes"] / focus_target * 100))
        scores["consistency"] = round(len(window.observed_days) / window.period_days * 100)

        if window.energy_samples:
            scores["energy"] = round(summary["average_energy_level"] / 5 * 100)

        focus_sessions = window.focus_sessions
        if focus_sessions:
            uninterrupted = sum(1 for s in focus_sessions if not s.was_interrupted)
            scores["distractions"] = round(uninterrupted / len(focus_sessions) * 100)

        return scores

    def _streaks(self, window: PeriodWindow, streaks: StreakData, now: datetime) -> Tuple[int, int]:
        """Текущая и самая длинная серия дней с выполнением от 70%"""
        if not window.daily_stats:
            today = to_local_date(now, self.timezone or now.tzinfo)
            if window.start <= today <= window.end:
                return streaks.current_streak, streaks.longest_streak
            return 0, 0

        good_days = sorted({
            s.date for s in window.daily_stats
            if s.tasks_planned > 0 and s.completion_rate >= STREAK_DAY_COMPLETION
        })

        longest = run = 0
        previous_day = None
        for day in good_days:
            run = run + 1 if previous_day is not None and day - previous_day == timedelta(days=1) else 1
            longest = max(longest, run)
            previous_day = day

        current = 0
        day = max(s.date for s in window.daily_stats)
        good = set(good_days)
        while day in good:
            current += 1
            day -= timedelta(days=1)

        return current, longest

    def _metrics(self, window: PeriodWindow, streaks: StreakData, now: datetime,
                 monthly: bool) -> PeriodMetrics:
        summary = self._summarize(window)
        if monthly:
            if window.is_empty:
                summary["streak_days"], summary["longest_streak"] = 0, 0
            else:
                summary["streak_days"], summary["longest_streak"] = self._streaks(window, streaks, now)
        return PeriodMetrics(summary=summary, scores=self._scores(window, summary))

    def _previous_metrics(self, history: ActivityHistory, start: date, end: date, now: datetime,
                          monthly: bool = False) -> Optional[PeriodMetrics]:
        window = self._collect(history, start, end, now)
        if window.is_empty:
            return None
        return self._metrics(window, history.streaks, now, monthly=monthly)

    def _confidence(self, window: PeriodWindow) -> int:
        """Доля дней с данными, уменьшенная при малом числе сессий"""
        coverage = len(window.observed_days) / window.period_days
        session_sufficiency = min(1.0, len(window.sessions) / (window.period_days * 2))
        return min(100, round(100 * coverage * (0.5 + 0.5 * session_sufficiency)))

    # ===== REPORT PARTS =====

    def _build_parts(self, period_type: str, window: PeriodWindow, metrics: PeriodMetrics,
                     previous: Optional[PeriodMetrics], now: datetime, deadline: date) -> Dict[str, Any]:
        monthly = period_type == PeriodType.MONTHLY.value
        summary = metrics.summary

        if window.is_empty:
            logger.debug(f"No activity in {window.start}..{window.end}, building empty {period_type} report")
            return {
                "achievements": [],
                "improvements": [],
                "next_period_goals": [],
                "motivational_message": self._motivational_message(period_type, summary, []),
                "insights": Insights(recommendations=[NO_DATA_RECOMMENDATION]),
                "confidence_level": 0,
            }

        achievements = self._period_achievements(period_type, metrics, previous, now)
        improvements = self._improvement_areas(metrics.scores)
        goals = self._goals(period_type, window, metrics, previous, improvements, deadline)
        confidence = self._confidence(window)

        return {
            "achievements": achievements,
            "improvements": improvements,
            "next_period_goals": goals[:MAX_MONTHLY_GOALS if monthly else MAX_WEEKLY_GOALS],
            "motivational_message": self._motivational_message(period_type, summary, achievements),
            "insights": self._insights(window, metrics, previous, improvements, confidence),
            "confidence_level": confidence,
        }

    def _achievement(self, kind: str, title: str, description: str, icon: str, now: datetime,
                     value: Optional[float] = None) -> PeriodAchievement:
        return PeriodAchievement(
            achievement_id=self.id_factory(),
            achievement_type=kind,
            title=title,
            description=description,
            icon=icon,
            earned_at=now,
            value=value,
        )

    def _period_achievements(self, period_type: str, metrics: PeriodMetrics,
                             previous: Optional[PeriodMetrics], now: datetime) -> List[PeriodAchievement]:
        """Достижения за период по порогам сводки"""
        monthly = period_type == PeriodType.MONTHLY.value
        scale = WEEKS_PER_MONTH if monthly else 1
        noun = "месяц" if monthly else "неделю"
        summary = metrics.summary
        rate = summary["completion_rate"]
        focus = summary["total_focus_minutes"]
        achievements = []

        if rate >= 90:
            achievements.append(self._achievement(
                "completion", "Перфекционист", f"За {noun} выполнено {rate:g}% задач!", "🎯", now, rate))
        elif rate >= 70:
            achievements.append(self._achievement(
                "completion", "Цель достигнута", f"Задачи на {noun} успешно выполнены!", "✅", now, rate))

        if focus >= 300 * scale:
            achievements.append(self._achievement(
                "focus", "Мастер фокуса", f"За {noun} вы провели в фокусе {_format_minutes(focus)}!", "🧠", now, focus))
        elif focus >= 120 * scale:
            achievements.append(self._achievement(
                "focus", "Стабильный фокус",
                f"{'Весь месяц' if monthly else 'Всю неделю'} вы регулярно находили время для фокуса!",
                "⏰", now, focus))

        consistency = metrics.scores.get("consistency", 0)
        if consistency >= 80:
            achievements.append(self._achievement(
                "consistency", "Король постоянства", "Вы работали почти каждый день!", "📈", now, consistency))

        if previous is not None and focus > previous.summary["total_focus_minutes"]:
            growth = focus - previous.summary["total_focus_minutes"]
            achievements.append(self._achievement(
                "improvement", "Растущая концентрация",
                f"Времени в фокусе на {growth} мин больше, чем в прошлый раз!", "📊", now, growth))

        if monthly:
            streak_days = summary.get("streak_days", 0)
            longest = summary.get("longest_streak", 0)
            if streak_days >= 7:
                achievements.append(self._achievement(
                    "streak", "Неделя без пропусков", f"{streak_days} дней подряд цель выполнена!", "🔥", now, streak_days))
            if longest >= 14:
                achievements.append(self._achievement(
                    "streak", "Две недели подряд", f"Рекорд месяца: {longest} дней подряд!", "🏆", now, longest))

        return achievements

    def _improvement_areas(self, scores: Dict[str, int]) -> List[ImprovementArea]:
        """Зоны ниже цели, по убыванию отставания"""
        areas = []
        for area, target in AREA_TARGETS.items():
            current = scores.get(area)
            if current is None or current >= target:
                continue
            title, description, suggestions = AREA_COPY[area]
            areas.append(ImprovementArea(
                area=area,
                title=title,
                description=description,
                priority=_priority_for_gap(target - current),
                current_score=current,
                target_score=target,
                suggestions=list(suggestions),
            ))
        return sorted(areas, key=lambda a: a.gap, reverse=True)

    def _goal(self, goal_type: str, title: str, description: str, current: float, target: float,
              projected: float, unit: str, deadline: date, suggestions: List[str]) -> Goal:
        return Goal(
            goal_id=self.id_factory(),
            goal_type=goal_type,
            title=title,
            description=description,
            current_value=current,
            target_value=target,
            unit=unit,
            deadline=deadline,
            is_achievable=projected >= target,
            suggestions=suggestions,
        )

    def _goals(self, period_type: str, window: PeriodWindow, metrics: PeriodMetrics,
               previous: Optional[PeriodMetrics], improvements: List[ImprovementArea],
               deadline: date) -> List[Goal]:
        """Цели на следующий период"""
        monthly = period_type == PeriodType.MONTHLY.value
        next_period = "следующий месяц" if monthly else "следующую неделю"
        summary = metrics.summary
        prev_summary = previous.summary if previous is not None else None
        goals = []

        rate = summary["completion_rate"]
        rate_target = min(100.0, rate + 10)
        goals.append(self._goal(
            "completion", "Больше выполненных задач",
            f"Выполнить не меньше {rate_target:g}% запланированного за {next_period}",
            rate, rate_target,
            _project(rate, prev_summary["completion_rate"] if prev_summary else None),
            "%", deadline,
            ["Разбивайте задачи на шаги поменьше", "Ставьте реалистичные цели"],
        ))

        focus = summary["total_focus_minutes"]
        focus_cap = window.period_days * self.daily_focus_target_minutes
        focus_step = 30 * (WEEKS_PER_MONTH if monthly else 1)
        focus_target = max(focus, min(focus_cap, focus + focus_step))
        goals.append(self._goal(
            "focus", "Больше времени в фокусе",
            f"Провести в фокусе {focus_target} мин за {next_period}",
            focus, focus_target,
            _project(focus, prev_summary["total_focus_minutes"] if prev_summary else None),
            "мин", deadline,
            ["Каждый день добавляйте немного времени фокуса", "Подготовьте рабочее место заранее"],
        ))

        if improvements:
            top = improvements[0]
            previous_score = previous.scores.get(top.area) if previous is not None else None
            goals.append(self._goal(
                top.area, top.title,
                f"Поднять показатель «{top.title}» до {top.target_score} баллов",
                top.current_score, top.target_score,
                _project(top.current_score, previous_score),
                "баллов", deadline,
                top.suggestions[:2],
            ))

        if monthly:
            streak = summary.get("streak_days", 0)
            goals.append(self._goal(
                "streak", "Серия без пропусков",
                f"Выполнять дневную цель {STREAK_GOAL_DAYS} дней подряд",
                streak, STREAK_GOAL_DAYS,
                _project(streak, prev_summary.get("streak_days") if prev_summary else None),
                "дней", deadline,
                ["Ставьте маленькую цель даже на трудный день", "Пропуск - не повод бросать"],
            ))

        return goals

    def _motivational_message(self, period_type: str, summary: Dict[str, Any],
                              achievements: List[PeriodAchievement]) -> str:
        rate = summary["completion_rate"]
        if rate >= 70 and len(achievements) >= 2:
            tone = "high"
        elif rate < 40 or not achievements:
            tone = "low"
        else:
            tone = "medium"

        pool = MOTIVATIONAL_MESSAGES[tone]
        message = pool[self.rng.randrange(len(pool))]

        if achievements:
            message += f" Особенно впечатляет достижение «{achievements[0].title}»!"

        focus = summary["total_focus_minutes"]
        if focus > 0:
            when = "в этом месяце" if period_type == PeriodType.MONTHLY.value else "на этой неделе"
            message += f" Помните: {when} вы провели в фокусе {_format_minutes(focus)}."

        return message

    def _insights(self, window: PeriodWindow, metrics: PeriodMetrics, previous: Optional[PeriodMetrics],
                  improvements: List[ImprovementArea], confidence: int) -> Insights:
        minutes_by_hour: Counter = Counter()
        for session, hour in zip(window.sessions, window.session_hours):
            if session.is_focus and session.is_completed:
                minutes_by_hour[hour] += session.actual_duration

        peak_hour = None
        if minutes_by_hour:
            peak_hour = max(sorted(minutes_by_hour), key=lambda h: minutes_by_hour[h])

        completed_focus = window.completed_focus_sessions
        average_session = 0.0
        if completed_focus:
            average_session = round(sum(s.actual_duration for s in completed_focus) / len(completed_focus), 1)

        focus = metrics.summary["total_focus_minutes"]
        trend = "stable"
        if previous is not None:
            previous_focus = previous.summary["total_focus_minutes"]
            if focus > previous_focus * 1.1:
                trend = "improving"
            elif focus < previous_focus * 0.9:
                trend = "declining"

        recommendations = [area.suggestions[0] for area in improvements if area.suggestions]
        if peak_hour is not None:
            recommendations.append(
                f"Пик продуктивности - около {peak_hour:02d}:00. Ставьте важные задачи на это время.")
        if trend == "declining":
            recommendations.append("Времени в фокусе стало меньше. Начните с коротких сессий.")
        if confidence < LOW_CONFIDENCE:
            recommendations.append(NO_DATA_RECOMMENDATION)

        return Insights(
            peak_hour=peak_hour,
            average_focus_session=average_session,
            weekly_consistency=metrics.scores.get("consistency", 0),
            focus_trend=trend,
            recommendations=recommendations[:MAX_RECOMMENDATIONS],
        )

    def _weekly_progress(self, history: ActivityHistory, window: PeriodWindow,
                         now: datetime) -> List[WeeklyProgress]:
        """Строка на каждую неделю (с понедельника), пересекающую месяц"""
        rows = []
        monday = week_start(window.start)
        while monday <= window.end:
            part = self._collect(history, max(monday, window.start), min(week_end(monday), window.end), now)
            summary = self._summarize(part)
            rows.append(WeeklyProgress(
                week_start=monday,
                focus_minutes=summary["total_focus_minutes"],
                completion_rate=summary["completion_rate"],
                pomodoros_completed=summary["pomodoros_completed"],
                average_energy_level=summary["average_energy_level"],
            ))
            monday += timedelta(days=7)
        return rows

__all__ = [
    'AREA_TARGETS',
    'PeriodWindow',
    'ReportGenerator',
]
