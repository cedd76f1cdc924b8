#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Report Schemas
Pydantic модели документа отчета (JSON формат экспорта)

Версия: 1.0.0
Дата: 2025-06-20
"""

from datetime import datetime, date, timedelta
from typing import List, Optional, Dict, Any, Union, Literal, Tuple, Annotated

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

AchievementKind = Literal["completion", "focus", "consistency", "streak", "improvement"]
AreaKind = Literal["planning", "focus", "consistency", "energy", "distractions"]
GoalKind = Literal["completion", "focus", "consistency", "energy", "planning", "distractions", "streak"]
Priority = Literal["low", "medium", "high"]
FocusTrend = Literal["improving", "stable", "declining"]

class _FrozenModel(BaseModel):
    """Отчет не изменяется после создания, повторная генерация его заменяет"""
    model_config = ConfigDict(frozen=True, extra="forbid")

# ===== SUMMARY =====

class ReportSummary(_FrozenModel):
    completion_rate: float = Field(0.0, ge=0, le=100)
    total_focus_minutes: int = Field(0, ge=0)
    tasks_completed: int = Field(0, ge=0)
    tasks_planned: int = Field(0, ge=0)
    pomodoros_completed: int = Field(0, ge=0)
    average_energy_level: float = Field(0.0, ge=0, le=5)  # 0 - нет данных

class MonthlySummary(ReportSummary):
    streak_days: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)

# ===== REPORT PARTS =====

class PeriodAchievement(_FrozenModel):
    """Достижение за период (в отличие от мгновенных достижений по событию)"""
    achievement_id: str
    achievement_type: AchievementKind
    title: str
    description: str
    icon: str
    earned_at: datetime
    value: Optional[float] = None
    is_new: bool = True

class ImprovementArea(_FrozenModel):
    area: AreaKind
    title: str
    description: str
    priority: Priority
    current_score: int = Field(ge=0, le=100)
    target_score: int = Field(ge=0, le=100)
    suggestions: List[str] = Field(default_factory=list)

    @property
    def gap(self) -> int:
        return self.target_score - self.current_score

class Goal(_FrozenModel):
    goal_id: str
    goal_type: GoalKind
    title: str
    description: str
    current_value: float
    target_value: float
    unit: str
    deadline: date
    is_achievable: bool
    suggestions: List[str] = Field(default_factory=list)

class Insights(_FrozenModel):
    peak_hour: Optional[int] = Field(None, ge=0, le=23)
    average_focus_session: float = 0.0
    weekly_consistency: int = Field(0, ge=0, le=100)
    focus_trend: FocusTrend = "stable"
    recommendations: List[str] = Field(default_factory=list)

class WeeklyProgress(_FrozenModel):
    week_start: date
    focus_minutes: int = 0
    completion_rate: float = 0.0
    pomodoros_completed: int = 0
    average_energy_level: float = 0.0

# ===== REPORTS =====

class ReportBase(_FrozenModel):
    report_id: str
    generated_at: datetime
    achievements: List[PeriodAchievement] = Field(default_factory=list)
    improvements: List[ImprovementArea] = Field(default_factory=list)
    next_period_goals: List[Goal] = Field(default_factory=list)
    motivational_message: str = ""
    insights: Insights = Field(default_factory=Insights)
    confidence_level: int = Field(0, ge=0, le=100)

class WeeklyReport(ReportBase):
    period_type: Literal["weekly"] = "weekly"
    week_start: date
    week_end: date
    summary: ReportSummary = Field(default_factory=ReportSummary)

    @field_validator("week_start")
    @classmethod
    def validate_week_start(cls, v: date) -> date:
        if v.weekday() != 0:
            raise ValueError("week_start должен быть понедельником")
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> "WeeklyReport":
        if self.week_end != self.week_start + timedelta(days=6):
            raise ValueError("week_end должен быть воскресеньем той же недели")
        return self

    @property
    def period_key(self) -> Tuple[str, date]:
        return ("weekly", self.week_start)

    @property
    def period_label(self) -> str:
        return f"{self.week_start.strftime('%d.%m.%Y')} - {self.week_end.strftime('%d.%m.%Y')}"

class MonthlyReport(ReportBase):
    period_type: Literal["monthly"] = "monthly"
    month: int = Field(ge=1, le=12)
    year: int = Field(ge=1)
    summary: MonthlySummary = Field(default_factory=MonthlySummary)
    weekly_progress: List[WeeklyProgress] = Field(default_factory=list)

    @property
    def period_key(self) -> Tuple[str, int, int]:
        return ("monthly", self.year, self.month)

    @property
    def period_label(self) -> str:
        return f"{self.month:02d}.{self.year}"

Report = Annotated[Union[WeeklyReport, MonthlyReport], Field(discriminator="period_type")]

_report_adapter = TypeAdapter(Report)

def load_report(data: Union[str, bytes, Dict[str, Any]]) -> Union[WeeklyReport, MonthlyReport]:
    """Загрузить отчет из JSON строки или словаря (тип по полю period_type)"""
    if isinstance(data, (str, bytes)):
        return _report_adapter.validate_json(data)
    return _report_adapter.validate_python(data)

# ===== COMPARISON =====

class ReportComparison(_FrozenModel):
    """Разница между отчетом и предыдущим отчетом того же типа"""
    completion_rate_change: int = 0
    focus_time_change: int = 0
    tasks_completed_change: int = 0
    energy_level_change: float = 0.0
    achievement_change: int = 0
    has_improvement: bool = False

__all__ = [
    'ReportSummary',
    'MonthlySummary',
    'PeriodAchievement',
    'ImprovementArea',
    'Goal',
    'Insights',
    'WeeklyProgress',
    'ReportBase',
    'WeeklyReport',
    'MonthlyReport',
    'Report',
    'load_report',
    'ReportComparison',
]
