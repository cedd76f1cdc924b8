#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Core Data Models
Модели входных данных движка аналитики с валидацией и типизацией

Задачи, сессии помодоро, дневная статистика и серии приходят из внешнего
хранилища. Движок их только читает, поэтому все проверки выполняются на
границе, в __post_init__, и сообщают об ошибке через ValidationError.

Версия: 1.0.0
Дата: 2025-06-20
"""

import math
import uuid
from datetime import datetime, date
from typing import Dict, List, Optional, Union, Any
from dataclasses import dataclass, field
from enum import Enum
import logging

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class TaskStatus(Enum):
    """Статусы задач"""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    POSTPONED = "postponed"

class TaskPriority(Enum):
    """Приоритеты задач"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class EnergyLevel(Enum):
    """Самооценка энергии пользователя"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class SessionType(Enum):
    """Типы сессий таймера"""
    FOCUS = "focus"
    BREAK = "break"

class AchievementType(Enum):
    """Типы мгновенных достижений"""
    TASK_COMPLETED = "task_completed"
    POMODORO_COMPLETED = "pomodoro_completed"
    STREAK_MILESTONE = "streak_milestone"
    DAILY_GOAL = "daily_goal"
    FOCUS_TIME = "focus_time"

class EncouragementSituation(Enum):
    """Ситуации, в которых нужна поддержка"""
    LOW_COMPLETION = "low_completion"
    MISSED_DAY = "missed_day"
    DISTRACTED = "distracted"

class PeriodType(Enum):
    """Периоды отчетов"""
    WEEKLY = "weekly"
    MONTHLY = "monthly"

class ExportFormat(Enum):
    """Форматы экспорта отчетов"""
    JSON = "json"
    TEXT = "text"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Ошибка валидации входных данных"""
    pass

def validate_text(text: str, min_length: int = 1, max_length: int = 1000, field_name: str = "text") -> str:
    """Валидация текстовых полей"""
    if not isinstance(text, str):
        raise ValidationError(f"{field_name} должен быть строкой")

    text = text.strip()
    if len(text) < min_length:
        raise ValidationError(f"{field_name} должен содержать минимум {min_length} символов")

    if len(text) > max_length:
        raise ValidationError(f"{field_name} должен содержать максимум {max_length} символов")

    return text

def validate_enum_value(value: Union[str, Enum], enum_class: type, field_name: str = "value") -> str:
    """Валидация значений enum, возвращает строковое значение"""
    if isinstance(value, enum_class):
        return value.value
    try:
        return enum_class(value).value
    except ValueError:
        valid_values = [e.value for e in enum_class]
        raise ValidationError(f"{field_name} должен быть одним из: {valid_values}")

def validate_non_negative(value: Any, field_name: str = "value") -> int:
    """Валидация неотрицательных целых счетчиков"""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"{field_name} должен быть неотрицательным целым числом")
    return value

def validate_hour(hour: Any) -> int:
    """Валидация часа суток (0-23)"""
    if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
        raise ValidationError(f"hour должен быть целым числом от 0 до 23, получено: {hour!r}")
    return hour

def parse_datetime(value: Union[str, datetime, None], field_name: str = "timestamp") -> Optional[datetime]:
    """Привести ISO строку или datetime к datetime"""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace('Z', '+00:00'))
        except ValueError:
            pass
    raise ValidationError(f"Неверный формат даты и времени в {field_name}: {value!r}")

def parse_date(value: Union[str, date, datetime], field_name: str = "date") -> date:
    """Привести ISO строку, date или datetime к date"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            pass
    raise ValidationError(f"Неверный формат даты в {field_name}: {value!r}")

def _same_awareness(a: datetime, b: datetime) -> bool:
    return (a.tzinfo is None) == (b.tzinfo is None)

def _iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    return value.isoformat() if value is not None else None

# ===== CORE MODELS =====

@dataclass
class Subtask:
    """Подзадача"""
    subtask_id: str
    title: str
    duration: int = 15  # в минутах
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.title = validate_text(self.title, min_length=1, max_length=200, field_name="title")
        if isinstance(self.duration, bool) or not isinstance(self.duration, int) or self.duration <= 0:
            raise ValidationError("duration подзадачи должен быть положительным числом")
        self.completed_at = parse_datetime(self.completed_at, "completed_at")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtask_id": self.subtask_id,
            "title": self.title,
            "duration": self.duration,
            "is_completed": self.is_completed,
            "completed_at": _iso(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Subtask":
        return cls(
            subtask_id=data.get("subtask_id") or str(uuid.uuid4()),
            title=data["title"],
            duration=data.get("duration", 15),
            is_completed=data.get("is_completed", False),
            completed_at=data.get("completed_at"),
        )

@dataclass
class Task:
    """Задача пользователя в том виде, в котором ее отдает хранилище"""
    task_id: str
    title: str
    estimated_duration: int  # в минутах
    description: Optional[str] = None
    priority: str = TaskPriority.MEDIUM.value
    category: str = ""
    is_flexible: bool = False
    subtasks: List[Subtask] = field(default_factory=list)
    status: str = TaskStatus.PENDING.value
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    scheduled_for: Optional[datetime] = None
    postponed_count: int = 0

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.title = validate_text(self.title, min_length=1, max_length=200, field_name="title")

        if self.description is not None:
            self.description = validate_text(self.description, min_length=0, max_length=1000, field_name="description")

        if (isinstance(self.estimated_duration, bool)
                or not isinstance(self.estimated_duration, int)
                or self.estimated_duration <= 0):
            raise ValidationError("estimated_duration должен быть положительным числом")

        self.priority = validate_enum_value(self.priority, TaskPriority, "priority")
        self.status = validate_enum_value(self.status, TaskStatus, "status")
        self.category = (self.category or "").strip()
        self.postponed_count = validate_non_negative(self.postponed_count, "postponed_count")

        self.created_at = parse_datetime(self.created_at, "created_at")
        self.completed_at = parse_datetime(self.completed_at, "completed_at")
        self.scheduled_for = parse_datetime(self.scheduled_for, "scheduled_for")

        if (self.completed_at is not None and _same_awareness(self.completed_at, self.created_at)
                and self.completed_at < self.created_at):
            raise ValidationError("completed_at не может быть раньше created_at")

    # ===== PROPERTIES =====

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING.value

    @property
    def normalized_category(self) -> str:
        """Категория в нижнем регистре для сопоставления с правилами"""
        return self.category.strip().lower()

    @property
    def subtasks_completed_count(self) -> int:
        """Количество выполненных подзадач"""
        return sum(1 for subtask in self.subtasks if subtask.is_completed)

    @property
    def subtasks_completion_rate(self) -> float:
        """Процент выполнения подзадач"""
        if not self.subtasks:
            return 100.0 if self.status == TaskStatus.COMPLETED.value else 0.0
        return (self.subtasks_completed_count / len(self.subtasks)) * 100

    # ===== SERIALIZATION =====

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь"""
        return {
            "task_id": self.task_id,
            "title": self.title,
            "description": self.description,
            "estimated_duration": self.estimated_duration,
            "priority": self.priority,
            "category": self.category,
            "is_flexible": self.is_flexible,
            "subtasks": [s.to_dict() for s in self.subtasks],
            "status": self.status,
            "created_at": _iso(self.created_at),
            "completed_at": _iso(self.completed_at),
            "scheduled_for": _iso(self.scheduled_for),
            "postponed_count": self.postponed_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Десериализация из словаря"""
        try:
            return cls(
                task_id=data["task_id"],
                title=data["title"],
                estimated_duration=data["estimated_duration"],
                description=data.get("description"),
                priority=data.get("priority", TaskPriority.MEDIUM.value),
                category=data.get("category", ""),
                is_flexible=data.get("is_flexible", False),
                subtasks=[
                    Subtask.from_dict(s) if isinstance(s, dict) else s
                    for s in data.get("subtasks", [])
                ],
                status=data.get("status", TaskStatus.PENDING.value),
                created_at=data.get("created_at", datetime.now()),
                completed_at=data.get("completed_at"),
                scheduled_for=data.get("scheduled_for"),
                postponed_count=data.get("postponed_count", 0),
            )
        except KeyError as e:
            logger.error(f"Task payload is missing field {e}")
            raise ValidationError(f"Не удалось загрузить задачу: нет поля {e}")

    @classmethod
    def create(cls, title: str, estimated_duration: int, priority: str = TaskPriority.MEDIUM.value,
               category: str = "", is_flexible: bool = False) -> "Task":
        """Создание новой задачи"""
        return cls(
            task_id=str(uuid.uuid4()),
            title=title,
            estimated_duration=estimated_duration,
            priority=priority,
            category=category,
            is_flexible=is_flexible,
        )

@dataclass
class Session:
    """Сессия таймера (фокус или перерыв)"""
    session_id: str
    session_type: str
    started_at: datetime
    actual_duration: int  # в минутах
    completed_at: Optional[datetime] = None
    planned_duration: Optional[int] = None
    was_interrupted: bool = False

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.session_type = validate_enum_value(self.session_type, SessionType, "session_type")
        self.actual_duration = validate_non_negative(self.actual_duration, "actual_duration")
        if self.planned_duration is not None:
            self.planned_duration = validate_non_negative(self.planned_duration, "planned_duration")
        self.started_at = parse_datetime(self.started_at, "started_at")
        self.completed_at = parse_datetime(self.completed_at, "completed_at")
        if self.started_at is None:
            raise ValidationError("started_at обязателен для сессии")
        if (self.completed_at is not None and _same_awareness(self.completed_at, self.started_at)
                and self.completed_at < self.started_at):
            raise ValidationError("completed_at не может быть раньше started_at")

    @property
    def is_focus(self) -> bool:
        return self.session_type == SessionType.FOCUS.value

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    @property
    def session_date(self) -> date:
        return self.started_at.date()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "session_type": self.session_type,
            "started_at": _iso(self.started_at),
            "completed_at": _iso(self.completed_at),
            "actual_duration": self.actual_duration,
            "planned_duration": self.planned_duration,
            "was_interrupted": self.was_interrupted,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        try:
            return cls(
                session_id=data.get("session_id") or str(uuid.uuid4()),
                session_type=data["session_type"],
                started_at=data["started_at"],
                actual_duration=data.get("actual_duration", 0),
                completed_at=data.get("completed_at"),
                planned_duration=data.get("planned_duration"),
                was_interrupted=data.get("was_interrupted", False),
            )
        except KeyError as e:
            raise ValidationError(f"Не удалось загрузить сессию: нет поля {e}")

@dataclass
class DailyStats:
    """Статистика за один день"""
    date: date
    tasks_planned: int = 0
    tasks_completed: int = 0
    pomodoros_completed: int = 0
    energy_level: Optional[float] = None  # 1-5

    def __post_init__(self):
        """Валидация после создания объекта"""
        self.date = parse_date(self.date)
        self.tasks_planned = validate_non_negative(self.tasks_planned, "tasks_planned")
        self.tasks_completed = validate_non_negative(self.tasks_completed, "tasks_completed")
        self.pomodoros_completed = validate_non_negative(self.pomodoros_completed, "pomodoros_completed")

        if self.energy_level is not None:
            if (isinstance(self.energy_level, bool)
                    or not isinstance(self.energy_level, (int, float))
                    or math.isnan(self.energy_level)
                    or not 1 <= self.energy_level <= 5):
                raise ValidationError("energy_level должен быть от 1 до 5")

    @property
    def completion_rate(self) -> float:
        """Процент выполнения за день"""
        if self.tasks_planned == 0:
            return 0.0
        return self.tasks_completed / self.tasks_planned * 100

    @property
    def has_activity(self) -> bool:
        return bool(self.tasks_planned or self.tasks_completed or self.pomodoros_completed
                    or self.energy_level is not None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "tasks_planned": self.tasks_planned,
            "tasks_completed": self.tasks_completed,
            "pomodoros_completed": self.pomodoros_completed,
            "energy_level": self.energy_level,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyStats":
        return cls(
            date=data["date"],
            tasks_planned=data.get("tasks_planned", 0),
            tasks_completed=data.get("tasks_completed", 0),
            pomodoros_completed=data.get("pomodoros_completed", 0),
            energy_level=data.get("energy_level"),
        )

@dataclass
class StreakData:
    """Счетчики серий"""
    current_streak: int = 0
    longest_streak: int = 0

    def __post_init__(self):
        self.current_streak = validate_non_negative(self.current_streak, "current_streak")
        self.longest_streak = validate_non_negative(self.longest_streak, "longest_streak")
        if self.longest_streak < self.current_streak:
            self.longest_streak = self.current_streak

    def to_dict(self) -> Dict[str, Any]:
        return {"current_streak": self.current_streak, "longest_streak": self.longest_streak}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StreakData":
        return cls(
            current_streak=data.get("current_streak", 0),
            longest_streak=data.get("longest_streak", 0),
        )

@dataclass
class ActivityHistory:
    """История активности пользователя, которую отдает хранилище"""
    tasks: List[Task] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    daily_stats: List[DailyStats] = field(default_factory=list)
    streaks: StreakData = field(default_factory=StreakData)

    @property
    def is_empty(self) -> bool:
        return not (self.tasks or self.sessions or self.daily_stats)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tasks": [t.to_dict() for t in self.tasks],
            "sessions": [s.to_dict() for s in self.sessions],
            "daily_stats": [d.to_dict() for d in self.daily_stats],
            "streaks": self.streaks.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActivityHistory":
        return cls(
            tasks=[Task.from_dict(t) for t in data.get("tasks", [])],
            sessions=[Session.from_dict(s) for s in data.get("sessions", [])],
            daily_stats=[DailyStats.from_dict(d) for d in data.get("daily_stats", [])],
            streaks=StreakData.from_dict(data.get("streaks", {})),
        )

# ===== DERIVED VALUES =====

@dataclass
class Recommendation:
    """Рекомендация задачи (не сохраняется, пересчитывается на каждый запрос)"""
    task: Task
    score: int
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task.task_id,
            "title": self.task.title,
            "score": self.score,
            "reason": self.reason,
        }

@dataclass
class Achievement:
    """Мгновенное достижение, созданное по событию"""
    achievement_id: str
    achievement_type: str
    title: str
    description: str
    icon: str
    points: int
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "achievement_id": self.achievement_id,
            "achievement_type": self.achievement_type,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "points": self.points,
            "created_at": _iso(self.created_at),
        }

@dataclass(frozen=True)
class Level:
    """Уровень, вычисленный из суммы очков"""
    level: int
    title: str
    points_to_next: Union[int, float]  # math.inf на последнем уровне
    progress: float = 0.0  # процент внутри текущего уровня

    @property
    def is_max(self) -> bool:
        return math.isinf(self.points_to_next)

__all__ = [
    # Enums
    'TaskStatus',
    'TaskPriority',
    'EnergyLevel',
    'SessionType',
    'AchievementType',
    'EncouragementSituation',
    'PeriodType',
    'ExportFormat',

    # Validation
    'ValidationError',
    'validate_text',
    'validate_enum_value',
    'validate_non_negative',
    'validate_hour',
    'parse_datetime',
    'parse_date',

    # Models
    'Subtask',
    'Task',
    'Session',
    'DailyStats',
    'StreakData',
    'ActivityHistory',
    'Recommendation',
    'Achievement',
    'Level',
]
