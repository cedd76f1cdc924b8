#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Achievement Factory
Достижения по событиям, уровни и поддерживающие сообщения

Тип и количество очков для каждого рубежа фиксированы. Текст берется из
небольшого набора вариантов, поэтому источник случайности и генератор
идентификаторов передаются снаружи.

Версия: 1.0.0
Дата: 2025-06-20
"""

import math
import random
import uuid
from datetime import datetime
from typing import Dict, Optional, Union, Any, Callable, Iterable
from dataclasses import dataclass

from dailyinsight.core.models import (
    Achievement, AchievementType, EncouragementSituation, Level,
    validate_enum_value, ValidationError
)
from dailyinsight.utils.datetime_utils import SystemClock
import logging

logger = logging.getLogger(__name__)

# ===== DATA CLASSES =====

@dataclass(frozen=True)
class AchievementTemplate:
    """Шаблон текста достижения"""
    title: str
    description: str
    icon: str
    points: int

@dataclass(frozen=True)
class LevelTier:
    """Ступень таблицы уровней"""
    level: int
    title: str
    min_points: int

# ===== MESSAGE POOLS =====

TASK_COMPLETED_POOL = (
    AchievementTemplate("Задача выполнена!", "«{title}» успешно завершена!", "🎯", 10),
    AchievementTemplate("Цель достигнута!", "«{title}» готово! Еще один шаг вперед!", "✅", 10),
    AchievementTemplate("Успех!", "Вы довели «{title}» до конца!", "🌟", 10),
)

POMODORO_POOL = (
    AchievementTemplate("Помидор завершен!", "25 минут фокуса успешно пройдены!", "🍅", 15),
    AchievementTemplate("Фокус удержан!", "Вы прошли весь отрезок глубокой концентрации!", "⏰", 15),
)

POMODORO_MILESTONES: Dict[int, AchievementTemplate] = {
    1: AchievementTemplate("Первый помидор!", "Первый помидор за день готов! Отличное начало!", "🎉", 20),
    4: AchievementTemplate("Мастер концентрации!", "4 помидора за день! Впечатляющая концентрация!", "🔥", 30),
    8: AchievementTemplate("Бог фокуса!", "8 помидоров! Невероятная концентрация!", "👑", 50),
}

STREAK_MILESTONES: Dict[int, AchievementTemplate] = {
    3: AchievementTemplate("3 дня подряд!", "3 дня подряд цель выполнена! Привычка формируется!", "🌟", 30),
    7: AchievementTemplate("Неделя подряд!", "7 дней подряд! Настоящая сила воли!", "⚡", 50),
    14: AchievementTemplate("2 недели подряд!", "14 дней подряд! Теперь это настоящая привычка!", "🔥", 100),
    21: AchievementTemplate("3 недели подряд!", "21 день подряд! Привычка закрепилась!", "🏆", 150),
    30: AchievementTemplate("Месяц подряд!", "30 дней подряд! Вы настоящий чемпион!", "👑", 200),
}

DAILY_GOAL = AchievementTemplate("Дневная цель выполнена!", "Сегодня выполнено {rate}% плана!", "🎯", 25)
PERFECT_DAY = AchievementTemplate("Идеальный день!", "Сделано все, что было запланировано! Потрясающе!", "🌟", 30)
DAILY_GOAL_THRESHOLD = 80

FOCUS_TIME_MILESTONES: Dict[int, AchievementTemplate] = {
    60: AchievementTemplate("1 час фокуса!", "Вы набрали час концентрации!", "⏰", 20),
    120: AchievementTemplate("2 часа фокуса!", "2 часа фокуса! Отличная концентрация!", "🧠", 40),
    180: AchievementTemplate("3 часа фокуса!", "3 часа фокуса! Вы мастер концентрации!", "🔥", 60),
    240: AchievementTemplate("4 часа фокуса!", "4 часа фокуса! Невероятная выдержка!", "👑", 80),
}

SPECIAL_ACHIEVEMENTS: Dict[str, Any] = {
    "first_task": (AchievementType.TASK_COMPLETED, AchievementTemplate(
        "Первый шаг!", "Первая задача выполнена! Любой путь начинается с первого шага!", "🚀", 25)),
    "perfect_week": (AchievementType.DAILY_GOAL, AchievementTemplate(
        "Идеальная неделя!", "Всю неделю цели выполнялись полностью! Невероятно!", "🏆", 100)),
    "comeback": (AchievementType.STREAK_MILESTONE, AchievementTemplate(
        "Возвращение!", "Начать заново - это смелость! Главное - не сдаваться!", "💪", 30)),
}

LEVEL_TABLE = (
    LevelTier(1, "Росток", 0),
    LevelTier(2, "Новичок", 100),
    LevelTier(3, "Ученик", 250),
    LevelTier(4, "Исполнитель", 500),
    LevelTier(5, "Умелец", 1000),
    LevelTier(6, "Профессионал", 2000),
    LevelTier(7, "Мастер", 4000),
    LevelTier(8, "Легенда", 8000),
    LevelTier(9, "Миф", 15000),
    LevelTier(10, "Бессмертный", 30000),
)

ENCOURAGEMENT_MESSAGES: Dict[str, tuple] = {
    EncouragementSituation.LOW_COMPLETION.value: (
        "Ничего страшного! Важно не сделать идеально, а начать. Завтра получится лучше! 💪",
        "Маленький шаг - тоже шаг. Не будьте к себе слишком строги, двигаться медленно - нормально! 🌱",
        "Не каждый день бывает идеальным. То, что вы сделали сегодня, уже здорово! ✨",
        "Неудача - мать успеха. Сегодняшний опыт сделает завтрашний день лучше! 🌟",
    ),
    EncouragementSituation.MISSED_DAY.value: (
        "Один пропущенный день ничего не перечеркивает. Просто начните снова! 🚀",
        "Идеальных людей не бывает. Главное - снова встать. Вперед! 💪",
        "Иногда отдых необходим. Вы отдохнули, теперь можно продолжать! 🌈",
        "Серия прервалась? Не беда, можно начать новую! ⭐",
    ),
    EncouragementSituation.DISTRACTED.value: (
        "Бывают дни, когда сосредоточиться трудно. Начните с цели поменьше! 🎯",
        "Рассеянность - часть вашей особенности. Начните с того, чтобы принять себя! 💝",
        "Идеального фокуса не существует. Важно двигаться вперед хоть понемногу! 🐢",
        "Сегодня было трудно сосредоточиться? Завтра точно будет лучше. Не сдавайтесь! 🌅",
    ),
}

# ===== FACTORY =====

class AchievementFactory:
    """Создание достижений по событиям"""

    def __init__(self, rng: Optional[random.Random] = None,
                 id_factory: Optional[Callable[[], str]] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.rng = rng or random.Random()
        self.id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.clock = clock or SystemClock()

    def _build(self, achievement_type: AchievementType, template: AchievementTemplate,
               **fmt: Any) -> Achievement:
        achievement = Achievement(
            achievement_id=self.id_factory(),
            achievement_type=achievement_type.value,
            title=template.title,
            description=template.description.format(**fmt) if fmt else template.description,
            icon=template.icon,
            points=template.points,
            created_at=self.clock(),
        )
        logger.debug(f"Created achievement {achievement.achievement_type}: {achievement.title} (+{achievement.points})")
        return achievement

    def _pick(self, pool: tuple) -> Any:
        return pool[self.rng.randrange(len(pool))]

    def on_task_completed(self, title: str) -> Achievement:
        """Достижение за выполненную задачу (всегда создается)"""
        return self._build(AchievementType.TASK_COMPLETED, self._pick(TASK_COMPLETED_POOL), title=title)

    def on_pomodoro_completed(self, session_count_today: int) -> Achievement:
        """Достижение за помидор: особые рубежи 1, 4 и 8"""
        template = POMODORO_MILESTONES.get(session_count_today)
        if template is None:
            template = self._pick(POMODORO_POOL)
        return self._build(AchievementType.POMODORO_COMPLETED, template)

    def on_streak_milestone(self, streak_days: int) -> Optional[Achievement]:
        """Достижение за серию, только на точных рубежах"""
        template = STREAK_MILESTONES.get(streak_days)
        if template is None:
            return None
        return self._build(AchievementType.STREAK_MILESTONE, template)

    def on_daily_goal(self, completion_rate_pct: Union[int, float]) -> Optional[Achievement]:
        """Достижение за дневную цель: от 80%, при 100% - идеальный день"""
        if completion_rate_pct < DAILY_GOAL_THRESHOLD:
            return None
        if completion_rate_pct >= 100:
            return self._build(AchievementType.DAILY_GOAL, PERFECT_DAY)
        return self._build(AchievementType.DAILY_GOAL, DAILY_GOAL, rate=_format_rate(completion_rate_pct))

    def on_focus_time_milestone(self, minutes: int) -> Optional[Achievement]:
        """Достижение за суммарное время фокуса, только на точных рубежах"""
        template = FOCUS_TIME_MILESTONES.get(minutes)
        if template is None:
            return None
        return self._build(AchievementType.FOCUS_TIME, template)

    def special(self, kind: str) -> Achievement:
        """Особые достижения: first_task, perfect_week, comeback"""
        if kind not in SPECIAL_ACHIEVEMENTS:
            raise ValidationError(f"kind должен быть одним из: {list(SPECIAL_ACHIEVEMENTS)}")
        achievement_type, template = SPECIAL_ACHIEVEMENTS[kind]
        return self._build(achievement_type, template)

    def encouragement(self, situation: Union[str, EncouragementSituation]) -> str:
        """Поддерживающее сообщение для трудной ситуации"""
        key = validate_enum_value(situation, EncouragementSituation, "situation")
        return self._pick(ENCOURAGEMENT_MESSAGES[key])

    @staticmethod
    def level(total_points: Union[int, float]) -> Level:
        return calculate_level(total_points)

# ===== LEVELS =====

def calculate_level(total_points: Union[int, float]) -> Level:
    """Уровень по сумме очков. На последнем уровне до следующего - math.inf."""
    current = LEVEL_TABLE[0]
    for tier in LEVEL_TABLE:
        if tier.min_points <= total_points:
            current = tier
        else:
            break

    if current is LEVEL_TABLE[-1]:
        return Level(level=current.level, title=current.title, points_to_next=math.inf, progress=100.0)

    next_tier = LEVEL_TABLE[current.level]
    span = next_tier.min_points - current.min_points
    progress = max(0.0, min(100.0, (total_points - current.min_points) / span * 100))

    return Level(
        level=current.level,
        title=current.title,
        points_to_next=next_tier.min_points - total_points,
        progress=round(progress, 1),
    )

def total_points(achievements: Iterable[Achievement]) -> int:
    """Сумма очков за список достижений"""
    return sum(achievement.points for achievement in achievements)

def _format_rate(rate: Union[int, float]) -> str:
    if float(rate).is_integer():
        return str(int(rate))
    return f"{rate:.1f}"

# ===== CONVENIENCE FUNCTIONS =====

def create_achievement_factory(seed: Optional[int] = None) -> AchievementFactory:
    """Создать фабрику достижений (с фиксированным seed для воспроизводимости)"""
    return AchievementFactory(rng=random.Random(seed))

__all__ = [
    'AchievementTemplate',
    'LevelTier',
    'LEVEL_TABLE',
    'POMODORO_MILESTONES',
    'STREAK_MILESTONES',
    'FOCUS_TIME_MILESTONES',
    'TASK_COMPLETED_POOL',
    'POMODORO_POOL',
    'ENCOURAGEMENT_MESSAGES',
    'AchievementFactory',
    'calculate_level',
    'total_points',
    'create_achievement_factory',
]
