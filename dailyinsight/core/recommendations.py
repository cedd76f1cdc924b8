#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Task Recommendations
Подбор задач под текущий уровень энергии и время суток

Каждое правило добавляет баллы и фрагмент причины. Порядок правил
фиксирован, поэтому текст причины воспроизводим. Задачи, набравшие меньше
RELEVANCE_FLOOR баллов, не рекомендуются.

Версия: 1.0.0
Дата: 2025-06-20
"""

from typing import Dict, List, Optional, Tuple, Union, Iterable
import logging

from dailyinsight.core.models import (
    Task, Recommendation, EnergyLevel, ValidationError,
    TaskPriority, validate_enum_value, validate_hour
)

logger = logging.getLogger(__name__)

# ===== CONSTANTS =====

RELEVANCE_FLOOR = 2
MAX_SCORE = 10

# Категории свободные, сравниваем по ключевым словам в нижнем регистре
DEMANDING_CATEGORIES = {"work", "learning", "работа", "обучение", "учеба"}
STEADY_CATEGORIES = {"personal", "organizing", "личное", "уборка", "организация"}
LIGHT_CATEGORIES = {"organizing", "simple_work", "уборка", "организация", "простые дела"}
RECREATIONAL_CATEGORIES = {"hobby", "creative", "хобби", "творчество"}
WIND_DOWN_CATEGORIES = {"organizing", "planning", "уборка", "организация", "планирование"}
WORK_CATEGORIES = {"work", "работа"}

# Границы времени суток: [начало, конец)
MORNING = (6, 12)
AFTERNOON = (12, 18)
EVENING = (18, 22)

ScoreResult = Optional[Tuple[int, str]]

class _ScoreAccumulator:
    """Накопитель баллов и фрагментов причины"""

    def __init__(self):
        self.score = 0
        self.fragments: List[str] = []

    def add(self, points: int, reason: Optional[str] = None) -> None:
        self.score += points
        if reason:
            self.fragments.append(reason)

    @property
    def reason(self) -> str:
        return " ".join(self.fragments)

# ===== SCORING PRIMITIVES =====

def score_for_energy(task: Task, energy_level: Union[str, EnergyLevel]) -> ScoreResult:
    """Оценить задачу под уровень энергии. None, если задача нерелевантна."""
    energy = validate_enum_value(energy_level, EnergyLevel, "energy_level")
    category = task.normalized_category
    subtask_count = len(task.subtasks)
    acc = _ScoreAccumulator()

    if energy == EnergyLevel.HIGH.value:
        if task.priority == TaskPriority.HIGH.value:
            acc.add(4, "Это важная задача.")
        if task.estimated_duration > 45:
            acc.add(3, "Хорошее время для длинной задачи, пока концентрация на высоте.")
        if category in DEMANDING_CATEGORIES:
            acc.add(2, "При высокой энергии стоит браться за сложное.")
        if subtask_count > 3:
            acc.add(2, "Подходящее состояние, чтобы шаг за шагом разобрать сложную задачу.")

    elif energy == EnergyLevel.MEDIUM.value:
        if task.priority == TaskPriority.MEDIUM.value:
            acc.add(3, "Задача со средним приоритетом.")
        if 25 <= task.estimated_duration <= 45:
            acc.add(3, "Задача подходящей длины.")
        if category in STEADY_CATEGORIES:
            acc.add(2, "Такую задачу удобно делать в ровном темпе.")
        if 0 < subtask_count <= 3:
            acc.add(2, "Удобно выполнять по шагам.")

    else:
        if task.priority == TaskPriority.LOW.value:
            acc.add(3, "С этой задачи легко начать.")
        if task.estimated_duration <= 25:
            acc.add(4, "Можно закончить за короткое время.")
        if category in LIGHT_CATEGORIES:
            acc.add(3, "Хорошая задача для низкой энергии.")
        if category in RECREATIONAL_CATEGORIES:
            acc.add(2, "Поможет переключиться и поднять настроение.")
        if subtask_count <= 1:
            acc.add(2, "Задача несложная, без лишней нагрузки.")
        if category in DEMANDING_CATEGORIES:
            acc.add(-2)

    if acc.score < RELEVANCE_FLOOR:
        return None

    if task.is_flexible:
        acc.add(1, "Сроки этой задачи можно сдвинуть.")

    return min(acc.score, MAX_SCORE), acc.reason

def time_band(hour: int) -> str:
    """Название временного интервала для часа суток"""
    hour = validate_hour(hour)
    if MORNING[0] <= hour < MORNING[1]:
        return "morning"
    if AFTERNOON[0] <= hour < AFTERNOON[1]:
        return "afternoon"
    if EVENING[0] <= hour < EVENING[1]:
        return "evening"
    return "night"

def score_for_time_of_day(task: Task, hour: int) -> ScoreResult:
    """Оценить задачу под время суток. None, если задача нерелевантна."""
    band = time_band(hour)
    category = task.normalized_category
    acc = _ScoreAccumulator()

    if band == "morning":
        if task.priority == TaskPriority.HIGH.value or category in WORK_CATEGORIES:
            acc.add(3, "Утро - время лучшей концентрации.")
        if task.estimated_duration > 30:
            acc.add(2, "Утром удобно браться за длинные задачи.")

    elif band == "afternoon":
        if task.priority == TaskPriority.MEDIUM.value:
            acc.add(2, "Подходящая задача для второй половины дня.")
        if category in STEADY_CATEGORIES:
            acc.add(2, "Днем хорошо разбираться с личными делами.")

    elif band == "evening":
        if task.priority == TaskPriority.LOW.value or task.estimated_duration <= 25:
            acc.add(2, "Вечером можно сделать что-то легкое.")
        if category in RECREATIONAL_CATEGORIES:
            acc.add(3, "Занятие для спокойного вечера.")

    else:
        if task.estimated_duration <= 15:
            acc.add(2, "Можно быстро сделать перед сном.")
        if category in WIND_DOWN_CATEGORIES:
            acc.add(2, "Хорошо подходит, чтобы завершить день.")

    if acc.score < RELEVANCE_FLOOR:
        return None

    return acc.score, acc.reason

# ===== COMPOSER =====

def _pending(tasks: Iterable[Task]) -> List[Task]:
    return [task for task in tasks if task.is_pending]

def _rank(recommendations: List[Recommendation]) -> List[Recommendation]:
    # sorted() устойчива: при равенстве сохраняется исходный порядок задач
    return sorted(recommendations, key=lambda rec: rec.score, reverse=True)

class TaskRecommender:
    """Ранжирование задач по энергии и времени суток"""

    def __init__(self, top_n: Optional[int] = None):
        if top_n is not None and top_n <= 0:
            raise ValidationError("top_n должен быть положительным числом")
        self.top_n = top_n

    def _limit(self, recommendations: List[Recommendation]) -> List[Recommendation]:
        if self.top_n is None:
            return recommendations
        return recommendations[:self.top_n]

    def recommend_for_energy(self, tasks: Iterable[Task],
                             energy_level: Union[str, EnergyLevel]) -> List[Recommendation]:
        """Рекомендации только по уровню энергии"""
        recommendations = []
        for task in _pending(tasks):
            result = score_for_energy(task, energy_level)
            if result is not None:
                score, reason = result
                recommendations.append(Recommendation(task=task, score=score, reason=reason))
        return self._limit(_rank(recommendations))

    def recommend_for_time_of_day(self, tasks: Iterable[Task], hour: int) -> List[Recommendation]:
        """Рекомендации только по времени суток"""
        recommendations = []
        for task in _pending(tasks):
            result = score_for_time_of_day(task, hour)
            if result is not None:
                score, reason = result
                recommendations.append(Recommendation(task=task, score=score, reason=reason))
        return self._limit(_rank(recommendations))

    def recommend(self, tasks: Iterable[Task], energy_level: Union[str, EnergyLevel],
                  hour: Optional[int] = None) -> List[Recommendation]:
        """Итоговый список: энергия плюс половина балла за время суток"""
        tasks = list(tasks)
        energy_level = validate_enum_value(energy_level, EnergyLevel, "energy_level")
        if hour is not None:
            validate_hour(hour)

        combined: Dict[str, Recommendation] = {}
        order: List[str] = []

        for task in _pending(tasks):
            result = score_for_energy(task, energy_level)
            if result is None:
                continue
            score, reason = result

            if hour is not None:
                time_result = score_for_time_of_day(task, hour)
                if time_result is not None:
                    time_score, time_reason = time_result
                    score = min(score + time_score // 2, MAX_SCORE)
                    reason = f"{reason} {time_reason}"

            if task.task_id not in combined:
                order.append(task.task_id)
            combined[task.task_id] = Recommendation(task=task, score=score, reason=reason)

        ranked = _rank([combined[task_id] for task_id in order])
        logger.debug(f"Ranked {len(ranked)} of {len(tasks)} tasks for energy={energy_level}, hour={hour}")
        return self._limit(ranked)

# ===== CONVENIENCE FUNCTIONS =====

def recommend(tasks: Iterable[Task], energy_level: Union[str, EnergyLevel],
              hour: Optional[int] = None) -> List[Recommendation]:
    """Быстрый вызов без настройки рекомендатора"""
    return TaskRecommender().recommend(tasks, energy_level, hour)

__all__ = [
    'RELEVANCE_FLOOR',
    'MAX_SCORE',
    'score_for_energy',
    'score_for_time_of_day',
    'time_band',
    'TaskRecommender',
    'recommend',
]
