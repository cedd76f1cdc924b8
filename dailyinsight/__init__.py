"""
DailyInsight Engine v1.0

Рекомендации задач, достижения с уровнями и недельные/месячные отчеты
по истории продуктивности пользователя.
"""

__version__ = "1.0.0"

from dailyinsight.core.achievements import AchievementFactory, calculate_level, total_points
from dailyinsight.core.models import ActivityHistory, ValidationError
from dailyinsight.core.recommendations import TaskRecommender, recommend

__all__ = [
    '__version__',
    'AchievementFactory',
    'ActivityHistory',
    'TaskRecommender',
    'ValidationError',
    'calculate_level',
    'recommend',
    'total_points',
]
