#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyInsight Engine v1.0 - Configuration
Настройки движка аналитики для разных сред

Все значения можно переопределить переменными окружения с префиксом
INSIGHT_ (например, INSIGHT_TIMEZONE=Europe/Berlin) или файлом .env.

Версия: 1.0.0
Дата: 2025-06-20
"""

import logging
from functools import lru_cache
from pathlib import Path

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dailyinsight.utils.logger import setup_logger

class InsightSettings(BaseSettings):
    """Настройки DailyInsight Engine"""

    model_config = SettingsConfigDict(
        env_prefix="INSIGHT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== ОСНОВНЫЕ НАСТРОЙКИ =====

    ENVIRONMENT: str = Field(
        default="development",
        description="Среда выполнения (development/production/testing)"
    )

    TIMEZONE: str = Field(
        default="Europe/Moscow",
        description="Часовой пояс пользователя (имя из базы pytz)"
    )

    # ===== ЛОГИРОВАНИЕ =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Уровень логирования (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        description="Формат логов"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Формат даты в логах"
    )

    LOG_TO_FILE: bool = Field(
        default=True,
        description="Писать логи в файл с ротацией"
    )

    # ===== ПУТИ И ФАЙЛЫ =====

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Директория логов"
    )

    EXPORT_DIR: Path = Field(
        default=Path("exports"),
        description="Директория для экспорта отчетов"
    )

    # ===== ОТЧЕТЫ =====

    WEEKLY_HISTORY_LIMIT: int = Field(
        default=10,
        description="Сколько последних недельных отчетов хранить"
    )

    MONTHLY_HISTORY_LIMIT: int = Field(
        default=12,
        description="Сколько последних месячных отчетов хранить"
    )

    AUTO_REPORTS_ENABLED: bool = Field(
        default=True,
        description="Автоматически создавать отчеты в конце недели и месяца"
    )

    AUTO_REPORT_HOUR: int = Field(
        default=20,
        description="Час, начиная с которого создаются автоматические отчеты"
    )

    DAILY_FOCUS_TARGET_MINUTES: int = Field(
        default=60,
        description="Целевое время фокуса в день (минуты)"
    )

    # ===== ВАЛИДАТОРЫ =====

    @field_validator('ENVIRONMENT')
    @classmethod
    def validate_environment(cls, v):
        """Валидация среды выполнения"""
        allowed_envs = ['development', 'production', 'testing', 'staging']
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v):
        """Валидация уровня логирования"""
        allowed_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator('TIMEZONE')
    @classmethod
    def validate_timezone(cls, v):
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown TIMEZONE: {v}")
        return v

    @field_validator('WEEKLY_HISTORY_LIMIT', 'MONTHLY_HISTORY_LIMIT', 'DAILY_FOCUS_TARGET_MINUTES')
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("value must be positive")
        return v

    @field_validator('AUTO_REPORT_HOUR')
    @classmethod
    def validate_hour(cls, v):
        if not 0 <= v <= 23:
            raise ValueError("AUTO_REPORT_HOUR must be between 0 and 23")
        return v

    # ===== МЕТОДЫ КОНФИГУРАЦИИ =====

    @property
    def is_production(self) -> bool:
        """Проверка продакшен среды"""
        return self.ENVIRONMENT == "production"

    @property
    def is_development(self) -> bool:
        """Проверка среды разработки"""
        return self.ENVIRONMENT == "development"

    @property
    def is_testing(self) -> bool:
        """Проверка тестовой среды"""
        return self.ENVIRONMENT == "testing"

    @property
    def tzinfo(self):
        return pytz.timezone(self.TIMEZONE)

    def setup_logging(self) -> logging.Logger:
        """Настройка логирования"""
        log_file = self.LOGS_DIR / "insight.log" if self.LOG_TO_FILE else None
        return setup_logger(
            log_file=log_file,
            level=getattr(logging, self.LOG_LEVEL),
            fmt=self.LOG_FORMAT,
            datefmt=self.LOG_DATE_FORMAT,
            console=not self.is_production,
        )

@lru_cache()
def get_settings() -> InsightSettings:
    """Настройки из окружения (создаются один раз)"""
    return InsightSettings()
