# services/__init__.py

"""
Модуль сервисов DailyInsight Engine v1.0

Генерация отчетов, история отчетов, экспорт и планировщик автоматических отчетов.
"""

from .data_export import ExportError, export_report, export_to_file, render_text
from .report_generator import ReportGenerator
from .report_history import ReportHistory
from .report_service import ReportService, create_report_service

__all__ = [
    'ExportError',
    'export_report',
    'export_to_file',
    'render_text',
    'ReportGenerator',
    'ReportHistory',
    'ReportService',
    'create_report_service',
]
