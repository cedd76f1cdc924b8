# services/data_export.py

from pathlib import Path
from typing import List, Union
import logging

from dailyinsight.core.models import ExportFormat, ValidationError, validate_enum_value
from dailyinsight.core.schemas import MonthlyReport, WeeklyReport

logger = logging.getLogger(__name__)

AnyReport = Union[WeeklyReport, MonthlyReport]

class ExportError(Exception):
    """Не удалось экспортировать отчет"""
    pass

def _number(value: float) -> str:
    return f"{value:g}"

def render_json(report: AnyReport) -> str:
    return report.model_dump_json(indent=2)

def render_text(report: AnyReport) -> str:
    """Текстовая версия отчета. Одинаковый отчет всегда дает одинаковый текст."""
    weekly = report.period_type == "weekly"
    summary = report.summary
    hours, minutes = divmod(summary.total_focus_minutes, 60)
    lines: List[str] = [
        f"# {'Недельный' if weekly else 'Месячный'} отчет",
        f"Период: {report.period_label}",
        f"Создан: {report.generated_at.strftime('%d.%m.%Y %H:%M')}",
        f"Достоверность данных: {report.confidence_level}%",
        "",
        "## Итоги",
        f"- Выполнено задач: {summary.tasks_completed} из {summary.tasks_planned} ({_number(summary.completion_rate)}%)",
        f"- Время в фокусе: {hours} ч {minutes} мин",
        f"- Помидоров: {summary.pomodoros_completed}",
        f"- Средняя энергия: {_number(summary.average_energy_level)}/5",
    ]
    if not weekly:
        lines.append(f"- Текущая серия: {summary.streak_days} дн., лучшая: {summary.longest_streak} дн.")
    lines.append("")

    if report.achievements:
        lines.append("## Достижения")
        for achievement in report.achievements:
            lines.append(f"- {achievement.icon} {achievement.title}: {achievement.description}")
        lines.append("")

    if report.improvements:
        lines.append("## Зоны роста")
        for area in report.improvements:
            lines.append(f"- {area.title} ({area.current_score}/{area.target_score}): {area.description}")
            for suggestion in area.suggestions:
                lines.append(f"  - {suggestion}")
        lines.append("")

    lines.append("## Мотивация")
    lines.append(report.motivational_message)
    lines.append("")

    if report.insights.recommendations:
        lines.append("## Рекомендации")
        for recommendation in report.insights.recommendations:
            lines.append(f"- {recommendation}")
        lines.append("")

    return "\n".join(lines)

def export_report(report: AnyReport, fmt: Union[str, ExportFormat] = ExportFormat.JSON) -> str:
    """Отчет в виде JSON или текста"""
    try:
        fmt = validate_enum_value(fmt, ExportFormat, "format")
    except ValidationError as e:
        raise ExportError(str(e)) from e
    if fmt == ExportFormat.JSON.value:
        return render_json(report)
    return render_text(report)

def export_to_file(report: AnyReport, export_dir: Path, fmt: Union[str, ExportFormat] = ExportFormat.JSON) -> Path:
    content = export_report(report, fmt)
    extension = "json" if validate_enum_value(fmt, ExportFormat) == ExportFormat.JSON.value else "txt"
    filename = Path(export_dir) / f"report-{report.report_id}.{extension}"
    try:
        filename.parent.mkdir(parents=True, exist_ok=True)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        logger.error(f"❌ Не удалось сохранить отчет {report.report_id}: {e}")
        raise ExportError(f"Не удалось сохранить отчет в {filename}: {e}") from e
    logger.info(f"💾 Отчет сохранен: {filename}")
    return filename
