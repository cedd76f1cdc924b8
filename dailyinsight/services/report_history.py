# services/report_history.py

import threading
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple, Union
import logging

from dailyinsight.core.models import PeriodType, ValidationError, validate_enum_value
from dailyinsight.core.schemas import MonthlyReport, WeeklyReport

logger = logging.getLogger(__name__)

AnyReport = Union[WeeklyReport, MonthlyReport]
PeriodKey = Tuple

class ReportHistory:
    """Последние N отчетов каждого типа, старые вытесняются первыми"""

    def __init__(self, weekly_limit: int = 10, monthly_limit: int = 12):
        if weekly_limit <= 0 or monthly_limit <= 0:
            raise ValidationError("Размер истории отчетов должен быть положительным")
        self._lock = threading.RLock()
        self._reports: Dict[str, Deque[AnyReport]] = {
            PeriodType.WEEKLY.value: deque(maxlen=weekly_limit),
            PeriodType.MONTHLY.value: deque(maxlen=monthly_limit),
        }

    def limit(self, period_type: Union[str, PeriodType]) -> int:
        return self._reports[validate_enum_value(period_type, PeriodType, "period_type")].maxlen

    def find(self, key: PeriodKey) -> Optional[AnyReport]:
        """Отчет за период с точным ключом"""
        with self._lock:
            for report in self._reports[key[0]]:
                if report.period_key == key:
                    return report
        return None

    def store(self, report: AnyReport) -> Optional[AnyReport]:
        """Сохранить отчет, заменив отчет за тот же период. Возвращает вытесненный отчет."""
        with self._lock:
            reports = self._reports[report.period_type]
            for existing in list(reports):
                if existing.period_key == report.period_key:
                    reports.remove(existing)

            evicted = None
            if len(reports) == reports.maxlen:
                evicted = reports[0]
                logger.info(f"🗑️ Отчет {evicted.period_label} вытеснен из истории ({report.period_type})")

            reports.append(report)
            return evicted

    def all(self, period_type: Union[str, PeriodType]) -> List[AnyReport]:
        """Отчеты от старых к новым"""
        with self._lock:
            return list(self._reports[validate_enum_value(period_type, PeriodType, "period_type")])

    def latest(self, period_type: Union[str, PeriodType]) -> Optional[AnyReport]:
        reports = self.all(period_type)
        return reports[-1] if reports else None

    def clear(self) -> None:
        with self._lock:
            for reports in self._reports.values():
                reports.clear()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(reports) for reports in self._reports.values())
