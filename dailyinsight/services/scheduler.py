# services/scheduler.py

from typing import Optional
import logging

from apscheduler.schedulers.background import BackgroundScheduler

logger = logging.getLogger(__name__)

REPORT_CHECK_JOB_ID = "report_checks"

scheduler = BackgroundScheduler()

def start_scheduler(timezone: Optional[str] = None, target: Optional[BackgroundScheduler] = None):
    target = target if target is not None else scheduler
    if timezone:
        target.configure(timezone=timezone)
    target.start()
    logger.info("⏰ Планировщик отчетов запущен")

def shutdown_scheduler(target: Optional[BackgroundScheduler] = None, wait: bool = False):
    target = target if target is not None else scheduler
    if target.running:
        target.shutdown(wait=wait)
        logger.info("⏹️ Планировщик отчетов остановлен")

def schedule_report_checks(service, hour: int = 20, target: Optional[BackgroundScheduler] = None):
    """Каждый час с hour до конца суток проверять, не пора ли создать отчеты"""
    target = target if target is not None else scheduler
    return target.add_job(
        service.run_scheduled_check,
        'cron',
        hour=f"{hour}-23",
        minute=0,
        id=REPORT_CHECK_JOB_ID,
        replace_existing=True,
    )

def start_auto_reports(service, target: Optional[BackgroundScheduler] = None):
    """Запустить автоматические отчеты по настройкам сервиса"""
    target = target if target is not None else scheduler
    settings = service.settings
    if not settings.AUTO_REPORTS_ENABLED:
        logger.info("Автоматические отчеты отключены")
        return None
    # Часовой пояс задается до add_job, триггер берет его при создании
    target.configure(timezone=settings.TIMEZONE)
    job = schedule_report_checks(service, settings.AUTO_REPORT_HOUR, target)
    start_scheduler(target=target)
    return job
