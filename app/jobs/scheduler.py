"""
Background Jobs - periodic tasks
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from datetime import datetime, timedelta
import logging

logger = logging.getLogger('main')


class JobScheduler:
    """Owns the APScheduler instance and the jobs registered on it"""

    def __init__(self):
        self.scheduler = BackgroundScheduler()
        self._jobs_registered = False

    def init_app(self, app, app_settings):
        """Register jobs for `app` and start the scheduler"""
        self._register_jobs(app, app_settings)
        self.scheduler.start()
        logger.info("Job scheduler initialized")

    def _register_jobs(self, app, app_settings):
        if self._jobs_registered:
            return

        deal_settings = app_settings["deals"]
        if deal_settings.get("sync_enabled"):
            self.scheduler.add_job(
                func=self._sync_deals_job,
                trigger=IntervalTrigger(
                    hours=deal_settings["sync_interval_hours"],
                    start_date=datetime.now() + timedelta(minutes=1),
                ),
                id='sync_free_deals',
                name='Sync free game deals',
                args=[app, deal_settings],
                max_instances=1,
                coalesce=True,
            )

        self._jobs_registered = True
        logger.info("Background jobs registered")

    def _sync_deals_job(self, app, deal_settings):
        from db import db
        from exceptions import PortalException
        from services.deal_sync import run_deal_sync

        with app.app_context():
            try:
                run_deal_sync(db.session, deal_settings)
            except PortalException as e:
                # Already logged by the client, retried on the next interval
                logger.warning(f"Scheduled deal sync failed: {e.message}")

    def get_jobs(self):
        return [
            {"id": job.id, "name": job.name, "next_run": job.next_run_time.isoformat() if job.next_run_time else None}
            for job in self.scheduler.get_jobs()
        ]

    def shutdown(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Job scheduler shutdown")
