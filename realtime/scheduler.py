"""
Heartbeat Scheduler
Periodically pings every open WebSocket connection and prunes dead ones
"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
import logging
from typing import Dict

from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class HeartbeatScheduler:
    """Runs ConnectionRegistry.heartbeat on the application's event loop"""

    JOB_ID = 'websocket_heartbeat'

    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry
        self.scheduler = None
        self.is_running = False

    async def beat(self) -> int:
        pruned = await self.registry.heartbeat()
        if pruned:
            logger.info(f"Heartbeat pruned {pruned} dead connection(s); {len(self.registry)} open")
        return pruned

    def start(self, seconds: int):
        """
        Start sending heartbeats. Must be called from a running event loop.

        Args:
            seconds: Interval between heartbeats
        """
        if self.is_running:
            logger.warning("Heartbeat scheduler is already running")
            return

        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.beat,
            trigger=IntervalTrigger(seconds=seconds),
            id=self.JOB_ID,
            name=f'WebSocket Heartbeat (Every {seconds}s)',
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        self.is_running = True
        logger.info(f"✅ Heartbeat scheduler STARTED (every {seconds}s)")

    def stop(self):
        if not self.is_running:
            logger.warning("Heartbeat scheduler is not running")
            return

        self.scheduler.shutdown(wait=False)
        self.scheduler = None
        self.is_running = False
        logger.info("Heartbeat scheduler STOPPED")

    def get_status(self) -> Dict:
        job = self.scheduler.get_job(self.JOB_ID) if self.is_running else None
        return {
            'running': self.is_running,
            'next_run_time': job.next_run_time.isoformat() if job and job.next_run_time else None,
        }
