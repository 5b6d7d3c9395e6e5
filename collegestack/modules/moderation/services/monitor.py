"""
Background re-evaluation of unanswered posts.

The monitor is scheduled on the application's event loop and runs each check
in the threadpool. It re-checks the stale set every refresh interval and
publishes UNANSWERED_POSTS_CHANGED whenever the set of flagged post ids
differs from the previous check. A failed check is logged and retried on the
next tick.
"""
import asyncio
import logging
from typing import Callable, FrozenSet, Optional

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from collegestack.core.config import settings
from collegestack.core.events import SessionEvents, session_events, UNANSWERED_POSTS_CHANGED
from collegestack.db.session import SessionLocal
from collegestack.modules.moderation.services.alerts import find_unanswered_posts

logger = logging.getLogger("app")


class UnansweredPostMonitor:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        events: SessionEvents = session_events,
        interval_seconds: Optional[float] = None,
    ):
        self.session_factory = session_factory
        self.events = events
        self.interval_seconds = interval_seconds or settings.UNANSWERED_REFRESH_SECONDS
        self.flagged: FrozenSet[str] = frozenset()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def check_once(self) -> bool:
        """Re-evaluate the stale set; True when it changed and an event was published"""
        db = self.session_factory()
        try:
            posts = find_unanswered_posts(db)
        finally:
            db.close()

        flagged = frozenset(p.post_id for p in posts)
        if flagged == self.flagged:
            return False

        self.flagged = flagged
        logger.info(f"Unanswered posts changed: {len(flagged)} flagged")
        self.events.publish(UNANSWERED_POSTS_CHANGED, {
            "count": len(posts),
            "post_ids": [p.post_id for p in posts],
        })
        return True

    async def _run(self) -> None:
        while True:
            try:
                # Queries are synchronous, keep them off the event loop
                await run_in_threadpool(self.check_once)
            except Exception:
                logger.exception("Unanswered post check failed")
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info(f"Unanswered post monitor started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if not self._task:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Unanswered post monitor ended with an error")
        self._task = None
        logger.info("Unanswered post monitor stopped")


unanswered_monitor = UnansweredPostMonitor()
