"""
Expiry sweeper.

Batch job that moves active licenses past their expiry date to expired.
"""
import logging
from typing import List, Optional

from core.domain.events import EventBus
from core.infrastructure.clock import Clock, system_clock
from core.infrastructure.events import event_bus
from core.metrics import licenses_expired_total
from licenses.domain.events import LicensesExpired
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """
    Expires overdue licenses in one bulk update per run.

    A run records a single audit event with the number of licenses it
    changed, and nothing at all when it changed none.
    """

    def __init__(
        self,
        license_repository: LicenseRepository,
        bus: Optional[EventBus] = None,
        clock: Optional[Clock] = None,
    ):
        self.license_repository = license_repository
        self.event_bus = bus or event_bus
        self.clock = clock or system_clock

    async def pending(self) -> List[License]:
        """Licenses the next run would expire."""
        return await self.license_repository.find_overdue(self.clock.today())

    async def run(self) -> int:
        """
        Run one sweep.

        Returns:
            Number of licenses transitioned to expired
        """
        now = self.clock.now()
        today = self.clock.to_date(now)
        count = await self.license_repository.expire_overdue(today, now)
        if count == 0:
            logger.debug("Expiry sweep found no overdue licenses")
            return 0

        licenses_expired_total.inc(count)
        logger.info(
            "Expired overdue licenses",
            extra={"count": count, "run_date": self.clock.format_date(today)},
        )
        await self.event_bus.publish(
            LicensesExpired(count=count, run_date=self.clock.format_date(today))
        )
        return count
