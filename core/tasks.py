"""
Celery tasks for background processing.

The expiry sweep runs here on the beat schedule.
"""
import logging

from asgiref.sync import async_to_sync

from DeviceLicenseService.celery import app
from licenses.application.services.expiry_sweeper import ExpirySweeper
from licenses.infrastructure.repositories.django_license_repository import (
    DjangoLicenseRepository,
)

logger = logging.getLogger(__name__)


@app.task(bind=True, max_retries=3)
def expire_licenses_task(self):
    """
    Expire active licenses whose expiry date has passed.

    Returns:
        Number of licenses transitioned
    """
    sweeper = ExpirySweeper(DjangoLicenseRepository())
    try:
        return async_to_sync(sweeper.run)()
    except Exception as exc:
        logger.error("Expiry sweep failed: %s", exc, exc_info=True)
        raise self.retry(exc=exc, countdown=2 ** self.request.retries)
