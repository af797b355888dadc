import logging

from celery import shared_task

from .services import purge_expired_bugs as purge

log = logging.getLogger(__name__)


@shared_task
def purge_expired_bugs():
    try:
        return purge()
    except Exception:
        # 다음 주기에 다시 시도
        log.exception("Expired bug sweep failed")
        return 0
