import logging
from typing import Dict

from sqlalchemy.exc import OperationalError

from hostpanel.celery_app import celery_app
from hostpanel.crud import Repositories
from hostpanel.db.session import SessionLocal
from hostpanel.middleware.metrics import STUCK_ITEMS
from hostpanel.services.mutation import MutationCoordinator
from hostpanel.services.reconciliation import ReconciliationSweep

logger = logging.getLogger("hostpanel.tasks.reconcile")


def sweep(db) -> Dict[str, int]:
    """Report every stuck row and publish the per-kind gauge. Returns counts by kind."""
    reconciliation = ReconciliationSweep(Repositories(db), MutationCoordinator(db))
    counts = {}
    for kind, items in reconciliation.find_all_stuck().items():
        counts[kind] = len(items)
        STUCK_ITEMS.labels(kind=kind).set(len(items))
        for item in items:
            logger.warning("Stuck %s #%s (%s): %s", kind, item.item_id, item.name, item.status)
    return counts


@celery_app.task(bind=True, max_retries=3)
def sweep_stuck_items(self):
    db = SessionLocal()
    try:
        counts = sweep(db)
        total = sum(counts.values())
        if total:
            logger.warning("Debugger sweep: %d item(s) in error state", total)
        else:
            logger.info("Debugger sweep: no error found")
        return {"status": "ok", "total": total, "by_kind": counts}
    except OperationalError as exc:
        logger.error("Debugger sweep failed: %s", exc)
        raise self.retry(exc=exc, countdown=60)
    finally:
        db.close()
