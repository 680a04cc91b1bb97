"""
Debugger: rows the provisioning daemon left in an error state.
Administrators only.
"""
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import (
    DaemonRequestResult,
    ForceRetryResult,
    PendingCount,
    StuckItem,
    StuckReport,
)
from hostpanel.services.reconciliation import ReconciliationSweep

router = APIRouter()


@router.get("/errors", response_model=StuckReport)
def list_errors(
    _: Identity = Depends(deps.require_admin),
    sweep: ReconciliationSweep = Depends(deps.get_sweep),
) -> Any:
    items = sweep.find_all_stuck()
    return StuckReport(items=items, total=sum(len(v) for v in items.values()))


@router.get("/errors/{kind}", response_model=List[StuckItem])
def list_errors_of_kind(
    kind: str,
    _: Identity = Depends(deps.require_admin),
    sweep: ReconciliationSweep = Depends(deps.get_sweep),
) -> Any:
    return sweep.find_stuck_rows(kind)


@router.get("/pending", response_model=PendingCount)
def count_pending(
    _: Identity = Depends(deps.require_admin),
    sweep: ReconciliationSweep = Depends(deps.get_sweep),
) -> Any:
    by_kind = sweep.count_all_pending()
    return PendingCount(pending=sum(by_kind.values()), by_kind=by_kind)


@router.post("/retry/{kind}/{item_id}", response_model=ForceRetryResult)
def force_retry(
    kind: str,
    item_id: str,
    table: Optional[str] = Query(None, description="plugin items only"),
    field: Optional[str] = Query(None, description="plugin items only"),
    identity: Identity = Depends(deps.require_admin),
    sweep: ReconciliationSweep = Depends(deps.get_sweep),
) -> Any:
    """
    Flag a failed item for a new attempt.
    The daemon is not woken; use /run once every item is flagged.
    """
    new_status = sweep.force_retry(kind, item_id, table=table, field=field, identity=identity)
    return ForceRetryResult(kind=kind, item_id=item_id, status=new_status)


@router.post("/run", response_model=DaemonRequestResult)
def run_pending(
    _: Identity = Depends(deps.require_admin),
    sweep: ReconciliationSweep = Depends(deps.get_sweep),
) -> Any:
    return sweep.run_pending()
