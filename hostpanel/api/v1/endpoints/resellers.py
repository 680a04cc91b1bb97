from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity, IdentityKind
from hostpanel.schemas.provisioning import ResellerQuota, ResellerQuotaUpdate
from hostpanel.services.reseller_quota import ResellerQuotaService

router = APIRouter()


@router.get("/{reseller_id}/quota", response_model=ResellerQuota)
def get_reseller_quota(
    reseller_id: int,
    identity: Identity = Depends(deps.require_reseller_or_admin),
    quota: ResellerQuotaService = Depends(deps.get_quota_service),
) -> Any:
    if identity.kind == IdentityKind.RESELLER and identity.acting_account_id != reseller_id:
        raise HTTPException(status_code=403, detail="Resellers can only view their own limits")
    return quota.get(reseller_id)


@router.patch("/{reseller_id}/quota", response_model=ResellerQuota)
def update_reseller_quota(
    reseller_id: int,
    body: ResellerQuotaUpdate,
    identity: Identity = Depends(deps.require_admin),
    quota: ResellerQuotaService = Depends(deps.get_quota_service),
) -> Any:
    """
    Edit the reseller's max_* limits.
    Concurrent edits are not detected: the last write wins.
    """
    return quota.update(reseller_id, body, identity)


@router.post("/{reseller_id}/quota/recalculate", response_model=ResellerQuota)
def recalculate_reseller_quota(
    reseller_id: int,
    identity: Identity = Depends(deps.require_admin),
    quota: ResellerQuotaService = Depends(deps.get_quota_service),
) -> Any:
    quota.get(reseller_id)
    return quota.recalculate(reseller_id, identity)
