from typing import Any

from fastapi import APIRouter, Depends

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import MutationResult
from hostpanel.services.provisioning import ProvisioningService

router = APIRouter()


@router.delete("/databases/{db_id}", response_model=MutationResult)
def delete_sql_database(
    db_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    """Drop the database and its users right away; the daemon is not involved."""
    return service.delete_sql_database(identity.effective_account_id, db_id, identity)


@router.delete("/users/{user_id}", response_model=MutationResult)
def delete_sql_user(
    user_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_sql_user(identity.effective_account_id, user_id, identity)
