from typing import Any

from fastapi import APIRouter, Depends

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import MutationResult, StatusChangeRequest
from hostpanel.services.provisioning import ProvisioningService

router = APIRouter()


@router.delete("/{customer_id}", response_model=MutationResult)
def delete_customer(
    customer_id: int,
    identity: Identity = Depends(deps.require_reseller_or_admin),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    """
    Schedule deletion of a customer and everything it owns.
    - SQL databases and users are removed immediately
    - every other object goes `todelete` for the daemon
    - resellers may only delete their own customers
    """
    return service.delete_customer(customer_id, identity)


@router.post("/{customer_id}/status", response_model=MutationResult)
def change_customer_status(
    customer_id: int,
    body: StatusChangeRequest,
    identity: Identity = Depends(deps.require_reseller_or_admin),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    """Activate or deactivate a customer's hosting objects."""
    return service.change_customer_status(customer_id, body.action == "activate", identity)
