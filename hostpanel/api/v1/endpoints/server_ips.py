from typing import Any

from fastapi import APIRouter, Depends

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import MutationResult
from hostpanel.services.provisioning import ProvisioningService

router = APIRouter()


@router.delete("/{ip_id}", response_model=MutationResult)
def delete_server_ip(
    ip_id: int,
    identity: Identity = Depends(deps.require_admin),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_server_ip(ip_id, identity)
