from typing import Any

from fastapi import APIRouter, Depends

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import MutationResult
from hostpanel.services.provisioning import ProvisioningService

router = APIRouter()


@router.delete("/mail/{mail_id}", response_model=MutationResult)
def delete_mail(
    mail_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    """
    Schedule deletion of a mail account.
    Forward and catch-all accounts listing its address are rewritten, or
    deleted when it was their only target.
    """
    return service.delete_mail(identity.effective_account_id, mail_id, identity)


@router.delete("/ftp/{userid}", response_model=MutationResult)
def delete_ftp(
    userid: str,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_ftp(identity.effective_account_id, userid, identity)


@router.delete("/htaccess/areas/{area_id}", response_model=MutationResult)
def delete_protected_area(
    area_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_htaccess(identity.effective_account_id, area_id, identity)


@router.delete("/htaccess/groups/{group_id}", response_model=MutationResult)
def delete_htaccess_group(
    group_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_htgroup(identity.effective_account_id, group_id, identity)


@router.delete("/htaccess/users/{user_id}", response_model=MutationResult)
def delete_htaccess_user(
    user_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_htuser(identity.effective_account_id, user_id, identity)
