from typing import Any

from fastapi import APIRouter, Depends

from hostpanel.api import deps
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import MutationResult
from hostpanel.services.provisioning import ProvisioningService

router = APIRouter()


# ═══════════════════════════════════════════
#  Customer surface
# ═══════════════════════════════════════════

@router.delete("/aliases/{alias_id}", response_model=MutationResult)
def delete_domain_alias(
    alias_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_domain_alias(identity.effective_account_id, alias_id, identity)


@router.delete("/subdomains/{subdomain_id}", response_model=MutationResult)
def delete_subdomain(
    subdomain_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_subdomain(identity.effective_account_id, subdomain_id, identity)


@router.delete("/subdomain-aliases/{subdomain_alias_id}", response_model=MutationResult)
def delete_subdomain_alias(
    subdomain_alias_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.delete_subdomain_alias(identity.effective_account_id, subdomain_alias_id, identity)


@router.delete("/dns/{dns_id}", response_model=MutationResult)
def delete_custom_dns(
    dns_id: int,
    identity: Identity = Depends(deps.require_customer),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    """Only records the daemon has finished with (ok / disabled) can be deleted."""
    return service.delete_custom_dns(identity.effective_account_id, dns_id, identity)


# ═══════════════════════════════════════════
#  Alias orders (reseller surface)
# ═══════════════════════════════════════════

@router.post("/alias-orders/{alias_id}/approve", response_model=MutationResult)
def approve_alias_order(
    alias_id: int,
    identity: Identity = Depends(deps.require_reseller_or_admin),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.approve_alias_order(alias_id, identity)


@router.delete("/alias-orders/{alias_id}", response_model=MutationResult)
def reject_alias_order(
    alias_id: int,
    identity: Identity = Depends(deps.require_reseller_or_admin),
    service: ProvisioningService = Depends(deps.get_provisioning),
) -> Any:
    return service.reject_alias_order(alias_id, identity)
