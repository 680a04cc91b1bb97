from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from hostpanel.crud import Repositories
from hostpanel.db.session import SessionLocal
from hostpanel.schemas.identity import Identity, IdentityKind
from hostpanel.services.daemon import DaemonNotifier
from hostpanel.services.mutation import MutationCoordinator, MutationHooks
from hostpanel.services.provisioning import ProvisioningService
from hostpanel.services.reconciliation import PluginSources, ReconciliationSweep
from hostpanel.services.reseller_quota import ResellerQuotaService
from hostpanel.services.sql_admin import MysqlServerAdmin, SqlServerAdmin


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ═══════════════════════════════════════════
#  Identity (set by the upstream authentication layer)
# ═══════════════════════════════════════════

def get_identity(
    x_account_id: Optional[int] = Header(None),
    x_account_kind: Optional[str] = Header(None),
    x_effective_account_id: Optional[int] = Header(None),
) -> Identity:
    if x_account_id is None or x_account_kind is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing account headers")
    try:
        return Identity(
            acting_account_id=x_account_id,
            effective_account_id=x_effective_account_id or x_account_id,
            kind=x_account_kind,
        )
    except ValidationError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid account identity")


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.kind != IdentityKind.ADMIN:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return identity


def require_reseller_or_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.kind not in (IdentityKind.ADMIN, IdentityKind.RESELLER):
        raise HTTPException(status_code=403, detail="Reseller or administrator access required")
    return identity


def require_customer(identity: Identity = Depends(get_identity)) -> Identity:
    """Customer surface: a customer, or an admin/reseller signed in as one."""
    if identity.kind != IdentityKind.CUSTOMER and not identity.is_impersonating:
        raise HTTPException(status_code=403, detail="Customer access required")
    return identity


# ═══════════════════════════════════════════
#  Services (one set per request)
# ═══════════════════════════════════════════

def get_repos(db: Session = Depends(get_db)) -> Repositories:
    return Repositories(db)


def get_notifier() -> DaemonNotifier:
    return DaemonNotifier()


def get_coordinator(
    request: Request,
    db: Session = Depends(get_db),
    notifier: DaemonNotifier = Depends(get_notifier),
) -> MutationCoordinator:
    hooks = getattr(request.app.state, "mutation_hooks", None) or MutationHooks()
    return MutationCoordinator(db, hooks, notifier)


def get_sql_admin(db: Session = Depends(get_db)) -> SqlServerAdmin:
    return MysqlServerAdmin(db)


def get_provisioning(
    repos: Repositories = Depends(get_repos),
    coordinator: MutationCoordinator = Depends(get_coordinator),
    sql_admin: SqlServerAdmin = Depends(get_sql_admin),
) -> ProvisioningService:
    return ProvisioningService(repos, coordinator, sql_admin)


def get_sweep(
    request: Request,
    repos: Repositories = Depends(get_repos),
    coordinator: MutationCoordinator = Depends(get_coordinator),
) -> ReconciliationSweep:
    sources = getattr(request.app.state, "plugin_sources", None) or PluginSources()
    return ReconciliationSweep(repos, coordinator, sources)


def get_quota_service(
    repos: Repositories = Depends(get_repos),
    coordinator: MutationCoordinator = Depends(get_coordinator),
) -> ResellerQuotaService:
    return ResellerQuotaService(repos, coordinator)
