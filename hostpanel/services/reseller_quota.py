"""
Reseller consumption counters (reseller_props.current_*)

The counters are derived data: they are recomputed from the reseller's
customers' domains, never incremented. Domains already scheduled for
deletion no longer count. A per-domain limit of -1 ("disabled") contributes
nothing; disk and traffic limits are summed as they are.
"""
import logging
from typing import Optional

from sqlalchemy import case, func

from hostpanel.crud import Repositories
from hostpanel.exceptions import ResellerNotFound
from hostpanel.models.account import Admin, ResellerProps
from hostpanel.models.domain import Domain
from hostpanel.models.status import ItemStatus
from hostpanel.schemas.identity import Identity
from hostpanel.schemas.provisioning import ResellerQuotaUpdate
from hostpanel.services.mutation import MutationContext, MutationCoordinator, Operation

logger = logging.getLogger("hostpanel.reseller_quota")


def _limit_sum(column):
    return func.coalesce(func.sum(case((column >= 0, column), else_=0)), 0)


class ResellerQuotaService:
    def __init__(self, repos: Repositories, coordinator: MutationCoordinator):
        self.repos = repos
        self.coordinator = coordinator

    def get(self, reseller_id: int) -> ResellerProps:
        props = self.repos.reseller_props.get(reseller_id)
        if props is None:
            raise ResellerNotFound(reseller_id)
        return props

    def compute(self, reseller_id: int) -> dict:
        """Current consumption of the reseller, from its customers' live domains."""
        row = (
            self.repos.db.query(
                func.count(Domain.domain_id).label("dmn"),
                _limit_sum(Domain.domain_subd_limit).label("sub"),
                _limit_sum(Domain.domain_alias_limit).label("als"),
                _limit_sum(Domain.domain_mailacc_limit).label("mail"),
                _limit_sum(Domain.domain_ftpacc_limit).label("ftp"),
                _limit_sum(Domain.domain_sqld_limit).label("sqld"),
                _limit_sum(Domain.domain_sqlu_limit).label("sqlu"),
                func.coalesce(func.sum(Domain.domain_disk_limit), 0).label("disk"),
                func.coalesce(func.sum(Domain.domain_traffic_limit), 0).label("traffic"),
            )
            .select_from(Domain)
            .join(Admin, Admin.admin_id == Domain.domain_admin_id)
            .filter(
                Admin.created_by == reseller_id,
                Domain.domain_status != ItemStatus.TODELETE.value,
            )
            .one()
        )
        return {
            "current_dmn_cnt": int(row.dmn),
            "current_sub_cnt": int(row.sub),
            "current_als_cnt": int(row.als),
            "current_mail_cnt": int(row.mail),
            "current_ftp_cnt": int(row.ftp),
            "current_sql_db_cnt": int(row.sqld),
            "current_sql_user_cnt": int(row.sqlu),
            "current_disk_amnt": int(row.disk),
            "current_traff_amnt": int(row.traffic),
        }

    def recalculate(self, reseller_id: int, identity: Optional[Identity] = None) -> Optional[ResellerProps]:
        """Rewrite the reseller's current_* counters.

        Joins the enclosing mutation when called from one (customer or alias
        deletion), so the counters reflect the rows written there. Returns
        None when the account has no reseller properties.
        """
        def work():
            props = self.repos.reseller_props.get(reseller_id)
            if props is None:
                logger.warning("No reseller properties for account %s; counters not updated", reseller_id)
                return None
            return self.repos.reseller_props.update_values(props, self.compute(reseller_id))

        context = MutationContext(Operation.RECALCULATE_RESELLER_QUOTA, identity, {"resellerId": reseller_id})
        return self.coordinator.run(context, work, notify=False)

    def update(
        self, reseller_id: int, values: ResellerQuotaUpdate, identity: Optional[Identity] = None
    ) -> ResellerProps:
        """Explicit edit of the max_* limits. Concurrent edits: last write wins."""
        props = self.get(reseller_id)
        changes = values.model_dump(exclude_none=True)

        def work():
            self.repos.reseller_props.update_values(props, changes)
            self.recalculate(reseller_id, identity)
            return props

        context = MutationContext(
            Operation.UPDATE_RESELLER_QUOTA, identity, {"resellerId": reseller_id, "changes": changes}
        )
        return self.coordinator.run(context, work, notify=False)
