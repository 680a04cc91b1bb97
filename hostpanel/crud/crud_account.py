from typing import Any, Dict, Optional, Tuple

from hostpanel.crud.base import Repository, StatusRepository
from hostpanel.models.account import Admin, ResellerProps, ACCOUNT_CUSTOMER
from hostpanel.models.domain import Domain


class AdminRepository(StatusRepository):
    model = Admin
    id_column = "admin_id"
    status_column = "admin_status"

    def get_customer_with_domain(
        self, customer_id: int, created_by: Optional[int] = None
    ) -> Optional[Tuple[Admin, Domain]]:
        q = (
            self.db.query(Admin, Domain)
            .join(Domain, Domain.domain_admin_id == Admin.admin_id)
            .filter(Admin.admin_id == customer_id, Admin.admin_type == ACCOUNT_CUSTOMER)
        )
        if created_by is not None:
            q = q.filter(Admin.created_by == created_by)
        return q.first()


class ResellerPropsRepository(Repository):
    model = ResellerProps
    id_column = "reseller_id"

    def update_values(self, props: ResellerProps, values: Dict[str, Any]) -> ResellerProps:
        self._guard()
        for field, value in values.items():
            setattr(props, field, value)
        self.db.flush()
        return props
