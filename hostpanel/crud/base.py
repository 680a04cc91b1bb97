"""
Repository base for tables that carry a provisioning status column.

Repositories are built per session (see `Repositories`) and hold no state
beyond it. Every write checks that the session is inside a mutation opened
by the MutationCoordinator.
"""
from typing import Any, Optional, Type

from sqlalchemy.orm import Session

from hostpanel.db.base_class import Base
from hostpanel.exceptions import MutationOutsideTransaction
from hostpanel.models.status import ItemStatus, ensure_transition

# Session.info key set by the MutationCoordinator while `work` runs
MUTATION_FLAG = "hostpanel.mutation"


def in_mutation(db: Session) -> bool:
    return bool(db.info.get(MUTATION_FLAG))


class Repository:
    model: Type[Base]
    id_column: str

    def __init__(self, db: Session):
        self.db = db

    def _guard(self) -> None:
        if not in_mutation(self.db):
            raise MutationOutsideTransaction(
                f"write to {self.model.__tablename__} outside of a provisioning mutation"
            )

    @property
    def pk(self):
        return getattr(self.model, self.id_column)

    def get(self, item_id: Any) -> Optional[Any]:
        return self.db.query(self.model).filter(self.pk == item_id).first()

    def delete_where(self, *criteria) -> int:
        self._guard()
        return self.db.query(self.model).filter(*criteria).delete(synchronize_session="fetch")


class StatusRepository(Repository):
    status_column: str = "status"

    @property
    def status_attr(self):
        return getattr(self.model, self.status_column)

    def status_of(self, item) -> Optional[ItemStatus]:
        return ItemStatus.parse(getattr(item, self.status_column))

    def flag(self, *criteria, status: ItemStatus) -> int:
        """Bulk status write for every row matching `criteria` (cascade writes)."""
        self._guard()
        return (
            self.db.query(self.model)
            .filter(*criteria)
            .update({self.status_attr: status.value}, synchronize_session="fetch")
        )

    def schedule(self, item, target: ItemStatus) -> None:
        """Single-row forward transition, validated against the state machine."""
        self._guard()
        ensure_transition(getattr(item, self.status_column), target)
        setattr(item, self.status_column, target.value)
        self.db.flush()

    def force_status(self, item_id: Any, status: ItemStatus, *criteria) -> int:
        """Unconditional rewrite; only the debugger retry path uses this."""
        return self.flag(self.pk == item_id, *criteria, status=status)
