"""
Provisioning mutation coordinator

Wraps one logical operation ("delete customer", "delete alias", ...) in a
single database transaction:

    before hooks -> work -> after hooks -> COMMIT -> daemon wake-up

Any exception raised by a hook or by the work rolls the whole transaction
back and is re-raised unchanged. The daemon is only woken after a successful
commit, and its failure never touches the committed rows.
"""
import enum
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.orm import Session

from hostpanel.crud.base import MUTATION_FLAG, in_mutation
from hostpanel.middleware.metrics import MUTATIONS
from hostpanel.schemas.identity import Identity
from hostpanel.services.daemon import DaemonNotifier, WakeupHint

logger = logging.getLogger("hostpanel.mutation")

T = TypeVar("T")


class Operation(str, enum.Enum):
    DELETE_CUSTOMER = "delete_customer"
    CHANGE_DOMAIN_STATUS = "change_domain_status"
    DELETE_DOMAIN_ALIAS = "delete_domain_alias"
    APPROVE_ALIAS_ORDER = "approve_alias_order"
    REJECT_ALIAS_ORDER = "reject_alias_order"
    DELETE_SUBDOMAIN = "delete_subdomain"
    DELETE_SUBDOMAIN_ALIAS = "delete_subdomain_alias"
    DELETE_MAIL = "delete_mail"
    DELETE_FTP = "delete_ftp"
    DELETE_CUSTOM_DNS = "delete_custom_dns"
    DELETE_HTACCESS = "delete_htaccess"
    DELETE_HTGROUP = "delete_htgroup"
    DELETE_HTUSER = "delete_htuser"
    DELETE_SQL_DATABASE = "delete_sql_database"
    DELETE_SQL_USER = "delete_sql_user"
    DELETE_SERVER_IP = "delete_server_ip"
    UPDATE_RESELLER_QUOTA = "update_reseller_quota"
    RECALCULATE_RESELLER_QUOTA = "recalculate_reseller_quota"
    FORCE_RETRY = "force_retry"


@dataclass
class MutationContext:
    operation: Operation
    identity: Optional[Identity] = None
    payload: Dict[str, Any] = field(default_factory=dict)


Hook = Callable[[Session, MutationContext], None]


class MutationHooks:
    """Before/after callbacks per operation, registered once at startup."""

    def __init__(self):
        self._before: Dict[Operation, List[Hook]] = defaultdict(list)
        self._after: Dict[Operation, List[Hook]] = defaultdict(list)

    def before(self, operation: Operation, hook: Hook) -> Hook:
        self._before[operation].append(hook)
        return hook

    def after(self, operation: Operation, hook: Hook) -> Hook:
        self._after[operation].append(hook)
        return hook

    def run_before(self, db: Session, context: MutationContext) -> None:
        for hook in self._before.get(context.operation, ()):
            hook(db, context)

    def run_after(self, db: Session, context: MutationContext) -> None:
        for hook in self._after.get(context.operation, ()):
            hook(db, context)


class MutationCoordinator:
    def __init__(
        self,
        db: Session,
        hooks: Optional[MutationHooks] = None,
        notifier: Optional[DaemonNotifier] = None,
    ):
        self.db = db
        self.hooks = hooks or MutationHooks()
        self.notifier = notifier or DaemonNotifier()
        self.last_wakeup: Optional[WakeupHint] = None

    def run(self, context: MutationContext, work: Callable[[], T], notify: bool = True) -> T:
        """Run `work` atomically. Nested calls join the enclosing transaction."""
        if in_mutation(self.db):
            self.hooks.run_before(self.db, context)
            result = work()
            self.hooks.run_after(self.db, context)
            return result

        self.db.info[MUTATION_FLAG] = True
        try:
            self.hooks.run_before(self.db, context)
            result = work()
            self.hooks.run_after(self.db, context)
            self.db.commit()
        except Exception as exc:
            self.db.rollback()
            MUTATIONS.labels(operation=context.operation.value, outcome="rolled_back").inc()
            logger.error(
                "%s: %s failed, transaction rolled back: %s",
                context.identity or "system", context.operation.value, exc,
            )
            raise
        finally:
            self.db.info.pop(MUTATION_FLAG, None)

        MUTATIONS.labels(operation=context.operation.value, outcome="committed").inc()
        logger.info(
            "%s: %s committed %s",
            context.identity or "system", context.operation.value, context.payload,
        )

        if notify:
            self.last_wakeup = self.notifier.notify()
        return result
