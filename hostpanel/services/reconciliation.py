"""
Reconciliation sweep (debugger)

Lists the rows the provisioning daemon left in an error state, counts the
requests still waiting for it, and lets an operator flag a failed row for a
new attempt. An error state is any status value outside the set expected for
the table: the daemon writes its failure message straight into the column.

Rows sitting in an in-progress value are never reported, however long they
have been waiting.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Protocol, Sequence

from hostpanel.crud import Repositories
from hostpanel.crud.base import StatusRepository
from hostpanel.exceptions import ItemNotFound, UnknownItemKind
from hostpanel.models.account import Admin, ACCOUNT_CUSTOMER
from hostpanel.models.plugin import Plugin
from hostpanel.models.status import ItemStatus, REQUESTABLE
from hostpanel.schemas.provisioning import DaemonRequestResult, StuckItem
from hostpanel.services.mutation import MutationContext, MutationCoordinator, Operation

logger = logging.getLogger("hostpanel.reconciliation")

S = ItemStatus

_DOMAIN_EXPECTED = frozenset({
    S.OK, S.DISABLED, S.TOADD, S.TOCHANGE, S.TORESTORE, S.TOENABLE, S.TODISABLE, S.TODELETE,
})
_HTACCESS_EXPECTED = frozenset({S.OK, S.DISABLED, S.TOADD, S.TOCHANGE, S.TODELETE})


@dataclass(frozen=True)
class TrackedTable:
    kind: str
    repo: str  # attribute name on Repositories
    name_column: str
    expected: FrozenSet[ItemStatus]
    id_type: type = int
    # extra row filter (e.g. only customer accounts in `admin`)
    scope: Optional[Callable[[], Sequence[Any]]] = None
    # extra error condition besides an unexpected status value
    error_when: Optional[Callable[[], Any]] = None

    def criteria(self) -> tuple:
        return tuple(self.scope()) if self.scope else ()


TRACKED_TABLES: Dict[str, TrackedTable] = {t.kind: t for t in (
    TrackedTable(
        "user", "admins", "admin_name",
        frozenset({S.OK, S.TOADD, S.TOCHANGE, S.TOCHANGEPWD, S.TODELETE}),
        scope=lambda: (Admin.admin_type == ACCOUNT_CUSTOMER,),
    ),
    TrackedTable("domain", "domains", "domain_name", _DOMAIN_EXPECTED),
    TrackedTable("alias", "aliases", "alias_name", _DOMAIN_EXPECTED | {S.ORDERED}),
    TrackedTable("subdomain", "subdomains", "subdomain_name", _DOMAIN_EXPECTED),
    TrackedTable("subdomain_alias", "subdomain_aliases", "subdomain_alias_name", _DOMAIN_EXPECTED),
    TrackedTable("custom_dns", "dns", "domain_dns", _DOMAIN_EXPECTED),
    TrackedTable(
        "ftp", "ftp", "userid",
        frozenset({S.OK, S.DISABLED, S.TOADD, S.TOCHANGE, S.TOENABLE, S.TODISABLE, S.TODELETE}),
        id_type=str,
    ),
    TrackedTable("mail", "mail", "mail_addr", _DOMAIN_EXPECTED | {S.ORDERED}),
    TrackedTable("htaccess", "htaccess", "auth_name", _HTACCESS_EXPECTED),
    TrackedTable("htgroup", "htgroups", "ugroup", _HTACCESS_EXPECTED),
    TrackedTable("htpasswd", "htusers", "uname", _HTACCESS_EXPECTED),
    TrackedTable("ip", "server_ips", "ip_number", frozenset({S.OK, S.TOADD, S.TOCHANGE, S.TODELETE})),
    TrackedTable(
        "plugin", "plugins", "plugin_name",
        frozenset({
            S.ENABLED, S.DISABLED, S.UNINSTALLED, S.TOINSTALL, S.TOUNINSTALL,
            S.TOUPDATE, S.TOCHANGE, S.TOENABLE, S.TODISABLE, S.TODELETE,
        }),
        error_when=lambda: Plugin.plugin_error.isnot(None),
    ),
)}

RETRY_STATUS = ItemStatus.TOCHANGE


class PluginItemSource(Protocol):
    """Items owned by a plugin, in tables the panel does not know about."""

    name: str

    def items_with_error_status(self) -> Iterable[Dict[str, Any]]:
        """Dicts with item_id, item_name, status, table and field keys."""
        ...

    def change_item_status(self, table: str, field: str, item_id: str) -> None: ...

    def count_requests(self) -> int: ...


@dataclass
class PluginSources:
    """Registry of plugin item sources, filled at startup."""
    sources: Dict[str, PluginItemSource] = field(default_factory=dict)

    def register(self, source: PluginItemSource) -> PluginItemSource:
        self.sources[source.name] = source
        return source

    def get(self, name: str) -> Optional[PluginItemSource]:
        return self.sources.get(name)

    def __iter__(self):
        return iter(self.sources.values())


def get_tracked_table(kind: str) -> TrackedTable:
    try:
        return TRACKED_TABLES[kind]
    except KeyError:
        raise UnknownItemKind(kind)


class ReconciliationSweep:
    def __init__(
        self,
        repos: Repositories,
        coordinator: MutationCoordinator,
        plugin_sources: Optional[PluginSources] = None,
    ):
        self.repos = repos
        self.coordinator = coordinator
        self.plugin_sources = plugin_sources or PluginSources()

    def _repo(self, table: TrackedTable) -> StatusRepository:
        return getattr(self.repos, table.repo)

    # ── error listing ──

    def find_stuck_rows(self, kind: str) -> List[StuckItem]:
        table = get_tracked_table(kind)
        repo = self._repo(table)
        values = [s.value for s in table.expected]
        unexpected = repo.status_attr.notin_(values)
        condition = unexpected | table.error_when() if table.error_when else unexpected

        rows = (
            self.repos.db.query(repo.model)
            .filter(*table.criteria(), condition)
            .order_by(repo.pk)
            .all()
        )
        items = []
        for row in rows:
            status = getattr(row, repo.status_column)
            if kind == "plugin" and row.plugin_error:
                status = row.plugin_error
            items.append(StuckItem(
                kind=kind,
                item_id=str(getattr(row, repo.id_column)),
                name=getattr(row, table.name_column),
                status=status,
            ))
        return items

    def find_plugin_items(self) -> List[StuckItem]:
        items = []
        for source in self.plugin_sources:
            for item in source.items_with_error_status():
                items.append(StuckItem(
                    kind=source.name,
                    item_id=str(item["item_id"]),
                    name=item.get("item_name"),
                    status=item.get("status"),
                    table=item.get("table"),
                    field=item.get("field"),
                ))
        return items

    def find_all_stuck(self) -> Dict[str, List[StuckItem]]:
        report = {kind: self.find_stuck_rows(kind) for kind in TRACKED_TABLES}
        plugin_items = self.find_plugin_items()
        if plugin_items:
            report["plugin_items"] = plugin_items
        return report

    # ── pending requests ──

    def count_pending(self, kind: str) -> int:
        table = get_tracked_table(kind)
        repo = self._repo(table)
        values = [s.value for s in REQUESTABLE]
        return (
            self.repos.db.query(repo.model)
            .filter(*table.criteria(), repo.status_attr.in_(values))
            .count()
        )

    def count_all_pending(self) -> Dict[str, int]:
        counts = {kind: self.count_pending(kind) for kind in TRACKED_TABLES}
        for source in self.plugin_sources:
            counts[f"plugin:{source.name}"] = source.count_requests()
        return counts

    # ── operator actions ──

    def force_retry(
        self,
        kind: str,
        item_id: str,
        table: Optional[str] = None,
        field: Optional[str] = None,
        identity=None,
    ) -> str:
        """Flag a failed row `tochange` so the daemon attempts it again.

        Does not wake the daemon; `run_pending` does. Returns the new status.
        """
        source = self.plugin_sources.get(kind)
        if source is not None and kind not in TRACKED_TABLES:
            if not table or not field:
                raise UnknownItemKind(kind)
            context = MutationContext(
                Operation.FORCE_RETRY, identity,
                {"kind": kind, "itemId": item_id, "table": table, "field": field},
            )
            self.coordinator.run(
                context, lambda: source.change_item_status(table, field, item_id), notify=False
            )
            logger.info("Plugin %s item %s.%s#%s flagged for a new attempt", kind, table, field, item_id)
            return RETRY_STATUS.value

        tracked = get_tracked_table(kind)
        repo = self._repo(tracked)
        try:
            row_id = tracked.id_type(item_id)
        except (TypeError, ValueError):
            raise ItemNotFound(kind, item_id)
        scope = tracked.criteria()
        if self.repos.db.query(repo.model).filter(repo.pk == row_id, *scope).first() is None:
            raise ItemNotFound(kind, item_id)

        context = MutationContext(Operation.FORCE_RETRY, identity, {"kind": kind, "itemId": item_id})
        self.coordinator.run(context, lambda: repo.force_status(row_id, RETRY_STATUS, *scope), notify=False)
        logger.info("%s #%s flagged for a new attempt", kind, item_id)
        return RETRY_STATUS.value

    def run_pending(self) -> DaemonRequestResult:
        """Wake the daemon when anything is waiting for it."""
        pending = sum(self.count_all_pending().values())
        if pending == 0:
            return DaemonRequestResult(
                pending=0, requested=False, delivered=False, message="There is no pending task"
            )

        hint = self.coordinator.notifier.notify()
        if hint:
            message = "Daemon request successful"
        else:
            message = f"Daemon request failed: {hint.detail}"
        return DaemonRequestResult(
            pending=pending, requested=True, delivered=hint.delivered, message=message
        )
