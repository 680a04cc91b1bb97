"""
Item status vocabulary shared by every provisioned entity.

Status columns are plain strings in SQL because the provisioning daemon
writes its failure messages straight into them. The web tier only ever
writes ItemStatus members; anything read back that is not a member is an
error state.
"""
import enum
from typing import Dict, FrozenSet, Optional

from hostpanel.exceptions import InvalidStatusTransition


class ItemStatus(str, enum.Enum):
    OK = "ok"
    DISABLED = "disabled"
    TOADD = "toadd"
    TOCHANGE = "tochange"
    TOCHANGEPWD = "tochangepwd"
    TODELETE = "todelete"
    TOENABLE = "toenable"
    TODISABLE = "todisable"
    TORESTORE = "torestore"
    ORDERED = "ordered"
    # plugin lifecycle
    TOINSTALL = "toinstall"
    TOUNINSTALL = "touninstall"
    TOUPDATE = "toupdate"
    ENABLED = "enabled"
    UNINSTALLED = "uninstalled"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ItemStatus"]:
        """Return the matching member, or None when the value is an error string."""
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL

    @property
    def is_in_progress(self) -> bool:
        return self in IN_PROGRESS


TERMINAL: FrozenSet[ItemStatus] = frozenset({
    ItemStatus.OK,
    ItemStatus.DISABLED,
    ItemStatus.ENABLED,
    ItemStatus.UNINSTALLED,
})

# Daemon-owned values: the worker is expected to move these to a terminal value.
IN_PROGRESS: FrozenSet[ItemStatus] = frozenset({
    ItemStatus.TOADD,
    ItemStatus.TOCHANGE,
    ItemStatus.TOCHANGEPWD,
    ItemStatus.TODELETE,
    ItemStatus.TOENABLE,
    ItemStatus.TODISABLE,
    ItemStatus.TORESTORE,
    ItemStatus.TOINSTALL,
    ItemStatus.TOUNINSTALL,
    ItemStatus.TOUPDATE,
})

# Values counted as pending daemon work by the debugger.
REQUESTABLE: FrozenSet[ItemStatus] = IN_PROGRESS


# Forward transitions the web tier may schedule. Every "in-progress -> terminal"
# move belongs to the daemon and is deliberately absent.
WEB_TRANSITIONS: Dict[Optional[ItemStatus], FrozenSet[ItemStatus]] = {
    None: frozenset({ItemStatus.TOADD, ItemStatus.ORDERED}),
    ItemStatus.ORDERED: frozenset({ItemStatus.TOADD}),
    ItemStatus.OK: frozenset({
        ItemStatus.TOCHANGE,
        ItemStatus.TOCHANGEPWD,
        ItemStatus.TODELETE,
        ItemStatus.TODISABLE,
        ItemStatus.TORESTORE,
    }),
    ItemStatus.DISABLED: frozenset({
        ItemStatus.TOCHANGE,
        ItemStatus.TODELETE,
        ItemStatus.TOENABLE,
    }),
    # plugins
    ItemStatus.UNINSTALLED: frozenset({ItemStatus.TOINSTALL, ItemStatus.TODELETE}),
    ItemStatus.ENABLED: frozenset({
        ItemStatus.TOCHANGE,
        ItemStatus.TOUPDATE,
        ItemStatus.TODISABLE,
    }),
}


def can_transition(current: Optional[ItemStatus], target: ItemStatus) -> bool:
    return target in WEB_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: Optional[str], target: ItemStatus) -> None:
    """Raise InvalidStatusTransition unless the web tier may move `current` to `target`.

    `current` is the raw column value; None stands for "row does not exist yet".
    """
    parsed = ItemStatus.parse(current)
    if current is not None and parsed is None:
        raise InvalidStatusTransition(current, target.value)
    if not can_transition(parsed, target):
        raise InvalidStatusTransition(current, target.value)


_LABELS = {
    ItemStatus.OK: "Ok",
    ItemStatus.ENABLED: "Ok",
    ItemStatus.TOADD: "Addition in progress...",
    ItemStatus.TOCHANGE: "Modification in progress...",
    ItemStatus.TORESTORE: "Modification in progress...",
    ItemStatus.TOCHANGEPWD: "Modification in progress...",
    ItemStatus.TOUPDATE: "Modification in progress...",
    ItemStatus.TODELETE: "Deletion in progress...",
    ItemStatus.DISABLED: "Deactivated",
    ItemStatus.UNINSTALLED: "Uninstalled",
    ItemStatus.TOENABLE: "Activation in progress...",
    ItemStatus.TODISABLE: "Deactivation in progress...",
    ItemStatus.ORDERED: "Awaiting for approval",
    ItemStatus.TOINSTALL: "Installation in progress...",
    ItemStatus.TOUNINSTALL: "Uninstallation in progress...",
}


def humanize_status(value: Optional[str], show_error: bool = False) -> str:
    """Operator-facing label for a raw status column value."""
    parsed = ItemStatus.parse(value)
    if parsed is None:
        return value if (show_error and value) else "Unexpected error"
    return _LABELS[parsed]
