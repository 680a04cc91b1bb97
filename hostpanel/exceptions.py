"""Domain exceptions raised by the provisioning layer.

The API layer maps them to HTTP responses; everything else (database errors,
hook failures) propagates unchanged.
"""


class ProvisioningError(Exception):
    """Base class for provisioning errors."""


class InvalidStatusTransition(ProvisioningError):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move item from status {current!r} to {target!r}")


class MutationOutsideTransaction(ProvisioningError):
    """A status write was attempted outside a coordinator-managed transaction."""


class ItemNotFound(ProvisioningError):
    def __init__(self, kind: str, item_id):
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} with ID {item_id} not found")


class UnknownItemKind(ProvisioningError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unknown item kind: {kind}")


class ResellerNotFound(ItemNotFound):
    def __init__(self, reseller_id):
        super().__init__("reseller", reseller_id)


class ProtectedItem(ProvisioningError):
    """The item exists but may not be removed (default mail addresses)."""
