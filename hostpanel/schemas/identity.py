from enum import Enum
from pydantic import BaseModel, ConfigDict, model_validator


class IdentityKind(str, Enum):
    ADMIN = "admin"
    RESELLER = "reseller"
    CUSTOMER = "customer"


class Identity(BaseModel):
    """Who is acting, and on whose behalf.

    Resolved once per request. `effective_account_id` differs from
    `acting_account_id` only while an administrator or reseller is signed in
    as one of its customers.
    """
    model_config = ConfigDict(frozen=True)

    acting_account_id: int
    effective_account_id: int
    kind: IdentityKind

    @model_validator(mode="after")
    def _customers_cannot_impersonate(self) -> "Identity":
        if self.kind == IdentityKind.CUSTOMER and self.is_impersonating:
            raise ValueError("customer identities cannot act on behalf of another account")
        return self

    @classmethod
    def direct(cls, account_id: int, kind: IdentityKind) -> "Identity":
        return cls(acting_account_id=account_id, effective_account_id=account_id, kind=kind)

    @property
    def is_impersonating(self) -> bool:
        return self.acting_account_id != self.effective_account_id

    def __str__(self) -> str:
        if self.is_impersonating:
            return f"{self.kind.value}#{self.acting_account_id} as #{self.effective_account_id}"
        return f"{self.kind.value}#{self.acting_account_id}"
