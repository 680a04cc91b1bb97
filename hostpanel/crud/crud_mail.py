from typing import List

from hostpanel.crud.base import StatusRepository
from hostpanel.models.mail import MailUser
from hostpanel.models.status import ItemStatus

NO_FORWARD = "_no_"


class MailRepository(StatusRepository):
    model = MailUser
    id_column = "mail_id"

    def get_for_domain(self, mail_id: int, domain_id: int):
        return (
            self.db.query(MailUser)
            .filter(MailUser.mail_id == mail_id, MailUser.domain_id == domain_id)
            .first()
        )

    def forwarding_to(self, address: str, exclude_id: int) -> List[MailUser]:
        """Forward and catch-all accounts that list `address` as a target."""
        like = f"%{address}%"
        candidates = (
            self.db.query(MailUser)
            .filter(
                MailUser.mail_id != exclude_id,
                (MailUser.mail_acc.like(like)) | (MailUser.mail_forward.like(like)),
            )
            .all()
        )
        return [m for m in candidates if address in _targets(m)]

    def drop_target(self, address: str, exclude_id: int) -> int:
        """Remove `address` from every forward or catch-all list.

        An account whose list becomes empty is scheduled for deletion, the
        others for rewrite.
        """
        self._guard()
        touched = 0
        for account in self.forwarding_to(address, exclude_id):
            targets = [t for t in _targets(account) if t != address]
            if account.mail_forward in (None, NO_FORWARD):
                account.mail_acc = ",".join(targets)  # catch-all
            else:
                account.mail_forward = ",".join(targets)
            account.status = (ItemStatus.TOCHANGE if targets else ItemStatus.TODELETE).value
            touched += 1
        self.db.flush()
        return touched

    def set_pop_active(self, *criteria, active: bool) -> int:
        self._guard()
        return (
            self.db.query(MailUser)
            .filter(*criteria)
            .update({MailUser.po_active: "yes" if active else "no"}, synchronize_session="fetch")
        )


def _targets(account: MailUser) -> List[str]:
    raw = account.mail_acc if account.mail_forward in (None, NO_FORWARD) else account.mail_forward
    return [t.strip() for t in (raw or "").split(",") if t.strip()]
