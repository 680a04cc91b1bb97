from typing import Callable, Optional

from hostpanel.crud.base import Repository, StatusRepository
from hostpanel.models.ftp import FtpUser, FtpGroup


class FtpRepository(StatusRepository):
    model = FtpUser
    id_column = "userid"

    def get_for_customer(self, userid: str, customer_id: int) -> Optional[FtpUser]:
        return (
            self.db.query(FtpUser)
            .filter(FtpUser.userid == userid, FtpUser.admin_id == customer_id)
            .first()
        )


class FtpGroupRepository(Repository):
    model = FtpGroup
    id_column = "groupname"

    def prune_members(self, groupname: str, drop: Callable[[str], bool]) -> None:
        """Remove members for which `drop(member)` is true; delete the group once empty."""
        self._guard()
        group = self.get(groupname)
        if group is None:
            return
        members = [m for m in (group.members or "").split(",") if m and not drop(m)]
        if not members:
            self.db.delete(group)
        else:
            group.members = ",".join(members)
        self.db.flush()
