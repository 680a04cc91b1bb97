from typing import List

from hostpanel.crud.base import StatusRepository
from hostpanel.models.htaccess import Htaccess, HtaccessGroup, HtaccessUser
from hostpanel.models.status import ItemStatus


def split_ids(value) -> List[str]:
    return [v for v in (value or "").split(",") if v]


class HtaccessRepository(StatusRepository):
    model = Htaccess
    id_column = "id"

    def of_domain(self, domain_id: int) -> List[Htaccess]:
        return self.db.query(Htaccess).filter(Htaccess.dmn_id == domain_id).all()

    def get_for_domain(self, area_id: int, domain_id: int):
        return self.db.query(Htaccess).filter(Htaccess.id == area_id, Htaccess.dmn_id == domain_id).first()

    def under_path(self, domain_id: int, mount: str):
        """Criteria for protected areas located below a mount point."""
        prefix = "/" + mount.strip("/")
        return (Htaccess.dmn_id == domain_id, Htaccess.path.like(f"{prefix}%"))

    def drop_principal(self, domain_id: int, user_id=None, group_id=None) -> int:
        """Remove a user or group from every area of the domain.

        Areas left without any user or group are scheduled for deletion, the
        others for rewrite. Returns the number of areas touched.
        """
        self._guard()
        touched = 0
        for area in self.of_domain(domain_id):
            users, groups = split_ids(area.user_id), split_ids(area.group_id)
            if user_id is not None and str(user_id) in users:
                users.remove(str(user_id))
            elif group_id is not None and str(group_id) in groups:
                groups.remove(str(group_id))
            else:
                continue
            area.user_id = ",".join(users)
            area.group_id = ",".join(groups)
            area.status = (
                ItemStatus.TODELETE.value if not users and not groups else ItemStatus.TOCHANGE.value
            )
            touched += 1
        self.db.flush()
        return touched


class HtaccessGroupRepository(StatusRepository):
    model = HtaccessGroup
    id_column = "id"

    def of_domain(self, domain_id: int) -> List[HtaccessGroup]:
        return self.db.query(HtaccessGroup).filter(HtaccessGroup.dmn_id == domain_id).all()

    def get_for_domain(self, group_id: int, domain_id: int):
        return (
            self.db.query(HtaccessGroup)
            .filter(HtaccessGroup.id == group_id, HtaccessGroup.dmn_id == domain_id)
            .first()
        )

    def drop_member(self, domain_id: int, user_id: int) -> int:
        """Remove a user from the groups of the domain; each changed group goes `tochange`."""
        self._guard()
        touched = 0
        for group in self.of_domain(domain_id):
            members = split_ids(group.members)
            if str(user_id) not in members:
                continue
            members.remove(str(user_id))
            group.members = ",".join(members)
            group.status = ItemStatus.TOCHANGE.value
            touched += 1
        self.db.flush()
        return touched


class HtaccessUserRepository(StatusRepository):
    model = HtaccessUser
    id_column = "id"

    def get_for_domain(self, user_id: int, domain_id: int):
        return (
            self.db.query(HtaccessUser)
            .filter(HtaccessUser.id == user_id, HtaccessUser.dmn_id == domain_id)
            .first()
        )
