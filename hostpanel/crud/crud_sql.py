from typing import List, Optional

from sqlalchemy import func

from hostpanel.crud.base import Repository
from hostpanel.models.sql import SqlDatabase, SqlUser


class SqlDatabaseRepository(Repository):
    model = SqlDatabase
    id_column = "sqld_id"

    def get_for_domain(self, db_id: int, domain_id: int) -> Optional[SqlDatabase]:
        return (
            self.db.query(SqlDatabase)
            .filter(SqlDatabase.sqld_id == db_id, SqlDatabase.domain_id == domain_id)
            .first()
        )

    def ids_of_domain(self, domain_id: int) -> List[int]:
        rows = self.db.query(SqlDatabase.sqld_id).filter(SqlDatabase.domain_id == domain_id).all()
        return [r.sqld_id for r in rows]


class SqlUserRepository(Repository):
    model = SqlUser
    id_column = "sqlu_id"

    def get_with_database(self, user_id: int, domain_id: int):
        return (
            self.db.query(SqlUser, SqlDatabase)
            .join(SqlDatabase, SqlDatabase.sqld_id == SqlUser.sqld_id)
            .filter(SqlUser.sqlu_id == user_id, SqlDatabase.domain_id == domain_id)
            .first()
        )

    def ids_of_database(self, db_id: int) -> List[int]:
        rows = self.db.query(SqlUser.sqlu_id).filter(SqlUser.sqld_id == db_id).all()
        return [r.sqlu_id for r in rows]

    def count_grants(self, name: str, host: str) -> int:
        """Rows sharing the same physical (user, host) account."""
        return (
            self.db.query(func.count(SqlUser.sqlu_id))
            .filter(SqlUser.sqlu_name == name, SqlUser.sqlu_host == host)
            .scalar()
            or 0
        )
