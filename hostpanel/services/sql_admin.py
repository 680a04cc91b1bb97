"""
Synchronous deletion of customer SQL databases and SQL users.

Unlike every other hosting object, SQL databases and users are not handed to
the provisioning daemon: the panel holds database-administrator privileges
on the SQL server and removes them itself, inside the calling transaction.
No status value is ever written for them.
"""
import logging
import re
from typing import Protocol

from sqlalchemy import text
from sqlalchemy.orm import Session

from hostpanel.crud import Repositories
from hostpanel.exceptions import ProvisioningError
from hostpanel.models.sql import SqlDatabase, SqlUser
from hostpanel.services.mutation import MutationContext, MutationCoordinator, Operation

logger = logging.getLogger("hostpanel.sql")


class SqlServerAdmin(Protocol):
    def revoke_user(self, user: str, host: str) -> None: ...

    def revoke_database_grant(self, user: str, host: str, db_name: str) -> None: ...

    def drop_database(self, db_name: str) -> None: ...

    def flush_privileges(self) -> None: ...


def escape_grant_pattern(db_name: str) -> str:
    """Escape LIKE wildcards the way they are stored in mysql.db."""
    return re.sub(r"([%_])", r"\\\1", db_name)


class MysqlServerAdmin:
    """Grant-table statements executed on the session's own connection."""

    def __init__(self, db: Session):
        self.db = db

    def revoke_user(self, user: str, host: str) -> None:
        params = {"user": user, "host": host}
        self.db.execute(text("DELETE FROM mysql.user WHERE User = :user AND Host = :host"), params)
        self.db.execute(text("DELETE FROM mysql.db WHERE Host = :host AND User = :user"), params)

    def revoke_database_grant(self, user: str, host: str, db_name: str) -> None:
        self.db.execute(
            text("DELETE FROM mysql.db WHERE Host = :host AND Db = :db AND User = :user"),
            {"user": user, "host": host, "db": escape_grant_pattern(db_name)},
        )

    def drop_database(self, db_name: str) -> None:
        quoted = self.db.get_bind().dialect.identifier_preparer.quote_identifier(db_name)
        self.db.execute(text(f"DROP DATABASE IF EXISTS {quoted}"))

    def flush_privileges(self) -> None:
        self.db.execute(text("FLUSH PRIVILEGES"))


class SqlObjectExecutor:
    def __init__(self, repos: Repositories, coordinator: MutationCoordinator, admin: SqlServerAdmin):
        self.repos = repos
        self.coordinator = coordinator
        self.admin = admin

    def delete_sql_user(self, domain_id: int, user_id: int, identity=None) -> bool:
        """Delete an SQL user of the domain. Returns False when it does not belong to it."""
        found = self.repos.sql_users.get_with_database(user_id, domain_id)
        if found is None:
            return False
        sql_user, database = found

        def work():
            # Same (user, host) may hold grants on other databases of the customer
            if self.repos.sql_users.count_grants(sql_user.sqlu_name, sql_user.sqlu_host) < 2:
                self.admin.revoke_user(sql_user.sqlu_name, sql_user.sqlu_host)
            else:
                self.admin.revoke_database_grant(
                    sql_user.sqlu_name, sql_user.sqlu_host, database.sqld_name
                )
            self.repos.sql_users.delete_where(SqlUser.sqlu_id == user_id)
            self.admin.flush_privileges()

        context = MutationContext(
            Operation.DELETE_SQL_USER,
            identity,
            {"sqlUserId": user_id, "sqlUsername": sql_user.sqlu_name, "sqlUserhost": sql_user.sqlu_host},
        )
        self.coordinator.run(context, work, notify=False)
        logger.info("SQL user %s@%s deleted", sql_user.sqlu_name, sql_user.sqlu_host)
        return True

    def delete_sql_database(self, domain_id: int, db_id: int, identity=None) -> bool:
        """Delete a database of the domain with all of its users. False when not found."""
        database = self.repos.sql_databases.get_for_domain(db_id, domain_id)
        if database is None:
            return False
        db_name = database.sqld_name

        def work():
            for user_id in self.repos.sql_users.ids_of_database(db_id):
                if not self.delete_sql_user(domain_id, user_id, identity):
                    raise ProvisioningError(f"Couldn't delete SQL user {user_id} of database {db_name}")
            self.admin.drop_database(db_name)
            self.repos.sql_databases.delete_where(
                SqlDatabase.domain_id == domain_id, SqlDatabase.sqld_id == db_id
            )

        context = MutationContext(
            Operation.DELETE_SQL_DATABASE, identity, {"sqlDbId": db_id, "sqlDatabaseName": db_name}
        )
        self.coordinator.run(context, work, notify=False)
        logger.info("SQL database %s deleted", db_name)
        return True

    def delete_domain_databases(self, domain_id: int, identity=None) -> int:
        count = 0
        for db_id in self.repos.sql_databases.ids_of_domain(domain_id):
            if self.delete_sql_database(domain_id, db_id, identity):
                count += 1
        return count
