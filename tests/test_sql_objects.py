"""Synchronous SQL database / SQL user deletion."""
import pytest

from hostpanel.models.sql import SqlDatabase, SqlUser
from hostpanel.services.sql_admin import SqlObjectExecutor, escape_grant_pattern
from tests.conftest import DOMAIN_ID, RecordingSqlAdmin


@pytest.fixture
def executor(repos, coordinator, sql_admin):
    return SqlObjectExecutor(repos, coordinator, sql_admin)


def test_escape_grant_pattern():
    assert escape_grant_pattern("cust1_db%") == "cust1\\_db\\%"


def test_delete_last_grant_revokes_the_account(seeded, executor, sql_admin, notifier):
    assert executor.delete_sql_user(DOMAIN_ID, 1) is True

    assert sql_admin.calls == [("revoke_user", "cust1_u", "localhost"), ("flush_privileges",)]
    assert seeded.get(SqlUser, 1) is None
    assert notifier.calls == 0


def test_delete_shared_user_only_revokes_database_grant(seeded, executor, sql_admin):
    executor.delete_sql_user(DOMAIN_ID, 2)

    assert sql_admin.calls[0] == ("revoke_database_grant", "cust1_shared", "%", "cust1_db")
    assert seeded.get(SqlUser, 2) is None
    assert seeded.get(SqlUser, 3) is not None


def test_delete_user_of_other_domain_returns_false(seeded, executor, sql_admin):
    assert executor.delete_sql_user(DOMAIN_ID + 1, 1) is False
    assert sql_admin.calls == []


def test_delete_database_removes_its_users_first(seeded, executor, sql_admin):
    assert executor.delete_sql_database(DOMAIN_ID, 1) is True

    names = [call[0] for call in sql_admin.calls]
    assert names.index("drop_database") > names.index("revoke_user")
    assert ("drop_database", "cust1_db") in sql_admin.calls
    assert seeded.get(SqlDatabase, 1) is None
    assert seeded.query(SqlUser).filter(SqlUser.sqld_id == 1).count() == 0
    assert seeded.get(SqlDatabase, 2) is not None


def test_delete_unknown_database_returns_false(seeded, executor):
    assert executor.delete_sql_database(DOMAIN_ID, 42) is False


def test_failed_drop_rolls_back_user_deletion(seeded, repos, coordinator, session_factory):
    executor = SqlObjectExecutor(repos, coordinator, RecordingSqlAdmin(fail_on_drop=True))

    with pytest.raises(RuntimeError):
        executor.delete_sql_database(DOMAIN_ID, 1)

    check = session_factory()
    try:
        assert check.query(SqlUser).filter(SqlUser.sqld_id == 1).count() == 2
        assert check.get(SqlDatabase, 1) is not None
    finally:
        check.close()
