"""Pytest configuration and fixtures."""
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hostpanel.config import settings
from hostpanel.crud import Repositories
from hostpanel.db.base_class import Base
from hostpanel.models.account import Admin, ResellerProps, ACCOUNT_ADMIN, ACCOUNT_RESELLER, ACCOUNT_CUSTOMER
from hostpanel.models.domain import Domain, DomainAlias, Subdomain, SubdomainAlias, DomainDns
from hostpanel.models.ftp import FtpUser, FtpGroup
from hostpanel.models.htaccess import Htaccess, HtaccessGroup, HtaccessUser
from hostpanel.models.mail import MailUser
from hostpanel.models.server_ip import ServerIp
from hostpanel.models.sql import SqlDatabase, SqlUser
from hostpanel.models.ssl_cert import SslCert
from hostpanel.services.daemon import WakeupHint
from hostpanel.services.mutation import MutationCoordinator, MutationHooks
from hostpanel.services.provisioning import ProvisioningService

ADMIN_ID = 1
RESELLER_ID = 2
CUSTOMER_ID = 3
DOMAIN_ID = 1

ADMIN_HEADERS = {"X-Account-Id": str(ADMIN_ID), "X-Account-Kind": "admin"}
RESELLER_HEADERS = {"X-Account-Id": str(RESELLER_ID), "X-Account-Kind": "reseller"}
CUSTOMER_HEADERS = {"X-Account-Id": str(CUSTOMER_ID), "X-Account-Kind": "customer"}


# --- Fakes ---

class FakeNotifier:
    """Stands in for DaemonNotifier; records wake-ups instead of opening a socket."""

    def __init__(self, delivered: bool = True):
        self.delivered = delivered
        self.calls = 0

    def notify(self) -> WakeupHint:
        self.calls += 1
        return WakeupHint(self.delivered, "fake")


class RecordingSqlAdmin:
    """SqlServerAdmin that records the statements it would run."""

    def __init__(self, fail_on_drop: bool = False):
        self.calls = []
        self.fail_on_drop = fail_on_drop

    def revoke_user(self, user, host):
        self.calls.append(("revoke_user", user, host))

    def revoke_database_grant(self, user, host, db_name):
        self.calls.append(("revoke_database_grant", user, host, db_name))

    def drop_database(self, db_name):
        if self.fail_on_drop:
            raise RuntimeError(f"cannot drop {db_name}")
        self.calls.append(("drop_database", db_name))

    def flush_privileges(self):
        self.calls.append(("flush_privileges",))


# --- Engine / session ---

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import hostpanel.models  # noqa: F401
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def hooks():
    return MutationHooks()


@pytest.fixture
def coordinator(db, hooks, notifier):
    return MutationCoordinator(db, hooks, notifier)


@pytest.fixture
def repos(db):
    return Repositories(db)


@pytest.fixture
def sql_admin():
    return RecordingSqlAdmin()


@pytest.fixture
def service(repos, coordinator, sql_admin):
    return ProvisioningService(repos, coordinator, sql_admin, settings)


@pytest.fixture
def seeded(db):
    seed_customer(db)
    return db


# --- HTTP client ---

@pytest.fixture
async def client(session_factory, notifier, sql_admin):
    """
    Async HTTP client bound to the in-memory database.
    The daemon socket and the SQL server admin are replaced by fakes.
    """
    from hostpanel.main import app as fastapi_app
    from hostpanel.api import deps

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[deps.get_db] = _override_get_db
    fastapi_app.dependency_overrides[deps.get_notifier] = lambda: notifier
    fastapi_app.dependency_overrides[deps.get_sql_admin] = lambda: sql_admin

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


# --- Helpers ---

def seed_customer(db) -> None:
    """
    One reseller with one customer owning example.com:
      alias shop.test (mount /shop) with subdomain alias blog.shop.test,
      subdomain www.example.com, mail/ftp/ssl/dns/htaccess on each,
      two SQL databases sharing one SQL user name.
    Everything starts `ok`.
    """
    db.add_all([
        Admin(admin_id=ADMIN_ID, admin_name="admin", admin_type=ACCOUNT_ADMIN, admin_status="ok"),
        Admin(admin_id=RESELLER_ID, admin_name="reseller1", admin_type=ACCOUNT_RESELLER,
              created_by=ADMIN_ID, admin_status="ok"),
        Admin(admin_id=CUSTOMER_ID, admin_name="cust1", admin_type=ACCOUNT_CUSTOMER,
              created_by=RESELLER_ID, admin_status="ok"),
    ])
    db.flush()
    db.add(ResellerProps(reseller_id=RESELLER_ID, max_dmn_cnt=10, current_dmn_cnt=1))
    db.add(Domain(
        domain_id=DOMAIN_ID, domain_name="example.com", domain_admin_id=CUSTOMER_ID, domain_status="ok",
        domain_subd_limit=5, domain_alias_limit=10, domain_mailacc_limit=-1, domain_ftpacc_limit=0,
        domain_sqld_limit=3, domain_sqlu_limit=3, domain_disk_limit=1000, domain_traffic_limit=2000,
    ))
    db.flush()
    db.add_all([
        DomainAlias(alias_id=1, domain_id=DOMAIN_ID, alias_name="shop.test", alias_mount="/shop", alias_status="ok"),
        Subdomain(subdomain_id=1, domain_id=DOMAIN_ID, subdomain_name="www", subdomain_mount="/www",
                  subdomain_status="ok"),
    ])
    db.flush()
    db.add(SubdomainAlias(subdomain_alias_id=1, alias_id=1, subdomain_alias_name="blog",
                          subdomain_alias_mount="/shop/blog", subdomain_alias_status="ok"))
    db.add_all([
        DomainDns(domain_dns_id=1, domain_id=DOMAIN_ID, alias_id=0, domain_dns="mx", domain_type="MX",
                  domain_text="10 mail.example.com.", domain_dns_status="ok"),
        DomainDns(domain_dns_id=2, domain_id=DOMAIN_ID, alias_id=1, domain_dns="shop.test.",
                  domain_text="192.0.2.10", domain_dns_status="ok"),
    ])
    db.add_all([
        MailUser(mail_id=1, mail_acc="info", domain_id=DOMAIN_ID, mail_type="normal_mail", sub_id=0,
                 mail_addr="info@example.com", status="ok"),
        MailUser(mail_id=2, mail_acc="sales", domain_id=DOMAIN_ID, mail_type="alias_mail", sub_id=1,
                 mail_addr="sales@shop.test", status="ok"),
        MailUser(mail_id=3, mail_acc="dev", domain_id=DOMAIN_ID, mail_type="subdom_mail", sub_id=1,
                 mail_addr="dev@www.example.com", status="ok"),
        MailUser(mail_id=4, mail_acc="me", domain_id=DOMAIN_ID, mail_type="alssub_mail", sub_id=1,
                 mail_addr="me@blog.shop.test", status="ok"),
        MailUser(mail_id=5, mail_acc="contact", domain_id=DOMAIN_ID, mail_type="normal_forward", sub_id=0,
                 mail_forward="sales@shop.test", mail_addr="contact@example.com", status="ok"),
        MailUser(mail_id=6, mail_acc="team", domain_id=DOMAIN_ID, mail_type="normal_forward", sub_id=0,
                 mail_forward="sales@shop.test,info@example.com", mail_addr="team@example.com", status="ok"),
    ])
    db.add_all([
        FtpUser(userid="joe@example.com", admin_id=CUSTOMER_ID, status="ok"),
        FtpUser(userid="ann@shop.test", admin_id=CUSTOMER_ID, status="ok"),
        FtpUser(userid="bob@blog.shop.test", admin_id=CUSTOMER_ID, status="ok"),
        FtpUser(userid="dev@www.example.com", admin_id=CUSTOMER_ID, status="ok"),
        FtpGroup(groupname="cust1", gid=2001,
                 members="joe@example.com,ann@shop.test,bob@blog.shop.test,dev@www.example.com"),
    ])
    db.add_all([
        SslCert(cert_id=1, domain_id=DOMAIN_ID, domain_type="dmn", status="ok"),
        SslCert(cert_id=2, domain_id=1, domain_type="als", status="ok"),
        SslCert(cert_id=3, domain_id=1, domain_type="sub", status="ok"),
        SslCert(cert_id=4, domain_id=1, domain_type="alssub", status="ok"),
    ])
    db.add_all([
        HtaccessUser(id=1, dmn_id=DOMAIN_ID, uname="alice", status="ok"),
        HtaccessUser(id=2, dmn_id=DOMAIN_ID, uname="bob", status="ok"),
        HtaccessGroup(id=1, dmn_id=DOMAIN_ID, ugroup="staff", members="1,2", status="ok"),
        Htaccess(id=1, dmn_id=DOMAIN_ID, user_id="1", group_id="", auth_name="Shop",
                 path="/shop/private", status="ok"),
        Htaccess(id=2, dmn_id=DOMAIN_ID, user_id="1", group_id="1", auth_name="Admin",
                 path="/www/admin", status="ok"),
        Htaccess(id=3, dmn_id=DOMAIN_ID, user_id="", group_id="1", auth_name="Secret",
                 path="/htdocs/secret", status="ok"),
    ])
    db.add_all([
        SqlDatabase(sqld_id=1, domain_id=DOMAIN_ID, sqld_name="cust1_db"),
        SqlDatabase(sqld_id=2, domain_id=DOMAIN_ID, sqld_name="cust1_db2"),
    ])
    db.flush()
    db.add_all([
        SqlUser(sqlu_id=1, sqld_id=1, sqlu_name="cust1_u", sqlu_host="localhost"),
        SqlUser(sqlu_id=2, sqld_id=1, sqlu_name="cust1_shared", sqlu_host="%"),
        SqlUser(sqlu_id=3, sqld_id=2, sqlu_name="cust1_shared", sqlu_host="%"),
    ])
    db.add(ServerIp(ip_id=1, ip_number="192.0.2.10", ip_card="eth0", ip_status="ok"))
    db.commit()
