from sqlalchemy.orm import Session

from hostpanel.crud.crud_account import AdminRepository, ResellerPropsRepository
from hostpanel.crud.crud_domain import (
    DomainRepository,
    AliasRepository,
    SubdomainRepository,
    SubdomainAliasRepository,
    DnsRepository,
)
from hostpanel.crud.crud_mail import MailRepository
from hostpanel.crud.crud_ftp import FtpRepository, FtpGroupRepository
from hostpanel.crud.crud_sql import SqlDatabaseRepository, SqlUserRepository
from hostpanel.crud.crud_ssl import SslCertRepository
from hostpanel.crud.crud_htaccess import (
    HtaccessRepository,
    HtaccessGroupRepository,
    HtaccessUserRepository,
)
from hostpanel.crud.crud_server import ServerIpRepository, PluginRepository


class Repositories:
    """Every repository bound to one session; build one per request."""

    def __init__(self, db: Session):
        self.db = db
        self.admins = AdminRepository(db)
        self.reseller_props = ResellerPropsRepository(db)
        self.domains = DomainRepository(db)
        self.aliases = AliasRepository(db)
        self.subdomains = SubdomainRepository(db)
        self.subdomain_aliases = SubdomainAliasRepository(db)
        self.dns = DnsRepository(db)
        self.mail = MailRepository(db)
        self.ftp = FtpRepository(db)
        self.ftp_groups = FtpGroupRepository(db)
        self.sql_databases = SqlDatabaseRepository(db)
        self.sql_users = SqlUserRepository(db)
        self.ssl_certs = SslCertRepository(db)
        self.htaccess = HtaccessRepository(db)
        self.htgroups = HtaccessGroupRepository(db)
        self.htusers = HtaccessUserRepository(db)
        self.server_ips = ServerIpRepository(db)
        self.plugins = PluginRepository(db)
