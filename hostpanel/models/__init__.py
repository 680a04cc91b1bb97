from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus
from hostpanel.models.account import Admin, ResellerProps
from hostpanel.models.domain import Domain, DomainAlias, Subdomain, SubdomainAlias, DomainDns
from hostpanel.models.mail import MailUser
from hostpanel.models.ftp import FtpUser, FtpGroup
from hostpanel.models.sql import SqlDatabase, SqlUser
from hostpanel.models.ssl_cert import SslCert
from hostpanel.models.htaccess import Htaccess, HtaccessGroup, HtaccessUser
from hostpanel.models.server_ip import ServerIp
from hostpanel.models.plugin import Plugin
