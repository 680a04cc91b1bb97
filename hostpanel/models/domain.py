from sqlalchemy import Column, String, Integer, BigInteger, ForeignKey
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus


class Domain(Base):
    """Customer main domain; root of the cascade subtree."""
    __tablename__ = "domain"

    domain_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_name = Column(String(200), nullable=False, unique=True)
    domain_admin_id = Column(Integer, ForeignKey("admin.admin_id"), nullable=False, index=True)
    domain_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)

    # Per-domain limits: -1 = disabled, 0 = unlimited
    domain_subd_limit = Column(Integer, nullable=False, default=0)
    domain_alias_limit = Column(Integer, nullable=False, default=0)
    domain_mailacc_limit = Column(Integer, nullable=False, default=0)
    domain_ftpacc_limit = Column(Integer, nullable=False, default=0)
    domain_sqld_limit = Column(Integer, nullable=False, default=0)
    domain_sqlu_limit = Column(Integer, nullable=False, default=0)
    domain_disk_limit = Column(BigInteger, nullable=False, default=0)
    domain_traffic_limit = Column(BigInteger, nullable=False, default=0)


class DomainAlias(Base):
    __tablename__ = "domain_aliases"

    alias_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    alias_name = Column(String(200), nullable=False, unique=True)
    alias_mount = Column(String(200), nullable=False, default="/")
    alias_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class Subdomain(Base):
    __tablename__ = "subdomain"

    subdomain_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    subdomain_name = Column(String(200), nullable=False)
    subdomain_mount = Column(String(200), nullable=False, default="/")
    subdomain_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class SubdomainAlias(Base):
    __tablename__ = "subdomain_alias"

    subdomain_alias_id = Column(Integer, primary_key=True, autoincrement=True)
    alias_id = Column(Integer, ForeignKey("domain_aliases.alias_id"), nullable=False, index=True)
    subdomain_alias_name = Column(String(200), nullable=False)
    subdomain_alias_mount = Column(String(200), nullable=False, default="/")
    subdomain_alias_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class DomainDns(Base):
    """Custom DNS resource record."""
    __tablename__ = "domain_dns"

    domain_dns_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    alias_id = Column(Integer, nullable=False, default=0)  # 0 = main domain
    domain_dns = Column(String(255), nullable=False)
    domain_class = Column(String(10), nullable=False, default="IN")
    domain_type = Column(String(10), nullable=False, default="A")
    domain_text = Column(String(255), nullable=False, default="")
    domain_dns_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)
