from sqlalchemy import Column, String, Integer, Text
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus

# Owner kind tags stored in ssl_certs.domain_type
SSL_OWNER_DOMAIN = "dmn"
SSL_OWNER_ALIAS = "als"
SSL_OWNER_SUBDOMAIN = "sub"
SSL_OWNER_SUBDOMAIN_ALIAS = "alssub"


class SslCert(Base):
    __tablename__ = "ssl_certs"

    cert_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_id = Column(Integer, nullable=False, index=True)  # id of the owning entity
    domain_type = Column(String(6), nullable=False, default=SSL_OWNER_DOMAIN)
    private_key = Column(Text, nullable=True)
    certificate = Column(Text, nullable=True)
    ca_bundle = Column(Text, nullable=True)
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)
