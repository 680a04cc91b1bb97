from sqlalchemy import Column, String, Integer, Text, ForeignKey
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus


class Htaccess(Base):
    """Protected area."""
    __tablename__ = "htaccess"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dmn_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=True)  # comma separated htaccess_users ids
    group_id = Column(String(255), nullable=True)  # comma separated htaccess_groups ids
    auth_type = Column(String(255), nullable=False, default="Basic")
    auth_name = Column(String(255), nullable=False)
    path = Column(String(255), nullable=False)
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class HtaccessGroup(Base):
    __tablename__ = "htaccess_groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dmn_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    ugroup = Column(String(255), nullable=False)
    members = Column(Text, nullable=True)  # comma separated htaccess_users ids
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class HtaccessUser(Base):
    __tablename__ = "htaccess_users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dmn_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    uname = Column(String(255), nullable=False)
    upass = Column(String(255), nullable=False, default="")
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)
