from sqlalchemy import Column, String, Integer, Text, ForeignKey
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus


class FtpUser(Base):
    __tablename__ = "ftp_users"

    userid = Column(String(255), primary_key=True)  # user@domain
    admin_id = Column(Integer, ForeignKey("admin.admin_id"), nullable=False, index=True)
    passwd = Column(String(255), nullable=False, default="")
    uid = Column(Integer, nullable=False, default=0)
    gid = Column(Integer, nullable=False, default=0)
    homedir = Column(String(255), nullable=True)
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class FtpGroup(Base):
    __tablename__ = "ftp_group"

    groupname = Column(String(255), primary_key=True)  # customer admin_name
    gid = Column(Integer, nullable=False, default=0)
    members = Column(Text, nullable=True)  # comma separated userids
