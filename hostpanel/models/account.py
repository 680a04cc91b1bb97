from sqlalchemy import Column, String, Integer, BigInteger, ForeignKey
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus

# admin.admin_type values
ACCOUNT_ADMIN = "admin"
ACCOUNT_RESELLER = "reseller"
ACCOUNT_CUSTOMER = "user"


class Admin(Base):
    """Administrator, reseller or customer account."""
    __tablename__ = "admin"

    admin_id = Column(Integer, primary_key=True, autoincrement=True)
    admin_name = Column(String(200), nullable=False, unique=True)
    admin_type = Column(String(10), nullable=False)
    created_by = Column(Integer, nullable=True, index=True)  # owning account
    email = Column(String(255), nullable=True)
    admin_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)


class ResellerProps(Base):
    """Reseller (current, max) consumption counters."""
    __tablename__ = "reseller_props"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reseller_id = Column(Integer, ForeignKey("admin.admin_id"), nullable=False, unique=True)

    # -1 = disabled, 0 = unlimited
    current_dmn_cnt = Column(Integer, nullable=False, default=0)
    max_dmn_cnt = Column(Integer, nullable=False, default=0)
    current_sub_cnt = Column(Integer, nullable=False, default=0)
    max_sub_cnt = Column(Integer, nullable=False, default=0)
    current_als_cnt = Column(Integer, nullable=False, default=0)
    max_als_cnt = Column(Integer, nullable=False, default=0)
    current_mail_cnt = Column(Integer, nullable=False, default=0)
    max_mail_cnt = Column(Integer, nullable=False, default=0)
    current_ftp_cnt = Column(Integer, nullable=False, default=0)
    max_ftp_cnt = Column(Integer, nullable=False, default=0)
    current_sql_db_cnt = Column(Integer, nullable=False, default=0)
    max_sql_db_cnt = Column(Integer, nullable=False, default=0)
    current_sql_user_cnt = Column(Integer, nullable=False, default=0)
    max_sql_user_cnt = Column(Integer, nullable=False, default=0)
    current_traff_amnt = Column(BigInteger, nullable=False, default=0)  # MiB
    max_traff_amnt = Column(BigInteger, nullable=False, default=0)
    current_disk_amnt = Column(BigInteger, nullable=False, default=0)  # MiB
    max_disk_amnt = Column(BigInteger, nullable=False, default=0)
