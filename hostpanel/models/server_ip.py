from sqlalchemy import Column, String, Integer
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus


class ServerIp(Base):
    __tablename__ = "server_ips"

    ip_id = Column(Integer, primary_key=True, autoincrement=True)
    ip_number = Column(String(45), nullable=False, unique=True)
    ip_netmask = Column(Integer, nullable=True)
    ip_card = Column(String(255), nullable=False)
    ip_config_mode = Column(String(15), nullable=False, default="auto")
    ip_status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)
