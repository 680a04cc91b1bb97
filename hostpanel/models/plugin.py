from sqlalchemy import Column, String, Integer, Text
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus


class Plugin(Base):
    __tablename__ = "plugin"

    plugin_id = Column(Integer, primary_key=True, autoincrement=True)
    plugin_name = Column(String(50), nullable=False, unique=True)
    plugin_type = Column(String(20), nullable=False, default="")
    plugin_info = Column(Text, nullable=True)
    plugin_config = Column(Text, nullable=True)
    plugin_priority = Column(Integer, nullable=False, default=0)
    plugin_error = Column(Text, nullable=True)
    plugin_status = Column(String(255), nullable=False, default=ItemStatus.UNINSTALLED.value)
