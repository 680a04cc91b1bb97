from sqlalchemy import Column, String, Integer, ForeignKey
from hostpanel.db.base_class import Base


class SqlDatabase(Base):
    """Customer SQL database. Deleted synchronously, never status driven."""
    __tablename__ = "sql_database"

    sqld_id = Column(Integer, primary_key=True, autoincrement=True)
    domain_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    sqld_name = Column(String(64), nullable=False, unique=True)


class SqlUser(Base):
    __tablename__ = "sql_user"

    sqlu_id = Column(Integer, primary_key=True, autoincrement=True)
    sqld_id = Column(Integer, ForeignKey("sql_database.sqld_id"), nullable=False, index=True)
    sqlu_name = Column(String(32), nullable=False)
    sqlu_host = Column(String(255), nullable=False, default="localhost")
