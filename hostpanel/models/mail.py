from sqlalchemy import Column, String, Integer, BigInteger, Text, ForeignKey
from hostpanel.db.base_class import Base
from hostpanel.models.status import ItemStatus

# mail_type values; a mail account may combine a mailbox and a forward
# ("normal_mail,normal_forward").
MT_NORMAL_MAIL = "normal_mail"
MT_NORMAL_FORWARD = "normal_forward"
MT_ALIAS_MAIL = "alias_mail"
MT_ALIAS_FORWARD = "alias_forward"
MT_SUBDOM_MAIL = "subdom_mail"
MT_SUBDOM_FORWARD = "subdom_forward"
MT_ALSSUB_MAIL = "alssub_mail"
MT_ALSSUB_FORWARD = "alssub_forward"
MT_NORMAL_CATCHALL = "normal_catchall"
MT_ALIAS_CATCHALL = "alias_catchall"
MT_SUBDOM_CATCHALL = "subdom_catchall"
MT_ALSSUB_CATCHALL = "alssub_catchall"


class MailUser(Base):
    __tablename__ = "mail_users"

    mail_id = Column(Integer, primary_key=True, autoincrement=True)
    mail_acc = Column(Text, nullable=True)  # local part, or forward list for catch-all
    mail_pass = Column(String(255), nullable=False, default="_no_")
    mail_forward = Column(Text, nullable=True, default="_no_")
    domain_id = Column(Integer, ForeignKey("domain.domain_id"), nullable=False, index=True)
    mail_type = Column(String(30), nullable=False)
    sub_id = Column(Integer, nullable=False, default=0)  # alias/subdomain/subdomain alias id
    status = Column(String(255), nullable=False, default=ItemStatus.TOADD.value)
    po_active = Column(String(3), nullable=False, default="yes")
    mail_addr = Column(String(254), nullable=True)
    quota = Column(BigInteger, nullable=True)
