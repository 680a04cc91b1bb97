from typing import Dict, List, Literal, Optional
from pydantic import BaseModel


class StuckItem(BaseModel):
    kind: str
    item_id: str
    name: Optional[str] = None
    status: Optional[str] = None
    # plugin items carry their own table / status field
    table: Optional[str] = None
    field: Optional[str] = None

    class Config:
        from_attributes = True


class StuckReport(BaseModel):
    items: Dict[str, List[StuckItem]]
    total: int


class PendingCount(BaseModel):
    pending: int
    by_kind: Dict[str, int] = {}


class DaemonRequestResult(BaseModel):
    pending: int
    requested: bool
    delivered: bool
    message: str


class ForceRetryResult(BaseModel):
    kind: str
    item_id: str
    status: str


class MutationResult(BaseModel):
    operation: str
    target_id: str
    scheduled: bool = True
    message: str


class StatusChangeRequest(BaseModel):
    action: Literal["activate", "deactivate"]


class ResellerQuota(BaseModel):
    reseller_id: int
    current_dmn_cnt: int = 0
    max_dmn_cnt: int = 0
    current_sub_cnt: int = 0
    max_sub_cnt: int = 0
    current_als_cnt: int = 0
    max_als_cnt: int = 0
    current_mail_cnt: int = 0
    max_mail_cnt: int = 0
    current_ftp_cnt: int = 0
    max_ftp_cnt: int = 0
    current_sql_db_cnt: int = 0
    max_sql_db_cnt: int = 0
    current_sql_user_cnt: int = 0
    max_sql_user_cnt: int = 0
    current_traff_amnt: int = 0
    max_traff_amnt: int = 0
    current_disk_amnt: int = 0
    max_disk_amnt: int = 0

    class Config:
        from_attributes = True


class ResellerQuotaUpdate(BaseModel):
    max_dmn_cnt: Optional[int] = None
    max_sub_cnt: Optional[int] = None
    max_als_cnt: Optional[int] = None
    max_mail_cnt: Optional[int] = None
    max_ftp_cnt: Optional[int] = None
    max_sql_db_cnt: Optional[int] = None
    max_sql_user_cnt: Optional[int] = None
    max_traff_amnt: Optional[int] = None
    max_disk_amnt: Optional[int] = None
