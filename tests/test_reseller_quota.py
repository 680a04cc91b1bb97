"""Reseller consumption counters."""
import pytest

from hostpanel.exceptions import ResellerNotFound
from hostpanel.models.account import Admin, ResellerProps
from hostpanel.models.domain import Domain
from hostpanel.schemas.provisioning import ResellerQuotaUpdate
from hostpanel.services.reseller_quota import ResellerQuotaService
from tests.conftest import RESELLER_ID


@pytest.fixture
def quota(repos, coordinator):
    return ResellerQuotaService(repos, coordinator)


def _add_customer(db, admin_id, domain_id, status="ok", **limits):
    db.add(Admin(admin_id=admin_id, admin_name=f"cust{admin_id}", admin_type="user",
                 created_by=RESELLER_ID, admin_status="ok"))
    db.add(Domain(domain_id=domain_id, domain_name=f"d{domain_id}.test", domain_admin_id=admin_id,
                  domain_status=status, **limits))
    db.commit()


def test_recalculate_sums_live_domains(seeded, quota):
    _add_customer(seeded, 4, 2, domain_subd_limit=2, domain_mailacc_limit=7, domain_disk_limit=500)
    _add_customer(seeded, 5, 3, status="todelete", domain_subd_limit=100, domain_disk_limit=9999)

    props = quota.recalculate(RESELLER_ID)

    assert props.current_dmn_cnt == 2
    assert props.current_sub_cnt == 5 + 2
    assert props.current_als_cnt == 10
    assert props.current_mail_cnt == 7       # -1 (disabled) contributes nothing
    assert props.current_sql_db_cnt == 3
    assert props.current_disk_amnt == 1000 + 500
    assert props.current_traff_amnt == 2000


def test_recalculate_is_idempotent(seeded, quota):
    first = quota.compute(RESELLER_ID)
    quota.recalculate(RESELLER_ID)
    quota.recalculate(RESELLER_ID)
    assert quota.compute(RESELLER_ID) == first
    assert seeded.query(ResellerProps).one().current_dmn_cnt == 1


def test_reseller_without_customers_counts_zero(seeded, quota):
    seeded.add(Admin(admin_id=9, admin_name="reseller2", admin_type="reseller", admin_status="ok"))
    seeded.add(ResellerProps(reseller_id=9, current_dmn_cnt=4))
    seeded.commit()

    props = quota.recalculate(9)

    assert props.current_dmn_cnt == 0
    assert props.current_disk_amnt == 0


def test_get_unknown_reseller(seeded, quota):
    with pytest.raises(ResellerNotFound):
        quota.get(77)


def test_update_limits_last_write_wins(seeded, quota):
    quota.update(RESELLER_ID, ResellerQuotaUpdate(max_dmn_cnt=20, max_mail_cnt=50))
    quota.update(RESELLER_ID, ResellerQuotaUpdate(max_dmn_cnt=30))

    props = quota.get(RESELLER_ID)
    assert props.max_dmn_cnt == 30
    assert props.max_mail_cnt == 50
    assert props.current_dmn_cnt == 1
