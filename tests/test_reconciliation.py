"""Debugger: error listing, pending counts, forced retries."""
import pytest
from prometheus_client import REGISTRY

from hostpanel.exceptions import ItemNotFound, UnknownItemKind
from hostpanel.models.account import Admin
from hostpanel.models.domain import Domain, DomainAlias, Subdomain
from hostpanel.models.ftp import FtpUser
from hostpanel.models.plugin import Plugin
from hostpanel.services.reconciliation import PluginSources, ReconciliationSweep
from hostpanel.tasks.reconcile_tasks import sweep as run_sweep
from tests.conftest import ADMIN_ID, CUSTOMER_ID, DOMAIN_ID


class FakePluginSource:
    name = "CronJobs"

    def __init__(self):
        self.changed = []

    def items_with_error_status(self):
        return [{"item_id": 7, "item_name": "backup", "status": "crontab failed",
                 "table": "cron_jobs", "field": "cron_job_status"}]

    def change_item_status(self, table, field, item_id):
        self.changed.append((table, field, item_id))

    def count_requests(self):
        return 2


@pytest.fixture
def plugin_source():
    return FakePluginSource()


@pytest.fixture
def sweep(repos, coordinator, plugin_source):
    sources = PluginSources()
    sources.register(plugin_source)
    return ReconciliationSweep(repos, coordinator, sources)


def _set(db, model, pk, **values):
    row = db.get(model, pk)
    for key, value in values.items():
        setattr(row, key, value)
    db.commit()


def test_error_string_is_reported(seeded, sweep):
    _set(seeded, Domain, DOMAIN_ID, domain_status="error: disk full")

    items = sweep.find_stuck_rows("domain")

    assert [(i.item_id, i.name, i.status) for i in items] == [("1", "example.com", "error: disk full")]


def test_in_progress_rows_are_never_stuck(seeded, sweep):
    _set(seeded, Domain, DOMAIN_ID, domain_status="toadd")
    _set(seeded, Subdomain, 1, subdomain_status="tochange")

    assert sweep.find_stuck_rows("domain") == []
    assert sweep.find_stuck_rows("subdomain") == []


def test_expected_set_is_per_table(seeded, sweep):
    _set(seeded, DomainAlias, 1, alias_status="ordered")
    _set(seeded, Subdomain, 1, subdomain_status="ordered")

    assert sweep.find_stuck_rows("alias") == []
    assert [i.item_id for i in sweep.find_stuck_rows("subdomain")] == ["1"]


def test_user_kind_only_lists_customers(seeded, sweep):
    _set(seeded, Admin, ADMIN_ID, admin_status="broken")
    _set(seeded, Admin, CUSTOMER_ID, admin_status="broken too")

    assert [i.item_id for i in sweep.find_stuck_rows("user")] == [str(CUSTOMER_ID)]


def test_plugin_error_column_marks_plugin_stuck(seeded, sweep):
    seeded.add(Plugin(plugin_id=1, plugin_name="Monitorix", plugin_status="enabled",
                      plugin_error="missing dependency"))
    seeded.commit()

    items = sweep.find_stuck_rows("plugin")
    assert [(i.name, i.status) for i in items] == [("Monitorix", "missing dependency")]


def test_unknown_kind(sweep):
    with pytest.raises(UnknownItemKind):
        sweep.find_stuck_rows("cron")


def test_find_all_stuck_includes_plugin_items(seeded, sweep):
    report = sweep.find_all_stuck()

    assert set(report) >= {"user", "domain", "mail", "ftp", "plugin_items"}
    assert report["plugin_items"][0].table == "cron_jobs"
    assert sum(len(v) for k, v in report.items() if k != "plugin_items") == 0


def test_force_retry_then_counted_as_pending(seeded, sweep, notifier):
    _set(seeded, Domain, DOMAIN_ID, domain_status="error: disk full")
    assert sweep.count_pending("domain") == 0

    assert sweep.force_retry("domain", "1") == "tochange"

    assert seeded.get(Domain, DOMAIN_ID).domain_status == "tochange"
    assert sweep.find_stuck_rows("domain") == []
    assert sweep.count_pending("domain") == 1
    assert notifier.calls == 0


def test_force_retry_ftp_uses_string_ids(seeded, sweep):
    _set(seeded, FtpUser, "joe@example.com", status="error: quota")

    sweep.force_retry("ftp", "joe@example.com")

    assert seeded.get(FtpUser, "joe@example.com").status == "tochange"


def test_force_retry_missing_row(seeded, sweep):
    with pytest.raises(ItemNotFound):
        sweep.force_retry("domain", "999")
    with pytest.raises(ItemNotFound):
        sweep.force_retry("domain", "not-a-number")


def test_force_retry_plugin_item(seeded, sweep, plugin_source):
    sweep.force_retry("CronJobs", "7", table="cron_jobs", field="cron_job_status")
    assert plugin_source.changed == [("cron_jobs", "cron_job_status", "7")]

    with pytest.raises(UnknownItemKind):
        sweep.force_retry("CronJobs", "7")


def test_count_all_pending_includes_plugin_requests(seeded, sweep):
    _set(seeded, Subdomain, 1, subdomain_status="todelete")

    counts = sweep.count_all_pending()

    assert counts["subdomain"] == 1
    assert counts["plugin:CronJobs"] == 2
    assert sum(counts.values()) == 3


def test_run_pending_without_work_does_not_wake_daemon(seeded, repos, coordinator, notifier):
    result = ReconciliationSweep(repos, coordinator).run_pending()

    assert result.pending == 0
    assert result.requested is False
    assert notifier.calls == 0


def test_run_pending_wakes_daemon(seeded, sweep, notifier):
    result = sweep.run_pending()

    assert result.pending == 2
    assert result.requested and result.delivered
    assert notifier.calls == 1


def test_periodic_sweep_publishes_gauge(seeded):
    _set(seeded, Domain, DOMAIN_ID, domain_status="error: disk full")

    counts = run_sweep(seeded)

    assert counts["domain"] == 1
    assert REGISTRY.get_sample_value("provisioning_stuck_items", {"kind": "domain"}) == 1.0
    assert REGISTRY.get_sample_value("provisioning_stuck_items", {"kind": "mail"}) == 0.0


def test_force_retry_user_kind_only_reaches_customers(seeded, sweep):
    _set(seeded, Admin, ADMIN_ID, admin_status="broken")

    with pytest.raises(ItemNotFound):
        sweep.force_retry("user", str(ADMIN_ID))
    assert seeded.get(Admin, ADMIN_ID).admin_status == "broken"

    _set(seeded, Admin, CUSTOMER_ID, admin_status="broken too")
    sweep.force_retry("user", str(CUSTOMER_ID))
    assert seeded.get(Admin, CUSTOMER_ID).admin_status == "tochange"
