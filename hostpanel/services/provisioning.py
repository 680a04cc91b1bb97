"""
Provisioning operations exposed to the admin, reseller and customer surfaces.

Each public method is one logical mutation: it resolves and checks ownership
of the target first (outside any transaction), then hands the status writes
to the MutationCoordinator. The daemon does the actual work later.
"""
import logging
from typing import Optional, Tuple

from hostpanel.config import settings as default_settings
from hostpanel.crud import Repositories
from hostpanel.exceptions import ItemNotFound, ProtectedItem
from hostpanel.models.account import Admin
from hostpanel.models.domain import Domain, DomainAlias
from hostpanel.models.ftp import FtpGroup
from hostpanel.models.mail import (
    MT_NORMAL_FORWARD,
    MT_ALIAS_FORWARD,
    MT_SUBDOM_FORWARD,
    MT_ALSSUB_FORWARD,
)
from hostpanel.models.status import ItemStatus
from hostpanel.schemas.identity import Identity, IdentityKind
from hostpanel.schemas.provisioning import MutationResult
from hostpanel.services.cascade import CascadePropagator
from hostpanel.services.mutation import MutationContext, MutationCoordinator, Operation
from hostpanel.services.reseller_quota import ResellerQuotaService
from hostpanel.services.sql_admin import SqlObjectExecutor, SqlServerAdmin

logger = logging.getLogger("hostpanel.provisioning")

_DEFAULT_MAIL_ACCOUNTS = {"abuse", "hostmaster", "postmaster", "webmaster"}


class ProvisioningService:
    def __init__(
        self,
        repos: Repositories,
        coordinator: MutationCoordinator,
        sql_admin: SqlServerAdmin,
        settings=None,
    ):
        self.repos = repos
        self.coordinator = coordinator
        self.settings = settings or default_settings
        self.cascade = CascadePropagator(repos)
        self.sql = SqlObjectExecutor(repos, coordinator, sql_admin)
        self.quota = ResellerQuotaService(repos, coordinator)

    # ═══════════════════════════════════════════
    #  Helpers
    # ═══════════════════════════════════════════

    def _run(self, operation: Operation, target_id, identity, payload, work, notify: bool = True) -> MutationResult:
        context = MutationContext(operation, identity, payload)
        self.coordinator.run(context, work, notify=notify)

        message = f"{operation.value} scheduled"
        hint = self.coordinator.last_wakeup
        if notify and hint is not None and not hint:
            message += "; the provisioning daemon could not be reached and will pick it up on its next run"
        return MutationResult(operation=operation.value, target_id=str(target_id), message=message)

    def _customer(self, customer_id: int, identity: Optional[Identity] = None) -> Tuple[Admin, Domain]:
        """The customer and its main domain; resellers only see their own customers."""
        created_by = None
        if identity is not None and identity.kind == IdentityKind.RESELLER:
            created_by = identity.acting_account_id
        found = self.repos.admins.get_customer_with_domain(customer_id, created_by)
        if found is None:
            raise ItemNotFound("customer", customer_id)
        return found

    # ═══════════════════════════════════════════
    #  Customer
    # ═══════════════════════════════════════════

    def delete_customer(self, customer_id: int, identity: Optional[Identity] = None) -> MutationResult:
        customer, domain = self._customer(customer_id, identity)
        r = self.repos

        def work():
            self.sql.delete_domain_databases(domain.domain_id, identity)
            r.ftp_groups.delete_where(FtpGroup.groupname == customer.admin_name)
            self.cascade.schedule_domain_deletion(domain.domain_id, customer_id)
            r.admins.flag(Admin.admin_id == customer_id, status=ItemStatus.TODELETE)
            self.quota.recalculate(customer.created_by, identity)

        result = self._run(
            Operation.DELETE_CUSTOMER, customer_id, identity, {"customerId": customer_id}, work
        )
        logger.info("%s: customer %s scheduled for deletion", identity or "system", customer.admin_name)
        return result

    def change_customer_status(
        self, customer_id: int, activate: bool, identity: Optional[Identity] = None
    ) -> MutationResult:
        customer, domain = self._customer(customer_id, identity)

        def work():
            self.cascade.change_domain_status(
                domain.domain_id, customer_id, activate, self.settings.HARD_MAIL_SUSPENSION
            )

        return self._run(
            Operation.CHANGE_DOMAIN_STATUS, customer_id, identity,
            {"customerId": customer_id, "action": "activate" if activate else "deactivate"},
            work,
        )

    # ═══════════════════════════════════════════
    #  Domain aliases, subdomains
    # ═══════════════════════════════════════════

    def _alias_of(self, domain: Domain, alias_id: int) -> DomainAlias:
        alias = self.repos.aliases.get(alias_id)
        if alias is None or alias.domain_id != domain.domain_id:
            raise ItemNotFound("alias", alias_id)
        return alias

    def delete_domain_alias(self, customer_id: int, alias_id: int, identity: Optional[Identity] = None) -> MutationResult:
        customer, domain = self._customer(customer_id, identity)
        alias = self._alias_of(domain, alias_id)

        def work():
            self.cascade.schedule_alias_deletion(alias, customer_id, customer.admin_name)
            self.quota.recalculate(customer.created_by, identity)

        return self._run(
            Operation.DELETE_DOMAIN_ALIAS, alias_id, identity,
            {"domainAliasId": alias_id, "domainAliasName": alias.alias_name},
            work,
        )

    def _ordered_alias(self, alias_id: int, identity: Optional[Identity]) -> Tuple[DomainAlias, Admin]:
        alias = self.repos.aliases.get_ordered(alias_id)
        if alias is None:
            raise ItemNotFound("alias order", alias_id)
        domain = self.repos.domains.get(alias.domain_id)
        customer, _ = self._customer(domain.domain_admin_id, identity)
        return alias, customer

    def approve_alias_order(self, alias_id: int, identity: Optional[Identity] = None) -> MutationResult:
        alias, customer = self._ordered_alias(alias_id, identity)

        def work():
            self.repos.aliases.schedule(alias, ItemStatus.TOADD)
            self.quota.recalculate(customer.created_by, identity)

        return self._run(
            Operation.APPROVE_ALIAS_ORDER, alias_id, identity,
            {"domainAliasId": alias_id, "domainAliasName": alias.alias_name},
            work,
        )

    def reject_alias_order(self, alias_id: int, identity: Optional[Identity] = None) -> MutationResult:
        alias, _ = self._ordered_alias(alias_id, identity)

        def work():
            self.repos.aliases.delete_where(
                DomainAlias.alias_id == alias_id,
                DomainAlias.alias_status == ItemStatus.ORDERED.value,
            )

        # nothing was ever provisioned for an order
        return self._run(
            Operation.REJECT_ALIAS_ORDER, alias_id, identity,
            {"domainAliasId": alias_id, "domainAliasName": alias.alias_name},
            work, notify=False,
        )

    def delete_subdomain(self, customer_id: int, subdomain_id: int, identity: Optional[Identity] = None) -> MutationResult:
        customer, domain = self._customer(customer_id, identity)
        subdomain = self.repos.subdomains.get(subdomain_id)
        if subdomain is None or subdomain.domain_id != domain.domain_id:
            raise ItemNotFound("subdomain", subdomain_id)

        def work():
            self.cascade.schedule_subdomain_deletion(subdomain, customer_id, customer.admin_name)

        return self._run(
            Operation.DELETE_SUBDOMAIN, subdomain_id, identity,
            {"subdomainId": subdomain_id, "subdomainName": subdomain.subdomain_name},
            work,
        )

    def delete_subdomain_alias(
        self, customer_id: int, subdomain_alias_id: int, identity: Optional[Identity] = None
    ) -> MutationResult:
        customer, domain = self._customer(customer_id, identity)
        found = self.repos.subdomain_aliases.with_alias(subdomain_alias_id)
        if found is None or found[1].domain_id != domain.domain_id:
            raise ItemNotFound("subdomain alias", subdomain_alias_id)
        subdomain_alias, alias = found

        def work():
            self.cascade.schedule_subdomain_alias_deletion(
                subdomain_alias, alias, customer_id, customer.admin_name
            )

        return self._run(
            Operation.DELETE_SUBDOMAIN_ALIAS, subdomain_alias_id, identity,
            {
                "subdomainAliasId": subdomain_alias_id,
                "subdomainAliasName": subdomain_alias.subdomain_alias_name,
            },
            work,
        )

    # ═══════════════════════════════════════════
    #  Mail, FTP, custom DNS
    # ═══════════════════════════════════════════

    def _is_protected_mail(self, mail) -> bool:
        if not self.settings.PROTECT_DEFAULT_MAIL_ADDRESSES:
            return False
        if mail.mail_type in (MT_NORMAL_FORWARD, MT_ALIAS_FORWARD):
            return mail.mail_acc in _DEFAULT_MAIL_ACCOUNTS
        return mail.mail_acc == "webmaster" and mail.mail_type in (MT_SUBDOM_FORWARD, MT_ALSSUB_FORWARD)

    def delete_mail(self, customer_id: int, mail_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        mail = self.repos.mail.get_for_domain(mail_id, domain.domain_id)
        if mail is None:
            raise ItemNotFound("mail", mail_id)
        if self._is_protected_mail(mail):
            raise ProtectedItem(f"Mail account {mail.mail_addr} is a default address and cannot be deleted")

        def work():
            self.repos.mail.schedule(mail, ItemStatus.TODELETE)
            if mail.mail_addr:
                self.repos.mail.drop_target(mail.mail_addr, mail_id)

        return self._run(Operation.DELETE_MAIL, mail_id, identity, {"mailId": mail_id}, work)

    def delete_ftp(self, customer_id: int, userid: str, identity: Optional[Identity] = None) -> MutationResult:
        customer, _ = self._customer(customer_id, identity)
        ftp_user = self.repos.ftp.get_for_customer(userid, customer_id)
        if ftp_user is None:
            raise ItemNotFound("ftp", userid)

        def work():
            self.repos.ftp_groups.prune_members(customer.admin_name, lambda m: m == userid)
            self.repos.ftp.schedule(ftp_user, ItemStatus.TODELETE)

        return self._run(Operation.DELETE_FTP, userid, identity, {"ftpUserId": userid}, work)

    def delete_custom_dns(self, customer_id: int, dns_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        record = self.repos.dns.get_for_domain(dns_id, domain.domain_id)
        if record is None:
            raise ItemNotFound("custom_dns", dns_id)

        return self._run(
            Operation.DELETE_CUSTOM_DNS, dns_id, identity, {"id": dns_id},
            lambda: self.repos.dns.schedule(record, ItemStatus.TODELETE),
        )

    # ═══════════════════════════════════════════
    #  Protected areas
    # ═══════════════════════════════════════════

    def delete_htaccess(self, customer_id: int, area_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        area = self.repos.htaccess.get_for_domain(area_id, domain.domain_id)
        if area is None:
            raise ItemNotFound("htaccess", area_id)

        return self._run(
            Operation.DELETE_HTACCESS, area_id, identity, {"htaccessId": area_id},
            lambda: self.repos.htaccess.schedule(area, ItemStatus.TODELETE),
        )

    def delete_htgroup(self, customer_id: int, group_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        group = self.repos.htgroups.get_for_domain(group_id, domain.domain_id)
        if group is None:
            raise ItemNotFound("htgroup", group_id)

        def work():
            self.repos.htaccess.drop_principal(domain.domain_id, group_id=group_id)
            self.repos.htgroups.schedule(group, ItemStatus.TODELETE)

        return self._run(Operation.DELETE_HTGROUP, group_id, identity, {"htgroupId": group_id}, work)

    def delete_htuser(self, customer_id: int, user_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        user = self.repos.htusers.get_for_domain(user_id, domain.domain_id)
        if user is None:
            raise ItemNotFound("htpasswd", user_id)

        def work():
            self.repos.htgroups.drop_member(domain.domain_id, user_id)
            self.repos.htaccess.drop_principal(domain.domain_id, user_id=user_id)
            self.repos.htusers.schedule(user, ItemStatus.TODELETE)

        return self._run(Operation.DELETE_HTUSER, user_id, identity, {"htuserId": user_id}, work)

    # ═══════════════════════════════════════════
    #  SQL (synchronous, no daemon involved)
    # ═══════════════════════════════════════════

    def delete_sql_database(self, customer_id: int, db_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        if not self.sql.delete_sql_database(domain.domain_id, db_id, identity):
            raise ItemNotFound("sql_database", db_id)
        return MutationResult(
            operation=Operation.DELETE_SQL_DATABASE.value, target_id=str(db_id),
            message="SQL database deleted",
        )

    def delete_sql_user(self, customer_id: int, user_id: int, identity: Optional[Identity] = None) -> MutationResult:
        _, domain = self._customer(customer_id, identity)
        if not self.sql.delete_sql_user(domain.domain_id, user_id, identity):
            raise ItemNotFound("sql_user", user_id)
        return MutationResult(
            operation=Operation.DELETE_SQL_USER.value, target_id=str(user_id),
            message="SQL user deleted",
        )

    # ═══════════════════════════════════════════
    #  Server
    # ═══════════════════════════════════════════

    def delete_server_ip(self, ip_id: int, identity: Optional[Identity] = None) -> MutationResult:
        ip = self.repos.server_ips.get(ip_id)
        if ip is None:
            raise ItemNotFound("ip", ip_id)

        return self._run(
            Operation.DELETE_SERVER_IP, ip_id, identity, {"ipId": ip_id, "ipNumber": ip.ip_number},
            lambda: self.repos.server_ips.schedule(ip, ItemStatus.TODELETE),
        )
