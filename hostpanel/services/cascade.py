"""
Cascade propagation of lifecycle transitions from a parent entity to every
dependent entity.

All methods must run inside a MutationCoordinator transaction; the
repositories refuse to write otherwise. Sibling writes are independent status
updates, so their order does not matter.
"""
import logging
import re
from typing import Callable, Optional

from sqlalchemy import or_

from hostpanel.crud import Repositories
from hostpanel.crud.crud_domain import AliasRepository, SubdomainRepository, SubdomainAliasRepository
from hostpanel.models.domain import Domain, DomainAlias, Subdomain, SubdomainAlias, DomainDns
from hostpanel.models.ftp import FtpUser
from hostpanel.models.htaccess import Htaccess, HtaccessGroup, HtaccessUser
from hostpanel.models.mail import MailUser
from hostpanel.models.ssl_cert import (
    SSL_OWNER_DOMAIN,
    SSL_OWNER_ALIAS,
    SSL_OWNER_SUBDOMAIN,
    SSL_OWNER_SUBDOMAIN_ALIAS,
)
from hostpanel.models.status import ItemStatus

logger = logging.getLogger("hostpanel.cascade")

TODELETE = ItemStatus.TODELETE


def member_of(host: str) -> Callable[[str], bool]:
    """Predicate matching ftp userids that live on `host` or any of its subdomains."""
    pattern = re.compile(r"@(?:.+\.)*" + re.escape(host) + r"$")
    return lambda member: bool(pattern.search(member))


class CascadePropagator:
    def __init__(self, repos: Repositories):
        self.repos = repos

    # ── deletion ──

    def schedule_domain_deletion(self, domain_id: int, customer_id: int) -> None:
        """Flag the domain and everything below it `todelete`."""
        r = self.repos
        r.ftp.flag(FtpUser.admin_id == customer_id, status=TODELETE)
        r.mail.flag(MailUser.domain_id == domain_id, status=TODELETE)
        r.subdomain_aliases.flag(
            SubdomainAlias.alias_id.in_(AliasRepository.ids_of_domain(domain_id)), status=TODELETE
        )
        r.aliases.flag(DomainAlias.domain_id == domain_id, status=TODELETE)
        r.subdomains.flag(Subdomain.domain_id == domain_id, status=TODELETE)
        r.domains.flag(Domain.domain_id == domain_id, status=TODELETE)

        r.ssl_certs.flag(*r.ssl_certs.owned_by(SSL_OWNER_DOMAIN, domain_id), status=TODELETE)
        r.ssl_certs.flag(
            *r.ssl_certs.owned_by(SSL_OWNER_ALIAS, AliasRepository.ids_of_domain(domain_id)),
            status=TODELETE,
        )
        r.ssl_certs.flag(
            *r.ssl_certs.owned_by(SSL_OWNER_SUBDOMAIN, SubdomainRepository.ids_of_domain(domain_id)),
            status=TODELETE,
        )
        r.ssl_certs.flag(
            *r.ssl_certs.owned_by(
                SSL_OWNER_SUBDOMAIN_ALIAS, SubdomainAliasRepository.ids_of_domain(domain_id)
            ),
            status=TODELETE,
        )

        r.dns.flag(DomainDns.domain_id == domain_id, status=TODELETE)
        r.htaccess.flag(Htaccess.dmn_id == domain_id, status=TODELETE)
        r.htgroups.flag(HtaccessGroup.dmn_id == domain_id, status=TODELETE)
        r.htusers.flag(HtaccessUser.dmn_id == domain_id, status=TODELETE)
        logger.debug("Domain %s subtree flagged for deletion", domain_id)

    def schedule_alias_deletion(self, alias: DomainAlias, customer_id: int, ftp_group: Optional[str]) -> None:
        r = self.repos
        alias_id = alias.alias_id
        sub_alias_names = [
            f"{sa.subdomain_alias_name}.{alias.alias_name}"
            for sa in r.db.query(SubdomainAlias).filter(SubdomainAlias.alias_id == alias_id).all()
        ]

        if ftp_group:
            r.ftp_groups.prune_members(ftp_group, member_of(alias.alias_name))

        hosts = [alias.alias_name] + sub_alias_names
        r.ftp.flag(
            FtpUser.admin_id == customer_id,
            or_(*[FtpUser.userid.like(f"%@{host}") for host in hosts]),
            status=TODELETE,
        )
        r.mail.flag(
            or_(
                (MailUser.sub_id == alias_id) & MailUser.mail_type.contains("alias_", autoescape=True),
                MailUser.sub_id.in_(SubdomainAliasRepository.ids_of_alias(alias_id))
                & MailUser.mail_type.contains("alssub_", autoescape=True),
            ),
            MailUser.domain_id == alias.domain_id,
            status=TODELETE,
        )
        r.ssl_certs.flag(
            *r.ssl_certs.owned_by(SSL_OWNER_SUBDOMAIN_ALIAS, SubdomainAliasRepository.ids_of_alias(alias_id)),
            status=TODELETE,
        )
        r.ssl_certs.flag(*r.ssl_certs.owned_by(SSL_OWNER_ALIAS, alias_id), status=TODELETE)
        r.htaccess.flag(*r.htaccess.under_path(alias.domain_id, alias.alias_mount), status=TODELETE)
        r.dns.flag(DomainDns.alias_id == alias_id, status=TODELETE)
        r.subdomain_aliases.flag(SubdomainAlias.alias_id == alias_id, status=TODELETE)
        r.aliases.flag(DomainAlias.alias_id == alias_id, status=TODELETE)

    def schedule_subdomain_deletion(self, subdomain: Subdomain, customer_id: int, ftp_group: Optional[str]) -> None:
        r = self.repos
        full_name = r.subdomains.full_name(subdomain)

        if ftp_group:
            r.ftp_groups.prune_members(ftp_group, lambda m: m.endswith(f"@{full_name}"))

        r.ftp.flag(
            FtpUser.admin_id == customer_id, FtpUser.userid.like(f"%@{full_name}"), status=TODELETE
        )
        r.mail.flag(
            MailUser.sub_id == subdomain.subdomain_id,
            MailUser.mail_type.contains("subdom_", autoescape=True),
            status=TODELETE,
        )
        r.ssl_certs.flag(
            *r.ssl_certs.owned_by(SSL_OWNER_SUBDOMAIN, subdomain.subdomain_id), status=TODELETE
        )
        r.htaccess.flag(
            *r.htaccess.under_path(subdomain.domain_id, subdomain.subdomain_mount), status=TODELETE
        )
        r.subdomains.flag(Subdomain.subdomain_id == subdomain.subdomain_id, status=TODELETE)

    def schedule_subdomain_alias_deletion(
        self,
        subdomain_alias: SubdomainAlias,
        alias: DomainAlias,
        customer_id: int,
        ftp_group: Optional[str],
    ) -> None:
        r = self.repos
        sa_id = subdomain_alias.subdomain_alias_id
        full_name = f"{subdomain_alias.subdomain_alias_name}.{alias.alias_name}"

        if ftp_group:
            r.ftp_groups.prune_members(ftp_group, lambda m: m.endswith(f"@{full_name}"))

        r.ftp.flag(
            FtpUser.admin_id == customer_id, FtpUser.userid.like(f"%@{full_name}"), status=TODELETE
        )
        r.mail.flag(
            MailUser.sub_id == sa_id,
            MailUser.mail_type.contains("alssub_", autoescape=True),
            status=TODELETE,
        )
        r.ssl_certs.flag(*r.ssl_certs.owned_by(SSL_OWNER_SUBDOMAIN_ALIAS, sa_id), status=TODELETE)
        r.htaccess.flag(
            *r.htaccess.under_path(alias.domain_id, subdomain_alias.subdomain_alias_mount),
            status=TODELETE,
        )
        r.subdomain_aliases.flag(SubdomainAlias.subdomain_alias_id == sa_id, status=TODELETE)

    # ── activation / deactivation ──

    def change_domain_status(
        self, domain_id: int, customer_id: int, activate: bool, hard_mail_suspension: bool
    ) -> ItemStatus:
        """Flag the customer's hosting objects `toenable` or `todisable`."""
        r = self.repos
        new_status = ItemStatus.TOENABLE if activate else ItemStatus.TODISABLE
        has_mailbox = MailUser.mail_type.contains("_mail", autoescape=True)

        if not activate:
            if hard_mail_suspension:  # SMTP/IMAP/POP disabled
                r.mail.flag(MailUser.domain_id == domain_id, status=ItemStatus.TODISABLE)
            r.mail.set_pop_active(MailUser.domain_id == domain_id, active=False)
        else:
            r.mail.flag(
                MailUser.domain_id == domain_id,
                MailUser.status == ItemStatus.DISABLED.value,
                status=ItemStatus.TOENABLE,
            )
            r.mail.set_pop_active(MailUser.domain_id == domain_id, has_mailbox, active=True)

        r.ftp.flag(FtpUser.admin_id == customer_id, status=new_status)
        r.htaccess.flag(Htaccess.dmn_id == domain_id, status=new_status)
        r.htgroups.flag(HtaccessGroup.dmn_id == domain_id, status=new_status)
        r.htusers.flag(HtaccessUser.dmn_id == domain_id, status=new_status)
        r.domains.flag(Domain.domain_id == domain_id, status=new_status)
        r.subdomains.flag(Subdomain.domain_id == domain_id, status=new_status)
        r.aliases.flag(DomainAlias.domain_id == domain_id, status=new_status)
        r.subdomain_aliases.flag(
            SubdomainAlias.alias_id.in_(AliasRepository.ids_of_domain(domain_id)), status=new_status
        )
        r.dns.flag(DomainDns.domain_id == domain_id, status=new_status)
        return new_status
