from typing import Optional

from sqlalchemy import select

from hostpanel.crud.base import StatusRepository
from hostpanel.models.domain import Domain, DomainAlias, Subdomain, SubdomainAlias, DomainDns
from hostpanel.models.status import ItemStatus


class DomainRepository(StatusRepository):
    model = Domain
    id_column = "domain_id"
    status_column = "domain_status"


class AliasRepository(StatusRepository):
    model = DomainAlias
    id_column = "alias_id"
    status_column = "alias_status"

    @staticmethod
    def ids_of_domain(domain_id: int):
        return select(DomainAlias.alias_id).where(DomainAlias.domain_id == domain_id)

    def get_ordered(self, alias_id: int) -> Optional[DomainAlias]:
        return (
            self.db.query(DomainAlias)
            .filter(
                DomainAlias.alias_id == alias_id,
                DomainAlias.alias_status == ItemStatus.ORDERED.value,
            )
            .first()
        )


class SubdomainRepository(StatusRepository):
    model = Subdomain
    id_column = "subdomain_id"
    status_column = "subdomain_status"

    @staticmethod
    def ids_of_domain(domain_id: int):
        return select(Subdomain.subdomain_id).where(Subdomain.domain_id == domain_id)

    def full_name(self, subdomain: Subdomain) -> str:
        domain = self.db.query(Domain).filter(Domain.domain_id == subdomain.domain_id).first()
        return f"{subdomain.subdomain_name}.{domain.domain_name}"


class SubdomainAliasRepository(StatusRepository):
    model = SubdomainAlias
    id_column = "subdomain_alias_id"
    status_column = "subdomain_alias_status"

    @staticmethod
    def ids_of_alias(alias_id: int):
        return select(SubdomainAlias.subdomain_alias_id).where(SubdomainAlias.alias_id == alias_id)

    @staticmethod
    def ids_of_domain(domain_id: int):
        return select(SubdomainAlias.subdomain_alias_id).where(
            SubdomainAlias.alias_id.in_(AliasRepository.ids_of_domain(domain_id))
        )

    def with_alias(self, subdomain_alias_id: int):
        return (
            self.db.query(SubdomainAlias, DomainAlias)
            .join(DomainAlias, DomainAlias.alias_id == SubdomainAlias.alias_id)
            .filter(SubdomainAlias.subdomain_alias_id == subdomain_alias_id)
            .first()
        )


class DnsRepository(StatusRepository):
    model = DomainDns
    id_column = "domain_dns_id"
    status_column = "domain_dns_status"

    def get_for_domain(self, dns_id: int, domain_id: int) -> Optional[DomainDns]:
        return (
            self.db.query(DomainDns)
            .filter(DomainDns.domain_dns_id == dns_id, DomainDns.domain_id == domain_id)
            .first()
        )
