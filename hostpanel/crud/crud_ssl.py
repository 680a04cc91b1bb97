from hostpanel.crud.base import StatusRepository
from hostpanel.models.ssl_cert import SslCert


class SslCertRepository(StatusRepository):
    model = SslCert
    id_column = "cert_id"

    def owned_by(self, owner_type: str, owner_ids):
        """Criteria for certificates of the given owner kind; `owner_ids` is an id or a select()."""
        if isinstance(owner_ids, int):
            return (SslCert.domain_type == owner_type, SslCert.domain_id == owner_ids)
        return (SslCert.domain_type == owner_type, SslCert.domain_id.in_(owner_ids))
