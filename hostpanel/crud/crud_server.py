from hostpanel.crud.base import StatusRepository
from hostpanel.models.plugin import Plugin
from hostpanel.models.server_ip import ServerIp


class ServerIpRepository(StatusRepository):
    model = ServerIp
    id_column = "ip_id"
    status_column = "ip_status"


class PluginRepository(StatusRepository):
    model = Plugin
    id_column = "plugin_id"
    status_column = "plugin_status"
