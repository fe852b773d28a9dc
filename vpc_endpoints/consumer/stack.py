from typing import Dict, Mapping

from constructs import Construct

from helper.config import Config
from vpc_endpoints.common.base import BaseStack
from vpc_endpoints.common.constants import CONFIG_ENDPOINT_INGRESS, DEFAULT_ENDPOINT_PORT
from vpc_endpoints.common.exceptions import StackConfigurationError
from vpc_endpoints.common.logging_config import get_logger
from vpc_endpoints.endpoints import (
    EndpointExports,
    EndpointType,
    ImportedInterfaceEndpoint,
    InterfaceEndpoint,
    allow_tcp_from_cidr,
)

logger = get_logger(__name__)


class EndpointAccessStack(BaseStack):
    """
    Stack that opens interface endpoints owned by another stack to extra clients.

    Each ``EndpointIngress`` entry names an exported interface endpoint, a
    source CIDR and a TCP port. The rules are created in this stack against
    the imported security group, so the owning stack is not redeployed.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 config: Config,
                 endpoint_exports: Mapping[str, EndpointExports],
                 **kwargs) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        self.imported_endpoints: Dict[str, ImportedInterfaceEndpoint] = {}

        for rule in self.config.get_endpoint_ingress():
            self.require_entry_keys(rule, ['EndpointId', 'Cidr'], CONFIG_ENDPOINT_INGRESS)
            endpoint_id = rule['EndpointId']
            cidr = rule['Cidr']

            exports = endpoint_exports.get(endpoint_id)
            if exports is None or exports.endpoint_type != EndpointType.INTERFACE:
                raise StackConfigurationError(
                    f"EndpointIngress references '{endpoint_id}', which is not an exported interface endpoint",
                    config_key=CONFIG_ENDPOINT_INGRESS
                )

            endpoint = InterfaceEndpoint.from_exports(self, f"{endpoint_id}Import", exports)
            self.imported_endpoints[endpoint_id] = endpoint

            port = rule.get('Port', DEFAULT_ENDPOINT_PORT)
            allow_tcp_from_cidr(endpoint, cidr, port, rule.get('Description'))
            logger.info(f"Allowed {cidr} on TCP {port} to imported endpoint {endpoint_id}")
