from typing import Any, Dict, List, Mapping

from aws_cdk import CfnOutput, aws_ec2 as ec2, aws_iam as iam
from constructs import Construct

from helper.config import Config
from vpc_endpoints.common.base import BaseStack
from vpc_endpoints.common.logging_config import get_logger
from vpc_endpoints.common.constants import (
    CONFIG_ENABLE_FLOW_LOGS,
    CONFIG_GATEWAY_ENDPOINTS,
    CONFIG_INTERFACE_ENDPOINTS,
    CONFIG_MAX_AZS,
    CONFIG_NAT_GATEWAYS,
    CONFIG_PROJECT_NAME,
    CONFIG_SUBNET_GROUPS,
    DEFAULT_CIDR_MASK,
    DEFAULT_ENDPOINT_PORT,
    DEFAULT_MAX_AZS,
    DEFAULT_NAT_GATEWAYS,
    DEFAULT_SUBNET_GROUPS,
)
from vpc_endpoints.endpoints import (
    EndpointExports,
    EndpointNetwork,
    GatewayEndpointOptions,
    InterfaceEndpointOptions,
)
from vpc_endpoints.endpoints.subnets import criteria_from_config, parse_subnet_type

logger = get_logger(__name__)


class VpcEndpointStack(BaseStack):
    """
    Stack owning a VPC and the endpoints attached to it.

    The VPC layout and the endpoints are read from configuration. Endpoints
    marked ``Export: true`` are exported, and their token sets are kept in
    ``endpoint_exports`` for consuming stacks.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 config: Config,
                 **kwargs) -> None:
        super().__init__(scope, construct_id, config, **kwargs)

        gateway_entries = self.config.get_gateway_endpoints()
        interface_entries = self.config.get_interface_endpoints()

        self.network = EndpointNetwork(
            self,
            "Network",
            max_azs=self.get_optional_config(CONFIG_MAX_AZS, DEFAULT_MAX_AZS),
            subnet_configuration=self._subnet_configuration(),
            nat_gateways=self.get_optional_config(CONFIG_NAT_GATEWAYS, DEFAULT_NAT_GATEWAYS),
            gateway_endpoints=self._gateway_options(gateway_entries),
            interface_endpoints=self._interface_options(interface_entries)
        )
        self.vpc = self.network.vpc

        if self.get_optional_config(CONFIG_ENABLE_FLOW_LOGS, True):
            self.vpc.add_flow_log("FlowLog")

        # Policies are attached after every endpoint exists
        for entry in gateway_entries:
            endpoint = self.network.gateway_endpoints[entry['Id']]
            for statement in entry.get('PolicyStatements', []):
                endpoint.add_to_policy(iam.PolicyStatement.from_json(statement))

        self.network.validate()

        self.endpoint_exports: Dict[str, EndpointExports] = {}
        for entry in gateway_entries:
            if entry.get('Export', False):
                self.endpoint_exports[entry['Id']] = self.network.gateway_endpoints[entry['Id']].export()
        for entry in interface_entries:
            if entry.get('Export', False):
                self.endpoint_exports[entry['Id']] = self.network.interface_endpoints[entry['Id']].export()

        self.add_common_tags(self.network)

        CfnOutput(
            self, "VpcIdExport",
            value=self.vpc.vpc_id,
            export_name=f"{self.get_required_config(CONFIG_PROJECT_NAME)}-VpcId",
            description="VPC ID of the endpoint network"
        )

        logger.info(
            f"Stack {construct_id}: {len(gateway_entries)} gateway and "
            f"{len(interface_entries)} interface endpoint(s), {len(self.endpoint_exports)} exported"
        )

    def _subnet_configuration(self) -> List[ec2.SubnetConfiguration]:
        """Translate SubnetGroups into VPC subnet configuration."""
        groups = self.config.get_subnet_groups() or DEFAULT_SUBNET_GROUPS
        configuration = []
        for group in groups:
            self.require_entry_keys(group, ['Name', 'SubnetType'], CONFIG_SUBNET_GROUPS)
            configuration.append(
                ec2.SubnetConfiguration(
                    name=group['Name'],
                    subnet_type=parse_subnet_type(group['SubnetType']),
                    cidr_mask=group.get('CidrMask', DEFAULT_CIDR_MASK)
                )
            )
        return configuration

    def _gateway_options(self, entries: List[Mapping[str, Any]]) -> Dict[str, GatewayEndpointOptions]:
        options = {}
        for entry in entries:
            self.require_entry_keys(entry, ['Id', 'Service'], CONFIG_GATEWAY_ENDPOINTS)
            options[entry['Id']] = GatewayEndpointOptions(
                service=entry['Service'],
                subnets=self._subnet_criteria(entry)
            )
        return options

    def _interface_options(self, entries: List[Mapping[str, Any]]) -> Dict[str, InterfaceEndpointOptions]:
        options = {}
        for entry in entries:
            self.require_entry_keys(entry, ['Id', 'Service'], CONFIG_INTERFACE_ENDPOINTS)
            options[entry['Id']] = InterfaceEndpointOptions(
                service=entry['Service'],
                subnets=self._subnet_criteria(entry),
                private_dns_enabled=entry.get('PrivateDnsEnabled'),
                open=bool(entry.get('Open', False)),
                port=entry.get('Port', DEFAULT_ENDPOINT_PORT)
            )
        return options

    @staticmethod
    def _subnet_criteria(entry: Mapping[str, Any]):
        subnets = entry.get('Subnets')
        if not subnets:
            return None
        return [criteria_from_config(subnet) for subnet in subnets]
