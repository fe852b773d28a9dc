"""
Network container that owns VPC endpoints.

``EndpointNetwork`` wraps an existing VPC or creates one, builds the
endpoints listed in its configuration and offers factory methods for adding
more afterwards. Every endpoint it creates is one of its child constructs.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from ..common.constants import DEFAULT_MAX_AZS
from ..common.logging_config import get_logger
from ..common.validators import ConfigValidator
from .catalog import AwsService
from .gateway import GatewayEndpoint, GatewayEndpointOptions
from .graph import EndpointResourceNode
from .interface import InterfaceEndpoint, InterfaceEndpointOptions
from .subnets import SubnetCriteria

logger = get_logger(__name__)


class EndpointNetwork(Construct):
    """
    A VPC together with the endpoints attached to it.

    Attributes:
        vpc: The wrapped or created VPC
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 vpc: Optional[ec2.IVpc] = None,
                 max_azs: Optional[int] = None,
                 subnet_configuration: Optional[List[ec2.SubnetConfiguration]] = None,
                 nat_gateways: Optional[int] = None,
                 gateway_endpoints: Optional[Mapping[str, GatewayEndpointOptions]] = None,
                 interface_endpoints: Optional[Mapping[str, InterfaceEndpointOptions]] = None) -> None:
        """
        Initialize the network.

        Args:
            scope: CDK scope
            construct_id: Unique identifier for this construct
            vpc: Existing VPC to attach endpoints to; a new VPC is created when omitted
            max_azs: Number of availability zones of a created VPC
            subnet_configuration: Subnet groups of a created VPC
            nat_gateways: NAT gateway count of a created VPC
            gateway_endpoints: Gateway endpoints to create, keyed by endpoint id
            interface_endpoints: Interface endpoints to create, keyed by endpoint id
        """
        super().__init__(scope, construct_id)

        if vpc is None:
            vpc = ec2.Vpc(
                self,
                "Vpc",
                max_azs=max_azs or DEFAULT_MAX_AZS,
                subnet_configuration=subnet_configuration,
                nat_gateways=nat_gateways
            )
        self.vpc: ec2.IVpc = vpc

        self._gateway_endpoints: Dict[str, GatewayEndpoint] = {}
        self._interface_endpoints: Dict[str, InterfaceEndpoint] = {}

        for endpoint_id, options in (gateway_endpoints or {}).items():
            self.add_gateway_endpoint(endpoint_id, options)

        for endpoint_id, options in (interface_endpoints or {}).items():
            self.add_interface_endpoint(endpoint_id, options)

    @property
    def gateway_endpoints(self) -> Dict[str, GatewayEndpoint]:
        return dict(self._gateway_endpoints)

    @property
    def interface_endpoints(self) -> Dict[str, InterfaceEndpoint]:
        return dict(self._interface_endpoints)

    def add_gateway_endpoint(self, endpoint_id: str, options: GatewayEndpointOptions) -> GatewayEndpoint:
        """Create a gateway endpoint in this network."""
        ConfigValidator.validate_construct_id(endpoint_id)
        endpoint = GatewayEndpoint(
            self,
            endpoint_id,
            vpc=self.vpc,
            service=options.service,
            subnets=options.subnets
        )
        self._gateway_endpoints[endpoint_id] = endpoint
        return endpoint

    def add_interface_endpoint(self, endpoint_id: str, options: InterfaceEndpointOptions) -> InterfaceEndpoint:
        """Create an interface endpoint in this network."""
        ConfigValidator.validate_construct_id(endpoint_id)
        endpoint = InterfaceEndpoint(
            self,
            endpoint_id,
            vpc=self.vpc,
            service=options.service,
            subnets=options.subnets,
            private_dns_enabled=options.private_dns_enabled,
            security_groups=options.security_groups,
            open=options.open,
            port=options.port
        )
        self._interface_endpoints[endpoint_id] = endpoint
        return endpoint

    def add_s3_endpoint(self,
                        endpoint_id: str,
                        subnets: Optional[Sequence[SubnetCriteria]] = None) -> GatewayEndpoint:
        return self.add_gateway_endpoint(endpoint_id, GatewayEndpointOptions(AwsService.S3, subnets))

    def add_dynamodb_endpoint(self,
                              endpoint_id: str,
                              subnets: Optional[Sequence[SubnetCriteria]] = None) -> GatewayEndpoint:
        return self.add_gateway_endpoint(endpoint_id, GatewayEndpointOptions(AwsService.DYNAMODB, subnets))

    def validate(self) -> None:
        """
        Check every gateway endpoint policy.

        Raises:
            InvalidPolicyError: If a policy statement has no principal
        """
        for endpoint in self._gateway_endpoints.values():
            endpoint.policy.validate()

    def resource_graph(self) -> List[EndpointResourceNode]:
        """
        Render every endpoint of the network as an abstract resource node.

        Gateway endpoints come first, each group in creation order.

        Raises:
            InvalidPolicyError: If a policy statement has no principal
        """
        nodes = [endpoint.to_resource_node() for endpoint in self._gateway_endpoints.values()]
        nodes.extend(endpoint.to_resource_node() for endpoint in self._interface_endpoints.values())
        logger.debug(f"Rendered {len(nodes)} endpoint node(s) for {self.node.path}")
        return nodes
