"""
Interface VPC endpoints.

An interface endpoint places one elastic network interface in each selected
subnet, so at most one subnet per availability zone may be selected. Traffic
to the interfaces is guarded by security groups that any holder of the
endpoint, including an imported proxy in another stack, can add rules to.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from aws_cdk import Stack, aws_ec2 as ec2
from constructs import Construct

from ..common.constants import (
    DEFAULT_ENDPOINT_PORT,
    INTERFACE_ENDPOINT_TYPE,
    SECURITY_GROUP_ID_ATTRIBUTE,
    VPC_ENDPOINT_ID_ATTRIBUTE,
)
from ..common.logging_config import get_logger
from ..common.validators import ConfigValidator, EndpointValidator
from .catalog import EndpointService, EndpointServiceCatalog, EndpointType, ServiceLike
from .connections import add_ingress_rule
from .graph import EndpointResourceNode
from .references import EndpointExports, EndpointReferenceBroker, ReferenceState
from .subnets import SubnetCriteria, SubnetSelection, SubnetSelector

logger = get_logger(__name__)


@dataclass
class InterfaceEndpointOptions:
    """Options for adding an interface endpoint to an EndpointNetwork."""
    service: ServiceLike
    subnets: Optional[Sequence[SubnetCriteria]] = None
    private_dns_enabled: Optional[bool] = None
    security_groups: Optional[List[ec2.ISecurityGroup]] = None
    open: bool = False
    port: int = DEFAULT_ENDPOINT_PORT


class InterfaceEndpoint(Construct):
    """
    An interface VPC endpoint owned by the current stack.

    Attributes:
        service: Catalog entry of the service reached through the endpoint
        subnet_ids: One subnet per availability zone
        security_groups: Security groups guarding the endpoint interfaces
        connections: Connections object for adding ingress rules
        private_dns_enabled: Whether the service's public DNS name resolves to the endpoint
        vpc_endpoint_id: Reference to the endpoint id
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 vpc: ec2.IVpc,
                 service: ServiceLike,
                 subnets: Optional[Sequence[SubnetCriteria]] = None,
                 private_dns_enabled: Optional[bool] = None,
                 security_groups: Optional[List[ec2.ISecurityGroup]] = None,
                 open: bool = False,
                 port: int = DEFAULT_ENDPOINT_PORT) -> None:
        """
        Create the endpoint in one subnet per availability zone.

        Args:
            scope: Construct scope, usually the owning EndpointNetwork
            construct_id: Unique identifier for this construct
            vpc: VPC the endpoint belongs to
            service: Catalog service, must be interface-capable
            subnets: Subnet criteria; defaults to all private subnets
            private_dns_enabled: Override the service's private DNS default
            security_groups: Existing security groups to use instead of creating one
            open: Allow the endpoint port from the VPC CIDR block
            port: Port the endpoint serves on

        Raises:
            UnsupportedEndpointTypeError: If the service cannot back an interface endpoint
            ConfigurationError: If the selection matches no subnets
            TopologyError: If two selected subnets share an availability zone
        """
        EndpointValidator.validate_vpc(vpc)
        ConfigValidator.validate_port_range(port)
        endpoint_service = EndpointServiceCatalog.get(service)
        EndpointValidator.validate_service_for_type(endpoint_service, INTERFACE_ENDPOINT_TYPE)

        selection = SubnetSelector.resolve(vpc, subnets, one_per_az_required=True)

        super().__init__(scope, construct_id)

        self.vpc = vpc
        self.service: EndpointService = endpoint_service
        self.subnet_selection: SubnetSelection = selection
        self.subnet_ids: List[str] = selection.subnet_ids
        self.availability_zones: List[str] = selection.availability_zones
        self.reference_state: Optional[ReferenceState] = None
        self.service_name = endpoint_service.service_name(Stack.of(self).region)
        self.private_dns_enabled: bool = (
            endpoint_service.private_dns_required if private_dns_enabled is None else private_dns_enabled
        )

        if security_groups:
            self.security_groups: List[ec2.ISecurityGroup] = list(security_groups)
        else:
            self.security_groups = [
                ec2.SecurityGroup(
                    self,
                    "SecurityGroup",
                    vpc=vpc,
                    allow_all_outbound=True
                )
            ]

        self._connections = ec2.Connections(
            security_groups=self.security_groups,
            default_port=ec2.Port.tcp(port)
        )

        if open:
            self._connections.allow_default_port_from(
                ec2.Peer.ipv4(vpc.vpc_cidr_block),
                f"Allow TCP {port} from the VPC CIDR block"
            )

        self._resource = ec2.CfnVPCEndpoint(
            self,
            "Resource",
            vpc_id=vpc.vpc_id,
            service_name=self.service_name,
            vpc_endpoint_type=INTERFACE_ENDPOINT_TYPE,
            subnet_ids=self.subnet_ids,
            security_group_ids=[sg.security_group_id for sg in self.security_groups],
            private_dns_enabled=self.private_dns_enabled
        )

        self.vpc_endpoint_id: str = self._resource.ref
        self.dns_entries: List[str] = self._resource.attr_dns_entries
        self.network_interface_ids: List[str] = self._resource.attr_network_interface_ids

        logger.info(
            f"Created interface endpoint {self.node.path} for {endpoint_service.key} "
            f"in {len(self.subnet_ids)} subnet(s)"
        )

    @property
    def connections(self) -> ec2.Connections:
        return self._connections

    @property
    def security_group_id(self) -> str:
        return self.security_groups[0].security_group_id

    def add_ingress_rule(self,
                         peer: ec2.IPeer,
                         port: ec2.Port,
                         description: Optional[str] = None) -> None:
        add_ingress_rule(self._connections, peer, port, description)

    def export(self) -> EndpointExports:
        """Export the endpoint id and security group id for use in other stacks."""
        exports = EndpointReferenceBroker.export_endpoint(
            self,
            EndpointType.INTERFACE,
            {
                VPC_ENDPOINT_ID_ATTRIBUTE: self.vpc_endpoint_id,
                SECURITY_GROUP_ID_ATTRIBUTE: self.security_group_id,
            }
        )
        self.reference_state = ReferenceState.EXPORTED
        return exports

    @classmethod
    def from_exports(cls,
                     scope: Construct,
                     construct_id: str,
                     exports: EndpointExports,
                     port: int = DEFAULT_ENDPOINT_PORT) -> "ImportedInterfaceEndpoint":
        """Import an interface endpoint exported from another stack."""
        existing = EndpointReferenceBroker.existing_import(scope, construct_id, exports, ImportedInterfaceEndpoint)
        if existing is not None:
            return existing
        return ImportedInterfaceEndpoint(scope, construct_id, exports, port=port)

    def to_resource_node(self) -> EndpointResourceNode:
        return EndpointResourceNode(
            path=self.node.path,
            endpoint_type=EndpointType.INTERFACE,
            service_name=self.service_name,
            vpc_id=self.vpc.vpc_id,
            subnet_ids=tuple(self.subnet_ids),
            security_group_ids=tuple(sg.security_group_id for sg in self.security_groups),
            private_dns_enabled=self.private_dns_enabled
        )


class ImportedInterfaceEndpoint(Construct):
    """
    Proxy for an interface endpoint owned by another stack.

    Ingress rules added here are rendered in the importing stack and target
    the origin endpoint's security group through its exported id.
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 exports: EndpointExports,
                 port: int = DEFAULT_ENDPOINT_PORT) -> None:
        attributes = EndpointReferenceBroker.import_attributes(
            exports,
            EndpointType.INTERFACE,
            [VPC_ENDPOINT_ID_ATTRIBUTE, SECURITY_GROUP_ID_ATTRIBUTE]
        )
        super().__init__(scope, construct_id)

        self.exports = exports
        self.reference_state = ReferenceState.IMPORTED
        self.vpc_endpoint_id: str = attributes[VPC_ENDPOINT_ID_ATTRIBUTE]
        self.security_group_id: str = attributes[SECURITY_GROUP_ID_ATTRIBUTE]

        self.security_group = ec2.SecurityGroup.from_security_group_id(
            self,
            "SecurityGroup",
            self.security_group_id
        )
        self._connections = ec2.Connections(
            security_groups=[self.security_group],
            default_port=ec2.Port.tcp(port)
        )

        logger.debug(f"Imported interface endpoint {self.node.path}")

    @property
    def connections(self) -> ec2.Connections:
        return self._connections

    def add_ingress_rule(self,
                         peer: ec2.IPeer,
                         port: ec2.Port,
                         description: Optional[str] = None) -> None:
        add_ingress_rule(self._connections, peer, port, description)
