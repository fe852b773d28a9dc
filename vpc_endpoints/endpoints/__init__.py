"""
VPC endpoint constructs.

Gateway and interface endpoints, the service catalog they draw from, subnet
selection, access policies and cross-stack export/import.
"""

from .catalog import AwsService, EndpointService, EndpointServiceCatalog, EndpointType
from .connections import IngressRuleAcceptor, allow_tcp_from_cidr
from .gateway import GatewayEndpoint, GatewayEndpointOptions, ImportedGatewayEndpoint
from .graph import EndpointResourceNode
from .interface import ImportedInterfaceEndpoint, InterfaceEndpoint, InterfaceEndpointOptions
from .network import EndpointNetwork
from .policy import AccessPolicyDocument
from .references import EndpointExports, EndpointReferenceBroker, ExportToken, ReferenceState
from .subnets import SelectedSubnet, SubnetCriteria, SubnetSelection, SubnetSelector

__all__ = [
    "AccessPolicyDocument",
    "AwsService",
    "EndpointExports",
    "EndpointNetwork",
    "EndpointReferenceBroker",
    "EndpointResourceNode",
    "EndpointService",
    "EndpointServiceCatalog",
    "EndpointType",
    "ExportToken",
    "GatewayEndpoint",
    "GatewayEndpointOptions",
    "ImportedGatewayEndpoint",
    "ImportedInterfaceEndpoint",
    "IngressRuleAcceptor",
    "InterfaceEndpoint",
    "InterfaceEndpointOptions",
    "ReferenceState",
    "SelectedSubnet",
    "SubnetCriteria",
    "SubnetSelection",
    "SubnetSelector",
    "allow_tcp_from_cidr",
]
