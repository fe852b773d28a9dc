"""
Gateway VPC endpoints.

A gateway endpoint is attached to the route tables of the selected subnets
and carries an optional access policy. Only services marked gateway-capable
in the catalog (S3 and DynamoDB) can back one.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from aws_cdk import Stack, aws_ec2 as ec2, aws_iam as iam
from constructs import Construct

from ..common.constants import GATEWAY_ENDPOINT_TYPE, VPC_ENDPOINT_ID_ATTRIBUTE
from ..common.exceptions import ConfigurationError
from ..common.logging_config import get_logger
from ..common.validators import EndpointValidator
from .catalog import EndpointService, EndpointServiceCatalog, EndpointType, ServiceLike
from .graph import EndpointResourceNode
from .policy import AccessPolicyDocument, PolicyPrincipalValidation
from .references import EndpointExports, EndpointReferenceBroker, ReferenceState
from .subnets import SubnetCriteria, SubnetSelection, SubnetSelector

logger = get_logger(__name__)


@dataclass
class GatewayEndpointOptions:
    """Options for adding a gateway endpoint to an EndpointNetwork."""
    service: ServiceLike
    subnets: Optional[Sequence[SubnetCriteria]] = None


class GatewayEndpoint(Construct):
    """
    A gateway VPC endpoint owned by the current stack.

    Attributes:
        service: Catalog entry of the service reached through the endpoint
        policy: Access policy of the endpoint
        route_table_ids: Deduplicated route tables the endpoint is attached to
        vpc_endpoint_id: Reference to the endpoint id
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 vpc: ec2.IVpc,
                 service: ServiceLike,
                 subnets: Optional[Sequence[SubnetCriteria]] = None) -> None:
        """
        Create the endpoint and attach it to the route tables of the selected subnets.

        Args:
            scope: Construct scope, usually the owning EndpointNetwork
            construct_id: Unique identifier for this construct
            vpc: VPC the endpoint belongs to
            service: Catalog service, must be gateway-capable
            subnets: Subnet criteria; defaults to all private subnets

        Raises:
            UnsupportedEndpointTypeError: If the service cannot back a gateway endpoint
            ConfigurationError: If the selection matches no subnets or no route tables
        """
        EndpointValidator.validate_vpc(vpc)
        endpoint_service = EndpointServiceCatalog.get(service)
        EndpointValidator.validate_service_for_type(endpoint_service, GATEWAY_ENDPOINT_TYPE)

        selection = SubnetSelector.resolve(vpc, subnets)
        route_table_ids = selection.route_table_ids
        if not route_table_ids:
            raise ConfigurationError(
                f"Gateway endpoint '{construct_id}' selected subnets without route tables",
                config_key="subnets"
            )

        super().__init__(scope, construct_id)

        self.vpc = vpc
        self.service: EndpointService = endpoint_service
        self.subnet_selection: SubnetSelection = selection
        self.route_table_ids: List[str] = route_table_ids
        self.policy = AccessPolicyDocument(owner=self.node.path)
        self.node.add_validation(PolicyPrincipalValidation(self.policy))
        self.reference_state: Optional[ReferenceState] = None
        self.service_name = endpoint_service.service_name(Stack.of(self).region)

        self._resource = ec2.CfnVPCEndpoint(
            self,
            "Resource",
            vpc_id=vpc.vpc_id,
            service_name=self.service_name,
            vpc_endpoint_type=GATEWAY_ENDPOINT_TYPE,
            route_table_ids=route_table_ids,
            policy_document=self.policy.document
        )

        self.vpc_endpoint_id: str = self._resource.ref
        self.vpc_endpoint_creation_timestamp: str = self._resource.attr_creation_timestamp

        logger.info(
            f"Created gateway endpoint {self.node.path} for {endpoint_service.key} "
            f"on {len(route_table_ids)} route table(s)"
        )

    def add_to_policy(self, statement: iam.PolicyStatement) -> None:
        """
        Append a statement to the endpoint's access policy.

        The statement is not checked here; a statement without a principal is
        reported when the policy is validated or rendered, and fails synthesis.
        """
        self.policy.add_statements(statement)

    def export(self) -> EndpointExports:
        """
        Export the endpoint identity for use in other stacks.

        The access policy is not part of the export; it stays with this stack.
        """
        exports = EndpointReferenceBroker.export_endpoint(
            self,
            EndpointType.GATEWAY,
            {VPC_ENDPOINT_ID_ATTRIBUTE: self.vpc_endpoint_id}
        )
        self.reference_state = ReferenceState.EXPORTED
        return exports

    @classmethod
    def from_exports(cls,
                     scope: Construct,
                     construct_id: str,
                     exports: EndpointExports) -> "ImportedGatewayEndpoint":
        """Import a gateway endpoint exported from another stack."""
        existing = EndpointReferenceBroker.existing_import(scope, construct_id, exports, ImportedGatewayEndpoint)
        if existing is not None:
            return existing
        return ImportedGatewayEndpoint(scope, construct_id, exports)

    def to_resource_node(self) -> EndpointResourceNode:
        """
        Render the endpoint as an abstract resource graph node.

        Raises:
            InvalidPolicyError: If a policy statement has no principal
        """
        return EndpointResourceNode(
            path=self.node.path,
            endpoint_type=EndpointType.GATEWAY,
            service_name=self.service_name,
            vpc_id=self.vpc.vpc_id,
            route_table_ids=tuple(self.route_table_ids),
            policy_document=self.policy.render()
        )


class ImportedGatewayEndpoint(Construct):
    """
    Read-only view of a gateway endpoint owned by another stack.

    Only the endpoint id is available; the access policy belongs to the
    owning stack and cannot be changed from here.
    """

    def __init__(self, scope: Construct, construct_id: str, exports: EndpointExports) -> None:
        attributes = EndpointReferenceBroker.import_attributes(
            exports, EndpointType.GATEWAY, [VPC_ENDPOINT_ID_ATTRIBUTE]
        )
        super().__init__(scope, construct_id)

        self.exports = exports
        self.reference_state = ReferenceState.IMPORTED
        self.vpc_endpoint_id: str = attributes[VPC_ENDPOINT_ID_ATTRIBUTE]

        logger.debug(f"Imported gateway endpoint {self.node.path}")
