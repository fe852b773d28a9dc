"""
Tests for the EndpointNetwork container.
"""

import pytest
from aws_cdk import aws_ec2 as ec2, aws_iam as iam
from aws_cdk.assertions import Template

from vpc_endpoints.common.exceptions import InvalidPolicyError, ValidationError
from vpc_endpoints.endpoints import (
    AwsService,
    EndpointNetwork,
    EndpointType,
    GatewayEndpointOptions,
    InterfaceEndpointOptions,
    SubnetCriteria,
)


class TestEndpointNetwork:
    """Test VPC creation and endpoints built from options."""

    def test_creates_vpc_and_configured_endpoints(self, stack):
        network = EndpointNetwork(
            stack,
            "Network",
            max_azs=3,
            gateway_endpoints={"S3": GatewayEndpointOptions(service=AwsService.S3)},
            interface_endpoints={"Sqs": InterfaceEndpointOptions(service="Sqs")}
        )

        template = Template.from_stack(stack)
        template.resource_count_is("AWS::EC2::VPC", 1)
        template.resource_count_is("AWS::EC2::VPCEndpoint", 2)
        assert len(network.vpc.availability_zones) == 3
        assert list(network.gateway_endpoints) == ["S3"]
        assert list(network.interface_endpoints) == ["Sqs"]

    def test_wraps_existing_vpc(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        assert network.vpc is vpc
        Template.from_stack(stack).resource_count_is("AWS::EC2::VPC", 1)

    def test_custom_subnet_configuration(self, stack):
        network = EndpointNetwork(
            stack,
            "Network",
            max_azs=2,
            subnet_configuration=[
                ec2.SubnetConfiguration(name="Isolated", subnet_type=ec2.SubnetType.PRIVATE_ISOLATED)
            ]
        )
        endpoint = network.add_gateway_endpoint("S3", GatewayEndpointOptions(service=AwsService.S3))
        assert endpoint.subnet_selection.subnet_ids == [
            subnet.subnet_id for subnet in network.vpc.isolated_subnets
        ]

    def test_endpoint_views_are_read_only(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        network.add_s3_endpoint("S3")
        network.gateway_endpoints.clear()
        assert list(network.gateway_endpoints) == ["S3"]

    def test_endpoint_id_with_separator_is_rejected(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        with pytest.raises(ValidationError):
            network.add_s3_endpoint("S3/Bad")

    def test_endpoints_are_children_of_network(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        endpoint = network.add_interface_endpoint(
            "Kms", InterfaceEndpointOptions(service=AwsService.KMS, subnets=[SubnetCriteria()])
        )
        assert endpoint.node.path == "TestStack/Network/Kms"


class TestResourceGraph:
    """Test rendering the network as resource nodes."""

    def test_gateway_nodes_come_first(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        network.add_interface_endpoint("EcrDocker", InterfaceEndpointOptions(service=AwsService.ECR_DOCKER))
        network.add_s3_endpoint("S3")

        nodes = network.resource_graph()

        assert [node.endpoint_type for node in nodes] == [EndpointType.GATEWAY, EndpointType.INTERFACE]
        assert nodes[0].policy_document is None
        assert all(node.to_dict()["Type"] == "AWS::EC2::VPCEndpoint" for node in nodes)
        assert nodes[1].to_dict()["Properties"]["ServiceName"] == "com.amazonaws.us-east-1.ecr.dkr"

    def test_validate_rejects_principal_less_policy(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        endpoint = network.add_dynamodb_endpoint("DynamoDb")
        endpoint.add_to_policy(iam.PolicyStatement(actions=["dynamodb:GetItem"], resources=["*"]))

        with pytest.raises(InvalidPolicyError):
            network.validate()
        with pytest.raises(InvalidPolicyError):
            network.resource_graph()

    def test_validate_accepts_principal_policy(self, stack, vpc):
        network = EndpointNetwork(stack, "Network", vpc=vpc)
        endpoint = network.add_dynamodb_endpoint("DynamoDb")
        endpoint.add_to_policy(iam.PolicyStatement(
            principals=[iam.AnyPrincipal()],
            actions=["dynamodb:GetItem"],
            resources=["*"]
        ))

        network.validate()
