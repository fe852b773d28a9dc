"""
Tests for the config-driven endpoint and endpoint-access stacks.
"""

import pytest
from aws_cdk import App, Environment
from aws_cdk.assertions import Match, Template

from helper.config import Config
from vpc_endpoints import EndpointAccessStack, VpcEndpointStack
from vpc_endpoints.common.exceptions import (
    ConfigurationError,
    InvalidPolicyError,
    StackConfigurationError,
)
from vpc_endpoints.endpoints import EndpointType

TEST_ENV = Environment(account="123456789012", region="us-east-1")


@pytest.fixture
def endpoint_config_data(base_config_data):
    data = dict(base_config_data)
    data.update({
        "SubnetGroups": [
            {"Name": "Public", "SubnetType": "public"},
            {"Name": "App", "SubnetType": "private"},
            {"Name": "Data", "SubnetType": "isolated", "CidrMask": 26},
        ],
        "GatewayEndpoints": [
            {
                "Id": "S3",
                "Service": "S3",
                "Export": True,
                "PolicyStatements": [{
                    "Effect": "Allow",
                    "Principal": {"AWS": "*"},
                    "Action": "s3:GetObject",
                    "Resource": "*",
                }],
            },
        ],
        "InterfaceEndpoints": [
            {"Id": "EcrDocker", "Service": "EcrDocker", "Export": True, "Open": True},
            {"Id": "Logs", "Service": "CloudWatchLogs", "Subnets": [{"SubnetType": "isolated"}]},
        ],
        "EndpointIngress": [
            {"EndpointId": "EcrDocker", "Cidr": "10.20.0.0/16", "Port": 443, "Description": "Build network"},
        ],
    })
    return data


def _build_stacks(data):
    app = App()
    conf = Config.from_dict(data)
    vpc_stack = VpcEndpointStack(app, "endpoints-test-vpc-endpoints", config=conf, env=TEST_ENV)
    access_stack = EndpointAccessStack(
        app,
        "endpoints-test-endpoint-access",
        config=conf,
        endpoint_exports=vpc_stack.endpoint_exports,
        env=TEST_ENV
    )
    access_stack.add_dependency(vpc_stack)
    return vpc_stack, access_stack


class TestVpcEndpointStack:
    """Test building the network and endpoints from configuration."""

    def test_endpoints_from_configuration(self, endpoint_config_data):
        vpc_stack, _ = _build_stacks(endpoint_config_data)

        template = Template.from_stack(vpc_stack)
        template.resource_count_is("AWS::EC2::VPCEndpoint", 3)
        template.resource_count_is("AWS::EC2::Subnet", 9)
        template.has_resource_properties("AWS::EC2::VPCEndpoint", {
            "ServiceName": "com.amazonaws.us-east-1.s3",
            "VpcEndpointType": "Gateway",
            "PolicyDocument": {
                "Statement": [Match.object_like({"Principal": {"AWS": "*"}, "Action": "s3:GetObject"})],
                "Version": "2012-10-17",
            },
        })
        template.has_resource_properties("AWS::EC2::VPCEndpoint", {
            "ServiceName": "com.amazonaws.us-east-1.logs",
            "SubnetIds": [
                vpc_stack.resolve(subnet.subnet_id) for subnet in vpc_stack.vpc.isolated_subnets
            ],
        })

    def test_only_requested_endpoints_are_exported(self, endpoint_config_data):
        vpc_stack, _ = _build_stacks(endpoint_config_data)

        assert set(vpc_stack.endpoint_exports) == {"S3", "EcrDocker"}
        assert vpc_stack.endpoint_exports["S3"].endpoint_type == EndpointType.GATEWAY
        assert vpc_stack.endpoint_exports["EcrDocker"].endpoint_type == EndpointType.INTERFACE

    def test_common_tags(self, endpoint_config_data):
        vpc_stack, _ = _build_stacks(endpoint_config_data)

        Template.from_stack(vpc_stack).has_resource_properties("AWS::EC2::VPC", {
            "Tags": Match.array_with([
                {"Key": "ManagedBy", "Value": "CDK"},
                {"Key": "Project", "Value": "endpoints-test"},
            ]),
        })

    def test_flow_logs_enabled_by_default(self, endpoint_config_data):
        data = dict(endpoint_config_data)
        data.pop("EnableFlowLogs")
        vpc_stack, _ = _build_stacks(data)

        Template.from_stack(vpc_stack).resource_count_is("AWS::EC2::FlowLog", 1)

    def test_empty_subnet_groups_use_default_layout(self, base_config_data):
        data = dict(base_config_data, SubnetGroups=[])
        vpc_stack, _ = _build_stacks(data)

        # Public and Private in each of the three zones
        Template.from_stack(vpc_stack).resource_count_is("AWS::EC2::Subnet", 6)
        assert len(vpc_stack.vpc.public_subnets) == 3
        assert len(vpc_stack.vpc.private_subnets) == 3

    def test_subnet_group_without_type_is_rejected(self, endpoint_config_data):
        endpoint_config_data["SubnetGroups"].append({"Name": "Edge"})
        with pytest.raises(StackConfigurationError) as exc_info:
            _build_stacks(endpoint_config_data)
        assert "SubnetType" in str(exc_info.value)

    def test_defaults_without_endpoints(self, base_config_data):
        vpc_stack, access_stack = _build_stacks(base_config_data)

        template = Template.from_stack(vpc_stack)
        template.resource_count_is("AWS::EC2::VPCEndpoint", 0)
        template.resource_count_is("AWS::EC2::NatGateway", 1)
        assert vpc_stack.endpoint_exports == {}
        assert access_stack.imported_endpoints == {}

    def test_principal_less_policy_fails_construction(self, endpoint_config_data):
        endpoint_config_data["GatewayEndpoints"][0]["PolicyStatements"] = [
            {"Effect": "Allow", "Action": "s3:GetObject", "Resource": "*"}
        ]
        with pytest.raises(InvalidPolicyError):
            _build_stacks(endpoint_config_data)

    def test_entry_without_service_is_rejected(self, endpoint_config_data):
        endpoint_config_data["InterfaceEndpoints"].append({"Id": "Broken"})
        with pytest.raises(StackConfigurationError) as exc_info:
            _build_stacks(endpoint_config_data)
        assert "Service" in str(exc_info.value)

    def test_unknown_subnet_type_is_rejected(self, endpoint_config_data):
        endpoint_config_data["SubnetGroups"].append({"Name": "Edge", "SubnetType": "dmz"})
        with pytest.raises(ConfigurationError):
            _build_stacks(endpoint_config_data)


class TestEndpointAccessStack:
    """Test opening exported interface endpoints from a consumer stack."""

    def test_ingress_rules_target_imported_security_group(self, endpoint_config_data):
        vpc_stack, access_stack = _build_stacks(endpoint_config_data)
        exports = vpc_stack.endpoint_exports["EcrDocker"]

        template = Template.from_stack(access_stack)
        template.resource_count_is("AWS::EC2::SecurityGroupIngress", 1)
        template.has_resource_properties("AWS::EC2::SecurityGroupIngress", {
            "GroupId": {"Fn::ImportValue": exports.export_name("SecurityGroupId")},
            "CidrIp": "10.20.0.0/16",
            "Description": "Build network",
            "FromPort": 443,
            "ToPort": 443,
        })
        assert list(access_stack.imported_endpoints) == ["EcrDocker"]

    def test_origin_exports_every_token(self, endpoint_config_data):
        vpc_stack, _ = _build_stacks(endpoint_config_data)
        export_names = {
            output["Export"]["Name"]
            for output in Template.from_stack(vpc_stack).find_outputs("*").values()
        }
        for exports in vpc_stack.endpoint_exports.values():
            assert set(exports.to_dict().values()) <= export_names

    def test_gateway_endpoint_cannot_receive_ingress(self, endpoint_config_data):
        endpoint_config_data["EndpointIngress"] = [{"EndpointId": "S3", "Cidr": "10.20.0.0/16"}]
        with pytest.raises(StackConfigurationError):
            _build_stacks(endpoint_config_data)

    def test_unknown_endpoint_is_rejected(self, endpoint_config_data):
        endpoint_config_data["EndpointIngress"] = [{"EndpointId": "Missing", "Cidr": "10.20.0.0/16"}]
        with pytest.raises(StackConfigurationError):
            _build_stacks(endpoint_config_data)

    def test_rule_without_cidr_is_rejected(self, endpoint_config_data):
        endpoint_config_data["EndpointIngress"] = [{"EndpointId": "EcrDocker", "Port": 443}]
        with pytest.raises(StackConfigurationError) as exc_info:
            _build_stacks(endpoint_config_data)
        assert "Cidr" in str(exc_info.value)
        assert exc_info.value.config_key == "EndpointIngress"
