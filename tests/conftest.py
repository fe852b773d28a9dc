"""Shared fixtures for the VPC endpoint tests."""

import pytest
from aws_cdk import App, Environment, Stack, aws_ec2 as ec2

from helper.config import Config

# Environment-specific stacks get three dummy availability zones at synthesis
TEST_ENV = Environment(account="123456789012", region="us-east-1")


@pytest.fixture
def app():
    return App()


@pytest.fixture
def stack(app):
    return Stack(app, "TestStack", env=TEST_ENV)


@pytest.fixture
def vpc(stack):
    """VPC with one public and one private subnet in each of three AZs."""
    return ec2.Vpc(stack, "Vpc", max_azs=3)


@pytest.fixture
def single_az_vpc(stack):
    """VPC with two private subnet groups, "app" and "db", in a single AZ."""
    return ec2.Vpc(
        stack,
        "Vpc",
        max_azs=1,
        subnet_configuration=[
            ec2.SubnetConfiguration(name="Public", subnet_type=ec2.SubnetType.PUBLIC, cidr_mask=24),
            ec2.SubnetConfiguration(name="app", subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS, cidr_mask=24),
            ec2.SubnetConfiguration(name="db", subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS, cidr_mask=24),
        ]
    )


@pytest.fixture
def base_config_data():
    return {
        "ProjectName": "endpoints-test",
        "MaxAZs": 3,
        "EnableFlowLogs": False,
    }


@pytest.fixture
def config(base_config_data):
    return Config.from_dict(base_config_data)
