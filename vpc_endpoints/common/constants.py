"""
Constants used across VPC endpoint constructs and stacks.
"""

# Endpoint types as rendered into AWS::EC2::VPCEndpoint
GATEWAY_ENDPOINT_TYPE = "Gateway"
INTERFACE_ENDPOINT_TYPE = "Interface"

# Service naming
DEFAULT_SERVICE_PREFIX = "com.amazonaws"

# Interface endpoints listen on HTTPS
DEFAULT_ENDPOINT_PORT = 443

# VPC Configuration
DEFAULT_MAX_AZS = 3
DEFAULT_CIDR_MASK = 24
DEFAULT_NAT_GATEWAYS = 1

# Default subnet layout when no SubnetGroups are configured
DEFAULT_SUBNET_GROUPS = [
    {"Name": "Public", "SubnetType": "public"},
    {"Name": "Private", "SubnetType": "private"},
]

# Cross-stack export attribute names
VPC_ENDPOINT_ID_ATTRIBUTE = "VpcEndpointId"
SECURITY_GROUP_ID_ATTRIBUTE = "SecurityGroupId"

# Config keys
CONFIG_PROJECT_NAME = "ProjectName"
CONFIG_MAX_AZS = "MaxAZs"
CONFIG_NAT_GATEWAYS = "NatGateways"
CONFIG_SUBNET_GROUPS = "SubnetGroups"
CONFIG_GATEWAY_ENDPOINTS = "GatewayEndpoints"
CONFIG_INTERFACE_ENDPOINTS = "InterfaceEndpoints"
CONFIG_ENDPOINT_INGRESS = "EndpointIngress"
CONFIG_ENABLE_FLOW_LOGS = "EnableFlowLogs"
CONFIG_REGION_NAME = "RegionName"

# Stack naming
DEFAULT_VPC_STACK_SUFFIX = "vpc-endpoints"
DEFAULT_ACCESS_STACK_SUFFIX = "endpoint-access"
