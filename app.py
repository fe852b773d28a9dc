#!/usr/bin/env python3

import aws_cdk as cdk
from helper import config
from vpc_endpoints import VpcEndpointStack, EndpointAccessStack
from vpc_endpoints.common.constants import (
    CONFIG_REGION_NAME,
    DEFAULT_ACCESS_STACK_SUFFIX,
    DEFAULT_VPC_STACK_SUFFIX,
)
from vpc_endpoints.common.logging_config import configure_debug_logging, setup_logging
from cdk_nag import ( AwsSolutionsChecks, NagSuppressions )
import os

logger = setup_logging(module_name="app")

app = cdk.App()

if app.node.try_get_context('debug'):
    configure_debug_logging()

environment = app.node.try_get_context('environment') or 'development'
conf = config.Config(environment)

# Use ProjectName for all stack naming
project_name = conf.get_validated_project_name()

env = {
    "region": conf.get_optional(CONFIG_REGION_NAME, os.environ.get('CDK_DEFAULT_REGION')),
    "account": os.environ.get('CDK_DEFAULT_ACCOUNT')
}

vpc_endpoint_stack = VpcEndpointStack(app, f"{project_name}-{DEFAULT_VPC_STACK_SUFFIX}",
                                      config=conf,
                                      env=env,
                                      termination_protection=True  # Protect the shared network
                                      )

# Consumer stack only references exports, so the origin is never redeployed for new rules
endpoint_access_stack = EndpointAccessStack(app, f"{project_name}-{DEFAULT_ACCESS_STACK_SUFFIX}",
                                            config=conf,
                                            endpoint_exports=vpc_endpoint_stack.endpoint_exports,
                                            env=env
                                            )
endpoint_access_stack.add_dependency(vpc_endpoint_stack)

logger.info(
    f"Synthesizing {environment} environment: "
    f"{len(vpc_endpoint_stack.endpoint_exports)} exported endpoint(s)"
)

cdk.Aspects.of(app).add(AwsSolutionsChecks(verbose=True))

NagSuppressions.add_stack_suppressions(vpc_endpoint_stack, [
    {"id": "AwsSolutions-EC23", "reason": "Endpoint security groups only open the endpoint port to the VPC CIDR block or configured client CIDRs"},
])

NagSuppressions.add_stack_suppressions(endpoint_access_stack, [
    {"id": "AwsSolutions-EC23", "reason": "Ingress rules are limited to the CIDRs listed under EndpointIngress"},
])

app.synth()
