"""
VPC endpoint constructs and stacks for AWS CDK.

The ``endpoints`` package holds the reusable constructs; ``vpc`` and
``consumer`` hold the config-driven stacks that own and consume them.
"""

from .consumer import EndpointAccessStack
from .vpc import VpcEndpointStack

__all__ = ["EndpointAccessStack", "VpcEndpointStack"]
