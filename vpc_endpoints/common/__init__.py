"""
Common components shared by the VPC endpoint stacks.
"""

from .base import BaseStack

from .exceptions import (
    EndpointError,
    ConfigurationError,
    StackConfigurationError,
    UnsupportedEndpointTypeError,
    TopologyError,
    InvalidPolicyError,
    ValidationError
)

from .validators import (
    ConfigValidator,
    EndpointValidator
)

from .constants import *

__all__ = [
    # Base classes
    "BaseStack",

    # Exceptions
    "EndpointError",
    "ConfigurationError",
    "StackConfigurationError",
    "UnsupportedEndpointTypeError",
    "TopologyError",
    "InvalidPolicyError",
    "ValidationError",

    # Validators
    "ConfigValidator",
    "EndpointValidator",
]
