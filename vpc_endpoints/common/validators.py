"""Validation utilities for VPC endpoint constructs."""

import re
from typing import Any, Dict, List

from aws_cdk import Token, aws_ec2 as ec2

from .constants import GATEWAY_ENDPOINT_TYPE, INTERFACE_ENDPOINT_TYPE
from .exceptions import UnsupportedEndpointTypeError, ValidationError
from .logging_config import get_logger

logger = get_logger(__name__)


class ConfigValidator:
    """Utility class for validating configuration parameters."""

    @staticmethod
    def validate_required_config(config: Dict[str, Any],
                                 required_keys: List[str]) -> None:
        """
        Validate that all required configuration keys are present.

        Args:
            config: Configuration dictionary to validate
            required_keys: List of required configuration keys

        Raises:
            ValidationError: If any required key is missing
        """
        missing_keys = [key for key in required_keys if key not in config]
        if missing_keys:
            raise ValidationError(
                f"Missing required configuration keys: {', '.join(missing_keys)}",
                parameter_name="config",
                provided_value=str(list(config.keys()))
            )

    @staticmethod
    def validate_port_range(port: int) -> None:
        """
        Validate that port number is within valid range.

        Args:
            port: Port number to validate

        Raises:
            ValidationError: If port is outside valid range
        """
        if not isinstance(port, int) or not 1 <= port <= 65535:
            raise ValidationError(
                f"Port must be between 1 and 65535, got {port}",
                parameter_name="port",
                provided_value=str(port)
            )

    @staticmethod
    def validate_cidr_block(cidr: str) -> None:
        """
        Validate CIDR block format.

        Args:
            cidr: CIDR block to validate

        Raises:
            ValidationError: If CIDR format is invalid
        """
        if Token.is_unresolved(cidr):
            return

        cidr_pattern = re.compile(
            r'^([0-9]{1,3}\.){3}[0-9]{1,3}(/([0-9]|[1-2][0-9]|3[0-2]))?$'
        )
        if not cidr_pattern.match(cidr):
            raise ValidationError(
                f"Invalid CIDR block format: {cidr}",
                parameter_name="cidr",
                provided_value=cidr
            )

    @staticmethod
    def validate_construct_id(construct_id: str, max_length: int = 128) -> None:
        """
        Validate an endpoint construct id.

        Args:
            construct_id: Construct id to validate
            max_length: Maximum allowed length

        Raises:
            ValidationError: If the id is empty, too long or contains a path separator
        """
        if not construct_id or not isinstance(construct_id, str):
            raise ValidationError(
                "Endpoint id cannot be empty",
                parameter_name="construct_id",
                provided_value=str(construct_id)
            )

        if len(construct_id) > max_length:
            raise ValidationError(
                f"Endpoint id too long (max {max_length}): {construct_id}",
                parameter_name="construct_id",
                provided_value=construct_id
            )

        # Construct paths use '/' as separator
        if "/" in construct_id:
            raise ValidationError(
                f"Invalid endpoint id: {construct_id}. Ids cannot contain '/'",
                parameter_name="construct_id",
                provided_value=construct_id
            )


class EndpointValidator:
    """Utility class for validating endpoint parameters."""

    @staticmethod
    def validate_vpc(vpc: ec2.IVpc) -> None:
        """
        Validate the VPC an endpoint is attached to.

        Args:
            vpc: VPC to validate (can be Vpc or imported via IVpc)

        Raises:
            ValidationError: If VPC is invalid
        """
        # IVpc is a jsii interface and can't be used with isinstance()
        if vpc is None or not hasattr(vpc, 'vpc_id'):
            raise ValidationError(
                f"Expected VPC instance with vpc_id attribute, got {type(vpc)}",
                parameter_name="vpc",
                provided_value=str(type(vpc))
            )

    @staticmethod
    def validate_service_for_type(service: Any, endpoint_type: str) -> None:
        """
        Validate that a catalog service supports the requested endpoint type.

        Args:
            service: EndpointService catalog entry
            endpoint_type: Either "Gateway" or "Interface"

        Raises:
            UnsupportedEndpointTypeError: If the service cannot back that endpoint type
        """
        if endpoint_type == GATEWAY_ENDPOINT_TYPE:
            supported = service.gateway
        elif endpoint_type == INTERFACE_ENDPOINT_TYPE:
            supported = service.interface
        else:
            raise ValidationError(
                f"Unknown endpoint type: {endpoint_type}",
                parameter_name="endpoint_type",
                provided_value=str(endpoint_type)
            )

        if not supported:
            logger.warning(f"Rejected {endpoint_type} endpoint for service {service.key}")
            raise UnsupportedEndpointTypeError(
                f"Service '{service.key}' ({service.name}) does not support "
                f"`{endpoint_type}` VPC endpoints",
                endpoint_type=endpoint_type,
                service_key=service.key
            )
