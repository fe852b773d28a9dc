"""Custom exceptions for VPC endpoint constructs."""

from typing import Optional


class EndpointError(Exception):
    """
    Base class for all VPC endpoint construction errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class ConfigurationError(EndpointError):
    """
    Exception raised when endpoint configuration cannot be satisfied.

    Raised when a subnet selection matches no subnets, when a catalog key
    is unknown, or when an export token set is incomplete.

    Attributes:
        message: Human-readable error description
        config_key: The configuration key that caused the error
    """

    def __init__(self, message: str, config_key: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            config_key: The configuration key that caused the error
        """
        self.config_key = config_key
        super().__init__(message)


class StackConfigurationError(ConfigurationError):
    """Exception raised when stack configuration is missing or invalid."""


class UnsupportedEndpointTypeError(EndpointError):
    """
    Exception raised when a service does not support the requested endpoint type.

    Attributes:
        message: Human-readable error description
        endpoint_type: The endpoint type that was requested (Gateway or Interface)
        service_key: Catalog key of the offending service
    """

    def __init__(
        self,
        message: str,
        endpoint_type: Optional[str] = None,
        service_key: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            endpoint_type: The endpoint type that was requested
            service_key: Catalog key of the offending service
        """
        self.endpoint_type = endpoint_type
        self.service_key = service_key
        super().__init__(message)


class TopologyError(EndpointError):
    """
    Exception raised when a subnet selection violates endpoint topology rules.

    Attributes:
        message: Human-readable error description
        availability_zone: The availability zone holding more than one subnet
    """

    def __init__(self, message: str, availability_zone: Optional[str] = None) -> None:
        self.availability_zone = availability_zone
        super().__init__(message)


class InvalidPolicyError(EndpointError):
    """
    Exception raised when an endpoint access policy cannot be rendered.

    Attributes:
        message: Human-readable error description
        statement_index: Position of the offending statement in the policy
    """

    def __init__(self, message: str, statement_index: Optional[int] = None) -> None:
        self.statement_index = statement_index
        super().__init__(message)


class ValidationError(Exception):
    """
    Exception raised when parameter validation fails.

    Attributes:
        message: Human-readable error description
        parameter_name: The parameter that failed validation
        provided_value: The value that was provided
    """

    def __init__(
        self,
        message: str,
        parameter_name: Optional[str] = None,
        provided_value: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            parameter_name: The parameter that failed validation
            provided_value: The value that was provided
        """
        self.message = message
        self.parameter_name = parameter_name
        self.provided_value = provided_value
        super().__init__(self.message)
