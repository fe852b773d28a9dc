"""
Base classes and common patterns for VPC endpoint stacks.
"""

from typing import Any, Dict, List, Mapping

from aws_cdk import Stack, Tags
from constructs import Construct

from helper.config import Config
from .exceptions import StackConfigurationError, ValidationError
from .validators import ConfigValidator


class BaseStack(Stack):
    """
    Base stack class with common functionality and validation.

    This class provides:
    - Configuration validation
    - Required/optional configuration access
    - Required keys of list entries
    - Common tagging
    """

    def __init__(self,
                 scope: Construct,
                 construct_id: str,
                 config: Config,
                 **kwargs) -> None:
        """
        Initialize the base stack.

        Args:
            scope: CDK scope
            construct_id: Unique identifier for this construct
            config: Configuration object
            **kwargs: Additional keyword arguments for Stack

        Raises:
            StackConfigurationError: If configuration is invalid
        """
        super().__init__(scope, construct_id, **kwargs)
        self.config = config
        self._validate_config()

    def _validate_config(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            StackConfigurationError: If configuration is invalid
        """
        if not isinstance(self.config, Config):
            raise StackConfigurationError(
                "Configuration must be a Config instance",
                config_key="config"
            )

    def get_required_config(self, key: str) -> Any:
        """
        Get a required configuration value with validation.

        Args:
            key: Configuration key to retrieve

        Returns:
            The configuration value

        Raises:
            StackConfigurationError: If key is missing
        """
        try:
            value = self.config.get(key)
        except KeyError:
            value = None
        if value is None:
            raise StackConfigurationError(
                f"Required configuration key '{key}' is missing",
                config_key=key
            )
        return value

    def get_optional_config(self, key: str, default_value: Any = None) -> Any:
        """
        Get an optional configuration value.

        Args:
            key: Configuration key to retrieve
            default_value: Default value if key is not found

        Returns:
            The configuration value or default
        """
        return self.config.get_optional(key, default_value)

    def require_entry_keys(self, entry: Mapping[str, Any], required_keys: List[str], section: str) -> None:
        """
        Check that one entry of a configuration list has the keys it needs.

        Raises:
            StackConfigurationError: Naming the section and the missing keys
        """
        try:
            ConfigValidator.validate_required_config(entry, required_keys)
        except ValidationError as e:
            raise StackConfigurationError(
                f"Entry {entry} in {section}: {str(e)}",
                config_key=section
            ) from e

    def add_common_tags(self, resource: Construct, additional_tags: Dict[str, str] = None) -> None:
        """
        Add common tags to a resource.

        Args:
            resource: The resource to tag
            additional_tags: Additional tags to add
        """
        common_tags = {
            "Environment": self.config.environment,
            "Project": self.get_optional_config("ProjectName", "default-project"),
            "ManagedBy": "CDK"
        }

        if additional_tags:
            common_tags.update(additional_tags)

        for key, value in common_tags.items():
            Tags.of(resource).add(key, value)
