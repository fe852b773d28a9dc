import yaml
import re
from yaml.loader import SafeLoader
from typing import Any, Dict, List, Optional


class ProjectNameValidationError(Exception):
    """Raised when ProjectName validation fails."""
    pass


class Config:

    _environment = 'development'
    _config_dir = 'config'
    data = {}

    def __init__(self, environment, config_dir: str = 'config', data: Optional[Dict[str, Any]] = None) -> None:
        self._environment = environment
        self._config_dir = config_dir
        if data is None:
            self.load()
        else:
            self.data = dict(data)
        self._validate_project_name()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], environment: str = 'test') -> 'Config':
        """Build a configuration from an in-memory dictionary instead of a YAML file."""
        return cls(environment, data=data)

    @property
    def environment(self) -> str:
        return self._environment

    def load(self) -> dict:
        with open(f'{self._config_dir}/{self._environment}.yaml', encoding='utf-8') as f:
            self.data = yaml.load(f, Loader=SafeLoader) or {}
        return self.data

    def get(self, key):
        return self.data[key]

    def get_optional(self, key, default=None):
        value = self.data.get(key)
        return default if value is None else value

    def _validate_project_name(self) -> None:
        """
        Validate ProjectName against the naming constraints of the resources it prefixes.

        ProjectName is used in stack names and CloudFormation export names, so it
        must be safe for both.

        Raises:
            ProjectNameValidationError: If ProjectName doesn't meet requirements
        """
        project_name = self.data.get('ProjectName')

        if not project_name:
            raise ProjectNameValidationError("ProjectName is required in configuration")

        if not isinstance(project_name, str):
            raise ProjectNameValidationError("ProjectName must be a string")

        project_name = project_name.strip()

        if not project_name:
            raise ProjectNameValidationError("ProjectName cannot be empty or whitespace only")

        # Stack names are "{ProjectName}-vpc-endpoints"; export names add
        # the construct unique id, so keep the prefix short
        MAX_LENGTH = 32
        if len(project_name) > MAX_LENGTH:
            raise ProjectNameValidationError(
                f"ProjectName must be {MAX_LENGTH} characters or less. "
                f"Current length: {len(project_name)}"
            )

        MIN_LENGTH = 3
        if len(project_name) < MIN_LENGTH:
            raise ProjectNameValidationError(
                f"ProjectName must be at least {MIN_LENGTH} characters long. "
                f"Current length: {len(project_name)}"
            )

        # CloudFormation stacks must start with a letter; export names allow
        # alphanumerics, colons and hyphens
        combined_pattern = r'^[a-z]([a-z0-9-]*[a-z0-9])?$'
        if not re.match(combined_pattern, project_name):
            raise ProjectNameValidationError(
                f"ProjectName '{project_name}' contains invalid characters. "
                f"Must use only lowercase letters (a-z), numbers (0-9), and hyphens (-). "
                f"Must start with a letter and end with a letter or number"
            )

        if '--' in project_name:
            raise ProjectNameValidationError(
                f"ProjectName '{project_name}' contains consecutive hyphens"
            )

    def get_validated_project_name(self) -> str:
        """
        Get the validated project name.

        Returns:
            Validated project name

        Raises:
            ProjectNameValidationError: If validation fails
        """
        self._validate_project_name()
        return self.data['ProjectName'].strip()

    def get_subnet_groups(self) -> List[Dict[str, Any]]:
        """Get the subnet group layout of the VPC (Name, SubnetType, CidrMask)."""
        return self.get_optional('SubnetGroups', [])

    def get_gateway_endpoints(self) -> List[Dict[str, Any]]:
        """Get gateway endpoint definitions."""
        return self.get_optional('GatewayEndpoints', [])

    def get_interface_endpoints(self) -> List[Dict[str, Any]]:
        """Get interface endpoint definitions."""
        return self.get_optional('InterfaceEndpoints', [])

    def get_endpoint_ingress(self) -> List[Dict[str, Any]]:
        """Get ingress rules the consumer stack adds to imported interface endpoints."""
        return self.get_optional('EndpointIngress', [])
