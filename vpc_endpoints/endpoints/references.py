"""
Cross-stack references for VPC endpoints.

An endpoint owned by one stack is exported as a set of named CloudFormation
exports (``EndpointExports``). Another stack turns that token set back into
``Fn::ImportValue`` references and builds a lightweight proxy from them.
The token set is an immutable value: nothing is shared between the origin
and consumer construct trees.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar

from aws_cdk import CfnOutput, Fn, Names, Stack
from constructs import Construct

from ..common.exceptions import ConfigurationError
from ..common.logging_config import get_logger
from .catalog import EndpointType

logger = get_logger(__name__)


class ReferenceState(Enum):
    """Where an endpoint object sits in the export/import lifecycle."""
    EXPORTED = "exported"
    IMPORTED = "imported"


@dataclass(frozen=True)
class ExportToken:
    """One exported endpoint attribute."""
    attribute: str
    export_name: str
    value: Optional[str] = None


@dataclass(frozen=True)
class EndpointExports:
    """Token set identifying one exported endpoint."""
    endpoint_type: EndpointType
    tokens: Tuple[ExportToken, ...]

    def get(self, attribute: str) -> Optional[ExportToken]:
        for token in self.tokens:
            if token.attribute == attribute:
                return token
        return None

    def export_name(self, attribute: str) -> str:
        token = self.get(attribute)
        if token is None:
            raise ConfigurationError(
                f"{self.endpoint_type.value} endpoint exports have no '{attribute}' token",
                config_key=attribute
            )
        return token.export_name

    @property
    def attributes(self) -> Tuple[str, ...]:
        return tuple(token.attribute for token in self.tokens)

    def to_dict(self) -> Dict[str, str]:
        """Attribute to export name mapping, suitable for configuration files."""
        return {token.attribute: token.export_name for token in self.tokens}

    @classmethod
    def from_dict(cls, endpoint_type: EndpointType, export_names: Mapping[str, str]) -> "EndpointExports":
        """Rebuild a token set from export names only, e.g. when read from configuration."""
        return cls(
            endpoint_type=endpoint_type,
            tokens=tuple(
                ExportToken(attribute=attribute, export_name=export_name)
                for attribute, export_name in export_names.items()
            )
        )


ProxyT = TypeVar("ProxyT", bound=Construct)


class EndpointReferenceBroker:
    """Creates export token sets and resolves them in consuming stacks."""

    @staticmethod
    def export_name_for(endpoint: Construct, attribute: str) -> str:
        """
        Export name of one endpoint attribute.

        Names are unique per stack and construct path, so several endpoints
        can be exported from the same stack without collisions.
        """
        return f"{Stack.of(endpoint).stack_name}:{Names.unique_id(endpoint)}{attribute}"

    @classmethod
    def export_endpoint(cls,
                        endpoint: Construct,
                        endpoint_type: EndpointType,
                        attributes: Mapping[str, str]) -> EndpointExports:
        """
        Export endpoint attributes from the stack that owns the endpoint.

        Exporting the same endpoint again returns an equal token set and does
        not add outputs.

        Args:
            endpoint: The owned endpoint construct
            endpoint_type: Kind of the endpoint
            attributes: Attribute name to origin-side value

        Returns:
            The token set to hand to consuming stacks
        """
        tokens = []
        for attribute, value in attributes.items():
            export_name = cls.export_name_for(endpoint, attribute)
            output_id = f"{attribute}Export"
            if endpoint.node.try_find_child(output_id) is None:
                CfnOutput(
                    endpoint,
                    output_id,
                    value=value,
                    export_name=export_name,
                    description=f"{attribute} of {endpoint_type.value} endpoint {endpoint.node.path}"
                )
                logger.info(f"Exported {attribute} of {endpoint.node.path} as {export_name}")
            tokens.append(ExportToken(attribute=attribute, export_name=export_name, value=value))

        return EndpointExports(endpoint_type=endpoint_type, tokens=tuple(tokens))

    @staticmethod
    def import_attributes(exports: EndpointExports,
                          endpoint_type: EndpointType,
                          required: Iterable[str]) -> Dict[str, str]:
        """
        Turn a token set into import-value references.

        Unresolvable export names are not detected here; CloudFormation
        rejects them when the consuming stack is deployed.

        Args:
            exports: Token set produced by the origin stack
            endpoint_type: Kind of proxy being built
            required: Attributes the proxy needs

        Returns:
            Attribute name to ``Fn::ImportValue`` token

        Raises:
            ConfigurationError: If the token set is of another kind or lacks an attribute
        """
        if exports.endpoint_type != endpoint_type:
            raise ConfigurationError(
                f"Cannot import {exports.endpoint_type.value} endpoint exports "
                f"as a {endpoint_type.value} endpoint",
                config_key="endpoint_type"
            )

        return {
            attribute: Fn.import_value(exports.export_name(attribute))
            for attribute in required
        }

    @staticmethod
    def existing_import(scope: Construct,
                        construct_id: str,
                        exports: EndpointExports,
                        proxy_class: Type[ProxyT]) -> Optional[ProxyT]:
        """
        Return the proxy already imported under this id from the same token set.

        Re-importing identical tokens under the same id in the same scope
        yields the existing proxy instead of a duplicate construct.
        """
        existing = scope.node.try_find_child(construct_id)
        if isinstance(existing, proxy_class) and getattr(existing, "exports", None) == exports:
            logger.debug(f"Reusing imported endpoint {existing.node.path}")
            return existing
        return None
