"""
Shared ingress-rule capability of interface endpoints.

Owned interface endpoints and proxies imported from another stack both
expose the endpoint's security groups through ``ec2.Connections``, so rules
can be added the same way regardless of which stack owns the group.
"""

from typing import Optional, Protocol, runtime_checkable

from aws_cdk import aws_ec2 as ec2

from ..common.validators import ConfigValidator


@runtime_checkable
class IngressRuleAcceptor(Protocol):
    """Anything holding security groups that accept ingress rules."""

    @property
    def connections(self) -> ec2.Connections:
        ...

    def add_ingress_rule(self,
                         peer: ec2.IPeer,
                         port: ec2.Port,
                         description: Optional[str] = None) -> None:
        ...


def add_ingress_rule(connections: ec2.Connections,
                     peer: ec2.IPeer,
                     port: ec2.Port,
                     description: Optional[str] = None) -> None:
    """
    Allow traffic from a peer on a port into every security group of a connections object.

    Args:
        connections: Connections of the endpoint
        peer: Source of the traffic
        port: Port or port range to open
        description: Optional rule description
    """
    for security_group in connections.security_groups:
        security_group.add_ingress_rule(peer, port, description)


def allow_tcp_from_cidr(acceptor: IngressRuleAcceptor,
                        cidr: str,
                        port: int,
                        description: Optional[str] = None) -> None:
    """
    Open a TCP port on an endpoint for an IPv4 CIDR range.

    Args:
        acceptor: Owned endpoint or imported proxy
        cidr: Source IPv4 CIDR block
        port: TCP port to open

    Raises:
        ValidationError: If the CIDR or port is malformed
    """
    ConfigValidator.validate_cidr_block(cidr)
    ConfigValidator.validate_port_range(port)
    acceptor.add_ingress_rule(
        ec2.Peer.ipv4(cidr),
        ec2.Port.tcp(port),
        description or f"Allow {cidr} on TCP {port}"
    )
