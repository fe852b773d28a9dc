"""Abstract resource graph nodes handed to the rendering layer."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .catalog import EndpointType


@dataclass(frozen=True)
class EndpointResourceNode:
    """
    One VPC endpoint in the resource graph.

    Gateway nodes carry route tables and the access policy; interface nodes
    carry subnets, security groups and the private DNS flag.
    """
    path: str
    endpoint_type: EndpointType
    service_name: str
    vpc_id: str
    route_table_ids: Tuple[str, ...] = ()
    subnet_ids: Tuple[str, ...] = ()
    security_group_ids: Tuple[str, ...] = ()
    private_dns_enabled: Optional[bool] = None
    policy_document: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {
            "ServiceName": self.service_name,
            "VpcEndpointType": self.endpoint_type.value,
            "VpcId": self.vpc_id,
        }
        if self.endpoint_type == EndpointType.GATEWAY:
            properties["RouteTableIds"] = list(self.route_table_ids)
            if self.policy_document is not None:
                properties["PolicyDocument"] = self.policy_document
        else:
            properties["SubnetIds"] = list(self.subnet_ids)
            properties["SecurityGroupIds"] = list(self.security_group_ids)
            properties["PrivateDnsEnabled"] = self.private_dns_enabled
        return {"Path": self.path, "Type": "AWS::EC2::VPCEndpoint", "Properties": properties}
