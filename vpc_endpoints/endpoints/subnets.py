"""
Subnet selection for VPC endpoints.

Resolves selection criteria against a VPC's subnet inventory. Gateway
endpoints use the route tables of the selected subnets; interface endpoints
place one network interface in each selected subnet and therefore require
at most one subnet per availability zone.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple, Union

from aws_cdk import Token, aws_ec2 as ec2

from ..common.exceptions import ConfigurationError, TopologyError
from ..common.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class SubnetCriteria:
    """
    Which subnets of a VPC an endpoint attaches to.

    All given fields must hold for a subnet to be selected. With no
    type, group or ids the VPC's private subnets are used.
    """
    subnet_type: Optional[ec2.SubnetType] = None
    subnet_group_name: Optional[str] = None
    subnet_ids: Optional[List[str]] = None
    availability_zones: Optional[List[str]] = None
    one_per_az: bool = False

    @property
    def is_default(self) -> bool:
        return self.subnet_type is None and not self.subnet_group_name and not self.subnet_ids


class SelectedSubnet(NamedTuple):
    availability_zone: str
    subnet_id: str
    route_table_id: Optional[str]


class SubnetSelection:
    """Ordered result of one subnet resolution."""

    def __init__(self, subnets: Iterable[SelectedSubnet]) -> None:
        self._subnets: Tuple[SelectedSubnet, ...] = tuple(subnets)

    def __iter__(self):
        return iter(self._subnets)

    def __len__(self) -> int:
        return len(self._subnets)

    @property
    def subnets(self) -> Tuple[SelectedSubnet, ...]:
        return self._subnets

    @property
    def subnet_ids(self) -> List[str]:
        return [subnet.subnet_id for subnet in self._subnets]

    @property
    def availability_zones(self) -> List[str]:
        return [subnet.availability_zone for subnet in self._subnets]

    @property
    def route_table_ids(self) -> List[str]:
        """Route tables of the selected subnets, deduplicated in first-seen order."""
        route_table_ids = []
        for subnet in self._subnets:
            if subnet.route_table_id is not None and subnet.route_table_id not in route_table_ids:
                route_table_ids.append(subnet.route_table_id)
        return route_table_ids

    def subnets_by_availability_zone(self) -> Dict[str, List[SelectedSubnet]]:
        grouped: Dict[str, List[SelectedSubnet]] = {}
        for subnet in self._subnets:
            grouped.setdefault(subnet.availability_zone, []).append(subnet)
        return grouped


CriteriaLike = Union[None, SubnetCriteria, Sequence[SubnetCriteria]]


class SubnetSelector:
    """Resolves SubnetCriteria against the subnets of a VPC."""

    @classmethod
    def resolve(cls,
                vpc: ec2.IVpc,
                criteria: CriteriaLike = None,
                one_per_az_required: bool = False) -> SubnetSelection:
        """
        Resolve one or more criteria into a subnet selection.

        Multiple criteria are combined as a union, in the order given. A subnet
        matched by more than one criteria entry is selected once.

        Args:
            vpc: VPC whose subnets are searched
            criteria: A criteria entry, a sequence of them, or None for the default selection
            one_per_az_required: Reject selections with two subnets in one availability zone

        Returns:
            The selected subnets

        Raises:
            ConfigurationError: If no subnet matches, or explicit subnet ids are unknown
            TopologyError: If one_per_az_required and two subnets share an availability zone
        """
        criteria_list = cls._normalize(criteria)

        selected: List[SelectedSubnet] = []
        seen_ids = set()
        for entry in criteria_list:
            for subnet in cls._resolve_one(vpc, entry):
                if subnet.subnet_id in seen_ids:
                    continue
                seen_ids.add(subnet.subnet_id)
                selected.append(subnet)

        if not selected:
            logger.warning(f"Subnet selection {criteria_list} matched no subnets")
            raise ConfigurationError(
                f"Subnet selection matched no subnets in the VPC: {criteria_list}",
                config_key="subnets"
            )

        selection = SubnetSelection(selected)
        if one_per_az_required:
            cls.validate_one_per_availability_zone(selection)

        logger.debug(f"Selected {len(selection)} subnet(s) in {len(set(selection.availability_zones))} AZ(s)")
        return selection

    @staticmethod
    def validate_one_per_availability_zone(selection: SubnetSelection) -> None:
        """
        Raises:
            TopologyError: If two selected subnets share an availability zone
        """
        for availability_zone, subnets in selection.subnets_by_availability_zone().items():
            if len(subnets) > 1:
                logger.warning(f"{len(subnets)} subnets selected in availability zone {availability_zone}")
                raise TopologyError(
                    f"Only one subnet per availability zone is allowed, but {len(subnets)} "
                    f"subnets were selected in availability zone {availability_zone}. "
                    f"Narrow the selection with a subnet group name or one_per_az.",
                    availability_zone=availability_zone
                )

    @staticmethod
    def _normalize(criteria: CriteriaLike) -> List[SubnetCriteria]:
        if criteria is None:
            return [SubnetCriteria()]
        if isinstance(criteria, SubnetCriteria):
            return [criteria]
        criteria_list = list(criteria)
        return criteria_list or [SubnetCriteria()]

    @classmethod
    def _resolve_one(cls, vpc: ec2.IVpc, criteria: SubnetCriteria) -> List[SelectedSubnet]:
        candidates = cls._candidates(vpc, criteria)

        if criteria.availability_zones:
            allowed = set(criteria.availability_zones)
            candidates = [subnet for subnet in candidates if subnet.availability_zone in allowed]

        # sorted() is stable, so subnets sharing an AZ keep inventory order
        candidates = sorted(candidates, key=cls._availability_zone_sort_key(vpc, candidates))

        if criteria.one_per_az:
            first_per_az = {}
            for subnet in candidates:
                first_per_az.setdefault(subnet.availability_zone, subnet)
            candidates = [subnet for subnet in candidates if first_per_az[subnet.availability_zone] is subnet]

        return [
            SelectedSubnet(
                availability_zone=subnet.availability_zone,
                subnet_id=subnet.subnet_id,
                route_table_id=cls._route_table_of(subnet)
            )
            for subnet in candidates
        ]

    @staticmethod
    def _availability_zone_sort_key(vpc: ec2.IVpc, candidates: Sequence[ec2.ISubnet]):
        """
        Order by AZ name. Unresolved AZ tokens have no meaningful name, so
        those fall back to their position in the VPC's zone list.
        """
        zones = list(vpc.availability_zones or [])
        if not any(Token.is_unresolved(az) for az in zones + [subnet.availability_zone for subnet in candidates]):
            return lambda subnet: subnet.availability_zone

        az_order = {az: index for index, az in enumerate(zones)}
        return lambda subnet: az_order.get(subnet.availability_zone, len(az_order))

    @classmethod
    def _candidates(cls, vpc: ec2.IVpc, criteria: SubnetCriteria) -> List[ec2.ISubnet]:
        if criteria.subnet_ids:
            inventory = cls._all_subnets(vpc)
            by_id = {subnet.subnet_id: subnet for subnet in inventory}
            unknown = [subnet_id for subnet_id in criteria.subnet_ids if subnet_id not in by_id]
            if unknown:
                raise ConfigurationError(
                    f"Subnet ids not found in the VPC: {', '.join(unknown)}",
                    config_key="subnet_ids"
                )
            candidates = [by_id[subnet_id] for subnet_id in dict.fromkeys(criteria.subnet_ids)]
        elif criteria.subnet_group_name:
            candidates = cls._group_subnets(vpc, criteria.subnet_group_name)
        elif criteria.subnet_type is not None:
            candidates = cls.list_subnets(vpc, criteria.subnet_type)
        else:
            candidates = (
                list(vpc.private_subnets)
                or list(vpc.isolated_subnets)
                or list(vpc.public_subnets)
            )

        # Later filters narrow the explicit list or group
        if criteria.subnet_type is not None and (criteria.subnet_ids or criteria.subnet_group_name):
            typed_ids = {subnet.subnet_id for subnet in cls.list_subnets(vpc, criteria.subnet_type)}
            candidates = [subnet for subnet in candidates if subnet.subnet_id in typed_ids]
        if criteria.subnet_group_name and criteria.subnet_ids:
            group_ids = {subnet.subnet_id for subnet in cls._group_subnets(vpc, criteria.subnet_group_name)}
            candidates = [subnet for subnet in candidates if subnet.subnet_id in group_ids]

        return candidates

    @staticmethod
    def list_subnets(vpc: ec2.IVpc, subnet_type: ec2.SubnetType) -> List[ec2.ISubnet]:
        """Return the VPC's subnets of one type."""
        if subnet_type == ec2.SubnetType.PUBLIC:
            return list(vpc.public_subnets)
        if subnet_type == ec2.SubnetType.PRIVATE_ISOLATED:
            return list(vpc.isolated_subnets)
        return list(vpc.private_subnets)

    @staticmethod
    def _group_subnets(vpc: ec2.IVpc, subnet_group_name: str) -> List[ec2.ISubnet]:
        try:
            return list(vpc.select_subnets(subnet_group_name=subnet_group_name).subnets)
        except Exception as e:
            raise ConfigurationError(
                f"Unknown subnet group '{subnet_group_name}': {str(e)}",
                config_key="subnet_group_name"
            ) from e

    @staticmethod
    def _all_subnets(vpc: ec2.IVpc) -> List[ec2.ISubnet]:
        return list(vpc.public_subnets) + list(vpc.private_subnets) + list(vpc.isolated_subnets)

    @staticmethod
    def _route_table_of(subnet: ec2.ISubnet) -> Optional[str]:
        route_table = subnet.route_table
        return getattr(route_table, "route_table_id", None) if route_table is not None else None


SUBNET_TYPE_NAMES = {
    "public": ec2.SubnetType.PUBLIC,
    "private": ec2.SubnetType.PRIVATE_WITH_EGRESS,
    "isolated": ec2.SubnetType.PRIVATE_ISOLATED,
}


def parse_subnet_type(name: str) -> ec2.SubnetType:
    """
    Map a configuration subnet type name (public, private, isolated) to ec2.SubnetType.

    Raises:
        ConfigurationError: If the name is unknown
    """
    subnet_type = SUBNET_TYPE_NAMES.get(str(name).strip().lower())
    if subnet_type is None:
        raise ConfigurationError(
            f"Unknown subnet type '{name}'. Expected one of: {', '.join(SUBNET_TYPE_NAMES)}",
            config_key="SubnetType"
        )
    return subnet_type


def criteria_from_config(entry: Mapping[str, Any]) -> SubnetCriteria:
    """Build SubnetCriteria from a configuration mapping such as ``{"SubnetType": "private"}``."""
    subnet_type = entry.get("SubnetType")
    return SubnetCriteria(
        subnet_type=parse_subnet_type(subnet_type) if subnet_type is not None else None,
        subnet_group_name=entry.get("SubnetGroupName"),
        subnet_ids=entry.get("SubnetIds"),
        availability_zones=entry.get("AvailabilityZones"),
        one_per_az=bool(entry.get("OnePerAz", False))
    )
