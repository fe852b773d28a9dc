"""
Catalog of AWS services reachable through VPC endpoints.

The catalog is a closed enumeration (`AwsService`) plus a constant table of
`EndpointService` entries. Each entry records the DNS-style service name
suffix and which endpoint types the service can back.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from ..common.constants import DEFAULT_SERVICE_PREFIX
from ..common.exceptions import ConfigurationError


class EndpointType(Enum):
    """Types of VPC endpoints."""
    GATEWAY = "Gateway"
    INTERFACE = "Interface"


class AwsService(Enum):
    """Logical identifiers of the services in the catalog."""
    APIGATEWAY = "ApiGateway"
    CLOUDFORMATION = "CloudFormation"
    CLOUDTRAIL = "CloudTrail"
    CLOUDWATCH = "CloudWatch"
    CLOUDWATCH_EVENTS = "CloudWatchEvents"
    CLOUDWATCH_LOGS = "CloudWatchLogs"
    CODEBUILD = "CodeBuild"
    CODEBUILD_FIPS = "CodeBuildFips"
    CODECOMMIT = "CodeCommit"
    CODECOMMIT_FIPS = "CodeCommitFips"
    CODEPIPELINE = "CodePipeline"
    CONFIG = "Config"
    DYNAMODB = "DynamoDb"
    EC2 = "Ec2"
    EC2_MESSAGES = "Ec2Messages"
    ECR = "Ecr"
    ECR_DOCKER = "EcrDocker"
    ECS = "Ecs"
    ECS_AGENT = "EcsAgent"
    ECS_TELEMETRY = "EcsTelemetry"
    ELASTIC_FILESYSTEM = "ElasticFilesystem"
    ELASTIC_LOAD_BALANCING = "ElasticLoadBalancing"
    KINESIS_FIREHOSE = "KinesisFirehose"
    KINESIS_STREAMS = "KinesisStreams"
    KMS = "Kms"
    LAMBDA = "Lambda"
    S3 = "S3"
    SAGEMAKER_API = "SageMakerApi"
    SAGEMAKER_NOTEBOOK = "SageMakerNotebook"
    SAGEMAKER_RUNTIME = "SageMakerRuntime"
    SECRETS_MANAGER = "SecretsManager"
    SERVICE_CATALOG = "ServiceCatalog"
    SNS = "Sns"
    SQS = "Sqs"
    SSM = "Ssm"
    SSM_MESSAGES = "SsmMessages"
    STEP_FUNCTIONS = "StepFunctions"
    STORAGE_GATEWAY = "StorageGateway"
    STS = "Sts"
    TRANSFER = "Transfer"


@dataclass(frozen=True)
class EndpointService:
    """A service that can be reached through a VPC endpoint."""
    key: str
    name: str
    gateway: bool = False
    interface: bool = True
    private_dns_required: bool = True
    prefix: str = DEFAULT_SERVICE_PREFIX

    def service_name(self, region: str) -> str:
        """
        Build the regional service name, e.g. ``com.amazonaws.us-east-1.s3``.

        Args:
            region: Region name or region token of the owning stack

        Returns:
            The fully qualified endpoint service name
        """
        return f"{self.prefix}.{region}.{self.name}"

    def supports(self, endpoint_type: EndpointType) -> bool:
        if endpoint_type == EndpointType.GATEWAY:
            return self.gateway
        return self.interface


def _gateway(service: AwsService, name: str) -> EndpointService:
    return EndpointService(
        key=service.value,
        name=name,
        gateway=True,
        interface=False,
        private_dns_required=False
    )


def _interface(service: AwsService, name: str, prefix: str = DEFAULT_SERVICE_PREFIX) -> EndpointService:
    return EndpointService(key=service.value, name=name, prefix=prefix)


_CATALOG: Dict[AwsService, EndpointService] = {
    AwsService.S3: _gateway(AwsService.S3, "s3"),
    AwsService.DYNAMODB: _gateway(AwsService.DYNAMODB, "dynamodb"),
    AwsService.APIGATEWAY: _interface(AwsService.APIGATEWAY, "execute-api"),
    AwsService.CLOUDFORMATION: _interface(AwsService.CLOUDFORMATION, "cloudformation"),
    AwsService.CLOUDTRAIL: _interface(AwsService.CLOUDTRAIL, "cloudtrail"),
    AwsService.CLOUDWATCH: _interface(AwsService.CLOUDWATCH, "monitoring"),
    AwsService.CLOUDWATCH_EVENTS: _interface(AwsService.CLOUDWATCH_EVENTS, "events"),
    AwsService.CLOUDWATCH_LOGS: _interface(AwsService.CLOUDWATCH_LOGS, "logs"),
    AwsService.CODEBUILD: _interface(AwsService.CODEBUILD, "codebuild"),
    AwsService.CODEBUILD_FIPS: _interface(AwsService.CODEBUILD_FIPS, "codebuild-fips"),
    AwsService.CODECOMMIT: _interface(AwsService.CODECOMMIT, "codecommit"),
    AwsService.CODECOMMIT_FIPS: _interface(AwsService.CODECOMMIT_FIPS, "codecommit-fips"),
    AwsService.CODEPIPELINE: _interface(AwsService.CODEPIPELINE, "codepipeline"),
    AwsService.CONFIG: _interface(AwsService.CONFIG, "config"),
    AwsService.EC2: _interface(AwsService.EC2, "ec2"),
    AwsService.EC2_MESSAGES: _interface(AwsService.EC2_MESSAGES, "ec2messages"),
    AwsService.ECR: _interface(AwsService.ECR, "ecr.api"),
    AwsService.ECR_DOCKER: _interface(AwsService.ECR_DOCKER, "ecr.dkr"),
    AwsService.ECS: _interface(AwsService.ECS, "ecs"),
    AwsService.ECS_AGENT: _interface(AwsService.ECS_AGENT, "ecs-agent"),
    AwsService.ECS_TELEMETRY: _interface(AwsService.ECS_TELEMETRY, "ecs-telemetry"),
    AwsService.ELASTIC_FILESYSTEM: _interface(AwsService.ELASTIC_FILESYSTEM, "elasticfilesystem"),
    AwsService.ELASTIC_LOAD_BALANCING: _interface(AwsService.ELASTIC_LOAD_BALANCING, "elasticloadbalancing"),
    AwsService.KINESIS_FIREHOSE: _interface(AwsService.KINESIS_FIREHOSE, "kinesis-firehose"),
    AwsService.KINESIS_STREAMS: _interface(AwsService.KINESIS_STREAMS, "kinesis-streams"),
    AwsService.KMS: _interface(AwsService.KMS, "kms"),
    AwsService.LAMBDA: _interface(AwsService.LAMBDA, "lambda"),
    AwsService.SAGEMAKER_API: _interface(AwsService.SAGEMAKER_API, "sagemaker.api"),
    AwsService.SAGEMAKER_NOTEBOOK: _interface(AwsService.SAGEMAKER_NOTEBOOK, "notebook", prefix="aws.sagemaker"),
    AwsService.SAGEMAKER_RUNTIME: _interface(AwsService.SAGEMAKER_RUNTIME, "sagemaker.runtime"),
    AwsService.SECRETS_MANAGER: _interface(AwsService.SECRETS_MANAGER, "secretsmanager"),
    AwsService.SERVICE_CATALOG: _interface(AwsService.SERVICE_CATALOG, "servicecatalog"),
    AwsService.SNS: _interface(AwsService.SNS, "sns"),
    AwsService.SQS: _interface(AwsService.SQS, "sqs"),
    AwsService.SSM: _interface(AwsService.SSM, "ssm"),
    AwsService.SSM_MESSAGES: _interface(AwsService.SSM_MESSAGES, "ssmmessages"),
    AwsService.STEP_FUNCTIONS: _interface(AwsService.STEP_FUNCTIONS, "states"),
    AwsService.STORAGE_GATEWAY: _interface(AwsService.STORAGE_GATEWAY, "storagegateway"),
    AwsService.STS: _interface(AwsService.STS, "sts"),
    AwsService.TRANSFER: _interface(AwsService.TRANSFER, "transfer.server"),
}

ServiceLike = Union[AwsService, EndpointService, str]


class EndpointServiceCatalog:
    """Read-only lookup over the endpoint service table."""

    @staticmethod
    def get(service: ServiceLike) -> EndpointService:
        """
        Resolve a service reference to its catalog entry.

        Args:
            service: An AwsService member, a catalog entry, a logical key
                such as ``"EcrDocker"`` or a member name such as ``"ECR_DOCKER"``

        Returns:
            The matching EndpointService

        Raises:
            ConfigurationError: If the service is not in the catalog
        """
        if isinstance(service, EndpointService):
            if _CATALOG.get(_member_for_key(service.key)) != service:
                raise ConfigurationError(
                    f"Endpoint service '{service.key}' is not part of the service catalog",
                    config_key="service"
                )
            return service

        if isinstance(service, AwsService):
            return _CATALOG[service]

        member = _member_for_key(service)
        if member is None:
            raise ConfigurationError(
                f"Unknown endpoint service '{service}'. "
                f"Known services: {', '.join(sorted(m.value for m in AwsService))}",
                config_key="service"
            )
        return _CATALOG[member]

    @staticmethod
    def services(endpoint_type: EndpointType = None) -> Dict[AwsService, EndpointService]:
        """Return the catalog, optionally filtered to services supporting one endpoint type."""
        if endpoint_type is None:
            return dict(_CATALOG)
        return {
            member: entry for member, entry in _CATALOG.items()
            if entry.supports(endpoint_type)
        }


def _member_for_key(key) -> AwsService:
    if not isinstance(key, str):
        return None
    try:
        return AwsService(key)
    except ValueError:
        pass
    return AwsService.__members__.get(key.upper())
