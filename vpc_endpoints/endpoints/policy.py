"""
Access policy documents attached to gateway endpoints.

Statements are accepted as-is when added. The "every statement names a
principal" rule is enforced when the document is validated or rendered,
and at synthesis through PolicyPrincipalValidation, so statements may be
built up in any order during construction.
"""

from typing import Any, Dict, List, Optional, Tuple

import jsii
from aws_cdk import aws_iam as iam
from constructs import IValidation

from ..common.exceptions import InvalidPolicyError
from ..common.logging_config import get_logger

logger = get_logger(__name__)


def statement_has_principal(statement: iam.PolicyStatement) -> bool:
    """Return True when the statement names at least one principal."""
    return bool(statement.has_principal)


class AccessPolicyDocument:
    """
    Mutable, ordered container of policy statements owned by one endpoint.

    Wraps an ``iam.PolicyDocument`` so the document can be handed directly to
    ``AWS::EC2::VPCEndpoint`` and resolved lazily at synthesis.
    """

    def __init__(self, owner: str = "endpoint") -> None:
        self._owner = owner
        self._statements: List[iam.PolicyStatement] = []
        self._document = iam.PolicyDocument()

    @property
    def document(self) -> iam.PolicyDocument:
        return self._document

    @property
    def statements(self) -> List[iam.PolicyStatement]:
        return list(self._statements)

    @property
    def is_empty(self) -> bool:
        return not self._statements

    def add_statements(self, *statements: iam.PolicyStatement) -> None:
        for statement in statements:
            self._statements.append(statement)
            self._document.add_statements(statement)
        logger.debug(f"Policy of {self._owner} now holds {len(self._statements)} statement(s)")

    def validation_errors(self) -> List[str]:
        """
        Collect the problems that would prevent this document from rendering.

        Returns:
            One message per statement that lacks a principal
        """
        return [message for _, message in self._errors_by_index()]

    def _errors_by_index(self) -> List[Tuple[int, str]]:
        return [
            (index, f"Statement {index} in the access policy of {self._owner} "
                     f"must specify at least one `Principal`")
            for index, statement in enumerate(self._statements)
            if not statement_has_principal(statement)
        ]

    def validate(self) -> None:
        """
        Raises:
            InvalidPolicyError: If any statement has no principal
        """
        errors = self._errors_by_index()
        if errors:
            index, message = errors[0]
            logger.warning(message)
            raise InvalidPolicyError(message, statement_index=index)

    def render(self) -> Optional[Dict[str, Any]]:
        """
        Validate and render the document as an IAM policy JSON object.

        Returns:
            The policy JSON, or None when the document holds no statements

        Raises:
            InvalidPolicyError: If any statement has no principal
        """
        self.validate()
        if self.is_empty:
            return None
        return self._document.to_json()


@jsii.implements(IValidation)
class PolicyPrincipalValidation:
    """Fails synthesis of the owning construct while its policy has a principal-less statement."""

    def __init__(self, policy: AccessPolicyDocument) -> None:
        self._policy = policy

    def validate(self) -> List[str]:
        return self._policy.validation_errors()
