"""
Tests for gateway endpoint access policy documents.
"""

import pytest
from aws_cdk import aws_iam as iam

from vpc_endpoints.common.exceptions import InvalidPolicyError
from vpc_endpoints.endpoints.policy import (
    AccessPolicyDocument,
    PolicyPrincipalValidation,
    statement_has_principal,
)


def _any_principal_statement(action="s3:GetObject"):
    return iam.PolicyStatement(
        principals=[iam.AnyPrincipal()],
        actions=[action],
        resources=["*"]
    )


def _principal_less_statement():
    return iam.PolicyStatement(actions=["s3:GetObject"], resources=["*"])


class TestAccessPolicyDocument:
    """Test statement storage and lazy validation."""

    def test_new_document_is_empty(self):
        policy = AccessPolicyDocument()
        assert policy.is_empty
        assert policy.render() is None

    def test_statements_keep_insertion_order(self):
        policy = AccessPolicyDocument()
        first = _any_principal_statement("s3:GetObject")
        second = _any_principal_statement("s3:PutObject")
        policy.add_statements(first, second)
        assert policy.statements == [first, second]

    def test_adding_principal_less_statement_does_not_raise(self):
        policy = AccessPolicyDocument()
        policy.add_statements(_principal_less_statement())
        assert not policy.is_empty

    def test_validate_rejects_missing_principal(self):
        policy = AccessPolicyDocument(owner="TestStack/S3")
        policy.add_statements(_any_principal_statement(), _principal_less_statement())

        with pytest.raises(InvalidPolicyError) as exc_info:
            policy.validate()

        assert "Principal" in str(exc_info.value)
        assert "TestStack/S3" in str(exc_info.value)
        assert exc_info.value.statement_index == 1

    def test_validate_reports_first_failing_statement(self):
        policy = AccessPolicyDocument()
        policy.add_statements(
            _any_principal_statement(),
            _any_principal_statement("s3:PutObject"),
            _principal_less_statement(),
            _principal_less_statement(),
        )

        with pytest.raises(InvalidPolicyError) as exc_info:
            policy.validate()

        assert exc_info.value.statement_index == 2
        assert str(exc_info.value).startswith("Statement 2")

    def test_render_rejects_missing_principal(self):
        policy = AccessPolicyDocument()
        policy.add_statements(_principal_less_statement())
        with pytest.raises(InvalidPolicyError):
            policy.render()

    def test_validation_errors_lists_every_bad_statement(self):
        policy = AccessPolicyDocument()
        policy.add_statements(_principal_less_statement(), _any_principal_statement(), _principal_less_statement())
        errors = policy.validation_errors()
        assert len(errors) == 2
        assert errors[0].startswith("Statement 0")
        assert errors[1].startswith("Statement 2")

    def test_render_wildcard_principal(self):
        policy = AccessPolicyDocument()
        policy.add_statements(_any_principal_statement())

        rendered = policy.render()

        assert rendered["Version"] == "2012-10-17"
        assert len(rendered["Statement"]) == 1
        assert rendered["Statement"][0]["Principal"] == {"AWS": "*"}
        assert rendered["Statement"][0]["Action"] == "s3:GetObject"


class TestStatementHasPrincipal:

    def test_statement_with_principal(self):
        assert statement_has_principal(_any_principal_statement())

    def test_statement_without_principal(self):
        assert not statement_has_principal(_principal_less_statement())


class TestPolicyPrincipalValidation:
    """Test the construct validation hooked into synthesis."""

    def test_follows_statements_added_later(self):
        policy = AccessPolicyDocument(owner="TestStack/S3")
        validation = PolicyPrincipalValidation(policy)
        assert validation.validate() == []

        policy.add_statements(_principal_less_statement())

        assert validation.validate() == policy.validation_errors()
        assert len(validation.validate()) == 1
