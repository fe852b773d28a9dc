"""
Tests for YAML configuration loading and ProjectName validation.
"""

import pytest

from helper.config import Config, ProjectNameValidationError


class TestConfigLoading:
    """Test reading configuration files."""

    def test_load_from_yaml(self, tmp_path):
        (tmp_path / "staging.yaml").write_text(
            "ProjectName: endpoints-staging\n"
            "MaxAZs: 2\n"
            "GatewayEndpoints:\n"
            "  - Id: S3\n"
            "    Service: S3\n",
            encoding="utf-8"
        )

        conf = Config("staging", config_dir=str(tmp_path))

        assert conf.environment == "staging"
        assert conf.get("MaxAZs") == 2
        assert conf.get_gateway_endpoints() == [{"Id": "S3", "Service": "S3"}]
        assert conf.get_interface_endpoints() == []

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Config("missing", config_dir=str(tmp_path))

    def test_get_missing_key_raises(self, config):
        with pytest.raises(KeyError):
            config.get("NotThere")

    def test_get_optional(self, config):
        assert config.get_optional("NotThere", 7) == 7
        assert config.get_optional("MaxAZs", 7) == 3

    def test_endpoint_ingress_defaults_to_empty(self, config):
        assert config.get_endpoint_ingress() == []
        assert config.get_subnet_groups() == []


class TestProjectNameValidation:
    """Test ProjectName constraints."""

    def test_valid_name(self):
        conf = Config.from_dict({"ProjectName": "network-01"})
        assert conf.get_validated_project_name() == "network-01"

    @pytest.mark.parametrize("name", [
        "ab",
        "a" * 33,
        "Network",
        "1network",
        "network-",
        "net--work",
        "net_work",
    ])
    def test_invalid_names(self, name):
        with pytest.raises(ProjectNameValidationError):
            Config.from_dict({"ProjectName": name})

    def test_missing_name(self):
        with pytest.raises(ProjectNameValidationError):
            Config.from_dict({"MaxAZs": 2})
