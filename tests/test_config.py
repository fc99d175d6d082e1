"""
Unit tests for controller settings.
"""

import pytest

from channel_controller.config import Settings, get_settings


@pytest.mark.unit
class TestSettings:
    """Test Settings loading from the environment."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("IMAGE_KUBE_RBAC_PROXY", raising=False)
        monkeypatch.delenv("SYSTEM_NAMESPACE", raising=False)

        settings = Settings()

        assert settings.image_kube_rbac_proxy == ""
        assert settings.system_namespace == "knative-eventing"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("IMAGE_KUBE_RBAC_PROXY", "proxy:v2")
        monkeypatch.setenv("SYSTEM_NAMESPACE", "kafka-system")

        settings = Settings()

        assert settings.image_kube_rbac_proxy == "proxy:v2"
        assert settings.system_namespace == "kafka-system"

    def test_lowercase_env_names(self, monkeypatch):
        """Env names are case insensitive."""
        monkeypatch.setenv("image_kube_rbac_proxy", "proxy:v3")

        assert Settings().image_kube_rbac_proxy == "proxy:v3"

    def test_get_settings_is_cached(self, clear_settings_cache):
        assert get_settings() is get_settings()
