"""
Test configuration and fixtures for pytest.

Fixtures include: controller settings, a dispatcher owner reference, and
ready-made DispatcherArgs for cluster and namespace scoped dispatchers.
"""

import sys
import os
from pathlib import Path
import pytest

# Add the project root to sys.path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))


def pytest_configure(config):
    """
    Pytest hook called before test collection.
    Sets up test environment variables and registers custom markers.
    """
    # CRITICAL: Set test environment variables BEFORE any package imports
    os.environ["SYSTEM_NAMESPACE"] = "knative-eventing"
    os.environ.pop("IMAGE_KUBE_RBAC_PROXY", None)

    # Import and clear settings cache after env vars are set
    from channel_controller.config import get_settings
    get_settings.cache_clear()

    # Register custom markers
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "kubernetes: mark test as building Kubernetes manifests")


@pytest.fixture
def clear_settings_cache():
    """Clear the cached settings before and after a test that edits env vars."""
    from channel_controller.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Controller settings with a configured kube-rbac-proxy image."""
    from channel_controller.config import Settings
    return Settings(
        image_kube_rbac_proxy="quay.io/brancz/kube-rbac-proxy:v0.13.1",
        system_namespace="knative-eventing",
    )


@pytest.fixture
def owner_ref():
    """Owner reference pointing at the channel controller deployment."""
    from kubernetes import client
    return client.V1OwnerReference(
        api_version="apps/v1",
        kind="Deployment",
        name="kafka-ch-controller",
        uid="6f1c2a3e-0d2b-4c51-9a0e-3d7f5b8e1c42",
        controller=True,
        block_owner_deletion=True,
    )


@pytest.fixture
def make_args(owner_ref):
    """Factory for DispatcherArgs with overridable fields."""
    from channel_controller.services.orchestration import DispatcherArgs

    def _make(**overrides):
        values = {
            "dispatcher_scope": "cluster",
            "dispatcher_namespace": "knative-eventing",
            "image": "gcr.io/knative-releases/kafka-ch-dispatcher:v1.0.0",
            "replicas": 1,
            "service_account": "kafka-ch-dispatcher",
            "config_map_hash": "b5d4f8a1c3e2",
            "owner_ref": owner_ref,
            "enable_monitoring": False,
        }
        values.update(overrides)
        return DispatcherArgs(**values)

    return _make
