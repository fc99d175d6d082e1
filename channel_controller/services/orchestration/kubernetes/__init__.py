"""
Kubernetes Manifests for the Kafka Channel Dispatcher

- DispatcherIdentity: fixed names and labels of the dispatcher workload
- ContainerRole: classifies pod containers (primary dispatcher vs sidecar)
- Helpers: template deployment, environment, kube-rbac-proxy sidecar
- DispatcherBuilder: merges DispatcherArgs onto a fresh or live deployment

Container ordering contract:
The dispatcher container is always first in the pod spec. Other components
index containers positionally, so sidecars are only ever appended.
"""

from .identity import DispatcherIdentity, DEFAULT_IDENTITY, ContainerRole
from .helpers import (
    # Template
    dispatcher_template,
    # Environment
    make_env,
    # Monitoring sidecar
    create_rbac_proxy_container,
    create_rbac_proxy_tls_volume,
    get_rbac_proxy_image,
)
from .dispatcher import DispatcherArgs, DispatcherBuilder, DispatcherBuildError

__all__ = [
    # Identity
    "DispatcherIdentity",
    "DEFAULT_IDENTITY",
    "ContainerRole",
    # Manifest Helpers
    "dispatcher_template",
    "make_env",
    "create_rbac_proxy_container",
    "create_rbac_proxy_tls_volume",
    "get_rbac_proxy_image",
    # Builder
    "DispatcherArgs",
    "DispatcherBuilder",
    "DispatcherBuildError",
]
