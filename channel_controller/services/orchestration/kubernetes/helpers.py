"""
Kubernetes Helpers for the Kafka Channel Dispatcher

This module contains the manifest building blocks used by DispatcherBuilder:
- Template: the zero-state dispatcher deployment (first-time creation)
- Environment: variables injected into the dispatcher container once
- Monitoring: kube-rbac-proxy sidecar terminating TLS in front of /metrics

Everything here is a pure function over kubernetes client models. Nothing
talks to the API server.
"""

from kubernetes import client
from typing import List, Optional, TYPE_CHECKING
import logging

from ....config import Settings, get_settings
from .identity import DispatcherIdentity, DEFAULT_IDENTITY

if TYPE_CHECKING:
    from .dispatcher import DispatcherArgs

logger = logging.getLogger(__name__)


# Kafka settings ConfigMap mounted into the dispatcher
SETTINGS_CONFIG_MAP_NAME = "config-kafka"
SETTINGS_CONFIG_MAP_MOUNT_PATH = "/etc/" + SETTINGS_CONFIG_MAP_NAME

# Pod template annotation that rolls the dispatcher when config-kafka changes
CONFIG_MAP_HASH_ANNOTATION_KEY = "kafka.eventing.knative.dev/configmap-hash"

METRICS_PORT_NAME = "metrics"
METRICS_PORT = 9090

SYSTEM_NAMESPACE_ENV_KEY = "SYSTEM_NAMESPACE"
NAMESPACE_SCOPE = "namespace"

RBAC_PROXY_IMAGE_ENV_VAR = "IMAGE_KUBE_RBAC_PROXY"
RBAC_PROXY_TLS_SECRET_NAME = "kafka-ch-dispatcher-sm-service-tls"
RBAC_PROXY_TLS_VOLUME_NAME = "secret-" + RBAC_PROXY_TLS_SECRET_NAME
RBAC_PROXY_TLS_MOUNT_PATH = "/etc/tls/private"


# =============================================================================
# Template
# =============================================================================

def dispatcher_template(
    identity: DispatcherIdentity = DEFAULT_IDENTITY
) -> client.V1Deployment:
    """
    Create the zero-state dispatcher deployment.

    Used only when no dispatcher deployment exists yet. The result carries no
    caller data: no namespace, no image, no environment. DispatcherBuilder
    fills those in.

    Args:
        identity: Fixed names and labels of the dispatcher

    Returns:
        V1Deployment manifest (a new object on every call)
    """
    container = client.V1Container(
        name=identity.container_name,
        ports=[
            client.V1ContainerPort(
                name=METRICS_PORT_NAME,
                container_port=METRICS_PORT
            )
        ],
        volume_mounts=[
            client.V1VolumeMount(
                name=SETTINGS_CONFIG_MAP_NAME,
                mount_path=SETTINGS_CONFIG_MAP_MOUNT_PATH
            )
        ]
    )

    pod_spec = client.V1PodSpec(
        containers=[container],
        volumes=[
            client.V1Volume(
                name=SETTINGS_CONFIG_MAP_NAME,
                config_map=client.V1ConfigMapVolumeSource(
                    name=SETTINGS_CONFIG_MAP_NAME
                )
            )
        ]
    )

    return client.V1Deployment(
        api_version="apps/v1",
        kind="Deployments",
        metadata=client.V1ObjectMeta(
            name=identity.name
        ),
        spec=client.V1DeploymentSpec(
            selector=client.V1LabelSelector(
                match_labels=dict(identity.labels)
            ),
            template=client.V1PodTemplateSpec(
                metadata=client.V1ObjectMeta(labels=dict(identity.labels)),
                spec=pod_spec
            )
        )
    )


# =============================================================================
# Environment
# =============================================================================

def _field_ref_env(name: str, field_path: str) -> client.V1EnvVar:
    return client.V1EnvVar(
        name=name,
        value_from=client.V1EnvVarSource(
            field_ref=client.V1ObjectFieldSelector(field_path=field_path)
        )
    )


def make_env(
    args: "DispatcherArgs",
    identity: DispatcherIdentity = DEFAULT_IDENTITY,
    settings: Optional[Settings] = None
) -> List[client.V1EnvVar]:
    """
    Build the dispatcher container environment.

    Namespace-scoped dispatchers additionally get NAMESPACE from the pod's
    own metadata so they only watch channels in that namespace.

    Args:
        args: DispatcherArgs of the current build
        identity: Fixed names of the dispatcher
        settings: Controller settings (defaults to get_settings())

    Returns:
        Ordered list of V1EnvVar
    """
    settings = settings or get_settings()

    env = [
        client.V1EnvVar(name=SYSTEM_NAMESPACE_ENV_KEY, value=settings.system_namespace),
        client.V1EnvVar(name="METRICS_DOMAIN", value="knative.dev/eventing"),
        client.V1EnvVar(name="CONFIG_LOGGING_NAME", value="config-logging"),
        client.V1EnvVar(name="CONFIG_LEADERELECTION_NAME", value="config-leader-election"),
        client.V1EnvVar(name="METRICS_PROMETHEUS_HOST", value="127.0.0.1"),
    ]

    if args.dispatcher_scope == NAMESPACE_SCOPE:
        env.append(_field_ref_env("NAMESPACE", "metadata.namespace"))

    env.append(_field_ref_env("POD_NAME", "metadata.name"))
    env.append(client.V1EnvVar(name="CONTAINER_NAME", value=identity.container_name))
    return env


# =============================================================================
# Monitoring Sidecar (kube-rbac-proxy)
# =============================================================================

def get_rbac_proxy_image(settings: Optional[Settings] = None) -> str:
    """
    Resolve the kube-rbac-proxy image from IMAGE_KUBE_RBAC_PROXY.

    There is no fallback image. If the variable is missing (e.g. a typo in
    the operator bundle) the empty string is returned so the sidecar fails
    to start visibly instead of running some default tag.

    Args:
        settings: Controller settings (defaults to get_settings())

    Returns:
        Image reference, or "" when unset
    """
    settings = settings or get_settings()
    image = settings.image_kube_rbac_proxy
    if not image:
        logger.warning(f"{RBAC_PROXY_IMAGE_ENV_VAR} is not set, monitoring sidecar will have no image")
    return image


def create_rbac_proxy_tls_volume() -> client.V1Volume:
    """Secret volume holding the serving certificate of the sidecar."""
    return client.V1Volume(
        name=RBAC_PROXY_TLS_VOLUME_NAME,
        secret=client.V1SecretVolumeSource(
            secret_name=RBAC_PROXY_TLS_SECRET_NAME
        )
    )


def create_rbac_proxy_container(
    image: str,
    identity: DispatcherIdentity = DEFAULT_IDENTITY
) -> client.V1Container:
    """
    Create the kube-rbac-proxy sidecar container.

    The proxy listens on 8444 with TLS and forwards to the dispatcher's
    metrics port over loopback.

    Args:
        image: kube-rbac-proxy image (may be empty, see get_rbac_proxy_image)
        identity: Fixed names of the dispatcher

    Returns:
        V1Container manifest
    """
    return client.V1Container(
        name=identity.sidecar_container_name,
        image=image,
        volume_mounts=[
            client.V1VolumeMount(
                name=RBAC_PROXY_TLS_VOLUME_NAME,
                mount_path=RBAC_PROXY_TLS_MOUNT_PATH
            )
        ],
        resources=client.V1ResourceRequirements(
            requests={"memory": "20Mi", "cpu": "10m"}
        ),
        args=[
            "--secure-listen-address=0.0.0.0:8444",
            f"--upstream=http://127.0.0.1:{METRICS_PORT}/",
            f"--tls-cert-file={RBAC_PROXY_TLS_MOUNT_PATH}/tls.crt",
            f"--tls-private-key-file={RBAC_PROXY_TLS_MOUNT_PATH}/tls.key",
            "--logtostderr=true",
            "--v=10",
        ]
    )
