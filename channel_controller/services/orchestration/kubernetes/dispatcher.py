"""
Dispatcher Deployment Builder

Merges the desired dispatcher state (DispatcherArgs) onto either the template
deployment or the live deployment fetched by the reconciler.

Merge rules:
- Namespace, owner references, replicas, service account, container image:
  always taken from the args.
- Pod template annotations: replaced wholesale by the config-kafka hash.
  Other annotations on the pod template do not survive a build.
- Dispatcher environment: written only while the container has none, so
  manual edits on the live deployment are kept.
- Monitoring sidecar: appended only while the dispatcher is the sole
  container. Turning monitoring off again does not remove it.

Usage:
    deployment = (
        DispatcherBuilder.from_deployment(live)
        .with_args(args)
        .build()
    )
"""

from kubernetes import client
from pydantic import BaseModel, Field
from typing import Optional
import logging

from ....config import Settings
from .helpers import (
    CONFIG_MAP_HASH_ANNOTATION_KEY,
    dispatcher_template,
    make_env,
    get_rbac_proxy_image,
    create_rbac_proxy_container,
    create_rbac_proxy_tls_volume,
)
from .identity import DispatcherIdentity, DEFAULT_IDENTITY, ContainerRole

logger = logging.getLogger(__name__)


class DispatcherBuildError(RuntimeError):
    """Raised when the builder is used out of order."""


class DispatcherArgs(BaseModel):
    """Desired state of the dispatcher deployment."""
    dispatcher_scope: str = Field(..., description="'cluster' or 'namespace'")
    dispatcher_namespace: str = Field(..., description="Namespace the deployment lives in")
    image: str = Field(..., description="Dispatcher image")
    replicas: int = Field(..., ge=0, description="Desired replica count")
    service_account: str = Field(..., description="Service account of the dispatcher pods")
    config_map_hash: str = Field(..., description="Hash of config-kafka, rolls pods on change")
    owner_ref: client.V1OwnerReference = Field(..., description="Owner for garbage collection")
    enable_monitoring: bool = Field(default=False, description="Inject the kube-rbac-proxy sidecar")

    class Config:
        arbitrary_types_allowed = True


class DispatcherBuilder:
    """
    Builds the dispatcher deployment.

    The builder owns the wrapped deployment until build() hands it back;
    build() mutates and returns that same object.
    """

    def __init__(
        self,
        deployment: client.V1Deployment,
        identity: DispatcherIdentity = DEFAULT_IDENTITY,
        settings: Optional[Settings] = None
    ):
        self.deployment = deployment
        self.identity = identity
        self.settings = settings
        self.args: Optional[DispatcherArgs] = None

    @classmethod
    def new(
        cls,
        identity: DispatcherIdentity = DEFAULT_IDENTITY,
        settings: Optional[Settings] = None
    ) -> "DispatcherBuilder":
        """Builder starting from the template, for first-time creation."""
        return cls(dispatcher_template(identity), identity=identity, settings=settings)

    @classmethod
    def from_deployment(
        cls,
        deployment: client.V1Deployment,
        identity: DispatcherIdentity = DEFAULT_IDENTITY,
        settings: Optional[Settings] = None
    ) -> "DispatcherBuilder":
        """Builder starting from an existing deployment, for updates."""
        return cls(deployment, identity=identity, settings=settings)

    def with_args(self, args: DispatcherArgs) -> "DispatcherBuilder":
        self.args = args
        return self

    def build(self) -> client.V1Deployment:
        """
        Apply the args to the wrapped deployment.

        Returns:
            The wrapped V1Deployment, mutated in place

        Raises:
            DispatcherBuildError: If with_args() was not called
        """
        if self.args is None:
            raise DispatcherBuildError("DispatcherBuilder.build() called before with_args()")

        args = self.args
        deployment = self.deployment
        if deployment.metadata is None:
            deployment.metadata = client.V1ObjectMeta()

        deployment.metadata.namespace = args.dispatcher_namespace
        deployment.metadata.owner_references = [args.owner_ref]
        deployment.spec.replicas = args.replicas

        template = deployment.spec.template
        if template.metadata is None:
            template.metadata = client.V1ObjectMeta()
        if template.spec is None:
            template.spec = client.V1PodSpec(containers=[])
        pod_spec = template.spec

        template.metadata.annotations = {
            CONFIG_MAP_HASH_ANNOTATION_KEY: args.config_map_hash
        }
        pod_spec.service_account_name = args.service_account

        self._apply_primary_container(pod_spec)

        if args.enable_monitoring and len(pod_spec.containers) == 1:
            self._inject_monitoring_sidecar(pod_spec)

        logger.debug(
            f"Built dispatcher deployment {deployment.metadata.name} in {args.dispatcher_namespace} "
            f"({len(pod_spec.containers)} containers, replicas={args.replicas})"
        )
        return deployment

    def _apply_primary_container(self, pod_spec: client.V1PodSpec) -> None:
        if pod_spec.containers is None:
            pod_spec.containers = []

        found = False
        for container in pod_spec.containers:
            if not ContainerRole.of(container, self.identity).is_primary:
                continue
            found = True
            container.image = self.args.image
            if not container.env:
                container.env = make_env(self.args, identity=self.identity, settings=self.settings)

        if not found:
            logger.debug(f"No '{self.identity.container_name}' container found, leaving containers untouched")

    def _inject_monitoring_sidecar(self, pod_spec: client.V1PodSpec) -> None:
        if pod_spec.volumes is None:
            pod_spec.volumes = []
        pod_spec.volumes.append(create_rbac_proxy_tls_volume())

        # Order matters: the dispatcher container must stay first
        pod_spec.containers.append(
            create_rbac_proxy_container(
                image=get_rbac_proxy_image(self.settings),
                identity=self.identity
            )
        )
        logger.info(f"Injected {self.identity.sidecar_container_name} sidecar into dispatcher deployment")
