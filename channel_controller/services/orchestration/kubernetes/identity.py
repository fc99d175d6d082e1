"""
Dispatcher Identity

Fixed names and labels of the Kafka channel dispatcher workload. One
DispatcherIdentity is built at import time (DEFAULT_IDENTITY) and passed by
reference to the template factory and the builder, so every manifest agrees
on the same strings without module-level mutable state.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from kubernetes import client
from pydantic import BaseModel, Field, field_validator


class DispatcherIdentity(BaseModel):
    """Identity strings of the dispatcher deployment."""
    name: str = Field(default="kafka-ch-dispatcher", description="Deployment name")
    container_name: str = Field(default="dispatcher", description="Primary container name")
    sidecar_container_name: str = Field(default="kube-rbac-proxy", description="Monitoring sidecar name")
    labels: Mapping[str, str] = Field(
        default_factory=lambda: {
            "messaging.knative.dev/channel": "kafka-channel",
            "messaging.knative.dev/role": "dispatcher",
        },
        validate_default=True,
        description="Selector and pod template labels (read-only)"
    )

    @field_validator("labels")
    @classmethod
    def freeze_labels(cls, v):
        """Copy labels into a read-only mapping."""
        return MappingProxyType(dict(v))

    class Config:
        frozen = True


DEFAULT_IDENTITY = DispatcherIdentity()


class ContainerRole(str, Enum):
    """
    Role of a container inside the dispatcher pod.

    Attributes:
        PRIMARY: The dispatcher container (always first in the pod spec)
        SIDECAR: The kube-rbac-proxy monitoring sidecar
        OTHER: Anything added out of band
    """

    PRIMARY = "primary"
    SIDECAR = "sidecar"
    OTHER = "other"

    @classmethod
    def of(
        cls,
        container: client.V1Container,
        identity: DispatcherIdentity = DEFAULT_IDENTITY
    ) -> "ContainerRole":
        """
        Classify a container by name.

        Args:
            container: Container from the pod spec
            identity: Identity holding the well-known container names

        Returns:
            ContainerRole of the container
        """
        if container.name == identity.container_name:
            return cls.PRIMARY
        if container.name == identity.sidecar_container_name:
            return cls.SIDECAR
        return cls.OTHER

    @property
    def is_primary(self) -> bool:
        """Check if this is the dispatcher container role."""
        return self == ContainerRole.PRIMARY

    def __str__(self) -> str:
        return self.value
