"""
Orchestration Module - Dispatcher Workload Manifests

This module builds the Kubernetes manifests the channel controller submits for
the Kafka channel dispatcher. It never talks to the API server itself: the
reconciler fetches the live object, hands it to the builder, and submits the
result with the usual create/update verbs.

Usage:
    from channel_controller.services.orchestration import DispatcherBuilder, DispatcherArgs

    deployment = DispatcherBuilder.new().with_args(args).build()
"""

from .kubernetes import (
    DispatcherArgs,
    DispatcherBuilder,
    DispatcherBuildError,
    DispatcherIdentity,
    DEFAULT_IDENTITY,
    ContainerRole,
    dispatcher_template,
    get_rbac_proxy_image,
    make_env,
)

__all__ = [
    # Builder
    "DispatcherArgs",
    "DispatcherBuilder",
    "DispatcherBuildError",
    # Identity
    "DispatcherIdentity",
    "DEFAULT_IDENTITY",
    "ContainerRole",
    # Manifest helpers
    "dispatcher_template",
    "get_rbac_proxy_image",
    "make_env",
]
