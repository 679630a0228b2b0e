# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/endpoint_resolver.py

from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import (
    KubectlError,
    ambiguous_context,
    endpoint_not_found,
    endpoint_unreachable,
)
from ..core.logger import Log
from ..kube.client import ControlPlaneClient
from ..kube.models import ClusterEndpoint, Provider
from ..providers.conventions import match_contexts


class ClusterEndpointResolver:
    """
    Turns (provider, cluster name) into a reachable ClusterEndpoint.

    The kubeconfig's current-context is never touched; the resolved context is
    carried on the endpoint and passed to every later call.
    """

    def __init__(self, logger: logging.Logger, client: ControlPlaneClient):
        self.logger = logger
        self.client = client

    def _contexts(self, provider: Provider, cluster: str, kubeconfig: Optional[str]):
        try:
            return self.client.list_contexts(kubeconfig)
        except KubectlError as e:
            raise endpoint_not_found(
                f"Cannot read kubeconfig contexts for {provider.value} cluster '{cluster}': {e}",
                kubeconfig=kubeconfig,
            ) from e

    def _derive_context(self, provider: Provider, cluster: str, kubeconfig: Optional[str]) -> str:
        contexts = self._contexts(provider, cluster, kubeconfig)
        matches = match_contexts(provider, cluster, contexts)

        if not matches:
            raise endpoint_not_found(
                f"Cannot auto-detect context for {provider.value} cluster '{cluster}'. "
                "Specify it with --source-context or --target-context.",
                provider=provider.value,
                cluster=cluster,
            )
        if len(matches) > 1:
            raise ambiguous_context(
                f"Multiple contexts match {provider.value} cluster '{cluster}': {', '.join(matches)}. "
                "Specify one with --source-context or --target-context.",
                provider=provider.value,
                cluster=cluster,
            )

        if not provider.is_local:
            self.logger.info("Auto-detected context: %s", matches[0])
        return matches[0]

    def resolve(
        self,
        provider: "Provider | str",
        cluster_name: str,
        explicit_context: Optional[str] = None,
        kubeconfig: Optional[str] = None,
    ) -> ClusterEndpoint:
        provider = Provider.parse(provider)
        Log.step(self.logger, f"Validating {provider.value} cluster '{cluster_name}'")

        if explicit_context:
            if explicit_context not in self._contexts(provider, cluster_name, kubeconfig):
                raise endpoint_not_found(
                    f"Context '{explicit_context}' not found. Please check it exists.",
                    context=explicit_context,
                    kubeconfig=kubeconfig,
                )
            context = explicit_context
        else:
            context = self._derive_context(provider, cluster_name, kubeconfig)

        endpoint = ClusterEndpoint(
            provider=provider,
            cluster_name=cluster_name,
            context=context,
            kubeconfig=kubeconfig,
        )

        try:
            self.client.ping(endpoint)
        except KubectlError as e:
            raise endpoint_unreachable(
                f"Cannot access cluster using context '{context}'. "
                "Please check your cluster is running and accessible.",
                e,
                context=context,
            ) from e

        Log.ok(self.logger, f"Validated {provider.value} cluster '{cluster_name}' using context '{context}'")
        return endpoint
