# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/orchestrator/namespace_selector.py

from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from ..core.exceptions import KubectlError, endpoint_unreachable, no_namespaces
from ..core.utils import U
from ..kube.client import ControlPlaneClient
from ..kube.models import ClusterEndpoint
from .session import DEFAULT_EXCLUDED_NAMESPACES


class NamespaceSelector:
    def __init__(self, logger: logging.Logger, client: ControlPlaneClient):
        self.logger = logger
        self.client = client

    def select(
        self,
        source: Optional[ClusterEndpoint],
        *,
        include: Optional[Iterable[str]] = None,
        all_namespaces: bool = False,
        exclude: Iterable[str] = DEFAULT_EXCLUDED_NAMESPACES,
    ) -> Tuple[str, ...]:
        """
        Build the namespace plan. Order follows the source listing (or the
        include list) with excluded names filtered out in place.
        """
        self.logger.info("Determining namespaces to migrate...")

        if all_namespaces:
            if source is None:
                raise no_namespaces("--all-namespaces needs a source cluster to list namespaces from.")
            try:
                candidates = self.client.list_namespaces(source)
            except KubectlError as e:
                raise endpoint_unreachable(f"Cannot list namespaces on source cluster: {e}", e) from e
            self.logger.info("Found %d namespaces in total.", len(candidates))
        else:
            candidates = [n.strip() for n in (include or []) if n and n.strip()]
            if not candidates:
                raise no_namespaces("No namespaces specified. Use --namespace or --all-namespaces.")

        excluded = set(exclude)
        plan = []
        for ns in U.dedupe(candidates):
            if ns in excluded:
                self.logger.info("Excluding namespace: %s", ns)
                continue
            plan.append(ns)

        if not plan:
            raise no_namespaces(
                "No namespaces left after filtering. Please check your namespace options.",
                excluded=sorted(excluded),
            )

        self.logger.info("Will migrate %d namespaces: %s", len(plan), " ".join(plan))
        return tuple(plan)
