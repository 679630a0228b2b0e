# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# kube2kube/cli/help_texts.py
from __future__ import annotations

# NOTE:
# Pure help text used by the argparse epilog. Keep examples copy/paste runnable.

YAML_EXAMPLE = r"""# kube2kube configuration example (YAML)
#
# Run:
#   kube2kube --config migrate.yaml
#
# Merge multiple configs (later overrides earlier):
#   kube2kube --config base.yaml --config prod.yaml --dry-run
#
# Keys are the long option names with dashes turned into underscores.
# CLI flags always win over config values.

source_provider: minikube
source_cluster: dev
# source_context: dev                 # optional, derived from provider when omitted
# source_kubeconfig: ~/.kube/config

target_provider: eks
target_cluster: prod-cluster
# target_context: arn:aws:eks:us-east-1:123456789012:cluster/prod-cluster

namespaces: [web, payments]
# all_namespaces: true
exclude_namespaces: [monitoring]      # added to kube-system, kube-public, kube-node-lease
resources: [jobs, cronjobs]           # added to the default kinds
include_custom_resources: true

recreate_pvcs: false
transfer_storage: false

timeout: 600
crd_settle: 10
staging_dir: ./k8s-staging
report: ./migration-report.json
"""

FEATURE_SUMMARY = r"""
  • Export namespaces, built-in kinds, CRDs and custom resources from the source cluster
  • Strip server-populated fields (uid, resourceVersion, status, clusterIP, ...) before import
  • Import in dependency order: config → storage → network → compute → ingress/autoscaling → custom
  • Every kubectl call names its --context explicitly; the active context is never switched
  • Verify resource counts and pod readiness on the target
  • --dry-run performs every check and writes nothing
  • --import-only replays a preserved staging directory
"""

EXAMPLES = r"""
  # Preview a minikube → kind migration of two namespaces
  kube2kube --source-provider minikube --source-cluster dev \
            --target-provider kind --target-cluster staging \
            --namespace web --namespace api --dry-run

  # Migrate everything except monitoring into a fresh k3d cluster
  kube2kube --source-provider kind --source-cluster old \
            --target-provider k3d --target-cluster new --create-target \
            --all-namespaces --exclude-namespace monitoring

  # Re-run only the import from a kept staging directory
  kube2kube --source-provider gke --source-cluster a \
            --target-provider eks --target-cluster b \
            --all-namespaces --staging-dir ./k8s-staging --import-only
"""
