# SPDX-License-Identifier: LGPL-3.0-or-later
import logging
import os
import sys
from pathlib import Path

import pytest

_THIS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent

if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

os.environ.setdefault("PYTHONPATH", str(_REPO_ROOT))

from fakes.fake_control_plane import FakeControlPlane  # noqa: E402
from kube2kube.kube.models import ClusterEndpoint, Provider  # noqa: E402


@pytest.fixture
def logger():
    log = logging.getLogger("k2k-tests")
    log.setLevel(logging.DEBUG)
    return log


@pytest.fixture
def plane():
    return FakeControlPlane()


@pytest.fixture
def source_ep():
    return ClusterEndpoint(Provider.MINIKUBE, "dev", "dev")


@pytest.fixture
def target_ep():
    return ClusterEndpoint(Provider.KIND, "prod", "kind-prod")


@pytest.fixture
def make_session(tmp_path, source_ep, target_ep):
    from kube2kube.orchestrator.session import MigrationOptions, MigrationSession
    from kube2kube.orchestrator.staging import StagingArea

    def _make(namespaces=("web",), *, dry_run=False, resources=None, root=None, source=source_ep, **opts):
        staging = StagingArea(root or tmp_path / "stage", dry_run=dry_run)
        kwargs = {"resources": tuple(resources)} if resources is not None else {}
        return MigrationSession(
            source=source,
            target=target_ep,
            staging=staging,
            options=MigrationOptions(dry_run=dry_run, **opts),
            namespaces=tuple(namespaces),
            **kwargs,
        )

    return _make
