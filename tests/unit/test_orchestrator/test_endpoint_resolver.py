# SPDX-License-Identifier: LGPL-3.0-or-later
import pytest

from kube2kube.core.exceptions import AmbiguousContext, EndpointNotFound, EndpointUnreachable
from kube2kube.kube.models import Provider
from kube2kube.orchestrator.endpoint_resolver import ClusterEndpointResolver


@pytest.fixture
def resolver(logger, plane):
    return ClusterEndpointResolver(logger, plane)


@pytest.mark.unit
class TestClusterEndpointResolver:
    def test_derives_local_context(self, resolver, plane):
        plane.cluster("kind-prod")

        ep = resolver.resolve("kind", "prod")

        assert ep.provider is Provider.KIND
        assert ep.context == "kind-prod"
        assert ("ping", "kind-prod") in plane.calls

    def test_explicit_context_wins(self, resolver, plane):
        plane.cluster("kind-prod")
        plane.cluster("staging-admin")

        ep = resolver.resolve(Provider.KIND, "prod", explicit_context="staging-admin")

        assert ep.context == "staging-admin"

    def test_explicit_context_must_exist(self, resolver, plane):
        plane.cluster("kind-prod")

        with pytest.raises(EndpointNotFound) as ei:
            resolver.resolve(Provider.KIND, "prod", explicit_context="nope")

        assert ei.value.code == 20
        assert "Context 'nope' not found" in str(ei.value)

    def test_no_match(self, resolver, plane):
        plane.cluster("dev")

        with pytest.raises(EndpointNotFound, match="Cannot auto-detect context"):
            resolver.resolve(Provider.EKS, "shop")

    def test_ambiguous(self, resolver, plane):
        plane.cluster("shop-east")
        plane.cluster("shop-west")

        with pytest.raises(AmbiguousContext) as ei:
            resolver.resolve(Provider.AKS, "shop")

        assert ei.value.code == 22
        assert "shop-east, shop-west" in str(ei.value)

    def test_hosted_single_match(self, resolver, plane):
        plane.cluster("arn:aws:eks:eu-west-1:1:cluster/shop")
        plane.cluster("shop-legacy")

        ep = resolver.resolve(Provider.EKS, "shop")

        assert ep.context == "arn:aws:eks:eu-west-1:1:cluster/shop"

    def test_unreachable(self, resolver, plane):
        plane.cluster("dev").reachable = False

        with pytest.raises(EndpointUnreachable) as ei:
            resolver.resolve(Provider.MINIKUBE, "dev")

        assert ei.value.code == 21

    def test_kubeconfig_read_failure(self, resolver, plane):
        plane.fail("list_contexts")

        with pytest.raises(EndpointNotFound, match="Cannot read kubeconfig contexts"):
            resolver.resolve(Provider.MINIKUBE, "dev", kubeconfig="/missing")

    def test_kubeconfig_carried_on_endpoint(self, resolver, plane):
        plane.cluster("k3d-edge")

        ep = resolver.resolve(Provider.K3D, "edge", kubeconfig="/etc/edge.yaml")

        assert ep.kubeconfig == "/etc/edge.yaml"
        assert ("list_contexts", "/etc/edge.yaml") in plane.calls
