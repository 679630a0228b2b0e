# SPDX-License-Identifier: LGPL-3.0-or-later
import pytest

from kube2kube.kube.models import ClusterEndpoint, Provider, empty_list_document, list_items, object_name


@pytest.mark.unit
class TestProvider:
    def test_parse(self):
        assert Provider.parse("EKS") is Provider.EKS
        assert Provider.parse(" kind ") is Provider.KIND
        assert Provider.parse(Provider.K3D) is Provider.K3D

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="supported: minikube, kind, k3d, eks, gke, aks"):
            Provider.parse("openshift")

    def test_is_local(self):
        assert [p.value for p in Provider if p.is_local] == ["minikube", "kind", "k3d"]


@pytest.mark.unit
class TestDocuments:
    def test_list_items_tolerates_shapes(self):
        assert list_items(None) == []
        assert list_items({"items": None}) == []
        assert list_items({"items": [{"a": 1}, "junk", None]}) == [{"a": 1}]

    def test_object_name(self):
        assert object_name({"metadata": {"name": "x"}}) == "x"
        assert object_name({}) == ""

    def test_empty_list_document(self):
        doc = empty_list_document([{"kind": "Secret"}])
        assert doc == {"apiVersion": "v1", "kind": "List", "items": [{"kind": "Secret"}], "metadata": {}}

    def test_endpoint_is_frozen(self):
        ep = ClusterEndpoint(Provider.KIND, "a", "kind-a")
        with pytest.raises(Exception):
            ep.context = "other"  # type: ignore[misc]
        assert ep.describe() == "kind/a (context=kind-a)"
