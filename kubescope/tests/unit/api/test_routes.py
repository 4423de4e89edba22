"""Tests for the HTTP surface: auth, role gating, error mapping and shapes."""

from __future__ import annotations

import time
from collections.abc import Iterator
from typing import Any

import jwt
import pytest
from fastapi.testclient import TestClient

from kubescope.app import create_app
from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.models.state.app_settings import AppSettings

SECRET = "kubescope-test-signing-secret-0123456789"


def _token(role: str | None = "viewer", secret: str = SECRET, **claims: Any) -> str:
    payload: dict[str, Any] = {"sub": "user-1", "exp": int(time.time()) + 600, **claims}
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, secret, algorithm="HS256")


def _auth(role: str | None = "viewer", **claims: Any) -> dict[str, str]:
    return {"Authorization": f"Bearer {_token(role, **claims)}"}


def _pod(name: str, waiting: str | None = None) -> dict[str, Any]:
    state = {"waiting": {"reason": waiting}} if waiting else {"running": {}}
    return {
        "metadata": {"name": name, "namespace": "prod", "creationTimestamp": "2024-05-01T10:00:00Z"},
        "status": {
            "phase": "Running",
            "conditions": [{"type": "Ready", "status": "True"}],
            "containerStatuses": [{"name": "app", "restartCount": 0, "state": state}],
        },
    }


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(jwt_secret=SECRET)


@pytest.fixture
def client(settings: AppSettings, gateway: KubectlGateway) -> Iterator[TestClient]:
    with TestClient(create_app(settings, gateway)) as test_client:
        yield test_client


class TestAuthentication:
    """Tests for token and role handling."""

    def test_health_is_public(self, client: TestClient) -> None:
        """Liveness needs no token."""
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_missing_token(self, client: TestClient) -> None:
        """No token is 401."""
        response = client.get("/api/resources")
        assert response.status_code == 401
        assert response.json() == {"error": "Missing token", "details": None}

    def test_invalid_signature(self, client: TestClient) -> None:
        """A token signed with another secret is 403."""
        forged = _token(secret="another-signing-secret-0123456789abcdef")
        response = client.get("/api/resources", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 403
        assert response.json()["error"] == "Invalid token"

    def test_expired_token(self, client: TestClient) -> None:
        """Expired tokens are 403."""
        response = client.get("/api/resources", headers=_auth(exp=int(time.time()) - 60))
        assert response.status_code == 403

    def test_invalid_role(self, client: TestClient) -> None:
        """Unknown roles are 403."""
        response = client.get("/api/resources", headers=_auth("superuser"))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden: invalid role"

    def test_role_header_fallback(self, client: TestClient) -> None:
        """Without a role claim the x-user-role header is used."""
        headers = {**_auth(None), "x-user-role": "editor"}
        assert client.get("/api/cluster/deployments", headers=headers).status_code == 200

    def test_query_token(self, client: TestClient) -> None:
        """EventSource-style clients may pass the token as a query parameter."""
        response = client.get("/api/resources", params={"token": _token()})
        assert response.status_code == 200

    def test_insufficient_role(self, client: TestClient) -> None:
        """Viewers cannot read cluster metrics."""
        response = client.get("/api/cluster/nodes", headers=_auth("viewer"))
        assert response.status_code == 403
        assert response.json()["error"] == "Forbidden: requires editor role"

    def test_auth_disabled(self, gateway: KubectlGateway) -> None:
        """With auth disabled, requests need no token."""
        app = create_app(AppSettings(auth_enabled=False), gateway)
        with TestClient(app) as client:
            assert client.get("/api/resources").status_code == 200


class TestResourceRoutes:
    """Tests for /resources."""

    def test_list_resources(self, client: TestClient, kubectl) -> None:
        """Rows are returned camelCased with query aliases applied."""
        kubectl.resources["pods"] = [_pod("api-1", "CrashLoopBackOff"), _pod("api-2")]

        response = client.get(
            "/api/resources",
            params={"namespace": "prod", "resourceType": "pods", "problemsOnly": "true"},
            headers=_auth(),
        )

        assert response.status_code == 200
        items = response.json()["items"]
        assert [item["name"] for item in items] == ["api-1"]
        assert items[0]["issue"] == "CrashLoopBackOff"
        assert items[0]["severity"] == "critical"
        assert "lastSeen" in items[0]

    def test_unsupported_type_is_400(self, client: TestClient) -> None:
        """Unknown resource types are rejected with the value echoed."""
        response = client.get("/api/resources", params={"type": "widgets"}, headers=_auth())
        assert response.status_code == 400
        assert response.json() == {"error": "Unsupported resource type: widgets", "details": "widgets"}

    def test_details_gateway_failure_is_502(self, client: TestClient) -> None:
        """Gateway failures on single-object reads map to 502."""
        response = client.get("/api/resources/prod/pods/ghost/details", headers=_auth())
        assert response.status_code == 502
        assert response.json()["error"] == "Cluster source unavailable"
        assert "NotFound" in response.json()["details"]

    def test_yaml_content_type(self, client: TestClient, kubectl) -> None:
        """YAML is served as text/yaml."""
        kubectl.objects[("configmaps", "cfg")] = {"kind": "ConfigMap", "metadata": {"name": "cfg"}}

        response = client.get("/api/resources/prod/configmaps/cfg/yaml", headers=_auth())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/yaml")
        assert "kind: ConfigMap" in response.text

    def test_container_logs(self, client: TestClient, kubectl) -> None:
        """Logs are plain text."""
        kubectl.outputs["logs"] = "hello\nworld\n"

        response = client.get("/api/resources/prod/api-1/app/logs", params={"tailLines": 50}, headers=_auth())

        assert response.status_code == 200
        assert response.text == "hello\nworld\n"
        args = kubectl.calls_for("logs")[0]
        assert "-c" in args
        assert "--tail=50" in args


class TestAnalyzerRoutes:
    """Tests for /analyzer."""

    def test_scan_shape(self, client: TestClient, kubectl) -> None:
        """The scan echoes its query alongside the rows."""
        kubectl.resources["pods"] = [_pod("api-1")]

        body = client.get(
            "/api/analyzer/scan", params={"namespace": "prod", "resourceType": "pods"}, headers=_auth()
        ).json()

        assert body["namespace"] == "prod"
        assert body["resourceType"] == "pods"
        assert body["problemsOnly"] is False
        assert body["count"] == 1

    def test_problems_shape(self, client: TestClient, kubectl) -> None:
        """Problems carry a scan time, a count and the issues."""
        kubectl.resources["pods"] = [_pod("api-1", "ImagePullBackOff"), _pod("api-2")]

        body = client.get("/api/analyzer/problems", params={"namespace": "prod"}, headers=_auth()).json()

        assert set(body) == {"scannedAt", "count", "issues"}
        assert body["count"] == 1
        assert body["issues"][0]["issue"] == "ImagePullBackOff"

    def test_scale_requires_editor(self, client: TestClient) -> None:
        """Viewers cannot scale."""
        response = client.post(
            "/api/analyzer/prod/deployments/api/scale", json={"replicas": 2}, headers=_auth("viewer")
        )
        assert response.status_code == 403

    def test_scale(self, client: TestClient, kubectl) -> None:
        """Editors can scale."""
        response = client.post(
            "/api/analyzer/prod/deployments/api/scale", json={"replicas": 2}, headers=_auth("editor")
        )
        assert response.status_code == 200
        assert response.json()["ok"] is True
        assert kubectl.calls_for("patch", "deployments")

    def test_scale_invalid(self, client: TestClient) -> None:
        """Invalid replica counts are 400."""
        response = client.post(
            "/api/analyzer/prod/deployments/api/scale", json={"replicas": "many"}, headers=_auth("editor")
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid replicas value"

    def test_delete_requires_admin(self, client: TestClient, kubectl) -> None:
        """Deletes are admin-only."""
        assert client.delete("/api/analyzer/prod/pods/api-1", headers=_auth("editor")).status_code == 403
        assert client.delete("/api/analyzer/prod/pods/api-1", headers=_auth("admin")).status_code == 200
        assert len(kubectl.calls_for("delete")) == 1

    def test_delete_unsupported_kind(self, client: TestClient) -> None:
        """Deleting an unknown kind is 400."""
        response = client.delete("/api/analyzer/prod/widgets/x", headers=_auth("admin"))
        assert response.status_code == 400

    def test_edit_yaml(self, client: TestClient, kubectl) -> None:
        """Admins can replace an object from YAML."""
        text = "kind: ConfigMap\nmetadata:\n  name: cfg\ndata:\n  a: b\n"

        response = client.put("/api/analyzer/prod/configmaps/cfg/edit", json={"yaml": text}, headers=_auth("admin"))

        assert response.status_code == 200
        assert response.json()["resource"]["metadata"]["namespace"] == "prod"

    def test_edit_yaml_missing_body(self, client: TestClient) -> None:
        """An empty edit is 400."""
        response = client.put("/api/analyzer/prod/configmaps/cfg/edit", json={}, headers=_auth("admin"))
        assert response.status_code == 400
        assert response.json()["error"] == "YAML is required"


class TestClusterRoutes:
    """Tests for /cluster and /stream."""

    def test_namespaces(self, client: TestClient, kubectl) -> None:
        """Namespaces are viewer-readable."""
        kubectl.resources["namespaces"] = [{"metadata": {"name": "prod"}}, {"metadata": {"name": "dev"}}]
        response = client.get("/api/cluster/namespaces", headers=_auth())
        assert response.json() == {"namespaces": ["dev", "prod"]}

    def test_nodes_without_metrics(self, client: TestClient, kubectl) -> None:
        """Node usage degrades when metrics-server is absent."""
        kubectl.resources["nodes"] = [
            {"metadata": {"name": "node-a"}, "status": {"conditions": [{"type": "Ready", "status": "True"}]}}
        ]

        body = client.get("/api/cluster/nodes", headers=_auth("editor")).json()

        assert body["cluster"]["metricsAvailable"] is False
        assert body["cluster"]["readyCount"] == 1
        assert body["nodes"][0]["cpuCores"] is None

    def test_pods_without_metrics(self, client: TestClient) -> None:
        """Pod metrics degrade to an empty list instead of failing."""
        body = client.get("/api/cluster/pods", headers=_auth("editor")).json()
        assert body == {"count": 0, "items": [], "metricsAvailable": False}

    def test_network(self, client: TestClient) -> None:
        """The network overview always reports metrics as unavailable."""
        body = client.get("/api/cluster/network", headers=_auth("admin")).json()
        assert body["metricsAvailable"] is False
        assert body["summary"] == {"totalServices": 0, "totalNetworkPolicies": 0}

    def test_stream_missing_token(self, client: TestClient) -> None:
        """The stream rejects missing tokens with 401."""
        assert client.get("/api/stream").status_code == 401

    def test_stream_invalid_token(self, client: TestClient) -> None:
        """The stream rejects invalid tokens with 403."""
        assert client.get("/api/stream", params={"token": "garbage"}).status_code == 403

    def test_stream_invalid_role(self, client: TestClient) -> None:
        """The stream rejects unknown roles with 403."""
        response = client.get("/api/stream", params={"token": _token(None), "role": "root"})
        assert response.status_code == 403
