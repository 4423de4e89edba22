"""Cluster controller for single-object reads and operator actions.

Covers the details/YAML/events/logs views and the restart, scale, delete,
secret view and YAML edit actions. Unlike the scanner, failures here are not
absorbed: a gateway error propagates to the HTTP layer.
"""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime
from typing import Any

import yaml

from kubescope.constants.values import RESTARTED_AT_ANNOTATION
from kubescope.controllers.base.base_controller import BaseController
from kubescope.controllers.cluster.correlator import EventCorrelator
from kubescope.errors import BadRequestError
from kubescope.gateway.kubectl_gateway import KubectlGateway
from kubescope.gateway.resource_kinds import KindSpec, resolve_resource
from kubescope.utils.payload import as_dict
from kubescope.utils.time_utils import utc_now

logger = logging.getLogger(__name__)

_BINARY_PLACEHOLDER = "<binary>"


class ClusterController(BaseController):
    """Reads and mutates one object at a time through the gateway."""

    def __init__(self, gateway: KubectlGateway, correlator: EventCorrelator | None = None) -> None:
        super().__init__(gateway)
        self._correlator = correlator or EventCorrelator(gateway)

    async def check_connection(self) -> bool:
        return await self._gateway.check_connection()

    async def list_namespaces(self) -> list[str]:
        return await self._gateway.list_namespaces()

    @staticmethod
    def _namespaced_spec(resource_type: str) -> KindSpec:
        spec = resolve_resource(resource_type)
        if not spec.namespaced:
            raise BadRequestError(
                f"Unsupported resource type: {resource_type}", value=resource_type
            )
        return spec

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_object(self, namespace: str, resource_type: str, name: str) -> dict[str, Any]:
        spec = resolve_resource(resource_type)
        return await self._gateway.get(spec.resource, namespace if spec.namespaced else None, name)

    async def get_details(self, namespace: str, resource_type: str, name: str) -> dict[str, Any]:
        resource = await self.get_object(namespace, resource_type, name)
        return {
            "kind": resource.get("kind"),
            "metadata": resource.get("metadata"),
            "spec": resource.get("spec"),
            "status": resource.get("status"),
        }

    async def get_yaml(self, namespace: str, resource_type: str, name: str) -> str:
        resource = await self.get_object(namespace, resource_type, name)
        metadata = resource.get("metadata")
        if isinstance(metadata, dict):
            metadata.pop("managedFields", None)
        return yaml.safe_dump(resource, sort_keys=False, default_flow_style=False)

    async def get_events(self, namespace: str, name: str) -> list[dict[str, Any]]:
        return await self._correlator.object_events(namespace, name)

    async def get_logs(
        self,
        namespace: str,
        pod: str,
        container: str | None = None,
        tail_lines: int | None = None,
    ) -> str:
        return await self._gateway.pod_logs(namespace, pod, container, tail_lines)

    async def view_secret(self, namespace: str, name: str) -> dict[str, Any]:
        """Secret metadata and base64-decoded data (undecodable values are masked)."""
        secret = await self._gateway.get("secrets", namespace, name)
        decoded: dict[str, str] = {}
        for key, value in as_dict(secret.get("data")).items():
            try:
                decoded[key] = base64.b64decode(value, validate=True).decode("utf-8")
            except (binascii.Error, UnicodeDecodeError, TypeError, ValueError):
                decoded[key] = _BINARY_PLACEHOLDER
        metadata = as_dict(secret.get("metadata"))
        logger.info("Secret %s/%s was viewed", namespace, name)
        return {
            "metadata": {
                "name": metadata.get("name"),
                "namespace": metadata.get("namespace"),
                "type": secret.get("type"),
            },
            "data": decoded,
        }

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def restart_pod(self, namespace: str, name: str) -> dict[str, Any]:
        await self._gateway.delete("pods", namespace, name)
        return {"ok": True, "message": f"Pod {name} deleted; controller will restart it."}

    async def restart_deployment(
        self, namespace: str, name: str, *, now: datetime | None = None
    ) -> dict[str, Any]:
        restarted_at = (now or utc_now()).isoformat()
        patch = {
            "spec": {
                "template": {
                    "metadata": {"annotations": {RESTARTED_AT_ANNOTATION: restarted_at}}
                }
            }
        }
        deployment = await self._gateway.patch("deployments", namespace, name, patch, "strategic")
        logger.info("Restarted deployment %s/%s", namespace, name)
        return {
            "ok": True,
            "message": f"Deployment {name} restarted",
            "restartedAt": restarted_at,
            "deployment": deployment,
        }

    async def scale_deployment(self, namespace: str, name: str, replicas: Any) -> dict[str, Any]:
        try:
            count = int(replicas)
        except (TypeError, ValueError, OverflowError):
            count = -1
        if isinstance(replicas, bool) or count < 0:
            raise BadRequestError("Invalid replicas value", value=str(replicas))
        deployment = await self._gateway.patch(
            "deployments", namespace, name, {"spec": {"replicas": count}}, "merge"
        )
        logger.info("Scaled deployment %s/%s to %d", namespace, name, count)
        return {
            "ok": True,
            "message": f"Deployment {name} scaled to {count}",
            "deployment": deployment,
        }

    async def delete_pod(self, namespace: str, name: str) -> dict[str, Any]:
        await self._gateway.delete("pods", namespace, name)
        return {"ok": True, "message": f"Pod {name} deleted."}

    async def delete_resource(self, namespace: str, kind: str, name: str) -> dict[str, Any]:
        spec = self._namespaced_spec(kind)
        await self._gateway.delete(spec.resource, namespace, name)
        return {"ok": True, "message": f"{kind} {name} deleted."}

    async def edit_yaml(self, namespace: str, kind: str, name: str, text: str | None) -> dict[str, Any]:
        """Replace ``namespace/name`` with the manifest in ``text`` after sanity checks."""
        spec = self._namespaced_spec(kind)
        if not text or not text.strip():
            raise BadRequestError("YAML is required")
        try:
            manifest = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise BadRequestError(f"Invalid YAML: {exc}") from exc
        if not isinstance(manifest, dict) or not manifest.get("kind"):
            raise BadRequestError("YAML must include a kind")

        manifest_kind = str(manifest["kind"])
        try:
            manifest_spec = resolve_resource(manifest_kind)
        except BadRequestError:
            manifest_spec = None
        if manifest_spec is None or manifest_spec.resource != spec.resource:
            raise BadRequestError(
                f"YAML kind ({manifest_kind}) does not match resource type ({kind})",
                value=manifest_kind,
            )

        metadata = manifest.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
            manifest["metadata"] = metadata
        if metadata.get("name") != name:
            raise BadRequestError(
                f"YAML name ({metadata.get('name')}) does not match path param name ({name})",
                value=str(metadata.get("name")),
            )
        if metadata.get("namespace") and metadata["namespace"] != namespace:
            raise BadRequestError(
                f"YAML namespace ({metadata['namespace']}) does not match path param "
                f"namespace ({namespace})",
                value=str(metadata["namespace"]),
            )
        metadata["namespace"] = namespace

        updated = await self._gateway.replace(manifest)
        logger.info("Replaced %s %s/%s from edited YAML", manifest_kind, namespace, name)
        return {"ok": True, "message": f"{manifest_kind} {name} updated", "resource": updated}
