"""Shared fixtures: a scriptable fake kubectl runner behind a real gateway."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

from kubescope.gateway.kubectl_gateway import KubectlGateway


class FakeKubectl:
    """Async stand-in for the kubectl runner.

    ``resources`` maps a resource name (``pods``, ``events``, ...) to the items
    a ``get`` returns, unless ``payloads`` overrides the raw output for that
    resource. ``raw`` maps ``get --raw`` paths to payloads. Resources
    in ``failing`` raise, resources in ``delays`` sleep first.
    """

    def __init__(self) -> None:
        self.resources: dict[str, list[dict[str, Any]]] = {}
        self.objects: dict[tuple[str, str], dict[str, Any]] = {}
        self.raw: dict[str, Any] = {}
        self.failing: dict[str, str] = {}
        self.delays: dict[str, float] = {}
        self.outputs: dict[str, str] = {}
        self.payloads: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []
        self.stdin: list[str | None] = []

    def calls_for(self, verb: str, resource: str | None = None) -> list[tuple[str, ...]]:
        return [
            args
            for args in self.calls
            if args[0] == verb and (resource is None or (len(args) > 1 and args[1] == resource))
        ]

    async def __call__(self, args: tuple[str, ...], stdin: str | None = None) -> str:
        self.calls.append(args)
        self.stdin.append(stdin)
        verb, target = args[0], args[1] if len(args) > 1 else ""
        key = args[2] if target == "--raw" else target

        if key in self.delays:
            await asyncio.sleep(self.delays[key])
        if key in self.failing:
            raise RuntimeError(self.failing[key])

        if verb == "get" and target == "--raw":
            payload = self.raw.get(key)
            if payload is None:
                raise RuntimeError(f"the server could not find the requested resource ({key})")
            return payload if isinstance(payload, str) else json.dumps(payload)
        if verb == "get" and len(args) > 2 and not args[2].startswith("-"):
            obj = self.objects.get((target, args[2]))
            if obj is None:
                raise RuntimeError(f'Error from server (NotFound): {target} "{args[2]}" not found')
            return json.dumps(obj)
        if verb == "get" and target in self.payloads:
            return self.payloads[target]
        if verb == "get":
            return json.dumps({"items": self.resources.get(target, [])})
        if verb in self.outputs:
            return self.outputs[verb]
        if verb == "replace" and stdin is not None:
            return stdin
        return "{}"


@pytest.fixture
def kubectl() -> FakeKubectl:
    return FakeKubectl()


@pytest.fixture
def gateway(kubectl: FakeKubectl) -> KubectlGateway:
    return KubectlGateway(request_timeout="30s", run_kubectl_func=kubectl)
