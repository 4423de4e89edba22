"""Tests for health classification rules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from kubescope.constants.enums import ResourceKind, Severity
from kubescope.controllers.cluster.classifiers import (
    PROBLEM_RULES,
    SCAN_RULES,
    ClassifierContext,
    classify,
    status_for,
)
from kubescope.controllers.cluster.parsers.kind_parser import KindParser
from kubescope.models.core.kind_views import ObjectMeta, ServiceView

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
CONTEXT = ClassifierContext(now=NOW)
PARSER = KindParser()


def _pod(
    *,
    phase: str | None = "Running",
    ready: str | None = "True",
    container_states: list[dict[str, Any]] | None = None,
    restarts: int = 0,
    created: datetime = NOW - timedelta(hours=2),
) -> dict[str, Any]:
    status: dict[str, Any] = {}
    if phase is not None:
        status["phase"] = phase
    if ready is not None:
        status["conditions"] = [{"type": "Ready", "status": ready}]
    status["containerStatuses"] = [
        {"name": f"c{index}", "restartCount": restarts, "state": state}
        for index, state in enumerate(container_states or [{"running": {}}])
    ]
    return {
        "metadata": {
            "name": "api-1",
            "namespace": "prod",
            "creationTimestamp": created.isoformat().replace("+00:00", "Z"),
        },
        "status": status,
    }


def _classify_pod(raw: Any, rules=SCAN_RULES):
    return classify(PARSER.parse(ResourceKind.POD, raw), CONTEXT, rules)


class TestPodClassification:
    """Tests for pod scan rules."""

    def test_healthy_running_pod(self) -> None:
        """A running, ready pod is healthy."""
        result = _classify_pod(_pod())
        assert result.issue == ""
        assert result.severity is Severity.OK

    def test_crash_loop(self) -> None:
        """CrashLoopBackOff is critical."""
        result = _classify_pod(_pod(container_states=[{"waiting": {"reason": "CrashLoopBackOff"}}]))
        assert (result.issue, result.severity) == ("CrashLoopBackOff", Severity.CRITICAL)

    def test_image_pull_reason_is_verbatim(self) -> None:
        """Image pull failures keep the waiting reason."""
        result = _classify_pod(_pod(container_states=[{"waiting": {"reason": "ErrImagePull"}}]))
        assert (result.issue, result.severity) == ("ErrImagePull", Severity.CRITICAL)

    def test_oom_killed(self) -> None:
        """OOMKilled termination is critical."""
        result = _classify_pod(
            _pod(container_states=[{"terminated": {"reason": "OOMKilled", "exitCode": 137}}])
        )
        assert (result.issue, result.severity) == ("OOMKilled", Severity.CRITICAL)

    def test_first_matching_container_wins(self) -> None:
        """Containers are checked in order."""
        result = _classify_pod(
            _pod(
                container_states=[
                    {"waiting": {"reason": "ImagePullBackOff"}},
                    {"waiting": {"reason": "CrashLoopBackOff"}},
                ]
            )
        )
        assert result.issue == "ImagePullBackOff"

    def test_failed_phase(self) -> None:
        """Failed pods are critical."""
        result = _classify_pod(_pod(phase="Failed", ready="False"))
        assert (result.issue, result.severity) == ("Failed", Severity.CRITICAL)

    def test_pending_recent_is_info(self) -> None:
        """A freshly pending pod is informational."""
        result = _classify_pod(_pod(phase="Pending", created=NOW - timedelta(minutes=2)))
        assert (result.issue, result.severity) == ("Pending", Severity.INFO)

    def test_pending_long_is_warning(self) -> None:
        """A pod pending for more than ten minutes is a warning."""
        result = _classify_pod(_pod(phase="Pending", created=NOW - timedelta(minutes=11)))
        assert (result.issue, result.severity) == ("Pending >10m", Severity.WARNING)

    def test_not_ready(self) -> None:
        """A running pod whose Ready condition is not True is a warning."""
        result = _classify_pod(_pod(ready="False"))
        assert (result.issue, result.severity) == ("NotReady", Severity.WARNING)

    def test_succeeded_without_ready_condition(self) -> None:
        """Completed pods without a Ready condition are healthy."""
        result = _classify_pod(_pod(phase="Succeeded", ready=None))
        assert result.severity is Severity.OK

    @pytest.mark.parametrize(
        "raw",
        [
            {},
            None,
            "not-a-pod",
            {"status": "broken"},
            {"status": {"containerStatuses": "nope", "conditions": [None, 3]}},
            {"metadata": [], "status": {"containerStatuses": [{"state": None}]}},
        ],
    )
    def test_malformed_pods_never_raise(self, raw: Any) -> None:
        """Malformed input classifies as Unknown instead of raising."""
        result = _classify_pod(raw)
        assert (result.issue, result.severity) == ("Unknown", Severity.WARNING)


class TestPodProblemRules:
    """Tests for the stricter pod problem rules."""

    def test_high_restarts(self) -> None:
        """Restarts above the threshold are critical."""
        result = _classify_pod(_pod(restarts=4), PROBLEM_RULES)
        assert (result.issue, result.severity) == ("High restarts: 4", Severity.CRITICAL)

    def test_restarts_at_threshold_are_fine(self) -> None:
        """The threshold itself is not a problem."""
        assert _classify_pod(_pod(restarts=3), PROBLEM_RULES).severity is Severity.OK

    def test_crash_loop_takes_precedence(self) -> None:
        """A critical primary issue wins over restart counts."""
        raw = _pod(restarts=12, container_states=[{"waiting": {"reason": "CrashLoopBackOff"}}])
        assert _classify_pod(raw, PROBLEM_RULES).issue == "CrashLoopBackOff"

    def test_restart_count_ignored_by_scan_rules(self) -> None:
        """The table rules do not look at restarts."""
        assert _classify_pod(_pod(restarts=50)).severity is Severity.OK


class TestWorkloadClassification:
    """Tests for controller workload rules."""

    def test_deployment_partially_available(self) -> None:
        """A deployment short of replicas is a warning."""
        view = PARSER.parse(
            ResourceKind.DEPLOYMENT,
            {"metadata": {"name": "api"}, "spec": {"replicas": 3}, "status": {"availableReplicas": 1}},
        )
        result = classify(view, CONTEXT)
        assert (result.issue, result.severity) == ("Unavailable: 1/3 ready", Severity.WARNING)

    def test_deployment_zero_available_is_critical(self) -> None:
        """Nothing available is critical; replicas default to one."""
        view = PARSER.parse(ResourceKind.DEPLOYMENT, {"metadata": {"name": "api"}})
        result = classify(view, CONTEXT)
        assert (result.issue, result.severity) == ("Unavailable: 0/1 ready", Severity.CRITICAL)

    def test_deployment_problem_text(self) -> None:
        """The problem rules include the updated replica count."""
        view = PARSER.parse(
            ResourceKind.DEPLOYMENT,
            {
                "metadata": {"name": "api"},
                "spec": {"replicas": 2},
                "status": {"availableReplicas": 1, "updatedReplicas": 2},
            },
        )
        result = classify(view, CONTEXT, PROBLEM_RULES)
        assert result.issue == "Unhealthy: 1/2 available (updated 2)"

    def test_scaled_to_zero_is_healthy(self) -> None:
        """Zero desired replicas is not a problem."""
        view = PARSER.parse(ResourceKind.DEPLOYMENT, {"metadata": {"name": "api"}, "spec": {"replicas": 0}})
        assert classify(view, CONTEXT).severity is Severity.OK

    def test_statefulset_not_ready(self) -> None:
        """StatefulSets compare ready to desired."""
        view = PARSER.parse(
            ResourceKind.STATEFUL_SET,
            {"metadata": {"name": "db"}, "spec": {"replicas": 3}, "status": {"readyReplicas": 2}},
        )
        assert classify(view, CONTEXT).issue == "Not Ready: 2/3"

    def test_daemonset_unavailable(self) -> None:
        """DaemonSets compare available to scheduled."""
        view = PARSER.parse(
            ResourceKind.DAEMON_SET,
            {"metadata": {"name": "agent"}, "status": {"desiredNumberScheduled": 4, "numberAvailable": 0}},
        )
        result = classify(view, CONTEXT)
        assert (result.issue, result.severity) == ("Unavailable: 0/4 available", Severity.CRITICAL)

    def test_job_failed(self) -> None:
        """Failed job pods are critical."""
        view = PARSER.parse(ResourceKind.JOB, {"metadata": {"name": "migrate"}, "status": {"failed": 2}})
        assert classify(view, CONTEXT).issue == "Failed: 2"

    @pytest.mark.parametrize(
        "kind",
        [
            ResourceKind.CRON_JOB,
            ResourceKind.SERVICE,
            ResourceKind.INGRESS,
            ResourceKind.CONFIG_MAP,
            ResourceKind.SECRET,
            ResourceKind.PERSISTENT_VOLUME_CLAIM,
            ResourceKind.NODE,
        ],
    )
    def test_always_healthy_kinds(self, kind: ResourceKind) -> None:
        """Kinds without health rules are healthy in the table."""
        view = PARSER.parse(kind, {"metadata": {"name": "x"}})
        assert classify(view, CONTEXT).severity is Severity.OK


class TestServiceProblemRules:
    """Tests for the service endpoint rule."""

    def _service(self, **kwargs: Any) -> ServiceView:
        return ServiceView(meta=ObjectMeta(name="web", namespace="prod"), **kwargs)

    def test_no_ready_endpoints(self) -> None:
        """A selector service without ready addresses is a warning."""
        result = classify(self._service(has_selector=True, ready_addresses=0), CONTEXT, PROBLEM_RULES)
        assert (result.issue, result.severity) == ("No ready endpoints", Severity.WARNING)

    def test_unknown_endpoints_are_not_judged(self) -> None:
        """Without an endpoints lookup the rule does not fire."""
        result = classify(self._service(has_selector=True), CONTEXT, PROBLEM_RULES)
        assert result.severity is Severity.OK

    def test_external_name_skipped(self) -> None:
        """ExternalName services never have endpoints."""
        service = self._service(has_selector=True, service_type="ExternalName", ready_addresses=0)
        assert classify(service, CONTEXT, PROBLEM_RULES).severity is Severity.OK


class TestStatusFor:
    """Tests for the status column."""

    def test_pod_phase(self) -> None:
        """Pods show their phase, or Unknown."""
        assert status_for(PARSER.parse(ResourceKind.POD, _pod())) == "Running"
        assert status_for(PARSER.parse(ResourceKind.POD, {})) == "Unknown"

    def test_node_readiness(self) -> None:
        """Nodes show readiness."""
        node = {"metadata": {"name": "n1"}, "status": {"conditions": [{"type": "Ready", "status": "False"}]}}
        assert status_for(PARSER.parse(ResourceKind.NODE, node)) == "NotReady"

    def test_other_kinds_placeholder(self) -> None:
        """Other kinds show a placeholder."""
        assert status_for(PARSER.parse(ResourceKind.CONFIG_MAP, {"metadata": {"name": "cfg"}})) == "—"
