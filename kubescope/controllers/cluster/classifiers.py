"""Health classification rules, one total function per resource kind.

Two rule sets exist. ``SCAN_RULES`` drives the resource table and the
analyzer scan. ``PROBLEM_RULES`` drives the analyzer issues table, which is
stricter about restarts, deployments rolling out and services without
endpoints.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any

from kubescope.constants.defaults import (
    HIGH_RESTART_THRESHOLD_DEFAULT,
    PENDING_WARNING_MINUTES_DEFAULT,
)
from kubescope.constants.enums import ResourceKind, Severity
from kubescope.constants.values import STATUS_PLACEHOLDER, STATUS_UNKNOWN
from kubescope.models.core.kind_views import (
    CronJobView,
    DaemonSetView,
    DeploymentView,
    JobView,
    KindView,
    NodeView,
    PodView,
    ServiceView,
    StatefulSetView,
)
from kubescope.models.core.resource_row import HEALTHY, Classification
from kubescope.utils.time_utils import age_seconds, utc_now

_CRASH_LOOP_RE = re.compile(r"CrashLoopBackOff", re.IGNORECASE)
_IMAGE_PULL_RE = re.compile(r"ImagePullBackOff|ErrImagePull", re.IGNORECASE)
_OOM_KILLED_RE = re.compile(r"OOMKilled", re.IGNORECASE)
_FAILED_RE = re.compile(r"Failed", re.IGNORECASE)
_PENDING_RE = re.compile(r"Pending", re.IGNORECASE)
_UNKNOWN_RE = re.compile(r"Unknown", re.IGNORECASE)


@dataclass(frozen=True)
class ClassifierContext:
    """Per-scan inputs that are not part of the object itself."""

    now: datetime = field(default_factory=utc_now)
    pending_warning_minutes: int = PENDING_WARNING_MINUTES_DEFAULT
    high_restart_threshold: int = HIGH_RESTART_THRESHOLD_DEFAULT


Classifier = Callable[[Any, ClassifierContext], Classification]


def _problem(issue: str, severity: Severity) -> Classification:
    return Classification(issue=issue, severity=severity)


def _shortfall_severity(have: int) -> Severity:
    return Severity.CRITICAL if have == 0 else Severity.WARNING


# ============================================================================
# Scan rules
# ============================================================================


def classify_pod(pod: PodView, context: ClassifierContext) -> Classification:
    for container in pod.containers:
        waiting = container.waiting_reason or ""
        if _CRASH_LOOP_RE.search(waiting):
            return _problem("CrashLoopBackOff", Severity.CRITICAL)
        if _IMAGE_PULL_RE.search(waiting):
            return _problem(waiting, Severity.CRITICAL)
        if _OOM_KILLED_RE.search(container.terminated_reason or ""):
            return _problem("OOMKilled", Severity.CRITICAL)

    phase = pod.phase or STATUS_UNKNOWN
    if _FAILED_RE.search(phase):
        return _problem("Failed", Severity.CRITICAL)
    if _PENDING_RE.search(phase):
        age = age_seconds(pod.meta.creation_timestamp, context.now)
        if age is not None and age > context.pending_warning_minutes * 60:
            return _problem(f"Pending >{context.pending_warning_minutes}m", Severity.WARNING)
        return _problem("Pending", Severity.INFO)
    if pod.ready_condition is not None and pod.ready_condition != "True":
        return _problem("NotReady", Severity.WARNING)
    if _UNKNOWN_RE.search(phase):
        return _problem("Unknown", Severity.WARNING)
    return HEALTHY


def classify_deployment(deployment: DeploymentView, context: ClassifierContext) -> Classification:
    if deployment.available < deployment.desired:
        return _problem(
            f"Unavailable: {deployment.available}/{deployment.desired} ready",
            _shortfall_severity(deployment.available),
        )
    return HEALTHY


def classify_statefulset(statefulset: StatefulSetView, context: ClassifierContext) -> Classification:
    if statefulset.ready < statefulset.desired:
        return _problem(
            f"Not Ready: {statefulset.ready}/{statefulset.desired}",
            _shortfall_severity(statefulset.ready),
        )
    return HEALTHY


def classify_daemonset(daemonset: DaemonSetView, context: ClassifierContext) -> Classification:
    if daemonset.available < daemonset.desired:
        return _problem(
            f"Unavailable: {daemonset.available}/{daemonset.desired} available",
            _shortfall_severity(daemonset.available),
        )
    return HEALTHY


def classify_job(job: JobView, context: ClassifierContext) -> Classification:
    if job.failed > 0:
        return _problem(f"Failed: {job.failed}", Severity.CRITICAL)
    return HEALTHY


def classify_cronjob(cronjob: CronJobView, context: ClassifierContext) -> Classification:
    return HEALTHY


def classify_healthy(view: KindView, context: ClassifierContext) -> Classification:
    return HEALTHY


# ============================================================================
# Problem rules
# ============================================================================


def classify_pod_problems(pod: PodView, context: ClassifierContext) -> Classification:
    primary = classify_pod(pod, context)
    if primary.severity is Severity.CRITICAL:
        return primary
    restarts = pod.restart_count
    if restarts > context.high_restart_threshold:
        return _problem(f"High restarts: {restarts}", Severity.CRITICAL)
    return primary


def classify_deployment_problems(
    deployment: DeploymentView, context: ClassifierContext
) -> Classification:
    if deployment.available < deployment.desired:
        return _problem(
            f"Unhealthy: {deployment.available}/{deployment.desired} available "
            f"(updated {deployment.updated})",
            _shortfall_severity(deployment.available),
        )
    return HEALTHY


def classify_service_problems(service: ServiceView, context: ClassifierContext) -> Classification:
    if service.expects_endpoints and service.ready_addresses == 0:
        return _problem("No ready endpoints", Severity.WARNING)
    return HEALTHY


def _complete(rules: dict[ResourceKind, Classifier], name: str) -> Mapping[ResourceKind, Classifier]:
    missing = set(ResourceKind) - set(rules)
    if missing:
        raise RuntimeError(
            f"{name} has no classifier for: {', '.join(sorted(kind.value for kind in missing))}"
        )
    return MappingProxyType(rules)


SCAN_RULES: Mapping[ResourceKind, Classifier] = _complete(
    {
        ResourceKind.POD: classify_pod,
        ResourceKind.DEPLOYMENT: classify_deployment,
        ResourceKind.STATEFUL_SET: classify_statefulset,
        ResourceKind.DAEMON_SET: classify_daemonset,
        ResourceKind.JOB: classify_job,
        ResourceKind.CRON_JOB: classify_cronjob,
        ResourceKind.SERVICE: classify_healthy,
        ResourceKind.INGRESS: classify_healthy,
        ResourceKind.CONFIG_MAP: classify_healthy,
        ResourceKind.SECRET: classify_healthy,
        ResourceKind.PERSISTENT_VOLUME_CLAIM: classify_healthy,
        ResourceKind.NODE: classify_healthy,
    },
    "SCAN_RULES",
)

PROBLEM_RULES: Mapping[ResourceKind, Classifier] = _complete(
    {
        **SCAN_RULES,
        ResourceKind.POD: classify_pod_problems,
        ResourceKind.DEPLOYMENT: classify_deployment_problems,
        ResourceKind.SERVICE: classify_service_problems,
    },
    "PROBLEM_RULES",
)


def classify(
    view: KindView,
    context: ClassifierContext | None = None,
    rules: Mapping[ResourceKind, Classifier] = SCAN_RULES,
) -> Classification:
    """Classify ``view`` with the rule for its kind."""
    return rules[view.kind](view, context or ClassifierContext())


def status_for(view: KindView) -> str:
    """Short status column: pod phase, node readiness, otherwise a placeholder."""
    if isinstance(view, PodView):
        return view.phase or STATUS_UNKNOWN
    if isinstance(view, NodeView):
        return view.phase or STATUS_UNKNOWN
    return STATUS_PLACEHOLDER


__all__ = [
    "PROBLEM_RULES",
    "SCAN_RULES",
    "Classifier",
    "ClassifierContext",
    "classify",
    "status_for",
]
