"""Scan request/response models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from kubescope.constants.defaults import (
    NAMESPACE_DEFAULT,
    RESOURCE_TYPE_DEFAULT,
    SCAN_NAMESPACE_DEFAULT,
)
from kubescope.constants.enums import Severity
from kubescope.constants.values import ALL_SENTINEL


class CamelModel(BaseModel):
    """Base model that serializes to camelCase JSON and accepts either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Classification(BaseModel):
    """Issue/severity pair produced by a classifier."""

    model_config = ConfigDict(frozen=True)

    issue: str = ""
    severity: Severity = Severity.OK

    @model_validator(mode="after")
    def _check_consistency(self) -> Classification:
        if (self.issue == "") != (self.severity is Severity.OK):
            raise ValueError(
                f"issue {self.issue!r} is inconsistent with severity {self.severity.value!r}"
            )
        return self

    @property
    def is_problem(self) -> bool:
        return self.issue != ""


HEALTHY = Classification()


class ResourceRow(CamelModel):
    """One normalized row returned to dashboard clients."""

    kind: str
    name: str
    namespace: str = NAMESPACE_DEFAULT
    status: str
    age: str
    issue: str = ""
    severity: Severity = Severity.OK
    last_seen: datetime | None = None
    node_name: str | None = None
    details: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _check_issue_matches_severity(self) -> ResourceRow:
        if (self.issue == "") != (self.severity is Severity.OK):
            raise ValueError(
                f"{self.kind} {self.namespace}/{self.name}: issue {self.issue!r} "
                f"is inconsistent with severity {self.severity.value!r}"
            )
        return self

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.kind, self.namespace, self.name)


class ScanQuery(CamelModel):
    """Scanner input."""

    namespace: str = SCAN_NAMESPACE_DEFAULT
    resource_type: str = RESOURCE_TYPE_DEFAULT
    search: str = ""
    problems_only: bool = False

    @model_validator(mode="after")
    def _normalize(self) -> ScanQuery:
        self.namespace = self.namespace.strip() or SCAN_NAMESPACE_DEFAULT
        self.resource_type = self.resource_type.strip() or RESOURCE_TYPE_DEFAULT
        self.search = self.search.strip()
        return self

    @property
    def all_namespaces(self) -> bool:
        return self.namespace.lower() == ALL_SENTINEL


class FetchFailure(CamelModel):
    """A data source that contributed nothing to a scan."""

    source: str
    namespace: str | None = None
    error: str


class ScanReport(CamelModel):
    """Rows that made it through a scan, plus the failures that were absorbed."""

    items: list[ResourceRow] = Field(default_factory=list)
    failures: list[FetchFailure] = Field(default_factory=list)

    @property
    def partial(self) -> bool:
        return bool(self.failures)
