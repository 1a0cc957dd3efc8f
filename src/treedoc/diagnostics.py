"""Diagnostic, stats and validation-result types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal


type Severity = Literal["error", "warning", "advisory"]
type Rule = Literal[
    "schema-validation",
    "duplicate-node-id",
    "dangling-edge",
    "trunk-cycle",
    "general-cycle",
    "orphan-node",
]

SEVERITIES: tuple[Severity, ...] = ("error", "warning", "advisory")
RULES: tuple[Rule, ...] = (
    "schema-validation",
    "duplicate-node-id",
    "dangling-edge",
    "trunk-cycle",
    "general-cycle",
    "orphan-node",
)


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RootLocation:
    def __str__(self) -> str:
        return "(document root)"


@dataclass(frozen=True, slots=True)
class NodeLocation:
    node_id: str

    def __str__(self) -> str:
        return f"node '{self.node_id}'"


@dataclass(frozen=True, slots=True)
class EdgeLocation:
    source: str
    target: str

    def __str__(self) -> str:
        return f"edge '{self.source}' -> '{self.target}'"


@dataclass(frozen=True, slots=True)
class PathLocation:
    node_ids: tuple[str, ...]

    def __str__(self) -> str:
        return f"path: {' -> '.join(self.node_ids)}"


type Location = RootLocation | NodeLocation | EdgeLocation | PathLocation

ROOT = RootLocation()


# ---------------------------------------------------------------------------
# Diagnostics and results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single reported issue."""

    rule: Rule
    message: str
    location: Location
    severity: Severity

    def __post_init__(self) -> None:
        if self.rule not in RULES:
            raise ValueError(f"unknown rule {self.rule!r}")
        if self.severity not in SEVERITIES:
            raise ValueError(f"unknown severity {self.severity!r}")

    def __str__(self) -> str:
        return f"[{self.severity}] {self.rule}: {self.message} (at {self.location})"

    def to_dict(self) -> dict[str, str]:
        return {
            "rule": self.rule,
            "message": self.message,
            "location": str(self.location),
            "severity": self.severity,
        }


@dataclass(frozen=True, slots=True)
class DocumentStats:
    """Summary counts for a document."""

    node_count: int = 0
    edge_count: int = 0
    trunk_length: int = 0
    branch_count: int = 0
    tier: int = 0

    def __post_init__(self) -> None:
        if self.tier not in (0, 1, 2):
            raise ValueError(f"tier must be 0, 1 or 2, got {self.tier}")

    def to_dict(self) -> dict[str, int]:
        return {
            "nodeCount": self.node_count,
            "edgeCount": self.edge_count,
            "trunkLength": self.trunk_length,
            "branchCount": self.branch_count,
            "tier": self.tier,
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of a full validation call.

    ``is_valid`` is derived from ``errors``; warnings and advisories never
    affect it.
    """

    errors: tuple[Diagnostic, ...]
    warnings: tuple[Diagnostic, ...]
    advisories: tuple[Diagnostic, ...]
    stats: DocumentStats

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.errors + self.warnings + self.advisories

    @classmethod
    def from_diagnostics(
        cls,
        diagnostics: Iterable[Diagnostic],
        stats: DocumentStats,
    ) -> ValidationResult:
        errors, warnings, advisories = partition_diagnostics(diagnostics)
        return cls(errors=errors, warnings=warnings, advisories=advisories, stats=stats)


def partition_diagnostics(
    diagnostics: Iterable[Diagnostic],
) -> tuple[tuple[Diagnostic, ...], tuple[Diagnostic, ...], tuple[Diagnostic, ...]]:
    """Split diagnostics into (errors, warnings, advisories), preserving order."""
    buckets: dict[Severity, list[Diagnostic]] = {severity: [] for severity in SEVERITIES}
    for diag in diagnostics:
        buckets[diag.severity].append(diag)
    return tuple(buckets["error"]), tuple(buckets["warning"]), tuple(buckets["advisory"])


def validation_result_to_dict(result: ValidationResult) -> dict[str, object]:
    """Serialize a result to the camelCase shape consumed by presentation layers."""

    return {
        "isValid": result.is_valid,
        "errors": [diag.to_dict() for diag in result.errors],
        "warnings": [diag.to_dict() for diag in result.warnings],
        "advisories": [diag.to_dict() for diag in result.advisories],
        "stats": result.stats.to_dict(),
    }


def info_to_dict(result: ValidationResult) -> dict[str, object]:
    """Flat stats-plus-validity summary."""

    return {**result.stats.to_dict(), "isValid": result.is_valid}
