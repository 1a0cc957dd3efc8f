"""Structural schema validation and tier detection.

The tier-0 and tier-1 JSON Schemas ship with the package and are compiled on
first use. Compilation happens once per process under a lock; the compiled
validators are never mutated afterwards and are shared by every call.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, cast

import orjson
from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError
from referencing import Registry, Resource

from treedoc.diagnostics import ROOT, Diagnostic

log = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
TIER0_SCHEMA_FILE = "tier0.schema.json"
TIER1_SCHEMA_FILE = "tier1.schema.json"

TIER1_FIELDS: tuple[str, ...] = ("minReaderVersion", "features", "metadata")
TIER2_FIELDS: tuple[str, ...] = ("trees",)

_lock = threading.Lock()
_validators: dict[int, Draft202012Validator] | None = None


def _load_schema(name: str) -> dict[str, Any]:
    return cast(dict[str, Any], orjson.loads((SCHEMA_DIR / name).read_bytes()))


def _compile_validators() -> dict[int, Draft202012Validator]:
    tier0 = _load_schema(TIER0_SCHEMA_FILE)
    tier1 = _load_schema(TIER1_SCHEMA_FILE)
    # A broken embedded schema is a packaging fault: let SchemaError propagate.
    Draft202012Validator.check_schema(tier0)
    Draft202012Validator.check_schema(tier1)
    registry: Registry[Any] = Registry().with_resources(
        [
            (tier0["$id"], Resource.from_contents(tier0)),
            (tier1["$id"], Resource.from_contents(tier1)),
        ],
    )
    log.debug("compiled tier schemas from %s", SCHEMA_DIR)
    return {
        0: Draft202012Validator(tier0, registry=registry),
        1: Draft202012Validator(tier1, registry=registry),
    }


def _get_validators() -> dict[int, Draft202012Validator]:
    global _validators
    validators = _validators
    if validators is None:
        with _lock:
            if _validators is None:
                _validators = _compile_validators()
            validators = _validators
    return validators


def tier0_validator() -> Draft202012Validator:
    return _get_validators()[0]


def tier1_validator() -> Draft202012Validator:
    return _get_validators()[1]


def _describe(error: ValidationError) -> str:
    if error.absolute_path:
        return f"{error.message} (at {error.json_path})"
    return error.message


def validate_schema(value: Any, *, strict_tier: bool = False) -> list[Diagnostic]:
    """Check a decoded JSON value against the structural schema.

    Returns one error-severity diagnostic per violation, located at the
    document root. By default only the tier-0 baseline is applied; with
    ``strict_tier`` documents detected as tier 1 or 2 are checked against the
    tier-1 schema, which includes the baseline.
    """
    validator = tier0_validator()
    if strict_tier and detect_tier(value) >= 1:
        validator = tier1_validator()

    errors = sorted(validator.iter_errors(value), key=lambda e: (e.json_path, e.message))
    diagnostics = [
        Diagnostic(
            rule="schema-validation",
            message=_describe(error),
            location=ROOT,
            severity="error",
        )
        for error in errors
    ]
    if diagnostics:
        log.debug("schema validation found %d violation(s)", len(diagnostics))
    return diagnostics


def detect_tier(value: Any) -> int:
    """Classify the feature tier of a decoded JSON value.

    Best effort: non-object values are tier 0 and this never raises.
    """
    if not isinstance(value, dict):
        return 0
    obj = cast(dict[str, Any], value)
    if any(key in obj for key in TIER2_FIELDS):
        return 2
    if any(key in obj for key in TIER1_FIELDS):
        tier1_validator()
        return 1
    return 0
