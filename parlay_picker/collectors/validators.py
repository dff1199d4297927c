"""Payload checks run before stats are loaded.

A result with errors must not be loaded. Warnings are logged and loading continues.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

PLAYER_REQUIRED_FIELDS = ("player_id", "full_name")
MEDIAN_FIELDS = ("points_median", "threes_median", "assists_median", "rebounds_median")


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_findings(cls, errors: list[str], warnings: list[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=errors, warnings=warnings)

    @classmethod
    def rejected(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, errors=[reason])


def validate_nba_stats_response(payload: Any) -> ValidationResult:
    if not isinstance(payload, dict):
        return ValidationResult.rejected("Response is not a dict")
    result_sets = payload.get("resultSets", payload.get("resultSet"))
    if result_sets is None:
        return ValidationResult.rejected("'resultSets'/'resultSet' key missing")
    if isinstance(result_sets, dict):
        result_sets = [result_sets]
    if not isinstance(result_sets, list) or not result_sets:
        return ValidationResult.rejected("resultSets is empty or invalid")

    errors: list[str] = []
    warnings: list[str] = []
    row_count = 0
    for result in (rs for rs in result_sets if isinstance(rs, dict)):
        rows = result.get("rowSet")
        if not isinstance(rows, list):
            continue
        row_count += len(rows)
        # rows are keyed by player downstream
        if rows and "PLAYER_ID" not in (result.get("headers") or []):
            errors.append(f"resultSet {result.get('name')!r} has rows but no PLAYER_ID header")
    if row_count == 0:
        warnings.append("No rows in any resultSet (may be off-season or no games)")
    return ValidationResult.from_findings(errors, warnings)


def _is_malformed(record: Any) -> bool:
    return not isinstance(record, dict) or any(record.get(key) in (None, "") for key in PLAYER_REQUIRED_FIELDS)


def validate_player_stats_payload(payload: Any) -> ValidationResult:
    """Player stat records, either a bare list or ``{"players": [...]}``."""
    records = payload.get("players") if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        return ValidationResult.rejected("Payload is not a list of player records")
    if not records:
        return ValidationResult.rejected("Player list is empty")

    malformed = sum(1 for record in records if _is_malformed(record))
    without_medians = sum(
        1
        for record in records
        if not _is_malformed(record) and all(record.get(key) is None for key in MEDIAN_FIELDS)
    )
    total = len(records)
    warnings = []
    if malformed:
        warnings.append(f"{malformed}/{total} records missing player_id or full_name")
    if without_medians:
        warnings.append(f"{without_medians}/{total} records have no medians")
    errors = ["All records malformed"] if malformed == total else []
    return ValidationResult.from_findings(errors, warnings)
