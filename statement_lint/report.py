"""
Violation Report

Collects StatementViolation records from one or more checked files and
exports them in the common ``{"issues": [...]}`` JSON shape that most
dashboard importers understand.
"""

import json
import logging
from typing import List, Dict, Optional
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class StatementViolation(BaseModel):
    rule_id: str
    message_key: str
    message: str
    line_number: int
    column: int = 0
    file_path: Optional[str] = None
    severity: str = "warning"


def _norm(path: Optional[str]) -> str:
    return (path or "").replace("\\", "/").rstrip("/")


class ViolationReport:
    """In-memory set of violations grouped by file."""

    def __init__(self, violations: Optional[List[StatementViolation]] = None):
        self.violations: List[StatementViolation] = []
        if violations:
            self.extend(violations)

    def extend(self, violations: List[StatementViolation]):
        self.violations.extend(violations)

    def clear_file(self, file_path: str) -> int:
        """Drop every violation recorded for *file_path*; return how many."""
        target = _norm(file_path)
        before = len(self.violations)
        self.violations = [v for v in self.violations if _norm(v.file_path) != target]
        return before - len(self.violations)

    # ────────────────────────────────────────────────────────────────
    #  Queries
    # ────────────────────────────────────────────────────────────────

    def get_all_violations(self) -> List[StatementViolation]:
        return self.violations

    def get_violations_by_file(self, file_path: str) -> List[StatementViolation]:
        """Get violations for a file.

        Matching tiers (returns on first tier that produces results):
          1. Exact match
          2. Suffix match (either direction)
          3. Basename match (case-insensitive)
        """
        query = _norm(file_path)
        query_base = query.rsplit("/", 1)[-1].lower()

        exact = []
        suffix = []
        basename = []

        for v in self.violations:
            vp = _norm(v.file_path)
            if vp == query:
                exact.append(v)
                continue
            if vp.endswith("/" + query) or query.endswith("/" + vp):
                suffix.append(v)
                continue
            if vp.rsplit("/", 1)[-1].lower() == query_base:
                basename.append(v)

        return exact or suffix or basename

    def get_violations_by_line(self, file_path: str, line_number: int) -> List[StatementViolation]:
        return [v for v in self.get_violations_by_file(file_path) if v.line_number == line_number]

    def get_summary(self) -> Dict:
        """Return a summary of the report for quick overview."""
        files = {}
        rules = {}
        for v in self.violations:
            key = _norm(v.file_path) or "<source>"
            files[key] = files.get(key, 0) + 1
            rules[v.rule_id] = rules.get(v.rule_id, 0) + 1
        return {
            "total_violations": len(self.violations),
            "files_affected": len(files),
            "by_file": files,
            "by_rule": rules,
        }

    # ────────────────────────────────────────────────────────────────
    #  Export
    # ────────────────────────────────────────────────────────────────

    def to_json(self) -> Dict:
        issues = []
        for v in self.violations:
            issues.append({
                "ruleId": v.rule_id,
                "message": v.message,
                "messageKey": v.message_key,
                "location": {
                    "path": _norm(v.file_path),
                    "startLine": v.line_number,
                    "startColumn": v.column,
                },
                "severity": v.severity,
            })
        return {"issues": issues}

    def write_json(self, output_path: str):
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(self.to_json(), f, indent=2)
        logger.info("Wrote %d violations to %s", len(self.violations), output_path)
