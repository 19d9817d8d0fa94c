from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from zengin.encoding import classify
from zengin.session import parse_text


@dataclass
class Manifest:
    name: str
    path: Path
    hash: str | None = None
    line_ending: str | None = None  # expected kind: CRLF, LF, CR, Mixed, None
    notes: str | None = None
    checks: dict[str, Any] | None = None

    @staticmethod
    def from_mapping(payload: dict[str, Any]) -> Manifest:
        return Manifest(
            name=str(payload["name"]),
            path=Path(payload["path"]),
            hash=payload.get("hash"),
            line_ending=payload.get("line_ending"),
            notes=payload.get("notes"),
            checks=payload.get("checks"),
        )


def _hash_file(path: Path, algo: str = "sha256") -> str:
    h = hashlib.new(algo)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            h.update(chunk)
    return f"{algo}:{h.hexdigest()}"


def validate_manifest(manifest: Manifest) -> dict[str, Any]:
    path = manifest.path
    checks = manifest.checks or {}
    result: dict[str, Any] = {
        "name": manifest.name,
        "path": str(path),
        "exists": path.exists(),
        "size_bytes": path.stat().st_size if path.exists() else 0,
        "hash_expected": manifest.hash,
        "hash_actual": None,
        "hash_match": None,
        "encoding": None,
        "confidence": 0.0,
        "line_ending": None,
        "records": 0,
        "data_records": 0,
        "invalid_records": 0,
        "total_amount": None,
        "structural_errors": [],
        "warnings": [],
    }
    if not path.exists():
        result["warnings"].append("file_missing")
        return result

    if manifest.hash:
        algo, _hex = (
            manifest.hash.split(":", 1) if ":" in manifest.hash else ("sha256", manifest.hash)
        )
        actual = _hash_file(path, algo=algo)
        result["hash_actual"] = actual
        result["hash_match"] = actual == (
            manifest.hash if ":" in manifest.hash else f"sha256:{manifest.hash}"
        )
        if not result["hash_match"]:
            result["warnings"].append("hash_mismatch")

    verdict = classify(path.read_bytes())
    result["encoding"] = verdict.encoding
    result["confidence"] = round(verdict.confidence, 4)
    if not verdict.is_target:
        result["warnings"].append("encoding_rejected")
        result["rejection_reason"] = verdict.rejection_reason
        return result

    if verdict.line_endings is not None:
        result["line_ending"] = verdict.line_endings.kind.value
        if manifest.line_ending and manifest.line_ending != result["line_ending"]:
            result["warnings"].append("line_ending_mismatch")

    session = parse_text(verdict.decoded_text)
    result["records"] = session.total_records
    result["data_records"] = len(session.data)
    result["invalid_records"] = session.error_count
    result["structural_errors"] = list(session.structural_errors)
    if session.structural_errors:
        result["warnings"].append("structural_errors")
    if checks.get("require_end_record") and session.end is None:
        result["warnings"].append("missing_end_record")
    if checks.get("max_errors") is not None:
        if len(session.all_errors) > int(checks["max_errors"]):
            result["warnings"].append("too_many_errors")

    amounts = [r.fields.get("amount", "") for r in session.data]
    if all(a.isascii() and a.isdigit() for a in amounts):
        result["total_amount"] = sum(int(a) for a in amounts)
    expected_total = checks.get("expected_total_amount")
    if expected_total is not None and result["total_amount"] != int(expected_total):
        result["warnings"].append("total_amount_mismatch")
    return result


def load_manifest(path: Path) -> Manifest:
    if path.suffix.lower() in {".yml", ".yaml"}:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    else:
        payload = json.loads(path.read_text(encoding="utf-8"))
    return Manifest.from_mapping(payload)


def sample_manifest() -> dict[str, Any]:
    return {
        "name": "sample_transfer",
        "path": "data/zengin/sample.txt",
        "hash": "sha256:<hex>",
        "line_ending": "CRLF",
        "notes": "edit with real details",
        "checks": {"require_end_record": True, "max_errors": 0},
    }
