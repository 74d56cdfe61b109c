"""
utils/audit.py — Query Audit Trail

Append-only log of semantics queries with hash chaining for tamper
detection. Each entry links to the previous via SHA-256.

Logs are written to both the logger and an append-only JSONL file.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger("afsat.audit")

AUDIT_LOG_PATH = os.environ.get("AFSAT_AUDIT_LOG", "afsat_audit.jsonl")
_previous_hash: str = "genesis"
_chain_path: str | None = None   # file _previous_hash was seeded from
_chain_lock = threading.Lock()


def entry_hash(entry: dict) -> str:
    """Hash of an entry without its own ``entry_hash`` field."""
    body = {k: v for k, v in entry.items() if k != "entry_hash"}
    return hashlib.sha256(json.dumps(body, sort_keys=True).encode()).hexdigest()[:16]


def _last_entry_hash(path: str) -> str:
    """``entry_hash`` of the last readable line of ``path``, else genesis."""
    try:
        lines = Path(path).read_text().strip().split("\n")
    except OSError:
        return "genesis"
    for line in reversed(lines):
        try:
            return json.loads(line)["entry_hash"]
        except (json.JSONDecodeError, KeyError, TypeError):
            continue
    return "genesis"


def log_query(
    request_id: str,
    semantics: str,
    framework_hash: str,
    num_arguments: int,
    num_attacks: int,
    num_labellings: int,
    elapsed_ms: float = 0.0,
    solver: str = "",
    skipped_lines: int = 0,
) -> dict:
    """
    Log a semantics query to the audit trail.
    Returns the log entry dict.
    """
    global _previous_hash, _chain_path

    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "semantics": semantics,
        "framework_hash": framework_hash,
        "num_arguments": num_arguments,
        "num_attacks": num_attacks,
        "num_labellings": num_labellings,
        "elapsed_ms": elapsed_ms,
        "solver": solver,
        "skipped_lines": skipped_lines,
    }

    # Link, hash and append as one step so concurrent queries cannot
    # chain to the same predecessor.
    with _chain_lock:
        path = AUDIT_LOG_PATH
        if _chain_path != path:
            _previous_hash = _last_entry_hash(path)
            _chain_path = path

        entry["hash_chain_previous"] = _previous_hash
        entry["entry_hash"] = entry_hash(entry)
        _previous_hash = entry["entry_hash"]

        try:
            with open(path, "a") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            log.error(f"Failed to write audit log: {e}")

    log.info(
        f"QUERY | {request_id} | {semantics} | {framework_hash} | "
        f"args={num_arguments} attacks={num_attacks} labellings={num_labellings}"
    )

    return entry


def get_recent_queries(limit: int = 50) -> list[dict]:
    """Read recent queries from the audit log file, newest first."""
    try:
        path = Path(AUDIT_LOG_PATH)
        if not path.exists():
            return []

        lines = path.read_text().strip().split("\n")
        entries = []
        for line in lines[-limit:]:
            try:
                entries.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        return list(reversed(entries))
    except OSError:
        return []


def verify_chain(entries: list[dict]) -> bool:
    """Check hashes and links of entries given oldest first."""
    for i, entry in enumerate(entries):
        if entry.get("entry_hash") != entry_hash(entry):
            return False
        if i > 0 and entry.get("hash_chain_previous") != entries[i - 1].get("entry_hash"):
            return False
    return True
