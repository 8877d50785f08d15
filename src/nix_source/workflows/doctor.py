from __future__ import annotations

import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .oracles import oracle_binaries
from .source_utils import resolve_http_timeout, resolve_sources_path


def _check_writable(path: Path) -> bool:
    try:
        if path.exists():
            return os.access(path, os.W_OK)
        parent = path.parent
        if not parent.exists():
            return False
        return os.access(parent, os.W_OK)
    except OSError:
        return False


def build_doctor_report(*, sources_path: Optional[Path] = None) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "generated_at": datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        "ok": True,
        "checks": [],
    }

    def add_check(
        name: str,
        status: bool,
        *,
        detail: Optional[str] = None,
        remedy: Optional[str] = None,
        level: str = "warn",
    ) -> None:
        entry = {
            "name": name,
            "status": "ok" if status else "missing",
            "level": level,
            "detail": detail,
        }
        if remedy:
            entry["remedy"] = remedy
        report["checks"].append(entry)
        if not status and level == "warn":
            report["ok"] = False

    for role, binary in oracle_binaries().items():
        resolved = shutil.which(binary)
        add_check(
            binary,
            resolved is not None,
            detail=resolved or f"{role} oracle not on PATH",
            remedy="Install Nix or set NIX_SOURCE_PREFETCH_BIN / NIX_SOURCE_NIX_BIN.",
            level="warn",
        )

    sources = resolve_sources_path(sources_path)
    add_check(
        "sources file",
        sources.exists(),
        detail=str(sources),
        remedy="Run `nix-source add` to create it, or pass --sources.",
        level="info",
    )
    add_check(
        "sources file writable",
        _check_writable(sources),
        detail=str(sources),
        remedy="Make the file (or its directory) writable.",
        level="warn",
    )
    add_check("NIX_SOURCE_HTTP_TIMEOUT", True, detail=f"{resolve_http_timeout()}s", level="info")

    return report


def format_doctor_report(report: Dict[str, Any]) -> str:
    lines: List[str] = []
    lines.append("nix-source doctor")
    lines.append(f"Generated: {report.get('generated_at')}")
    lines.append("")
    for check in report.get("checks", []):
        name = check.get("name", "check")
        status = check.get("status", "unknown")
        level = check.get("level", "info")
        lines.append(f"- [{level}] {name}: {status}")
        detail = check.get("detail")
        if detail:
            lines.append(f"  detail: {detail}")
        remedy = check.get("remedy")
        if remedy and status != "ok":
            lines.append(f"  remedy: {remedy}")
    return "\n".join(lines).rstrip() + "\n"


__all__ = ["build_doctor_report", "format_doctor_report"]
