from __future__ import annotations

from typing import Any

from . import __version__
from .catalog import FUNCTIONS, MODULES, iter_functions, iter_modules
from .contracts.validate import validate_self
from .scanner import EntryKind, MatchRecord, ScanResult

REPORT_SCHEMA = "exist-audit.report.v1"
CATALOG_SCHEMA = "exist-audit.catalog.v1"


def render_header(kind: EntryKind, name: str, replacement: str) -> str:
    return f"\n>>>  Replace the following instances of the {kind} {name} with {replacement}.\n\n"


def render_record(record: MatchRecord) -> str:
    text = record.text if record.text.endswith("\n") else record.text + "\n"
    return f"{record.path}:{record.line_number} {text}"


def render_text(result: ScanResult) -> str:
    out: list[str] = []
    for fn in iter_functions():
        rows = result.functions.get(fn.name, [])
        if not rows:
            continue
        out.append(render_header("function", fn.name, fn.replacement))
        out.extend(render_record(row) for row in rows)
    for mod in iter_modules():
        rows = result.modules.get(mod.name, [])
        if not rows:
            continue
        out.append(render_header("module", mod.name, mod.replacement))
        out.extend(render_record(row) for row in rows)
    out.append("\n")
    return "".join(out)


def _printable(value: str) -> str:
    return value.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _match_rows(rows: list[MatchRecord]) -> list[dict[str, Any]]:
    return [
        {"path": _printable(row.path), "line": row.line_number, "text": _printable(row.text.rstrip("\r\n"))}
        for row in rows
    ]


def build_report_payload(result: ScanResult, *, run_id: str = "", root: str = "") -> dict[str, Any]:
    functions = [
        {"name": fn.name, "replacement": fn.replacement, "matches": _match_rows(result.functions[fn.name])}
        for fn in iter_functions()
        if result.functions.get(fn.name)
    ]
    modules = [
        {
            "name": mod.name,
            "namespace": mod.namespace,
            "replacement": mod.replacement,
            "matches": _match_rows(result.modules[mod.name]),
        }
        for mod in iter_modules()
        if result.modules.get(mod.name)
    ]
    payload: dict[str, Any] = {
        "schema_name": REPORT_SCHEMA,
        "schema_version": 1,
        "tool": "exist-audit",
        "version": __version__,
        "status": "fail" if result.findings_count else "pass",
        "run_id": run_id,
        "root": _printable(root),
        "summary": {
            "files": len(result.files),
            "lines": result.lines_scanned,
            "findings": result.findings_count,
            "functions": len(functions),
            "modules": len(modules),
        },
        "functions": functions,
        "modules": modules,
    }
    return validate_self(REPORT_SCHEMA, payload)


def render_catalog_text() -> str:
    out: list[str] = ["functions:"]
    width = max(len(name) for name in FUNCTIONS)
    for fn in iter_functions():
        out.append(f"  {fn.name.ljust(width)}  -> {fn.replacement}")
    out.append("modules:")
    width = max(len(name) for name in MODULES)
    for mod in iter_modules():
        out.append(f"  {mod.name.ljust(width)}  {mod.namespace} -> {mod.replacement}")
    return "\n".join(out) + "\n"


def build_catalog_payload() -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema_name": CATALOG_SCHEMA,
        "schema_version": 1,
        "tool": "exist-audit",
        "status": "ok",
        "functions": [{"name": fn.name, "replacement": fn.replacement} for fn in iter_functions()],
        "modules": [
            {"name": mod.name, "namespace": mod.namespace, "replacement": mod.replacement} for mod in iter_modules()
        ],
    }
    return validate_self(CATALOG_SCHEMA, payload)


__all__ = [
    "CATALOG_SCHEMA",
    "REPORT_SCHEMA",
    "build_catalog_payload",
    "build_report_payload",
    "render_catalog_text",
    "render_header",
    "render_record",
    "render_text",
]
