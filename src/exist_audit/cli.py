from __future__ import annotations

import argparse
import sys

from . import __version__
from .core.context import RunContext
from .core.errors import ScriptError
from .core.exit_codes import ERR_FINDINGS, ERR_INTERNAL, ERR_USAGE, OK
from .core.logging import log_event
from .core.serialize import dumps_json
from .report import build_catalog_payload, build_report_payload, render_catalog_text, render_text
from .scanner import scan_tree


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="exist-audit",
        description=(
            "Report XQuery functions and modules deprecated in eXist-db 4.x and removed in 5.x. "
            "Scans every .xq, .xql and .xqm file under ROOT."
        ),
    )
    p.add_argument("root", nargs="?", help="directory tree to scan (default: current directory)")
    p.add_argument("--version", action="version", version=f"exist-audit {__version__}")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--json", action="store_true", help="shorthand for --format json")
    p.add_argument("--strict", action="store_true", help="exit non-zero when any finding is reported")
    p.add_argument("--list-catalog", action="store_true", help="print the removal catalog and exit")
    p.add_argument("--run-id", help="run identifier attached to diagnostics and JSON output")
    p.add_argument("--log-json", action="store_true", help="emit diagnostics as JSON lines on stderr")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    return p


def resolve_output_format(*, cli_json: bool, cli_format: str | None) -> str | None:
    if cli_json and cli_format == "text":
        raise ScriptError("conflicting output flags: use either --format text or --json", ERR_USAGE, kind="usage_error")
    if cli_json:
        return "json"
    return cli_format


def render_error(exc: ScriptError, *, as_json: bool, run_id: str = "") -> str:
    if as_json:
        return dumps_json(
            {
                "schema_name": "exist-audit.error.v1",
                "schema_version": 1,
                "tool": "exist-audit",
                "status": "error",
                "run_id": run_id,
                "errors": [exc.as_row()],
            }
        )
    return exc.message


def run_audit(ctx: RunContext) -> int:
    result = scan_tree(ctx.root, ctx)
    if ctx.output_format == "json":
        payload = build_report_payload(result, run_id=ctx.run_id, root=ctx.root)
        print(dumps_json(payload, pretty=True))
    else:
        # Source lines are echoed byte for byte, undecodable bytes included.
        sys.stdout.flush()
        sys.stdout.buffer.write(render_text(result).encode("utf-8", "surrogateescape"))
        sys.stdout.buffer.flush()
    if ctx.strict and result.findings_count:
        return ERR_FINDINGS
    return OK


def run_list_catalog(ctx: RunContext) -> int:
    if ctx.output_format == "json":
        print(dumps_json(build_catalog_payload(), pretty=True))
    else:
        sys.stdout.write(render_catalog_text())
    return OK


def main(argv: list[str] | None = None) -> int:
    ns = build_parser().parse_args(argv)
    as_json = bool(ns.json or ns.format == "json")
    ctx: RunContext | None = None
    try:
        fmt = resolve_output_format(cli_json=ns.json, cli_format=ns.format)
        ctx = RunContext.from_args(
            ns.root,
            run_id=ns.run_id,
            output_format=fmt,  # type: ignore[arg-type]
            verbose=ns.verbose,
            quiet=ns.quiet,
            log_json=ns.log_json,
            strict=ns.strict,
        )
        as_json = ctx.output_format == "json"
        log_event(ctx, "info", "cli", "start", root=ctx.root, fmt=ctx.output_format, strict=ctx.strict)
        if ns.list_catalog:
            return run_list_catalog(ctx)
        return run_audit(ctx)
    except ScriptError as exc:
        print(
            render_error(
                exc,
                as_json=as_json,
                run_id=ctx.run_id if ctx is not None else "",
            ),
            file=sys.stderr,
        )
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(
            render_error(
                ScriptError(f"internal error: {exc}", ERR_INTERNAL, kind="internal_error"),
                as_json=as_json,
                run_id=ctx.run_id if ctx is not None else "",
            ),
            file=sys.stderr,
        )
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
