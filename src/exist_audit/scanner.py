"""Line-oriented matching of XQuery source against the removal catalog.

The function check has to cope with `map`, which is both a removed function and
the `map(...)` sequence-type constructor, and which is a common variable name.
A line is reported for a function only when the name

* is not part of an ``as F(`` type declaration,
* starts at a word boundary and is not preceded by ``$`` or ``-``,
* is followed by ``(`` whose first non-blank content is not an occurrence
  indicator, the ``function`` keyword or an ``xs:`` atomic type name.

Everything is purely textual: comments, string literals and calls split across
lines are not recognised.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Literal

from .catalog import FUNCTIONS, MODULES, RemovedFunction, RemovedModule, iter_functions, iter_modules
from .core.errors import ScriptError
from .core.exit_codes import ERR_READ
from .core.logging import log_event
from .core.scan import collect_sources

if TYPE_CHECKING:
    from .core.context import RunContext

EntryKind = Literal["function", "module"]

SEQUENCE_TYPE_NAMES: tuple[str, ...] = (
    "xs:integer",
    "xs:string",
    "xs:anyURI",
    "xs:boolean",
    "xs:byte",
    "xs:date",
    "xs:dateTime",
    "xs:decimal",
    "xs:dayTimeDuration",
    "xs:double",
    "xs:duration",
    "xs:float",
    "xs:gDay",
    "xs:gMonthDay",
    "xs:gYear",
    "xs:gYearMonth",
    "xs:long",
    "xs:Name",
    "xs:QName",
    "xs:short",
    "xs:time",
    "xs:yearMonthDuration",
)

_NOT_A_CALL = r"(?!\s*(?:[+?*]|function|" + "|".join(re.escape(name) for name in SEQUENCE_TYPE_NAMES) + r"))"
_IMPORT_MODULE = re.compile(r"import module namespace\s")


@dataclass(frozen=True)
class MatchRecord:
    kind: EntryKind
    name: str
    path: str
    line_number: int
    text: str


@dataclass(frozen=True)
class FunctionMatcher:
    entry: RemovedFunction
    declaration: re.Pattern[str]
    call: re.Pattern[str]

    @classmethod
    def for_entry(cls, entry: RemovedFunction) -> "FunctionMatcher":
        name = re.escape(entry.name)
        return cls(
            entry=entry,
            declaration=re.compile(rf"\bas\s+{name}\("),
            call=re.compile(rf"(?<![$\-])\b{name}\s*\({_NOT_A_CALL}"),
        )

    def matches(self, line: str) -> bool:
        if self.declaration.search(line):
            return False
        return self.call.search(line) is not None


@dataclass(frozen=True)
class ModuleMatcher:
    entry: RemovedModule

    def matches(self, line: str) -> bool:
        found = _IMPORT_MODULE.search(line)
        if found is None:
            return False
        # Only the first import clause matters: any later one is inside its tail.
        return self.entry.namespace in line[found.end():]


FUNCTION_MATCHERS: tuple[FunctionMatcher, ...] = tuple(FunctionMatcher.for_entry(f) for f in iter_functions())
MODULE_MATCHERS: tuple[ModuleMatcher, ...] = tuple(ModuleMatcher(m) for m in iter_modules())


@dataclass
class ScanResult:
    functions: dict[str, list[MatchRecord]] = field(default_factory=lambda: {name: [] for name in sorted(FUNCTIONS)})
    modules: dict[str, list[MatchRecord]] = field(default_factory=lambda: {name: [] for name in sorted(MODULES)})
    files: list[str] = field(default_factory=list)
    lines_scanned: int = 0

    def add(self, record: MatchRecord) -> None:
        table = self.functions if record.kind == "function" else self.modules
        if record.name not in table:
            raise KeyError(f"{record.kind} `{record.name}` is not in the removal catalog")
        table[record.name].append(record)

    def records(self, kind: EntryKind, name: str) -> list[MatchRecord]:
        table = self.functions if kind == "function" else self.modules
        return list(table[name])

    @property
    def findings_count(self) -> int:
        return sum(len(rows) for rows in self.functions.values()) + sum(len(rows) for rows in self.modules.values())


def scan_lines(path: str, lines: Iterable[str], result: ScanResult) -> ScanResult:
    for line_number, line in enumerate(lines, start=1):
        result.lines_scanned += 1
        for fn in FUNCTION_MATCHERS:
            if fn.matches(line):
                result.add(MatchRecord("function", fn.entry.name, path, line_number, line))
        for mod in MODULE_MATCHERS:
            if mod.matches(line):
                result.add(MatchRecord("module", mod.entry.name, path, line_number, line))
    return result


def scan_file(path: str | Path, result: ScanResult) -> ScanResult:
    path = os.fspath(path)
    try:
        # newline="\n" keeps `\r` inside the line text; surrogateescape keeps bytes that are not UTF-8.
        with open(path, "r", encoding="utf-8", errors="surrogateescape", newline="\n") as handle:
            scan_lines(path, handle, result)
    except OSError as exc:
        raise ScriptError(f"couldn't open {path}: {exc.strerror or exc}", ERR_READ, kind="read_error") from exc
    result.files.append(path)
    return result


def scan_paths(paths: Iterable[str | Path], ctx: RunContext | None = None) -> ScanResult:
    result = ScanResult()
    for path in paths:
        before = result.findings_count
        scan_file(path, result)
        if ctx is not None:
            log_event(ctx, "info", "scanner", "scan", path=path, findings=result.findings_count - before)
    return result


def scan_tree(root: str | Path, ctx: RunContext | None = None) -> ScanResult:
    paths = collect_sources(root)
    if ctx is not None:
        log_event(ctx, "info", "collector", "collect", root=root, files=len(paths))
    result = scan_paths(paths, ctx)
    if ctx is not None:
        log_event(
            ctx,
            "info",
            "scanner",
            "done",
            files=len(result.files),
            lines=result.lines_scanned,
            findings=result.findings_count,
        )
    return result


__all__ = [
    "FUNCTION_MATCHERS",
    "MODULE_MATCHERS",
    "FunctionMatcher",
    "MatchRecord",
    "ModuleMatcher",
    "SEQUENCE_TYPE_NAMES",
    "ScanResult",
    "scan_file",
    "scan_lines",
    "scan_paths",
    "scan_tree",
]
