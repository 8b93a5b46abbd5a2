from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import settings

_ALLOWED_MARKERS = {"unit", "integration", "slow"}

settings.register_profile("exist-audit", deadline=None, max_examples=200)
settings.load_profile("exist-audit")

APP_XQ = (
    'xquery version "3.1";\n'
    'import module namespace http="http://exist-db.org/xquery/httpclient";\n'
    "declare variable $m as map(xs:string, xs:integer) external;\n"
    "let $x := map(1,2,3)\n"
    "let $result := $map(1)\n"
    'let $doc := xmldb:document("/db/foo")\n'
    "return ($x, $doc)\n"
)

UTIL_XQM = (
    'module namespace u="http://example.org/util";\n'
    'import module namespace dt="http://exist-db.org/xquery/datetime";\n'
    "declare function u:copy($src, $dst) {\n"
    "    xmldb:copy($src, $dst)\n"
    "};\n"
    "declare function u:users() {\n"
    "    xmldb:get-users(),\n"
    "    xdb:get-users()\n"
    "};\n"
    "declare function u:wrap($f as function(*)) as map(*) {\n"
    "    map:new(($f))\n"
    "};\n"
)

# No trailing newline on the last line.
LEGACY_XQL = "let $u := util:parse($s)\nlet $e := fn:map(local:f#1, $seq)"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        names = {mark.name for mark in item.iter_markers()}
        if not names.intersection(_ALLOWED_MARKERS):
            item.add_marker("unit")


@pytest.fixture
def xquery_tree(tmp_path: Path) -> Path:
    root = tmp_path / "app"
    (root / "lib").mkdir(parents=True)
    (root / "z").mkdir()
    (root / "app.xq").write_text(APP_XQ, encoding="utf-8")
    (root / "lib" / "util.xqm").write_text(UTIL_XQM, encoding="utf-8")
    (root / "z" / "legacy.xql").write_text(LEGACY_XQL, encoding="utf-8")
    # Not XQuery sources by name; must never be scanned.
    (root / "notes.txt").write_text("let $x := map(1)\n", encoding="utf-8")
    (root / "skip.xqy").write_text("let $x := map(1)\n", encoding="utf-8")
    (root / "old.xq.bak").write_text("let $x := map(1)\n", encoding="utf-8")
    return root
