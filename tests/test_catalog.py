from __future__ import annotations

import pytest

from exist_audit.catalog import FUNCTIONS, MODULES, iter_functions, iter_modules


def test_catalog_sizes() -> None:
    assert len(FUNCTIONS) == 70
    assert len(MODULES) == 8


def test_iteration_is_lexicographic() -> None:
    assert [fn.name for fn in iter_functions()] == sorted(FUNCTIONS)
    assert [mod.name for mod in iter_modules()] == sorted(MODULES)


def test_legacy_xdb_prefix_mirrors_xmldb() -> None:
    xmldb = {name.split(":", 1)[1]: fn.replacement for name, fn in FUNCTIONS.items() if name.startswith("xmldb:")}
    xdb = {name.split(":", 1)[1]: fn.replacement for name, fn in FUNCTIONS.items() if name.startswith("xdb:")}
    assert len(xmldb) == 28
    assert xmldb == xdb


@pytest.mark.parametrize(
    ("name", "replacement"),
    [
        ("map", "fn:for-each"),
        ("map-pairs", "fn:for-each-pair"),
        ("map:new", "map:merge"),
        ("util:eval-async", "none available -- long broken"),
        ("xmldb:document", "fn:doc"),
        ("xmldb:copy", "xmldb:copy-collection or xmldb:copy-resource (no replacement in 4.x.x!)"),
        ("xdb:set-resource-permissions", "sm:chmod sm:chown sm:chgrp"),
        ("httpclient:delete", "EXPath HTTP Client"),
    ],
)
def test_function_replacements(name: str, replacement: str) -> None:
    assert FUNCTIONS[name].name == name
    assert FUNCTIONS[name].replacement == replacement


def test_module_entries() -> None:
    http = MODULES["httpclient"]
    assert http.namespace == "http://exist-db.org/xquery/httpclient"
    assert http.replacement == "EXPath HTTP Client"
    assert MODULES["math-ext"].namespace == "http://exist-db.org/xquery/math"
    assert MODULES["svn"].replacement == "https://github.com/shabanovd/eXist-svn"


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        FUNCTIONS["new"] = FUNCTIONS["map"]  # type: ignore[index]
    with pytest.raises(TypeError):
        MODULES["new"] = MODULES["svn"]  # type: ignore[index]
