"""Functions and modules deprecated in eXist-db 4.x and removed in 5.x."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping


@dataclass(frozen=True)
class RemovedFunction:
    name: str
    replacement: str


@dataclass(frozen=True)
class RemovedModule:
    name: str
    namespace: str
    replacement: str


# The security-manager functions live under both the current `xmldb:` prefix and
# the legacy `xdb:` one.
_DB_FUNCTIONS: dict[str, str] = {
    "add-user-to-group": "sm:add-group-member",
    "change-user": "more specific sm function",
    "chmod-collection": "sm:chmod",
    "chmod-resource": "sm:chmod",
    "copy": "xmldb:copy-collection or xmldb:copy-resource (no replacement in 4.x.x!)",
    "create-group": "sm:create-group",
    "create-user": "sm:create-account",
    "delete-user": "sm:remove-account",
    "document": "fn:doc",
    "exists-user": "sm:user-exists",
    "get-current-user": "sm:id",
    "get-current-user-attribute": "sm:get-account-metadata",
    "get-current-user-attribute-names": "sm:get-account-metadata-keys",
    "get-group": "sm:get-group*",
    "get-owner": "sm:get-permissions",
    "get-user-groups": "sm:get-user-groups",
    "get-user-home": "obsolete -- none available",
    "get-user-primary-group": "sm:get-user-primary-group",
    "get-users": "sm:list-users",
    "group-exists": "sm:group-exists",
    "is-admin-user": "sm:is-dba",
    "is-authenticated": "sm:is-authenticated or sm:is-externally-authenticated",
    "get-permissions": "sm:get-permissions",
    "permissions-to-string": "sm:octal-to-mode",
    "string-to-permissions": "sm:mode-to-octal",
    "remove-user-from-group": "sm:remove-group-member",
    "set-collection-permissions": "sm:chmod sm:chown sm:chgrp",
    "set-resource-permissions": "sm:chmod sm:chown sm:chgrp",
}

_FUNCTIONS: dict[str, str] = {
    # `fn:` is optional in XQuery, so the bare names are the keys.
    "map": "fn:for-each",
    "map-pairs": "fn:for-each-pair",
    "map:for-each-entry": "map:for-each",
    "map:new": "map:merge",
    "util:catch": "XQuery 3.1 try-catch expression",
    "util:eval-async": "none available -- long broken",
    "util:parse": "fn:parse-xml",
    "util:serialize": "fn:serialize",
    "validation:validate": "more specific validation function",
    "validation:validate-report": "more specific validation function",
    **{f"xmldb:{local}": replacement for local, replacement in _DB_FUNCTIONS.items()},
    **{f"xdb:{local}": replacement for local, replacement in _DB_FUNCTIONS.items()},
    # Built into the httpclient module; an import check alone can miss these.
    "httpclient:get": "EXPath HTTP Client",
    "httpclient:post": "EXPath HTTP Client",
    "httpclient:put": "EXPath HTTP Client",
    "httpclient:delete": "EXPath HTTP Client",
}

_MODULES: tuple[RemovedModule, ...] = (
    RemovedModule("context", "http://exist-db.org/xquery/context", "... sorry, obsolete -- no replacement available"),
    RemovedModule("datetime", "http://exist-db.org/xquery/datetime", "XQuery 3.1, FunctX, or other implementations"),
    RemovedModule("ftp", "http://exist-db.org/xquery/ftpclient", "EXPath File Transfer Client"),
    RemovedModule("httpclient", "http://exist-db.org/xquery/httpclient", "EXPath HTTP Client"),
    RemovedModule("math-ext", "http://exist-db.org/xquery/math", "XQuery 3.1 math module"),
    RemovedModule("memcached", "http://exist-db.org/xquery/memcached", "... sorry, obsolete -- no replacement available"),
    RemovedModule("svn", "http://exist-db.org/xquery/versioning/svn", "https://github.com/shabanovd/eXist-svn"),
    RemovedModule("xmpp", "http://exist-db.org/xquery/xmpp", "... sorry, obsolete -- no replacement available"),
)

FUNCTIONS: Mapping[str, RemovedFunction] = MappingProxyType(
    {name: RemovedFunction(name, replacement) for name, replacement in sorted(_FUNCTIONS.items())}
)
MODULES: Mapping[str, RemovedModule] = MappingProxyType({mod.name: mod for mod in sorted(_MODULES, key=lambda m: m.name)})


def iter_functions() -> Iterator[RemovedFunction]:
    for name in sorted(FUNCTIONS):
        yield FUNCTIONS[name]


def iter_modules() -> Iterator[RemovedModule]:
    for name in sorted(MODULES):
        yield MODULES[name]


__all__ = [
    "FUNCTIONS",
    "MODULES",
    "RemovedFunction",
    "RemovedModule",
    "iter_functions",
    "iter_modules",
]
