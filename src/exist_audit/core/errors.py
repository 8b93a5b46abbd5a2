"""The one exception type the audit raises for expected failures.

``kind`` names the failure class (``traversal_error``, ``read_error``,
``schema_error``, ``usage_error``) and ``code`` is the process exit status
``cli.main`` returns for it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_INTERNAL


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message

    def as_row(self) -> dict[str, object]:
        return {"code": self.code, "kind": self.kind, "message": self.message}
