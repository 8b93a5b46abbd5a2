from __future__ import annotations

import os
import re
from pathlib import Path

from .errors import ScriptError
from .exit_codes import ERR_TRAVERSAL

SOURCE_NAME = re.compile(r"\.xq[lm]?$")


def is_source_name(name: str) -> bool:
    return SOURCE_NAME.search(name) is not None


def _raise_traversal(exc: OSError) -> None:
    path = exc.filename if exc.filename is not None else "<unknown>"
    raise ScriptError(f"cannot traverse {path}: {exc.strerror or exc}", ERR_TRAVERSAL, kind="traversal_error") from exc


def collect_sources(root: str | Path) -> list[str]:
    """Return every XQuery source under ``root``.

    Paths are ``os.path.join(dirpath, name)`` exactly as the walk yields them,
    so a root of ``.`` gives ``./lib/util.xqm``. Names and subdirectories are
    visited in sorted order so repeated runs over an unchanged tree yield the
    same sequence. Symlinked directories are not followed. A root that is a
    file is filtered by name like any other file.
    """
    top = os.fspath(root)
    if os.path.isfile(top):
        return [top] if is_source_name(os.path.basename(top)) else []
    if not os.path.exists(top):
        raise ScriptError(f"cannot traverse {top}: no such file or directory", ERR_TRAVERSAL, kind="traversal_error")
    if not os.path.isdir(top):
        raise ScriptError(f"cannot traverse {top}: not a directory", ERR_TRAVERSAL, kind="traversal_error")

    out: list[str] = []
    for dirpath, dirnames, filenames in os.walk(top, topdown=True, onerror=_raise_traversal, followlinks=False):
        dirnames.sort()
        for filename in sorted(filenames):
            if is_source_name(filename):
                out.append(os.path.join(dirpath, filename))
    return out
