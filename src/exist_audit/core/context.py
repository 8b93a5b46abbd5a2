from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True)
class RunContext:
    run_id: str
    # Kept as given on the command line; report paths are joined onto it verbatim.
    root: str
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool
    strict: bool

    @classmethod
    def from_args(
        cls,
        root: str | None,
        run_id: str | None = None,
        output_format: OutputFormat | None = None,
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
        strict: bool = False,
    ) -> "RunContext":
        default_run = f"audit-{datetime.now(timezone.utc).strftime('%Y%m%d-%H%M%S')}"
        return cls(
            run_id=run_id or default_run,
            root=root or os.curdir,
            output_format=output_format or "text",
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
            strict=strict,
        )
