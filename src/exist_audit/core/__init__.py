"""Runtime plumbing shared by the collector, scanner and CLI."""
