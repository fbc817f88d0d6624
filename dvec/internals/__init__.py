"""Error catalog, diagnostics and version helpers."""
