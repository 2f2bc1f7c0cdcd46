"""Cross-cutting utilities: logging, sanitization, metrics."""
