"""HTTP-level helpers: response envelopes and exception handlers."""
