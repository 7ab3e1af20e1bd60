from .redact import redact, scrub

__all__ = [
    "redact",
    "scrub",
]
