"""Observability for the award bot.

Request-scoped context, structured JSON logging to stdout, in-process
counters/histograms, and the ASGI middleware that feeds them.
"""

__all__ = [
    "middleware",
    "metrics",
    "logger",
    "context",
]
