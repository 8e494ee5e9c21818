"""Live attendance view engine.

This package is organized by feature modules (roster, attendance, store, ...)
around a small engine that keeps categorized attendance views in sync with a
remote, continuously-updated store. The Flask layer only exposes the engine's
state as JSON.
"""
