# src/svcwatch/__init__.py
"""svcwatch: liveness watchdog that restarts a hung background service."""

__version__ = "1.0.0"
