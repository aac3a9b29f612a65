"""HTTP transport."""

from simpilot.api.main import create_app, run_server

__all__ = ["create_app", "run_server"]
