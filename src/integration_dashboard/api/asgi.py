"""ASGI entrypoint for the dashboard API."""

from integration_dashboard.api.app import create_app
from integration_dashboard.containers import build_container

app = create_app(build_container())
