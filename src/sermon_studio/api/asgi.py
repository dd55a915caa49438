"""ASGI entrypoint for the sermon studio API."""

from sermon_studio.api.app import create_app
from sermon_studio.containers import build_container

app = create_app(build_container())
