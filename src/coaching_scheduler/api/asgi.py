"""ASGI entrypoint for the coaching scheduler API."""

from coaching_scheduler.api.app import create_app
from coaching_scheduler.containers import build_container

app = create_app(build_container())
