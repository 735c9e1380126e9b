"""ASGI entrypoint for the swipe triage API."""

from swipe_triage.api.app import create_app
from swipe_triage.containers import build_container

app = create_app(build_container())
