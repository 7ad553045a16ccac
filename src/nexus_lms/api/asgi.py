"""ASGI entrypoint for the Nexus LMS scheduling API."""

from nexus_lms.api.app import create_app
from nexus_lms.containers import build_container

app = create_app(build_container())
