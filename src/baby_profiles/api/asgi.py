"""ASGI entrypoint for the baby profiles API."""

from baby_profiles.api.app import create_app
from baby_profiles.containers import build_container

app = create_app(build_container())
