"""ASGI entrypoint for the admin panel API.

Run with ``uvicorn acta_admin.api.asgi:app``; settings come from the
environment and ``.env.<ENVIRONMENT>``.
"""

from acta_admin.api.app import create_app
from acta_admin.config import Settings
from acta_admin.containers import build_container

settings = Settings()
app = create_app(build_container(settings))
