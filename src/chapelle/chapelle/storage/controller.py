from __future__ import annotations

from flask import Flask, send_from_directory

from ..container import Container
from ..users.guards import build_guards


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_guards(container.auth_service)

    @app.route("/photos/<path:location>", endpoint="photo")
    @login_required
    def photo(location: str):
        return send_from_directory(container.object_store.root, location)
