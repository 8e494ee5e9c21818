from __future__ import annotations

import importlib
import logging
import os
from datetime import date
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import build_container
from .store.base import RemoteStore
from .web.controller import register as register_attendance


def create_app(*, store: Optional[RemoteStore] = None, day: Optional[date] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Starting with settings=%s", settings_module)

    container = build_container(settings=settings, store=store, day=day)
    container.engine.start()
    app.extensions["attendance_live"] = container

    register_attendance(app, container)

    return app


def run() -> None:
    app = create_app()
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=int(os.getenv("PORT", "5000")))


if __name__ == "__main__":  # pragma: no cover
    run()
