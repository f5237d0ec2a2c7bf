from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .container import build_container
from .dashboard.controller import register as register_dashboard
from .prediction.controller import register as register_prediction
from .sync.credentials import CredentialStore
from .sync.gateway import BackendGateway

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(
    *,
    gateway: Optional[BackendGateway] = None,
    credentials: Optional[CredentialStore] = None,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.debug("settings=%s backend=%s", settings_module, type(gateway).__name__ if gateway else None)

    container = build_container(
        prediction_max_workers=int(getattr(settings, "PREDICTION_MAX_WORKERS", 0)),
        gateway=gateway,
        credentials=credentials,
    )
    app.extensions["bunk_tracker"] = container

    register_prediction(app, container)
    register_dashboard(app, container)

    return app
