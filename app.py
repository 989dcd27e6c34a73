# app.py
from typing import Optional

from flask import Flask
from core.config import Config
from core.logging_config import configure_logging
from application.tariff_sync_service import TariffSyncService
from interface.api import tariffs_bp, health_bp
from storage.tariff_store import TariffStore, build_store


def create_app(store: Optional[TariffStore] = None, config: Optional[dict] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    configure_logging(app)

    if store is None:
        store = build_store(app.config["TARIFF_STORE_BACKEND"], app.config["TARIFF_STORE_PATH"])
    app.extensions["tariff_sync_service"] = TariffSyncService(
        store, idempotent_delete=app.config["TARIFF_IDEMPOTENT_DELETE"]
    )

    # rejestracja blueprintów
    app.register_blueprint(tariffs_bp, url_prefix=app.config["TARIFFS_BASE_PATH"])
    app.register_blueprint(health_bp)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
