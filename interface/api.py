# interface/api.py
from flask import Blueprint, Response, current_app, jsonify, request

from access_control.auth import token_required
from application.tariff_sync_service import TariffSyncService
from core.exceptions import TariffError, ValidationError
from domain.models import Tariff

KEY_PARAMS = ("country_code", "party_id", "tariff_id")

# url_prefix ustawiany przy rejestracji (Config.TARIFFS_BASE_PATH)
tariffs_bp = Blueprint("tariffs", __name__)
health_bp = Blueprint("health", __name__)


def _service() -> TariffSyncService:
    return current_app.extensions["tariff_sync_service"]


def _key_params():
    """Wymagane query params: country_code, party_id, tariff_id."""
    values = {name: request.args.get(name) for name in KEY_PARAMS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValidationError(
            "Missing required query parameter(s)",
            problems=[f"{name}: required" for name in missing],
        )
    return values["country_code"], values["party_id"], values["tariff_id"]


def _empty_ok() -> Response:
    return Response(status=200)


@tariffs_bp.errorhandler(TariffError)
def handle_tariff_error(err: TariffError):
    return jsonify(err.to_payload()), err.http_status


@tariffs_bp.route("", methods=["GET"])
@token_required
def get_tariff():
    """
    Zwraca Tariff tak, jak jest zapisany u eMSP.

    Parametry:
      ?country_code=NL&party_id=ABC&tariff_id=T1
    """
    country_code, party_id, tariff_id = _key_params()
    tariff = _service().get_tariff(country_code, party_id, tariff_id)
    return jsonify(tariff.to_dict())


@tariffs_bp.route("", methods=["PUT"])
@token_required
def put_tariff():
    """
    Nowy lub zaktualizowany Tariff od CPO (pełna podmiana, bez merge).

    country_code / party_id / tariff_id z query muszą się zgadzać z obiektem w body.
    """
    country_code, party_id, tariff_id = _key_params()
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be a JSON Tariff object")
    tariff = Tariff.from_dict(payload)
    _service().save_tariff(tariff, country_code, party_id, tariff_id)
    return _empty_ok()


@tariffs_bp.route("", methods=["DELETE"])
@token_required
def delete_tariff():
    """Usuwa Tariff, który nie jest i nie będzie już używany."""
    country_code, party_id, tariff_id = _key_params()
    _service().delete_tariff(country_code, party_id, tariff_id)
    return _empty_ok()


@health_bp.route("/health")
def healthcheck():
    return jsonify({"status": "ok", "tariffs": len(_service().store)})
