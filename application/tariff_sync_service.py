# application/tariff_sync_service.py
from __future__ import annotations

import logging
from typing import Dict

from core.exceptions import IdentityMismatch, TariffNotFound
from domain.models import Tariff, TariffKey
from storage.tariff_store import TariffStore

logger = logging.getLogger(__name__)


class TariffSyncService:
    """
    Strona eMSP modułu Tariffs OCPI (model push).

    Taryfy należą do CPO; trzymamy ich kopię pod kluczem
    (country_code, party_id, tariff_id). Serwis nie ma własnego stanu,
    wszystko siedzi we wstrzykniętym store.
    """

    def __init__(self, store: TariffStore, idempotent_delete: bool = False) -> None:
        self._store = store
        self._idempotent_delete = idempotent_delete

    @property
    def store(self) -> TariffStore:
        return self._store

    def get_tariff(self, country_code: str, party_id: str, tariff_id: str) -> Tariff:
        key = TariffKey.build(country_code, party_id, tariff_id)
        tariff = self._store.get(key)
        if tariff is None:
            logger.info("GET tariff %s: not found", key)
            raise TariffNotFound(key)
        return tariff

    def save_tariff(self, tariff: Tariff, country_code: str, party_id: str, tariff_id: str) -> bool:
        """PUT: utworzenie albo pełna podmiana. True, gdy taryfa jest nowa."""
        key = TariffKey.build(country_code, party_id, tariff_id)
        mismatches = _identity_mismatches(tariff, key)
        if mismatches:
            logger.warning("PUT tariff %s rejected, identity mismatch on %s", key, sorted(mismatches))
            raise IdentityMismatch(mismatches)

        created = self._store.put(key, tariff)
        logger.info("PUT tariff %s: %s", key, "created" if created else "replaced")
        return created

    def delete_tariff(self, country_code: str, party_id: str, tariff_id: str) -> None:
        key = TariffKey.build(country_code, party_id, tariff_id)
        if self._store.delete(key):
            logger.info("DELETE tariff %s: removed", key)
            return
        if self._idempotent_delete:
            logger.info("DELETE tariff %s: already absent", key)
            return
        logger.info("DELETE tariff %s: not found", key)
        raise TariffNotFound(key)


def _identity_mismatches(tariff: Tariff, key: TariffKey) -> Dict[str, Dict[str, str]]:
    # country_code / party_id to CiString, id porównujemy dokładnie
    out: Dict[str, Dict[str, str]] = {}
    if (tariff.country_code or "").upper() != key.country_code:
        out["country_code"] = {"body": tariff.country_code, "request": key.country_code}
    if (tariff.party_id or "").upper() != key.party_id:
        out["party_id"] = {"body": tariff.party_id, "request": key.party_id}
    if tariff.id != key.tariff_id:
        out["id"] = {"body": tariff.id, "request": key.tariff_id}
    return out
