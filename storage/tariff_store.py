# storage/tariff_store.py
from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from core.exceptions import ConfigurationError, ValidationError
from domain.models import Tariff, TariffKey

logger = logging.getLogger(__name__)


class TariffStore(ABC):
    """
    Trwałe przechowywanie taryf po kluczu (country_code, party_id, tariff_id).
    Operacje na jednym kluczu są atomowe i linearyzowalne.
    """

    @abstractmethod
    def get(self, key: TariffKey) -> Optional[Tariff]:
        """Zapisana taryfa albo ``None``, gdy klucza nie ma."""

    @abstractmethod
    def put(self, key: TariffKey, tariff: Tariff) -> bool:
        """Utwórz albo podmień. ``True``, gdy rekordu wcześniej nie było."""

    @abstractmethod
    def delete(self, key: TariffKey) -> bool:
        """Usuń rekord. ``False``, gdy nie było czego usuwać."""

    @abstractmethod
    def keys(self) -> List[TariffKey]:
        ...

    def __len__(self) -> int:
        return len(self.keys())


class _Shard:
    __slots__ = ("lock", "records")

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.records: Dict[TariffKey, Tariff] = {}


class InMemoryTariffStore(TariffStore):
    """
    Stała liczba shardów (dict + lock), shard wybierany po hash(key).
    Ten sam klucz zawsze trafia do tego samego locka; liczba locków nie
    rośnie z liczbą kluczy.
    """

    SHARDS = 64

    def __init__(self, shards: Optional[int] = None) -> None:
        self._shards = [_Shard() for _ in range(shards or self.SHARDS)]

    def _shard(self, key: TariffKey) -> _Shard:
        return self._shards[hash(key) % len(self._shards)]

    def get(self, key: TariffKey) -> Optional[Tariff]:
        shard = self._shard(key)
        with shard.lock:
            tariff = shard.records.get(key)
        # zapisane obiekty są tylko podmieniane, nigdy modyfikowane
        return copy.deepcopy(tariff) if tariff is not None else None

    def put(self, key: TariffKey, tariff: Tariff) -> bool:
        stored = copy.deepcopy(tariff)
        shard = self._shard(key)
        with shard.lock:
            created = key not in shard.records
            shard.records[key] = stored
        return created

    def delete(self, key: TariffKey) -> bool:
        shard = self._shard(key)
        with shard.lock:
            return shard.records.pop(key, None) is not None

    def keys(self) -> List[TariffKey]:
        out: List[TariffKey] = []
        for shard in self._shards:
            with shard.lock:
                out.extend(shard.records)
        return out


class JsonFileTariffStore(TariffStore):
    """
    Jeden plik JSON: {"NL/ABC/T1": {...tariff...}, ...}.

    Plik jest walidowany raz, przy wczytaniu; uszkodzony klucz albo dokument
    to ConfigurationError. Każda zmiana zapisuje cały plik przez plik
    tymczasowy + os.replace pod jednym lockiem (single writer). Gdy zapis się
    nie uda, ani plik, ani stan w pamięci się nie zmieniają.
    """

    def __init__(self, path) -> None:
        self.path = Path(path)
        self._lock = threading.RLock()
        self._records: Dict[TariffKey, Tariff] = self._load()
        logger.info("Loaded %d tariffs from %s", len(self._records), self.path)

    def _load(self) -> Dict[TariffKey, Tariff]:
        if not self.path.exists():
            return {}
        with self.path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Tariff store file {self.path} is not a JSON object")

        records: Dict[TariffKey, Tariff] = {}
        for storage_id, document in raw.items():
            try:
                key = TariffKey.from_storage_id(storage_id)
                tariff = Tariff.from_dict(document)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Tariff store file {self.path}: invalid entry {storage_id!r}: {e.message} {e.problems}"
                ) from e
            if tariff.key != key:
                raise ConfigurationError(
                    f"Tariff store file {self.path}: entry {storage_id!r} holds tariff {tariff.key}"
                )
            records[key] = tariff
        return records

    def _write(self, records: Dict[TariffKey, Tariff]) -> None:
        payload = {key.storage_id(): tariff.to_dict() for key, tariff in records.items()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get(self, key: TariffKey) -> Optional[Tariff]:
        with self._lock:
            tariff = self._records.get(key)
        return copy.deepcopy(tariff) if tariff is not None else None

    def put(self, key: TariffKey, tariff: Tariff) -> bool:
        stored = copy.deepcopy(tariff)
        with self._lock:
            created = key not in self._records
            records = dict(self._records)
            records[key] = stored
            self._write(records)
            self._records = records
            return created

    def delete(self, key: TariffKey) -> bool:
        with self._lock:
            if key not in self._records:
                return False
            records = dict(self._records)
            del records[key]
            self._write(records)
            self._records = records
            return True

    def keys(self) -> List[TariffKey]:
        with self._lock:
            return list(self._records)


def build_store(backend: str = "memory", path: Optional[str] = None) -> TariffStore:
    backend = (backend or "memory").strip().lower()
    if backend == "memory":
        return InMemoryTariffStore()
    if backend == "file":
        if not path:
            raise ConfigurationError("TARIFF_STORE_PATH is required for the file backend")
        return JsonFileTariffStore(path)
    raise ConfigurationError(f"Unknown TARIFF_STORE_BACKEND: {backend!r}")
