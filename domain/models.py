# domain/models.py
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

from core.exceptions import ValidationError
from domain.validation import validate_tariff_document

KEY_SEPARATOR = "/"


@dataclass(frozen=True)
class TariffKey:
    """
    (country_code, party_id, tariff_id) – tożsamość taryfy.
    country_code i party_id są CiString w OCPI, więc trzymamy je wielkimi literami;
    tariff_id porównujemy dokładnie.
    """

    country_code: str
    party_id: str
    tariff_id: str

    @classmethod
    def build(cls, country_code: Any, party_id: Any, tariff_id: Any) -> "TariffKey":
        problems: List[str] = []
        for name, value in (
            ("country_code", country_code),
            ("party_id", party_id),
            ("tariff_id", tariff_id),
        ):
            if not isinstance(value, str) or not value.strip():
                problems.append(f"{name}: required")
        for name, value in (("country_code", country_code), ("party_id", party_id)):
            if isinstance(value, str) and KEY_SEPARATOR in value:
                problems.append(f"{name}: must not contain '{KEY_SEPARATOR}'")
        if problems:
            raise ValidationError("Invalid tariff key", problems=problems)
        return cls(
            country_code=country_code.strip().upper(),
            party_id=party_id.strip().upper(),
            tariff_id=tariff_id,
        )

    def storage_id(self) -> str:
        return KEY_SEPARATOR.join((self.country_code, self.party_id, self.tariff_id))

    @classmethod
    def from_storage_id(cls, value: str) -> "TariffKey":
        parts = value.split(KEY_SEPARATOR, 2) if isinstance(value, str) else []
        if len(parts) != 3:
            raise ValidationError(
                "Invalid tariff storage id",
                problems=[f"{value!r}: expected country_code/party_id/tariff_id"],
            )
        return cls.build(*parts)

    def __str__(self) -> str:
        return self.storage_id()


@dataclass(frozen=True)
class Tariff:
    """
    Obiekt Tariff od CPO. Struktura cenowa jest dla nas nieprzezroczysta –
    `document` to dokładnie to, co przyszło (po walidacji) i to oddajemy w GET.
    """

    country_code: str
    party_id: str
    id: str
    currency: str
    last_updated: str
    document: Dict[str, Any] = field(default_factory=dict, repr=False, hash=False)

    @classmethod
    def from_dict(cls, data: Any) -> "Tariff":
        problems = validate_tariff_document(data)
        if problems:
            raise ValidationError("Invalid Tariff object", problems=problems)
        return cls(
            country_code=data["country_code"],
            party_id=data["party_id"],
            id=data["id"],
            currency=data["currency"],
            last_updated=data["last_updated"],
            document=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.document)

    @property
    def key(self) -> TariffKey:
        return TariffKey.build(self.country_code, self.party_id, self.id)

