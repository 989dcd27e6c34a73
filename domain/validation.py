# domain/validation.py
"""
Schemat obiektu Tariff (OCPI 2.2.1) jako modele pydantic.

Wszystkie problemy są zbierane naraz i zwracane w jednej odpowiedzi 400
jako lista "pole.ścieżka: komunikat".
"""
from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

import pycountry
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

MAX_TARIFF_ID_LENGTH = 36

# RFC 3339 date-time; OCPI dopuszcza brak strefy (wtedy UTC)
RFC3339_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})?"
)


def _rfc3339(value: Any) -> Any:
    if not isinstance(value, str) or not RFC3339_RE.fullmatch(value):
        raise PydanticCustomError("rfc3339", "must be an RFC 3339 timestamp")
    return value


Timestamp = Annotated[datetime, BeforeValidator(_rfc3339)]


class TariffDimensionType(str, Enum):
    ENERGY = "ENERGY"
    FLAT = "FLAT"
    PARKING_TIME = "PARKING_TIME"
    TIME = "TIME"


class TariffType(str, Enum):
    AD_HOC_PAYMENT = "AD_HOC_PAYMENT"
    PROFILE_CHEAP = "PROFILE_CHEAP"
    PROFILE_FAST = "PROFILE_FAST"
    PROFILE_GREEN = "PROFILE_GREEN"
    REGULAR = "REGULAR"


class DisplayTextModel(BaseModel):
    language: str = Field(min_length=2, max_length=2)
    text: str = Field(max_length=512)


class PriceModel(BaseModel):
    excl_vat: float = Field(ge=0, strict=True)
    incl_vat: Optional[float] = Field(default=None, ge=0, strict=True)


class PriceComponentModel(BaseModel):
    type: TariffDimensionType
    price: float = Field(ge=0, strict=True)
    vat: Optional[float] = Field(default=None, strict=True)
    step_size: int = Field(ge=0, strict=True)


class TariffElementModel(BaseModel):
    price_components: List[PriceComponentModel] = Field(min_length=1)
    # restrykcje są dla nas nieprzezroczyste, byle był obiekt
    restrictions: Optional[Dict[str, Any]] = None


class TariffModel(BaseModel):
    """Walidacja body PUT; surowy dokument trzymamy osobno (domain.models.Tariff)."""

    country_code: str
    party_id: str = Field(pattern=r"^[A-Za-z0-9]{3}$")
    id: str = Field(min_length=1, max_length=MAX_TARIFF_ID_LENGTH)
    currency: str
    type: Optional[TariffType] = None
    tariff_alt_text: Optional[List[DisplayTextModel]] = None
    tariff_alt_url: Optional[str] = None
    min_price: Optional[PriceModel] = None
    max_price: Optional[PriceModel] = None
    elements: List[TariffElementModel] = Field(min_length=1)
    energy_mix: Optional[Dict[str, Any]] = None
    start_date_time: Optional[Timestamp] = None
    end_date_time: Optional[Timestamp] = None
    last_updated: Timestamp

    model_config = ConfigDict(extra="allow")

    @field_validator("country_code", mode="before")
    @classmethod
    def _country_code(cls, value: Any) -> Any:
        if (
            not isinstance(value, str)
            or len(value) != 2
            or not value.isalpha()
            or pycountry.countries.get(alpha_2=value.upper()) is None
        ):
            raise PydanticCustomError("country_code", "must be an ISO-3166-1 alpha-2 code")
        return value

    @field_validator("currency", mode="before")
    @classmethod
    def _currency(cls, value: Any) -> Any:
        if (
            not isinstance(value, str)
            or len(value) != 3
            or not value.isalpha()
            or pycountry.currencies.get(alpha_3=value.upper()) is None
        ):
            raise PydanticCustomError("currency", "must be an ISO-4217 code")
        return value


_TIMESTAMP_ADAPTER = TypeAdapter(Timestamp)


def parse_timestamp(value: Any) -> Optional[datetime]:
    try:
        return _TIMESTAMP_ADAPTER.validate_python(value)
    except PydanticValidationError:
        return None


def _location(loc) -> str:
    out = ""
    for part in loc:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}" if out else str(part)
    return out or "body"


def validate_tariff_document(data: Any) -> List[str]:
    """Zwraca listę problemów; pusta lista = dokument poprawny."""
    if not isinstance(data, dict):
        return ["body: must be a JSON object"]
    try:
        TariffModel.model_validate(data)
    except PydanticValidationError as e:
        return [f"{_location(err['loc'])}: {err['msg']}" for err in e.errors()]
    return []
