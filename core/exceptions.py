# core/exceptions.py
from __future__ import annotations
from typing import Dict, List, Optional


class TariffError(Exception):
    """Baza dla wszystkich błędów, które moduł taryf zgłasza celowo."""

    http_status = 500
    kind = "tariff_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(TariffError):
    http_status = 400
    kind = "validation_error"

    def __init__(self, message: str, problems: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.problems = list(problems or [])

    def to_payload(self) -> Dict:
        payload = super().to_payload()
        if self.problems:
            payload["fields"] = self.problems
        return payload


class IdentityMismatch(ValidationError):
    """Obiekt Tariff w body ma inne (country_code, party_id, id) niż zapytanie."""

    kind = "identity_mismatch"

    def __init__(self, mismatches: Dict[str, Dict[str, str]]) -> None:
        names = ", ".join(sorted(mismatches))
        super().__init__(
            f"Tariff object does not match the request key ({names})",
            problems=sorted(mismatches),
        )
        self.mismatches = mismatches


class TariffNotFound(TariffError):
    http_status = 404
    kind = "not_found"

    def __init__(self, key) -> None:
        super().__init__(f"Tariff {key} not found")
        self.key = key


class ConfigurationError(TariffError):
    kind = "configuration_error"


class CpoClientError(TariffError):
    """CPO odpowiedział statusem OCPI spoza zakresu sukcesu."""

    http_status = 502
    kind = "cpo_error"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
