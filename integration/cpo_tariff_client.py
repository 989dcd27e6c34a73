# integration/cpo_tariff_client.py
from __future__ import annotations
from typing import Any, Dict, Iterator, List, Optional, Tuple
import logging
import requests

from core.config import Config
from core.exceptions import CpoClientError

logger = logging.getLogger(__name__)

OCPI_SUCCESS_RANGE = range(1000, 2000)


class CpoTariffClient:
    """
    Pull taryf z modułu Tariffs po stronie CPO (OCPI 2.2.1, sender interface).
      GET {base_url}?offset=&limit=  ->  {"data": [...], "status_code": 1000, ...}
    - Paginacja przez nagłówek Link: <...>; rel="next".
    - status_code spoza 1000-1999 -> CpoClientError.
    - Błędy HTTP lecą dalej jako requests.HTTPError.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        session: Optional[requests.Session] = None,
        page_limit: Optional[int] = None,
        timeout: int = 60,
    ) -> None:
        if not base_url:
            raise ValueError("CPO tariffs URL is not set")
        self.base_url = base_url
        self.token = token
        self.s = session or requests.Session()
        self.page_limit = page_limit or Config.CPO_PAGE_LIMIT
        self.timeout = timeout

        # debug/diag
        self.last_request: Optional[Tuple[str, Dict]] = None
        self.last_status: Optional[int] = None

    # ---------------- HTTP ----------------

    def _headers(self) -> Dict[str, str]:
        h = {"Accept": "application/json"}
        if self.token:
            h["Authorization"] = f"Token {self.token}"
        return h

    def _get_page(self, url: str, params: Optional[Dict]) -> requests.Response:
        self.last_request = (url, dict(params or {}))
        r = self.s.get(url, headers=self._headers(), params=params, timeout=self.timeout)
        self.last_status = r.status_code
        r.raise_for_status()
        return r

    @staticmethod
    def _unwrap(body: Any) -> List[Dict]:
        if not isinstance(body, dict):
            raise CpoClientError("CPO response is not an OCPI envelope")
        status_code = body.get("status_code")
        if status_code not in OCPI_SUCCESS_RANGE:
            raise CpoClientError(
                f"CPO returned OCPI status {status_code}: {body.get('status_message', '')}",
                status_code=status_code,
            )
        data = body.get("data") or []
        if not isinstance(data, list):
            raise CpoClientError("CPO response 'data' is not a list")
        return data

    # -------------- Public --------------

    def iter_tariffs(self) -> Iterator[Dict]:
        """Surowe dokumenty Tariff, strona po stronie."""
        url: Optional[str] = self.base_url
        params: Optional[Dict] = {"offset": 0, "limit": self.page_limit}
        page = 0
        while url:
            r = self._get_page(url, params)
            items = self._unwrap(r.json())
            page += 1
            logger.info("CPO tariffs page %d: %d item(s)", page, len(items))
            yield from items
            # kolejne strony: pełny URL z nagłówka Link, bez dodatkowych params
            url = (r.links.get("next") or {}).get("url")
            params = None

    def fetch_tariffs(self) -> List[Dict]:
        return list(self.iter_tariffs())
