# tools/import_tariffs.py
"""
Zasila magazyn taryf eMSP pełną listą taryf CPO.

Źródła (jedno z dwóch):
    --file dump.json        lista obiektów Tariff albo koperta OCPI {"data": [...]}
    --cpo-url URL           pull z modułu Tariffs CPO (token: --cpo-token / CPO_TOKEN)

Każdy obiekt przechodzi przez tę samą walidację i TariffSyncService.save_tariff
co PUT od CPO, kluczem jest tożsamość zapisana w samym obiekcie.

Wyjście: podsumowanie created / replaced / rejected; kod wyjścia 1, gdy
cokolwiek zostało odrzucone.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from application.tariff_sync_service import TariffSyncService
from core.config import Config
from core.exceptions import ValidationError
from domain.models import Tariff
from integration.cpo_tariff_client import CpoTariffClient
from storage.tariff_store import build_store


def load_documents(path: Path) -> List[Dict]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if isinstance(raw, dict) and "data" in raw:
        raw = raw["data"]
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of Tariff objects")
    return raw


def import_documents(service: TariffSyncService, documents: Iterable) -> Dict[str, int]:
    summary = {"created": 0, "replaced": 0, "rejected": 0}
    for i, document in enumerate(documents):
        try:
            tariff = Tariff.from_dict(document)
            created = service.save_tariff(tariff, tariff.country_code, tariff.party_id, tariff.id)
        except ValidationError as e:
            summary["rejected"] += 1
            print(f"[WARN] Obiekt #{i} odrzucony: {e.message} {e.problems}")
            continue
        summary["created" if created else "replaced"] += 1
    return summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import CPO tariffs into the eMSP tariff store")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", type=Path, help="JSON dump with Tariff objects")
    source.add_argument("--cpo-url", help="URL of the CPO Tariffs module")
    parser.add_argument("--cpo-token", default=Config.CPO_TOKEN, help="OCPI token for the CPO")
    parser.add_argument("--backend", default="file", choices=["file", "memory"])
    parser.add_argument("--store", default=Config.TARIFF_STORE_PATH, help="path of the JSON tariff store")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    store = build_store(args.backend, args.store)
    service = TariffSyncService(store)

    if args.file:
        documents: Iterable = load_documents(args.file)
        print(f"[INFO] Wczytano {len(documents)} obiekt(ów) z {args.file}")
    else:
        documents = CpoTariffClient(args.cpo_url, token=args.cpo_token).iter_tariffs()
        print(f"[INFO] Pobieranie taryf z {args.cpo_url}")

    summary = import_documents(service, documents)
    print(
        f"[INFO] created={summary['created']} replaced={summary['replaced']} "
        f"rejected={summary['rejected']}, w magazynie: {len(store)}"
    )
    return 1 if summary["rejected"] else 0


if __name__ == "__main__":
    raise SystemExit(main())
