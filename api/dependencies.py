"""
Service wiring for the API.

The sale services are built once per process: the transaction engine owns the
per-product locks, so every request must go through the same instance. Tests
replace `get_services` through `app.dependency_overrides`.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from repositories.memory_store import InMemoryCatalogStore, InMemorySaleLedger, seed_demo_catalog
from repositories.ports import CatalogStore, SaleLedger
from services.sale_management_service import SaleManagementService
from services.sale_query_service import SaleQueryService
from services.sale_transaction_service import SaleTransactionEngine
from settings import Settings, load_settings


@dataclass(frozen=True, slots=True)
class SaleServices:
    engine: SaleTransactionEngine
    management: SaleManagementService
    queries: SaleQueryService


def build_services(catalog: CatalogStore, ledger: SaleLedger, settings: Settings) -> SaleServices:
    return SaleServices(
        engine=SaleTransactionEngine(
            catalog,
            ledger,
            business_timezone=settings.business_timezone,
            stock_conflict_attempts=settings.stock_conflict_attempts,
        ),
        management=SaleManagementService(catalog, ledger),
        queries=SaleQueryService(ledger, business_timezone=settings.business_timezone),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_services() -> SaleServices:
    settings = get_settings()

    if settings.storage_backend == "memory":
        catalog = InMemoryCatalogStore()
        seed_demo_catalog(catalog)
        return build_services(catalog, InMemorySaleLedger(catalog), settings)

    from repositories.catalog_repository import SupabaseCatalogStore
    from repositories.client import get_supabase
    from repositories.sale_repository import SupabaseSaleLedger

    client = get_supabase()
    return build_services(SupabaseCatalogStore(client), SupabaseSaleLedger(client), settings)


__all__ = ["SaleServices", "build_services", "get_settings", "get_services"]
