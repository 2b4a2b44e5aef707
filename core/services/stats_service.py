# =============================================================================
# core/services/stats_service.py - Dashboard Counters
# =============================================================================
# Aggregate counts for the admin dashboard. Each counter is an exact
# head-only count query; no rows are transferred.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class StatsService:

    @staticmethod
    def _count(table: str, filters: dict | None = None) -> int:
        client = SupabaseClient.get_client()
        query = client.table(table).select("*", count="exact", head=True)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        return SupabaseClient.count(query, f"count {table}")

    @staticmethod
    def get_stats() -> dict[str, int]:
        """
        Dashboard totals.

        outOfStock is derived as total minus available, so products with any
        status other than "available" count as out of stock.
        """
        total = StatsService._count("products")
        available = StatsService._count("products", {"status": "available"})

        stats = {
            "totalProducts": total,
            "availableProducts": available,
            "outOfStock": max(0, total - available),
            "totalCategories": StatsService._count("categories"),
            "totalBrands": StatsService._count("brands"),
            "unreadMessages": StatsService._count("contacts", {"is_read": False}),
        }
        logger.debug(f"Dashboard stats: {stats}")
        return stats
