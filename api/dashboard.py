"""Dashboard statistics."""

from api.base_service import parse_response
from api.client import ApiClient
from api.query_cache import QueryCache, make_key
from models.dashboard import DashboardStats

STATS_PATH = "/dashboard/stats"


class DashboardService:

    def __init__(self, client: ApiClient, cache: QueryCache):
        self.client = client
        self.cache = cache

    def stats(self) -> DashboardStats:
        def fetch() -> DashboardStats:
            payload = self.client.get(STATS_PATH) or {}
            return parse_response(DashboardStats, payload, "GET", STATS_PATH)

        return self.cache.fetch(make_key("dashboard-stats"), fetch)
