"""
REST API client, query cache and resource services.
"""

from api.client import ApiClient
from api.query_cache import CacheRegistry, QueryCache, make_key
from api.services import ConsoleServices, build_services
