"""TTL cache for resolved insurer scoring configurations."""
from .ttl_cache import TTLCache
from .cache_key import generate_config_cache_key

__all__ = ["TTLCache", "generate_config_cache_key"]
