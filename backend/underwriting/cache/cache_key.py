"""Cache key generation logic."""


def generate_config_cache_key(insurer_id: str) -> str:
    """
    Generate a cache key for an insurer's resolved scoring configuration.

    Example:
        >>> generate_config_cache_key("acme")
        "insurer:acme:config"
    """
    return f"insurer:{insurer_id}:config"
