"""Shared Redis client factory for the token blocklist."""

import redis

_clients: dict[str, redis.Redis] = {}


def get_redis_client(url: str) -> redis.Redis:
    """Return a pooled Redis client for ``url``, creating it on first use."""

    client = _clients.get(url)
    if client is None:
        client = redis.Redis.from_url(url, decode_responses=True)
        _clients[url] = client
    return client


__all__ = ["get_redis_client"]
