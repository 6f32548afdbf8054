import redis.asyncio as redis

from config.settings import RedisSettings


def get_redis(settings: RedisSettings | None = None) -> redis.Redis | None:
    """Returns an asyncio Redis client, or None when REDIS_URL is not set."""
    settings = settings or RedisSettings()
    if not settings.url:
        return None
    return redis.from_url(
        settings.url,
        decode_responses=True,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.socket_timeout,
    )
