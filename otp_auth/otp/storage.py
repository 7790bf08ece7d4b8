"""Redis client construction and error translation."""

import logging
from contextlib import contextmanager

import redis

from ..config import RedisConfig
from ..errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)


def create_redis_client(config: RedisConfig) -> redis.Redis:
    """Build a Redis client from configuration. Connects lazily."""
    return redis.Redis(
        host=config.host,
        port=config.port,
        password=config.password,
        db=config.db,
        socket_timeout=config.socket_timeout,
        socket_connect_timeout=config.socket_timeout,
        decode_responses=True
    )


@contextmanager
def storage_errors(operation: str):
    """Translate redis client failures into STORAGE_FAILURE."""
    try:
        yield
    except redis.RedisError as e:
        logger.error(f"Redis {operation} failed: {e}")
        raise DomainError(ErrorKind.STORAGE_FAILURE, details=f"{operation}: {e}")
