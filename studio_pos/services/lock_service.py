import redis
from studio_pos.utils.retry import redis_retry
from studio_pos.utils.settings import REDIS_URL
from studio_pos.utils.logging import get_logger

logger = get_logger(__name__)

#LUA compare and delete, atomic
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis runs the script as one uninterruptible operation
#nothing can slip in between GET and DEL, so only the owner of the token releases


class LockService:
    """
    -single-flight guard for checkout (one commit per cart at a time)
    -release only by the holder of the token
    -expiry so a crashed commit never blocks the cart for good
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @staticmethod
    def _key(cart_id: int) -> str:
        return f"checkout:{cart_id}:lock"

    @redis_retry()
    def acquire_checkout_lock(self, cart_id: int, token: str, ttl: int) -> bool:
        key = self._key(cart_id)
        logger.info(f"Acquire lock {key}")
        #SET checkout:1:lock "<token>" NX EX 30
        return bool(
            self.redis.set(
                name=key,
                value=token,
                nx=True,  #only if the key does not exist yet
                ex=ttl,
            )
        )

    @redis_retry()
    def release_checkout_lock(self, cart_id: int, token: str) -> bool:
        key = self._key(cart_id)
        logger.info(f"Release lock {key}")
        res = self.redis.eval(_RELEASE_LUA, 1, key, token)
        return bool(res)
