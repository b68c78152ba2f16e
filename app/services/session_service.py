# app/services/session_service.py
import secrets

import redis

from app.domain.schemas import PrincipalOut
from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, SESSION_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class SessionService:
    """
    Sesje po stronie serwera:
    -cookie niesie tylko losowy, nieprzezroczysty identyfikator
    -w redisie hash {user_id, role} z TTL, nigdy hash hasla
    -sesje przezywaja restart procesu
    """

    def __init__(self, client: redis.Redis | None = None, ttl: int = SESSION_TTL_SECONDS):
        self.redis = client or redis.Redis.from_url(REDIS_URL, decode_responses=True)
        self.ttl = ttl

    @staticmethod
    def _key(session_id: str) -> str:
        return f"session:{session_id}"

    @redis_retry()
    def create(self, user_id: int, role: str) -> str:
        session_id = secrets.token_urlsafe(32)
        key = self._key(session_id)

        pipe = self.redis.pipeline()
        pipe.hset(key, mapping={"user_id": str(user_id), "role": role})
        pipe.expire(key, self.ttl)
        pipe.execute()

        logger.info(f"Session created for user {user_id}")
        return session_id

    @redis_retry()
    def get(self, session_id: str | None) -> PrincipalOut | None:
        if not session_id:
            return None

        data = self.redis.hgetall(self._key(session_id))
        if not data:
            return None

        return PrincipalOut(user_id=int(data["user_id"]), role=data["role"])

    @redis_retry()
    def destroy(self, session_id: str | None) -> bool:
        if not session_id:
            return False

        removed = self.redis.delete(self._key(session_id))
        if removed:
            logger.info("Session destroyed")
        return bool(removed)
