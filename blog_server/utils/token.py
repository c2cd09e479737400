"""
Refresh Token 存储

Refresh Token 以 SHA256 哈希为键保存在 Redis 中, TTL 与 Token 有效期一致.
刷新时必须在 Redis 中找到对应记录, 登出或修改密码时删除记录即撤销.
"""

import json
from datetime import datetime, timezone
from typing import Dict, Optional

from loguru import logger
from redis.asyncio import Redis

from blog_server.core.config import settings
from blog_server.core.security import hash_token


class TokenService:
    """Refresh Token 服务"""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    @staticmethod
    def _get_token_key(token_hash: str) -> str:
        return f"refresh_token:{token_hash}"

    @staticmethod
    def _get_user_tokens_key(user_id: int) -> str:
        return f"user_tokens:{user_id}"

    @staticmethod
    def _ttl_seconds() -> int:
        return settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 3600

    async def store_refresh_token(self, token: str, user_id: int, username: str) -> str:
        """
        存储 Refresh Token

        Returns:
            str: Token 哈希值
        """
        token_hash = hash_token(token)
        ttl = self._ttl_seconds()
        token_data = {
            "user_id": user_id,
            "username": username,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }

        await self.redis.setex(self._get_token_key(token_hash), ttl, json.dumps(token_data))
        # 记录用户持有的 Token, 用于整体撤销
        await self.redis.sadd(self._get_user_tokens_key(user_id), token_hash)
        await self.redis.expire(self._get_user_tokens_key(user_id), ttl)

        logger.debug(f"Refresh Token 已存储: user_id={user_id}, username={username}")
        return token_hash

    async def get_refresh_token(self, token: str) -> Optional[Dict]:
        """获取 Refresh Token 记录, 不存在或已撤销时返回 None"""
        token_data = await self.redis.get(self._get_token_key(hash_token(token)))
        if token_data:
            return json.loads(token_data)
        return None

    async def revoke_refresh_token(self, token: str) -> bool:
        """
        撤销 Refresh Token

        Returns:
            bool: 记录存在并被删除时返回 True
        """
        token_hash = hash_token(token)
        token_data = await self.get_refresh_token(token)
        if not token_data:
            return False

        await self.redis.srem(self._get_user_tokens_key(token_data["user_id"]), token_hash)
        await self.redis.delete(self._get_token_key(token_hash))
        logger.info(f"Refresh Token 已撤销: user_id={token_data['user_id']}")
        return True

    async def revoke_all_user_tokens(self, user_id: int) -> int:
        """
        撤销用户的所有 Refresh Token

        Returns:
            int: 撤销的 Token 数量
        """
        user_tokens_key = self._get_user_tokens_key(user_id)
        # decode_responses=True, 集合成员已是字符串
        token_hashes = await self.redis.smembers(user_tokens_key)

        count = 0
        for token_hash in token_hashes:
            count += await self.redis.delete(self._get_token_key(token_hash))
        await self.redis.delete(user_tokens_key)

        logger.info(f"已撤销用户所有 Token: user_id={user_id}, 撤销数量={count}")
        return count
