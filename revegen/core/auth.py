"""
认证凭据管理
保存授权头与会话Cookie，并维护每个客户端实例独立的缓存令牌
"""

import base64
import json
import re
import threading
import time
from typing import Any, Dict, Optional

from revegen.core.exceptions import AuthenticationError
from revegen.core.log_messages import log_messages
from revegen.core.log_utils import get_logger

logger = get_logger(__name__)

_BEARER_PATTERN = re.compile(r"Bearer\s+(.+)")


def decode_token_payload(token: str) -> Dict[str, Any]:
    """
    尽力解析令牌中的JSON载荷

    标准JWT的载荷位于第二段；部分令牌（如 v2.login-xxx.<payload>）位于最后一段，
    因此依次尝试第二段和最后一段，均失败时返回空字典。

    Args:
        token: 令牌字符串

    Returns:
        Dict[str, Any]: 解析出的载荷
    """
    segments = token.split(".")
    if len(segments) < 2:
        return {}

    for segment in dict.fromkeys([segments[1], segments[-1]]):
        try:
            padded = segment + "=" * (-len(segment) % 4)
            payload = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
        except (ValueError, UnicodeDecodeError):
            continue
        if isinstance(payload, dict):
            return payload
    return {}


class AuthCredentials:
    """
    认证凭据

    授权头和Cookie在每个请求上附加；缓存令牌只属于当前客户端实例，
    收到401时通过 invalidate() 清除。
    """

    def __init__(self, authorization: str, cookie: str):
        if not authorization or not cookie:
            raise AuthenticationError("Authorization header and cookie are required")

        self.authorization = authorization
        self.cookie = cookie
        self._lock = threading.Lock()
        self._token: Optional[str] = None
        self.user_id: Optional[str] = None
        self.expires_at: Optional[float] = None

        match = _BEARER_PATTERN.match(authorization)
        if match:
            self._token = match.group(1).strip()
            payload = decode_token_payload(self._token)
            user_id = payload.get("sub") or payload.get("user_id")
            self.user_id = str(user_id) if user_id else None
            self.expires_at = self._read_expiry(payload)

    @staticmethod
    def _read_expiry(payload: Dict[str, Any]) -> Optional[float]:
        """读取过期时间（秒级时间戳）"""
        if isinstance(payload.get("expiration_ms"), (int, float)):
            return payload["expiration_ms"] / 1000.0
        if isinstance(payload.get("exp"), (int, float)):
            return float(payload["exp"])
        return None

    @property
    def token(self) -> Optional[str]:
        """当前缓存的令牌，失效后为None"""
        return self._token

    @property
    def had_token(self) -> bool:
        return _BEARER_PATTERN.match(self.authorization) is not None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now if now is not None else time.time()) >= self.expires_at

    def ensure_valid(self) -> None:
        """
        请求前检查令牌状态

        Raises:
            AuthenticationError: 令牌已被清除或已过期
        """
        if self.had_token and (self._token is None or self.is_expired()):
            raise AuthenticationError("Authentication token expired", status_code=401)

    def invalidate(self, token: Optional[str]) -> bool:
        """
        比较并清除缓存令牌

        只有当前缓存令牌仍为 token 时才清除，并发的多个任务同时收到401时只有一个生效。

        Returns:
            bool: 是否执行了清除
        """
        with self._lock:
            if token is None or self._token != token:
                return False
            self._token = None
        logger.warning(log_messages.TOKEN_INVALIDATED, user_id=self.user_id)
        return True

    @staticmethod
    def mask(value: str, keep: int = 25) -> str:
        """截断敏感头信息用于日志输出"""
        if len(value) <= keep:
            return value
        return value[:keep] + "..."
