# app/services/supa_auth.py
import logging
from typing import Dict

from jose import JWTError, jwt

from app.config import settings

logger = logging.getLogger(__name__)


async def verify_bearer(authorization: str | None) -> Dict[str, str | None]:
    """
    - Authorization: Bearer <access_token> 헤더에서 토큰을 꺼내서
    - Supabase JWT secret(HS256)으로 검증하고
    - 기본적인 클레임(sub, email, full_name)을 반환한다.
    """
    secret = settings.supabase_jwt_secret
    if not secret:
        raise RuntimeError("SUPABASE_JWT_SECRET 환경변수가 설정되어 있지 않습니다.")

    if not authorization:
        raise ValueError("missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise ValueError("invalid Authorization header")

    token = parts[1].strip()
    if not token:
        raise ValueError("invalid Authorization header")

    decode_kwargs = {
        "key": secret,
        "algorithms": ["HS256"],  # Supabase access token 의 alg
    }
    if settings.supabase_jwt_audience:
        decode_kwargs["audience"] = settings.supabase_jwt_audience  # "authenticated"

    try:
        claims = jwt.decode(token, **decode_kwargs)
    except JWTError as e:
        logger.warning("JWT decode failed: %s", e)
        raise ValueError("invalid token") from e

    user_id = claims.get("sub")
    if not user_id:
        raise ValueError("invalid token: missing sub")

    metadata = claims.get("user_metadata") or {}
    return {
        "user_id": user_id,
        "email": claims.get("email"),
        "full_name": metadata.get("full_name"),
    }
