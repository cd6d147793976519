import hashlib
import logging
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from fastapi import HTTPException
from supabase import Client

from lunchlog.config.settings import settings

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _drop_expired(now: float) -> None:
    expired = [key for key, (_, expiry) in list(_AUTH_USER_CACHE.items()) if expiry <= now]
    for key in expired:
        _AUTH_USER_CACHE.pop(key, None)


class AuthService:
    def __init__(self, supabase: Optional[Client]):
        self.supabase = supabase

    def _require_db(self) -> Client:
        if self.supabase is None:
            raise HTTPException(status_code=503, detail="Authentication service not available")
        return self.supabase

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Validate the token with Supabase Auth and return the upserted users row. Uses short TTL cache."""
        supabase = self._require_db()
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if cache_key in _AUTH_USER_CACHE:
            user_data, expiry = _AUTH_USER_CACHE[cache_key]
            if now < expiry:
                return user_data
            _AUTH_USER_CACHE.pop(cache_key, None)
        try:
            user_response = supabase.auth.get_user(jwt=token)
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

        auth_user = user_response.user
        user_metadata = auth_user.user_metadata or {}
        app_metadata = auth_user.app_metadata or {}
        user_data = self.upsert_user(
            open_id=auth_user.id,
            name=user_metadata.get("full_name") or user_metadata.get("name"),
            email=auth_user.email,
            login_method=app_metadata.get("provider"),
        )
        if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
            _drop_expired(now)
        if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
            # Oldest insertion goes first
            _AUTH_USER_CACHE.pop(next(iter(_AUTH_USER_CACHE), None), None)
        _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
        return user_data

    def upsert_user(
        self,
        open_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        login_method: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or update the users row keyed by open_id."""
        if not open_id:
            raise HTTPException(status_code=400, detail="User openId is required for upsert")
        supabase = self._require_db()
        values: Dict[str, Any] = {
            "open_id": open_id,
            "last_signed_in": datetime.now(timezone.utc).isoformat(),
        }
        if name is not None:
            values["name"] = name
        if email is not None:
            values["email"] = email
        if login_method is not None:
            values["login_method"] = login_method
        if settings.owner_open_id and open_id == settings.owner_open_id:
            values["role"] = "admin"
        try:
            result = supabase.table("users")\
                .upsert(values, on_conflict="open_id")\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to upsert user")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to upsert user: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def logout(self, token: Optional[str] = None) -> bool:
        """Logout user using Supabase Auth"""
        if token:
            _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs, so logout is mainly client-side
            if self.supabase is not None:
                self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Supabase sign_out failed: {e}")
            return False
