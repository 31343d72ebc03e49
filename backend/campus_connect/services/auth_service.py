import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

import httpx
from jose import JWTError, jwt
from postgrest import APIError
from supabase import AsyncClient

from campus_connect.config import settings
from campus_connect.exceptions import DataServiceError
from campus_connect.models.token import TokenData
from campus_connect.models.user import ROLE_TABLES

logger = logging.getLogger(__name__)

class AuthService:
    def __init__(self, db: Optional[AsyncClient] = None):
        self.db = db
        self.access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_token_expires = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def _encode(self, data: dict, expires_delta: timedelta) -> str:
        to_encode = data.copy()
        to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta})
        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.ALGORITHM)

    def create_access_token(self, user_id: str, email: str, role: str) -> str:
        """Creates a JWT access token."""
        return self._encode(
            {"sub": str(user_id), "email": email, "role": role, "type": "access"},
            self.access_token_expires,
        )

    def create_refresh_token(self, user_id: str, email: str) -> str:
        """Creates a JWT refresh token."""
        return self._encode(
            {"sub": str(user_id), "email": email, "type": "refresh"},
            self.refresh_token_expires,
        )

    def create_tokens(self, user_id: str, email: str, role: str) -> Tuple[str, str]:
        """Generates both access and refresh tokens for a user."""
        return (
            self.create_access_token(user_id, email, role),
            self.create_refresh_token(user_id, email),
        )

    def decode_token(self, token: str) -> Optional[TokenData]:
        """Decodes a JWT token and returns its payload."""
        try:
            payload = jwt.decode(
                token, settings.JWT_SECRET_KEY, algorithms=[settings.ALGORITHM]
            )
        except JWTError:
            return None

        user_id = payload.get("sub")
        if user_id is None:
            return None
        try:
            return TokenData(
                user_id=user_id,
                email=payload.get("email"),
                role=payload.get("role"),
                type=payload.get("type"),
            )
        except ValueError:
            return None

    async def resolve_role(self, email: str) -> Optional[str]:
        """
        Finds which profile table holds `email`. The first table with a
        matching row decides the role; None when no table has one.
        Raises DataServiceError when a profile table cannot be read.
        """
        for role, table in ROLE_TABLES.items():
            try:
                response = await (
                    self.db.table(table).select("email").eq("email", email).limit(1).execute()
                )
            except (APIError, httpx.HTTPError) as e:
                raise DataServiceError(f"Profile lookup in {table} failed: {e}") from e
            if response.data:
                return role
        return None

    async def sign_in(self, email: str, password: str):
        """
        Verifies credentials with Supabase Auth. Raises AuthApiError on
        bad credentials; returns the Supabase user otherwise.
        """
        auth_response = await self.db.auth.sign_in_with_password(
            {"email": email, "password": password}
        )
        if auth_response.user is not None:
            logger.info("User signed in", extra={"email": email})
        return auth_response.user
