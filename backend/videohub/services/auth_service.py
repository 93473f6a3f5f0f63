"""Authentication service for JWT tokens and password hashes."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Any

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from videohub.config import settings
from videohub.errors import AuthenticationError
from videohub.models.user import User
from videohub.schemas.auth import TokenData

ACCESS = "access"
REFRESH = "refresh"


class AuthService:
    """Service for handling authentication and authorization."""

    @staticmethod
    def hash_password(password: str) -> str:
        return generate_password_hash(password)

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        return check_password_hash(password_hash, password)

    @staticmethod
    def _create_token(data: Dict[str, Any], token_type: str, expires_in: timedelta) -> str:
        to_encode = data.copy()
        expire = datetime.now(timezone.utc) + expires_in
        to_encode.update({"exp": expire, "type": token_type})

        return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)

    @staticmethod
    def create_access_token(data: Dict[str, Any]) -> str:
        """
        Create a JWT access token.

        Args:
            data: Data to encode in the token

        Returns:
            Encoded JWT token
        """
        return AuthService._create_token(
            data, ACCESS, timedelta(minutes=settings.access_token_expire_minutes)
        )

    @staticmethod
    def create_refresh_token(data: Dict[str, Any]) -> str:
        """
        Create a JWT refresh token.

        Args:
            data: Data to encode in the token

        Returns:
            Encoded JWT refresh token
        """
        return AuthService._create_token(
            data, REFRESH, timedelta(days=settings.refresh_token_expire_days)
        )

    @staticmethod
    def create_tokens_for_user(user: User) -> Dict[str, str]:
        """
        Create both access and refresh tokens for a user.

        Returns:
            Dictionary with access_token and refresh_token
        """
        # jti keeps two pairs issued within the same second distinct
        token_data = {"sub": str(user.id), "jti": uuid.uuid4().hex}

        return {
            "access_token": AuthService.create_access_token(token_data),
            "refresh_token": AuthService.create_refresh_token(token_data),
        }

    @staticmethod
    def decode_token(token: str, expected_type: str) -> TokenData:
        """
        Decode and check a token.

        Raises:
            AuthenticationError: if the token is malformed, expired, or of
                the wrong type
        """
        try:
            payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        except JWTError:
            raise AuthenticationError("Invalid or expired token")

        user_id = payload.get("sub")
        token_type = payload.get("type")

        if not user_id or token_type != expected_type:
            raise AuthenticationError("Invalid token type")

        return TokenData(user_id=user_id, token_type=token_type)
