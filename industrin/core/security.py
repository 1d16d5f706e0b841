# industrin/core/security.py
from __future__ import annotations

import hashlib
import hmac
import os
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import bcrypt
from jose import jwt

SECRET_KEY = os.getenv("SECRET_KEY", "dev-insecure-change-me")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
TOKEN_ISSUER = "industrin"

# Identity provider (optional). Tokens signed with this secret carry role metadata.
IDP_JWT_SECRET = os.getenv("IDP_JWT_SECRET") or None
IDP_JWT_AUDIENCE = os.getenv("IDP_JWT_AUDIENCE", "authenticated")

# Company access tokens: 32 random bytes, url-safe (43 chars)
ACCESS_TOKEN_BYTES = 32


# --- passwords (admin legacy login) -----------------------------------------

def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # malformed hash or over-long password
        return False


# --- session tokens ----------------------------------------------------------

def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[timedelta] = None
) -> str:
    to_encode = dict(data)
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire, "iss": TOKEN_ISSUER})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_session_token(token: str) -> Dict[str, Any]:
    """Raises jose.JWTError when the token is not ours or has expired."""
    return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], issuer=TOKEN_ISSUER)


def decode_idp_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode an identity-provider JWT. Returns None when no IdP is configured.
    Raises jose.JWTError on a bad signature, audience or expiry.
    """
    if not IDP_JWT_SECRET:
        return None
    return jwt.decode(
        token,
        IDP_JWT_SECRET,
        algorithms=[ALGORITHM],
        audience=IDP_JWT_AUDIENCE,
    )


# --- company access tokens ---------------------------------------------------

def generate_access_token() -> str:
    return secrets.token_urlsafe(ACCESS_TOKEN_BYTES)


def hash_access_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def access_token_matches(token: str, token_hash: str) -> bool:
    return hmac.compare_digest(hash_access_token(token or ""), token_hash or "")


# Compared against when no company user matched; not a SHA-256 hex digest of anything
UNMATCHABLE_TOKEN_HASH = "-" * 64
