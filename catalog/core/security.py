from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from catalog.core.config import JWT_SECRET, JWT_ALGORITHM, JWT_EXPIRES_MINUTES


def create_jwt_token(data: dict, expires_minutes: int = JWT_EXPIRES_MINUTES) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_minutes)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_jwt_token(token: str) -> dict:
    """
    Decode and validate JWT token.
    Raises JWTError if token is invalid or expired.
    """
    try:
        # jose.jwt.decode automatically validates expiration when present
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
        return payload
    except JWTError:
        raise


def user_id_from_token(token: str) -> int:
    """
    Extract the user id from the token's 'sub' claim.
    Raises JWTError or ValueError when the token cannot identify a user.
    """
    payload = decode_jwt_token(token)
    sub = payload.get("sub")
    if sub is None:
        raise ValueError("Token missing 'sub' claim")
    return int(sub)
