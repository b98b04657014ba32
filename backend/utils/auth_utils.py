from typing import Dict, List

from fastapi import Depends, HTTPException, status, Request
from jose import jwt
from jose.exceptions import JWTError

# === Token Configuration ===
# Tokens are issued by the shop's identity service; this backend only verifies them.
# To keep them secure, set these via environment variables.
import os
from dotenv import load_dotenv

load_dotenv()

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE")  # Optional; checked only when set

ROLE_ADMIN = "ADMIN"
ROLE_SALES_STAFF = "SALES_STAFF"

# =================================================================


def get_current_user(request: Request) -> Dict[str, any]:
    """
    FastAPI dependency to validate the bearer JWT from the Authorization header.

    The payload must carry a ``role`` claim (ADMIN or SALES_STAFF) and a ``sub``
    identifying the user.

    Usage:
        @router.get("/secure-data", dependencies=[Depends(get_current_user)])
        def secure_endpoint():
            return {"message": "This is secure data."}
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header is missing",
        )

    # The token is expected to be in the format "Bearer <token>"
    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
        )

    token = parts[1]
    options = {"verify_aud": JWT_AUDIENCE is not None}

    # Decode and validate the token
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired"
        )
    except jwt.JWTClaimsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token claims: {e}"
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Token validation failed: {e}"
        )

    if payload.get("role") not in (ROLE_ADMIN, ROLE_SALES_STAFF):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token carries no recognised role",
        )
    return payload


def get_user_identifier(user: Dict[str, any]) -> str:
    """Best human-readable identifier for audit columns."""
    return user.get("name") or user.get("username") or user.get("sub") or "unknown"


def require_role(roles: List[str]):
    """Dependency factory restricting an endpoint to the given roles."""
    def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user
    return checker


require_admin = require_role([ROLE_ADMIN])
