from datetime import datetime, timedelta
from typing import Optional
from fastapi import Header, HTTPException, status
from jose import JWTError, jwt
from blockdb.core.config import settings


class Actor:
    # utilisateur authentifié + son workspace (tiré du token)
    def __init__(self, user_id: str, workspace_id: str):
        self.user_id = user_id
        self.workspace_id = workspace_id


def create_access_token(user_id: str, workspace_id: str) -> str:
    # crée un token d'accès JWT de 15 minutes
    payload = {
        "user_id": user_id,
        "workspace_id": workspace_id,
        "exp": datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRE_MIN),
        "type": "access"
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")

def verify_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    except JWTError:
        return None
    if payload.get("type") != "access":
        return None
    return payload

def decode_actor(token: str) -> Optional[Actor]:
    payload = verify_token(token)
    if payload is None or not payload.get("user_id") or not payload.get("workspace_id"):
        return None
    return Actor(payload["user_id"], payload["workspace_id"])


def get_current_actor(authorization: Optional[str] = Header(None)) -> Actor:
    """Récupère l'acteur depuis le JWT token"""
    if not authorization:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = authorization.replace("Bearer ", "")
    actor = decode_actor(token)
    if actor is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return actor
