from typing import Optional

from fastapi import Header, HTTPException
from starlette.status import HTTP_401_UNAUTHORIZED


async def verify_actor(x_user_id: Optional[str] = Header(None, alias="X-User-Id")) -> str:
    """Resolve the acting user; authentication happens upstream (gateway)"""
    actor_id = (x_user_id or "").strip()
    if not actor_id:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing X-User-Id header")
    return actor_id
