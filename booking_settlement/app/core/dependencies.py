"""
Request dependencies for FastAPI.

Authentication happens upstream; handlers forward the acting identity in
the X-Actor-Name header and this module turns it into a dependency.
"""

from typing import Optional
from fastapi import Header
from booking_settlement.app.core.exceptions import MissingActorError

ACTOR_HEADER = "X-Actor-Name"


async def get_actor(x_actor_name: Optional[str] = Header(None, alias=ACTOR_HEADER)) -> str:
    """
    FastAPI dependency returning the acting admin or customer.
    
    Raises:
        MissingActorError: header missing or blank (400)
    """
    if x_actor_name is None or not x_actor_name.strip():
        raise MissingActorError()
    return x_actor_name.strip()
