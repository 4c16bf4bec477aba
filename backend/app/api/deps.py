"""
Common dependencies for API endpoints.
"""

from fastapi import Query, HTTPException


async def get_current_user_id(user_id: str = Query(..., description="User ID")) -> str:
    """
    Extract the requesting user's ID from the query string.

    Session handling lives in the web frontend, which resolves the
    signed-in user and passes the user_id along with each call.
    """
    if not user_id.strip():
        raise HTTPException(status_code=400, detail="user_id is required")
    return user_id
