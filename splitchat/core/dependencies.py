from fastapi import HTTPException, Request
from splitchat.core.jwt_config import decode_token, get_token_from_cookie

async def get_current_user(request: Request) -> str:
    """Id of the caller, taken from the `sub` claim of the access token.

    Users live in the account service; here a user id is an opaque string.
    """
    token = get_token_from_cookie(request=request)
    payload = decode_token(token)
    user_id = payload.get("sub")

    if user_id is None or not str(user_id).strip():
        raise HTTPException(status_code=401, detail="Invalid authentication credentials")

    return str(user_id)
