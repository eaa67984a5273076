import logging

from pydantic import ValidationError

from booker.exceptions.custom import AuthFailure
from booker.schemas.auth import TokenCreds, TokenResponse
from booker.services.booker import BookerService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, booker: BookerService):
        self._booker = booker

    async def acquire_token(self, creds: TokenCreds) -> str:
        """Request a fresh session token. Never cached."""
        resp = await self._booker.create_token(creds)

        if resp.status_code != 200:
            logger.warning("Token request rejected (status=%d)", resp.status_code)
            raise AuthFailure(resp.text, status_code=resp.status_code)

        try:
            data = TokenResponse(**resp.json())
        except (ValueError, TypeError, ValidationError) as exc:
            raise AuthFailure(
                f"Unreadable token response: {resp.text[:200]}", status_code=200
            ) from exc

        if not data.token:
            logger.warning("Token response carried no token: %s", data.reason)
            raise AuthFailure(data.reason or "token missing from response", status_code=200)

        logger.info("Acquired session token for %s", creds.username)
        return data.token
