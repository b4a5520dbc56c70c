# lucent_shop/core/signing.py
"""
Time-limited download links for digital assets.

A link carries a signed JWT naming the order item; the download endpoint
decodes it and redirects to the stored asset. Nothing is streamed through
the API.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from lucent_shop.core.config import settings

logger = logging.getLogger(__name__)

DOWNLOAD_TOKEN_PURPOSE = "download"
DOWNLOAD_TOKEN_AUDIENCE = "lucent-shop:download"


@dataclass
class SignedDownload:
    url: str
    expires_in: int
    expires_at: datetime


class InvalidDownloadToken(Exception):
    pass


def sign_download_url(order_item_id: int, user_id: int, expires_in: int | None = None) -> SignedDownload:
    """Builds a download URL valid for `expires_in` seconds."""
    expires_in = expires_in or settings.DOWNLOAD_LINK_EXPIRE_SECONDS
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
    payload = {
        "sub": str(order_item_id),
        "uid": user_id,
        "purpose": DOWNLOAD_TOKEN_PURPOSE,
        "aud": DOWNLOAD_TOKEN_AUDIENCE,
        "exp": expires_at,
    }
    token = jwt.encode(payload, settings.DOWNLOAD_SIGNING_KEY, algorithm=settings.ALGORITHM)
    url = f"{settings.PUBLIC_BASE_URL.rstrip('/')}/api/v1/downloads/{token}"
    return SignedDownload(url=url, expires_in=expires_in, expires_at=expires_at)


def verify_download_token(token: str) -> int:
    """Returns the order item id carried by a valid, unexpired token."""
    try:
        payload = jwt.decode(
            token, settings.DOWNLOAD_SIGNING_KEY, algorithms=[settings.ALGORITHM], audience=DOWNLOAD_TOKEN_AUDIENCE
        )
    except ExpiredSignatureError:
        logger.info("Expired download token presented.")
        raise InvalidDownloadToken("expired")
    except JWTError as e:
        logger.warning(f"Invalid download token presented: {e}")
        raise InvalidDownloadToken("invalid")

    if payload.get("purpose") != DOWNLOAD_TOKEN_PURPOSE or payload.get("sub") is None:
        raise InvalidDownloadToken("wrong purpose")
    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidDownloadToken("malformed subject")
