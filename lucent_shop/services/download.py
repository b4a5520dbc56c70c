# lucent_shop/services/download.py

import logging
import re
from datetime import datetime, timezone

from fastapi import status
from sqlalchemy.orm import Session

from lucent_shop.core import locales
from lucent_shop.core.exceptions import DownloadNotAvailable
from lucent_shop.core.signing import InvalidDownloadToken, sign_download_url, verify_download_token
from lucent_shop.crud import order as crud_order
from lucent_shop.models.order import OrderStatus
from lucent_shop.models.product import ProductType
from lucent_shop.models.user import User
from lucent_shop.schemas.order import DownloadLink
from lucent_shop.services import event_log

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9가-힣 ]")


def download_filename(product_name: str) -> str:
    return f"{_UNSAFE_FILENAME_CHARS.sub('_', product_name)}.zip"


def request_download(
    db: Session,
    order_id: int,
    item_id: int,
    user: User,
    ip_address: str | None = None,
) -> DownloadLink:
    """
    Issues a short-lived link to a purchased voice pack.

    The item has to belong to the order, the order to the user, the item has
    to be a fulfilled voice pack and the product must have a file attached.
    """
    item = crud_order.get_order_item_in_order(db, order_id=order_id, item_id=item_id)
    if not item:
        raise DownloadNotAvailable(
            locales.ERROR_ORDER_ITEM_NOT_FOUND,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="ORDER_ITEM_NOT_FOUND",
        )

    if item.order.user_id != user.id:
        logger.warning(f"User {user.id} tried to download item {item_id} of order {order_id} owned by user {item.order.user_id}.")
        event_log.log_unauthorized_download(item.product_id, user.id, ip_address=ip_address)
        raise DownloadNotAvailable(locales.ERROR_DOWNLOAD_FORBIDDEN, error_code="DOWNLOAD_FORBIDDEN")

    if item.product_type != ProductType.VOICE_PACK:
        raise DownloadNotAvailable(
            locales.ERROR_DOWNLOAD_NOT_DIGITAL,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="NOT_DIGITAL_PRODUCT",
        )

    if item.item_status != OrderStatus.DONE:
        raise DownloadNotAvailable(locales.ERROR_DOWNLOAD_NOT_COMPLETED, error_code="DOWNLOAD_NOT_READY")

    file_url = item.product.digital_file_url if item.product else None
    if not file_url:
        raise DownloadNotAvailable(
            locales.ERROR_DOWNLOAD_NO_FILE,
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="DIGITAL_FILE_MISSING",
        )

    signed = sign_download_url(item.id, user.id)

    crud_order.record_download(db, item.id, datetime.now(timezone.utc))
    db.commit()
    db.refresh(item)

    logger.info(f"Download link issued for item {item.id} (order {order_id}) to user {user.id}; count {item.download_count}.")
    event_log.log_download(
        item.product_id, order_id, user.id,
        metadata={
            "order_item_id": item.id,
            "product_name": item.product_name,
            "download_count": item.download_count,
        },
        ip_address=ip_address,
    )

    return DownloadLink(
        download_url=signed.url,
        expires_in=signed.expires_in,
        expires_at=signed.expires_at,
        filename=download_filename(item.product_name),
    )


def resolve_download_token(db: Session, token: str) -> str:
    """Maps a signed token back to the stored asset URL."""
    try:
        item_id = verify_download_token(token)
    except InvalidDownloadToken:
        raise DownloadNotAvailable(locales.ERROR_DOWNLOAD_LINK_INVALID, error_code="DOWNLOAD_LINK_INVALID")

    item = crud_order.get_order_item(db, item_id)
    if (
        not item
        or item.product_type != ProductType.VOICE_PACK
        or item.item_status != OrderStatus.DONE
        or not item.product
        or not item.product.digital_file_url
    ):
        raise DownloadNotAvailable(locales.ERROR_DOWNLOAD_LINK_INVALID, error_code="DOWNLOAD_LINK_INVALID")

    return item.product.digital_file_url
