# lucent_shop/services/storage.py

import logging
import uuid
from pathlib import Path

import aiofiles

from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import ApiError

logger = logging.getLogger(__name__)

SAMPLES_DIR = "samples"


async def save_sample(product_id: int, data: bytes) -> str:
    """
    Stores a generated MP3 sample under MEDIA_ROOT and returns its public URL.
    """
    target_dir = Path(settings.MEDIA_ROOT) / SAMPLES_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    filename = f"{product_id}-{uuid.uuid4().hex}.mp3"
    file_path = target_dir / filename

    try:
        async with aiofiles.open(file_path, 'wb') as out_file:
            await out_file.write(data)
    except OSError:
        logger.error(f"Failed to store sample for product {product_id} at '{file_path}'.", exc_info=True)
        raise ApiError()

    logger.info(f"Stored sample for product {product_id} at '{file_path}'.")
    return f"{settings.MEDIA_URL.rstrip('/')}/{SAMPLES_DIR}/{filename}"
