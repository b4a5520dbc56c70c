# lucent_shop/services/sample_generation.py
"""
Builds the public preview of a voice pack: the first seconds of its first
audio track, re-encoded to MP3 with ffmpeg.
"""

import asyncio
import io
import json
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path

import aiofiles

from lucent_shop.core import locales
from lucent_shop.core.config import settings
from lucent_shop.core.exceptions import SampleGenerationError, ValidationError

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = {".mp3", ".wav", ".flac", ".m4a", ".aac", ".ogg", ".wma"}


def get_file_type(filename: str) -> str:
    ext = Path(filename).suffix.lower()
    if ext == ".zip":
        return "zip"
    if ext in AUDIO_EXTENSIONS:
        return "audio"
    return "unknown"


def extract_first_audio_from_zip(data: bytes, target_dir: Path) -> Path | None:
    """Writes the first audio entry of the archive into target_dir."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile:
        raise ValidationError(locales.ERROR_SAMPLE_UNSUPPORTED, error_code="SAMPLE_UNSUPPORTED")

    with archive:
        for entry in archive.infolist():
            if entry.is_dir():
                continue
            if Path(entry.filename).suffix.lower() in AUDIO_EXTENSIONS:
                # basename only; entry names may contain path segments
                output_path = target_dir / Path(entry.filename).name
                output_path.write_bytes(archive.read(entry))
                logger.info(f"Extracted '{entry.filename}' from ZIP for sample generation.")
                return output_path
    return None


async def _run(*args: str) -> bytes:
    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await process.communicate()
    if process.returncode != 0:
        logger.error(f"{args[0]} exited with {process.returncode}: {stderr.decode(errors='replace')[-2000:]}")
        raise SampleGenerationError()
    return stdout


async def get_audio_duration(path: Path) -> float:
    output = await _run(
        settings.FFPROBE_PATH, "-v", "error",
        "-show_entries", "format=duration",
        "-of", "json",
        str(path),
    )
    try:
        return float(json.loads(output)["format"]["duration"])
    except (KeyError, TypeError, ValueError):
        logger.warning(f"ffprobe returned no duration for '{path.name}'.")
        return 0.0


async def extract_audio(input_path: Path, output_path: Path, duration: float) -> None:
    await _run(
        settings.FFMPEG_PATH, "-y",
        "-ss", "0",
        "-t", f"{duration:.3f}",
        "-i", str(input_path),
        "-vn",
        "-acodec", "libmp3lame",
        "-b:a", "192k",
        str(output_path),
    )


async def generate_sample(data: bytes, filename: str) -> bytes:
    """
    Returns the MP3 sample for an uploaded voice pack (ZIP or single audio file).
    The working directory is removed whatever happens.
    """
    temp_dir = Path(tempfile.mkdtemp(prefix="sample-gen-"))
    try:
        file_type = get_file_type(filename)
        if file_type == "zip":
            audio_path = extract_first_audio_from_zip(data, temp_dir)
            if audio_path is None:
                raise ValidationError(locales.ERROR_SAMPLE_NO_AUDIO_IN_ZIP, error_code="SAMPLE_NO_AUDIO")
        elif file_type == "audio":
            audio_path = temp_dir / f"source{Path(filename).suffix.lower()}"
            async with aiofiles.open(audio_path, "wb") as out_file:
                await out_file.write(data)
        else:
            raise ValidationError(locales.ERROR_SAMPLE_UNSUPPORTED, error_code="SAMPLE_UNSUPPORTED")

        duration = await get_audio_duration(audio_path)
        limit = settings.SAMPLE_DURATION_SECONDS
        if 0 < duration < limit:
            logger.warning(f"'{filename}' is only {duration:.1f}s long; using the whole file as sample.")
        extract_duration = min(duration, limit) if duration > 0 else limit

        sample_path = temp_dir / "sample.mp3"
        await extract_audio(audio_path, sample_path, extract_duration)

        async with aiofiles.open(sample_path, "rb") as in_file:
            sample = await in_file.read()

        logger.info(f"Sample generated from '{filename}': {len(sample)} bytes, {extract_duration:.1f}s.")
        return sample
    except (ValidationError, SampleGenerationError):
        raise
    except OSError as e:
        logger.error(f"Sample generation for '{filename}' failed: {e}", exc_info=True)
        raise SampleGenerationError()
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
