"""
Upload Service

Validates uploaded images and stores them under UPLOAD_DIR. Files are
validated in full before anything touches the disk, and callers that fail
after storing get a `discard` to remove what was written.
"""

import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from fastapi import UploadFile
from loguru import logger

from models.config import settings
from models.exceptions import InvalidImageException, ValidationException

# Detected MIME type -> stored file extension
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass
class ValidatedImage:
    content: bytes
    extension: str
    filename: str


def _format_size(size: int) -> str:
    return f"{size // (1024 * 1024)}MB"


class UploadService:
    """Image validation and storage on the local filesystem."""

    @staticmethod
    def present_files(files: Optional[Sequence[UploadFile]]) -> List[UploadFile]:
        """Drop empty multipart parts browsers send for untouched file inputs."""
        return [f for f in files or [] if f is not None and f.filename]

    @staticmethod
    def validate_image(file: UploadFile, max_size: int) -> ValidatedImage:
        """
        Check one uploaded file is an acceptable image.

        The type is detected from the bytes with python-magic; the client's
        Content-Type header is not trusted.

        Args:
            file: Uploaded file
            max_size: Size ceiling in bytes

        Returns:
            The file content with its canonical extension

        Raises:
            InvalidImageException: If the file is empty, too large or not an
                allowed image type
        """
        import magic

        content = file.file.read()
        file.file.seek(0)

        name = file.filename or "upload"
        if not content:
            raise InvalidImageException(f"File '{name}' is empty")
        if len(content) > max_size:
            raise InvalidImageException(
                f"File '{name}' exceeds the {_format_size(max_size)} limit"
            )

        detected_type = magic.from_buffer(content, mime=True)
        if detected_type not in ALLOWED_IMAGE_TYPES:
            raise InvalidImageException(
                f"Invalid file type '{detected_type}' for '{name}'. "
                f"Allowed: {', '.join(ALLOWED_IMAGE_TYPES.keys())}"
            )

        return ValidatedImage(
            content=content,
            extension=ALLOWED_IMAGE_TYPES[detected_type],
            filename=name,
        )

    @staticmethod
    def validate_images(
        files: Sequence[UploadFile], max_size: Optional[int] = None
    ) -> List[ValidatedImage]:
        """
        Validate a batch of images before any of them is stored.

        Raises:
            ValidationException: If there are too many files
            InvalidImageException: If any single file is rejected
        """
        if len(files) > settings.MAX_IMAGES_PER_REQUEST:
            raise ValidationException(
                f"At most {settings.MAX_IMAGES_PER_REQUEST} images can be uploaded at once"
            )
        limit = max_size if max_size is not None else settings.MAX_IMAGE_SIZE
        return [UploadService.validate_image(f, limit) for f in files]

    @staticmethod
    def store(image: ValidatedImage, subdirectory: str = "") -> str:
        """
        Write an image under an unpredictable name.

        Args:
            image: A validated image
            subdirectory: Optional folder below UPLOAD_DIR (e.g. "avatars")

        Returns:
            Public URL of the stored file
        """
        directory = Path(settings.UPLOAD_DIR)
        if subdirectory:
            directory = directory / subdirectory
        directory.mkdir(parents=True, exist_ok=True)

        name = f"{secrets.token_hex(16)}{image.extension}"
        (directory / name).write_bytes(image.content)

        prefix = settings.UPLOAD_URL_PREFIX.rstrip("/")
        if subdirectory:
            return f"{prefix}/{subdirectory}/{name}"
        return f"{prefix}/{name}"

    @staticmethod
    def store_all(images: Sequence[ValidatedImage], subdirectory: str = "") -> List[str]:
        """Store several images; on a write error the ones already written are removed."""
        urls: List[str] = []
        try:
            for image in images:
                urls.append(UploadService.store(image, subdirectory))
        except OSError:
            UploadService.discard(urls)
            raise
        return urls

    @staticmethod
    def path_for_url(url: str) -> Optional[Path]:
        """Map a public upload URL back to its file, or None if it is not ours."""
        prefix = settings.UPLOAD_URL_PREFIX.rstrip("/") + "/"
        if not url.startswith(prefix):
            return None
        relative = url[len(prefix) :]
        root = Path(settings.UPLOAD_DIR).resolve()
        path = (root / relative).resolve()
        if root not in path.parents:
            return None
        return path

    @staticmethod
    def discard(urls: Sequence[str]) -> None:
        """
        Remove stored files. Failures are logged, never raised.

        Args:
            urls: Public URLs previously returned by `store`
        """
        for url in urls:
            path = UploadService.path_for_url(url)
            if path is None:
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove upload {url}: {e}")
