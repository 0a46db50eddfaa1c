from fastapi import UploadFile
from janmitra.config import ALLOWED_IMAGE_EXTENSIONS, MAX_IMAGE_SIZE
from janmitra.exceptions import ValidationFailed
from uuid import uuid4
import os
import logging

logger = logging.getLogger(__name__)


class PhotoStorage:
    """
    File-system storage for issue photos.

    Issues only ever hold the returned reference (`/uploads/<name>`),
    the bytes stay here.
    """

    def __init__(self, directory: str, url_prefix: str = "/uploads/"):
        self.directory = directory
        self.url_prefix = url_prefix if url_prefix.endswith("/") else url_prefix + "/"
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, reference: str) -> str:
        # only the file name is trusted, never a path coming from a stored reference
        return os.path.join(self.directory, os.path.basename(reference))

    async def save(self, upload: UploadFile) -> str:
        extension = (upload.filename or "").rsplit(".", 1)[-1].lower()
        if "." not in (upload.filename or "") or extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise ValidationFailed("Only image files are allowed (jpg, jpeg, png, gif)")

        contents = await upload.read()
        if len(contents) > MAX_IMAGE_SIZE:
            raise ValidationFailed("Image is too large (max. 5MB)")

        filename = f"issue-{uuid4()}.{extension}"
        with open(self.path_for(filename), "wb") as f:
            f.write(contents)

        return f"{self.url_prefix}{filename}"

    def release(self, reference: str) -> None:
        path = self.path_for(reference)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.info(f"Photo {reference} already gone, nothing to release")
        except OSError as e:
            logger.warning(f"Could not release photo {reference}: {e}")
