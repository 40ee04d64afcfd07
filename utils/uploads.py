import logging
import shutil
import time
from pathlib import Path
from typing import Optional, Union

from fastapi import Request
from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

class PhotoStore:
    """
    Faculty photos on local disk.

    Files are named <epoch millis><original extension> and published as
    <url_prefix>/<name>; that public path is what gets stored on the record.
    Nothing about the content is checked: any type and any size is accepted.
    """

    def __init__(self, directory: str, url_prefix: str):
        self.directory = Path(directory).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")
        self.directory.mkdir(parents=True, exist_ok=True)

    def save(self, upload: Union[UploadFile, str, None]) -> Optional[str]:
        """Write the upload to disk and return its public path, or None if nothing was sent.

        A plain text value in the photo field (some forms send "" or "null"
        when no file is picked) counts as nothing sent.
        """
        if not isinstance(upload, UploadFile) or not upload.filename:
            return None

        # same-millisecond uploads with the same extension overwrite each other
        filename = f"{int(time.time() * 1000)}{Path(upload.filename).suffix}"
        target = self.directory / filename
        with target.open("wb") as out:
            shutil.copyfileobj(upload.file, out)

        logger.info("Stored photo %s (%s)", filename, upload.filename)
        return f"{self.url_prefix}/{filename}"

    def path_for(self, photo: Optional[str]) -> Optional[Path]:
        if not photo or not photo.startswith(self.url_prefix + "/"):
            return None
        name = Path(photo).name
        if not name:
            return None
        return self.directory / name

    def discard(self, photo: Optional[str]) -> bool:
        """Best-effort delete of a stored photo. Returns True if a file was removed."""
        path = self.path_for(photo)
        if path is None:
            return False
        try:
            if path.exists():
                path.unlink()
                logger.info("Removed photo %s", path.name)
                return True
        except OSError as e:
            logger.warning("Failed to remove photo %s: %s", path, e)
        return False


def get_photo_store(request: Request) -> PhotoStore:
    return request.app.state.photo_store
