"""
Document storage for uploaded quiz source files
"""
import aiofiles
import aiofiles.os
import logging
import os
import uuid
from typing import Optional
from urllib.parse import quote, unquote

from app.config import settings
from app.exceptions import DependencyFailure

logger = logging.getLogger(__name__)


class DocumentStorage:
    """
    Local-directory document store

    Files are written under storage_dir as "<uuid>-<filename>" and exposed as
    "<base_url>/<blob name>". The blob name is recovered from the URL on delete.
    """

    def __init__(self, storage_dir: Optional[str] = None, base_url: Optional[str] = None):
        self.storage_dir = storage_dir or settings.DOCUMENT_STORAGE_DIR
        self.base_url = (base_url or settings.DOCUMENT_BASE_URL).rstrip("/")

    def _blob_name(self, url: str) -> str:
        return os.path.basename(unquote(url.split("/")[-1]))

    def path_for(self, url: str) -> str:
        return os.path.join(self.storage_dir, self._blob_name(url))

    async def upload(self, filename: str, content: bytes) -> str:
        """
        Store a file and return its reference URL

        Raises:
            DependencyFailure: the file could not be written
        """
        blob_name = f"{uuid.uuid4()}-{os.path.basename(filename)}"
        path = os.path.join(self.storage_dir, blob_name)

        try:
            await aiofiles.os.makedirs(self.storage_dir, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error(f"Error uploading {filename} to document storage: {str(e)}")
            raise DependencyFailure(f"File upload failed: {filename}") from e

        logger.info(f"File uploaded: {blob_name}")
        return f"{self.base_url}/{quote(blob_name)}"

    async def delete(self, url: str) -> bool:
        """Delete a stored file by its URL; failures are logged, not raised"""
        path = self.path_for(url)
        try:
            await aiofiles.os.remove(path)
            logger.info(f"Document deleted: {os.path.basename(path)}")
            return True
        except OSError as e:
            logger.error(f"Failed to delete document {url}: {str(e)}")
            return False


# Global instance
document_storage = DocumentStorage()
