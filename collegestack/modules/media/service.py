import logging
import mimetypes
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException
from starlette.responses import FileResponse, StreamingResponse

from collegestack.core.storage import R2Storage

logger = logging.getLogger(__name__)


class MediaService:
    def __init__(self, r2_storage: R2Storage):
        self.r2_storage = r2_storage

    def _local_path(self, key: str) -> Path:
        root = self.r2_storage.local_root().resolve()
        file_path = (root / key).resolve()
        # Keys must stay inside the upload directory
        if root not in file_path.parents:
            raise HTTPException(status_code=404, detail="File not found")
        return file_path

    def get_media(self, key: str):
        """Stream an object from R2, or serve it from local storage"""
        if self.r2_storage.client:
            try:
                logger.info(f"Retrieving file {key} from R2")
                obj = self.r2_storage.client.get_object(Bucket=self.r2_storage.bucket, Key=key)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in ("NoSuchKey", "404"):
                    raise HTTPException(status_code=404, detail="File not found")
                logger.error(f"Failed to retrieve file {key} from R2: {e}")
                raise HTTPException(status_code=502, detail="Failed to retrieve media file")
            except BotoCoreError as e:
                logger.error(f"Failed to retrieve file {key} from R2: {e}")
                raise HTTPException(status_code=502, detail="Failed to retrieve media file")

            return StreamingResponse(
                obj["Body"].iter_chunks(),
                media_type=obj.get("ContentType") or "application/octet-stream",
                headers={"Cache-Control": "public, max-age=86400"},
            )

        file_path = self._local_path(key)
        if not file_path.is_file():
            logger.error(f"File {key} not found in local storage")
            raise HTTPException(status_code=404, detail="File not found")

        content_type = mimetypes.guess_type(file_path.name)[0] or "application/octet-stream"
        return FileResponse(
            file_path,
            media_type=content_type,
            headers={
                "Cache-Control": "public, max-age=86400",
                "Content-Disposition": f"inline; filename={file_path.name}",
            },
        )
