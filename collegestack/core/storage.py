import os
import uuid
import boto3
import logging
from pathlib import Path
from typing import Dict, Optional

from botocore.exceptions import BotoCoreError, ClientError

from .config import settings
from .errors import CollegeStackError, ErrorKind

logger = logging.getLogger(__name__)


class R2Storage:
    """Handles attachment storage using Cloudflare R2, with a local directory fallback"""

    def __init__(self):
        """Initialize the R2 client with settings from config"""
        self.client = None
        self.bucket = settings.R2_BUCKET_NAME
        self.public_url = settings.R2_PUBLIC_URL

        logger.info("Initializing R2Storage with configuration:")
        logger.info(f"  Bucket: {self.bucket}")
        logger.info(f"  Public URL: {self.public_url or 'Not set'}")
        logger.info(f"  Endpoint: {settings.R2_ENDPOINT or 'Not set'}")

        if all([settings.R2_ENDPOINT, settings.R2_ACCESS_KEY_ID, settings.R2_SECRET_ACCESS_KEY]):
            try:
                self.client = boto3.client(
                    's3',
                    endpoint_url=settings.R2_ENDPOINT,
                    aws_access_key_id=settings.R2_ACCESS_KEY_ID,
                    aws_secret_access_key=settings.R2_SECRET_ACCESS_KEY
                )
                logger.info("R2Storage S3 client initialized successfully")
            except (BotoCoreError, ClientError, ValueError) as e:
                logger.error(f"Failed to create S3 client: {str(e)}")
                logger.warning("R2 storage will not be available, using local storage")
        else:
            missing = []
            if not settings.R2_ENDPOINT:
                missing.append("R2_ENDPOINT")
            if not settings.R2_ACCESS_KEY_ID:
                missing.append("R2_ACCESS_KEY_ID")
            if not settings.R2_SECRET_ACCESS_KEY:
                missing.append("R2_SECRET_ACCESS_KEY")
            logger.warning(f"R2 storage not configured - missing: {', '.join(missing)}; using local storage")

    @staticmethod
    def local_root() -> Path:
        return Path(settings.UPLOAD_DIRECTORY)

    def public_url_for(self, key: str) -> str:
        if self.client and self.public_url:
            return f"{self.public_url}/{key}"
        # Served back through the media proxy route
        return f"{settings.BASE_URL}{settings.API_V1_STR}/media/{key}"

    def generate_key(self, filename: str, prefix: str) -> str:
        file_extension = os.path.splitext(filename or "")[1].lower()
        return f"{prefix}/{uuid.uuid4().hex}{file_extension}"

    def upload_bytes(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str] = None,
        prefix: str = "post_attachments",
    ) -> Dict[str, str]:
        """Store an object under a generated unique key; returns {"key", "url"}"""
        key = self.generate_key(filename, prefix)

        if not self.client:
            local_path = self.local_root() / key
            try:
                local_path.parent.mkdir(parents=True, exist_ok=True)
                with open(local_path, "wb") as out_file:
                    out_file.write(content)
            except OSError as e:
                logger.error(f"[UPLOAD] Failed to save file locally: {str(e)}")
                raise CollegeStackError(ErrorKind.STORAGE_FAILURE, f"Failed to save file: {str(e)}")
            logger.info(f"[UPLOAD] Saved '{filename}' locally at {local_path}")
            return {"key": key, "url": self.public_url_for(key)}

        logger.info(f"[UPLOAD] Uploading '{filename}' to R2 bucket '{self.bucket}' with key '{key}'")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type or 'application/octet-stream'
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"[UPLOAD] Failed to upload to R2: {str(e)}")
            raise CollegeStackError(ErrorKind.STORAGE_FAILURE, f"Failed to upload file: {str(e)}")
        logger.info("[UPLOAD] Successfully uploaded file to R2")
        return {"key": key, "url": self.public_url_for(key)}

    def delete_object(self, key: str) -> None:
        """Delete an object by key. Missing objects are not an error."""
        if not key:
            raise CollegeStackError(ErrorKind.VALIDATION, "No key provided for file deletion")

        if not self.client:
            local_path = self.local_root() / key
            try:
                if local_path.exists():
                    os.remove(local_path)
                    logger.info(f"Deleted local file {local_path}")
            except OSError as e:
                raise CollegeStackError(ErrorKind.STORAGE_FAILURE, f"Failed to delete file: {str(e)}")
            return

        try:
            logger.info(f"Deleting file with key '{key}' from bucket '{self.bucket}'")
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete from R2: {str(e)}")
            raise CollegeStackError(ErrorKind.STORAGE_FAILURE, f"Failed to delete file: {str(e)}")


# Global instance for app-wide usage
r2_storage = R2Storage()
