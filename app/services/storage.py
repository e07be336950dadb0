import uuid
from typing import Optional, Dict

import boto3

from app.core.config import ENDPOINT, ACCESS_KEY, SECRET_KEY, BUCKET, REGION


class BlobStore:
    """
    S3-compatible blob store for profile photos and uploaded files.

    Clients upload directly with a presigned PUT URL and keep the returned
    storage id; reads go through short-lived presigned GET URLs.
    """

    def __init__(self, client=None, bucket: str = BUCKET):
        if client is None:
            session = boto3.session.Session()
            client = session.client(
                "s3",
                region_name=REGION,
                endpoint_url=ENDPOINT,
                aws_access_key_id=ACCESS_KEY,
                aws_secret_access_key=SECRET_KEY,
            )
        self.client = client
        self.bucket = bucket

    def generate_upload_url(
        self,
        prefix: str = "uploads",
        expires_in: int = 300
    ) -> Dict[str, str]:
        """
        One-time upload target for direct browser upload.

        Returns:
            storage_id: key the client sends back once the PUT succeeds
            upload_url: signed PUT URL
        """
        key = f"{prefix}/{uuid.uuid4()}"
        url = self.client.generate_presigned_url(
            ClientMethod="put_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
            },
            ExpiresIn=expires_in,
        )
        return {"storage_id": key, "upload_url": url}

    def get_url(self, key: Optional[str], expires_in: int = 3600) -> Optional[str]:
        """Signed GET URL for a stored blob, None when there is no key"""
        if not key:
            return None
        return self.client.generate_presigned_url(
            ClientMethod="get_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
            },
            ExpiresIn=expires_in,
        )

    def resolve_photos(self, keys) -> list:
        return [{"id": key, "url": self.get_url(key)} for key in keys or []]

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)
