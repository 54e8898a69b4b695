#!/usr/bin/env python3
"""
S3/MinIO Thesaurus Store Client

A low-level client wrapper for storing built thesaurus forests in MinIO.
Each vocabulary type is stored as one JSON object; the cache TTL travels with
the object as user metadata so readers can decide when a refresh is due.

This client is pure infrastructure - it contains no vocabulary logic.
"""

import json
import logging
from io import BytesIO
from typing import Any, Optional

from minio import Minio
from minio.error import S3Error

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# S3 error codes meaning "nothing stored yet"
MISSING_OBJECT_CODES = ("NoSuchKey", "NoSuchBucket")


async def create_bucket(client: Minio, bucket: str):
    """
    Create the thesaurus bucket if it does not exist.

    Idempotent - safe to call on every startup.

    Raises:
        S3Error: If bucket creation fails due to permissions or connectivity issues
    """
    try:
        if not client.bucket_exists(bucket):
            client.make_bucket(bucket)
            logger.info(f"Created bucket: {bucket}")
        else:
            logger.info(f"Bucket already exists: {bucket}")
    except S3Error as e:
        logger.error(f"Failed to create bucket {bucket}: {e}")
        raise


async def upload_json(
    client: Minio,
    bucket: str,
    object_name: str,
    payload: dict[str, Any],
    ttl: Optional[int] = None
) -> str:
    """
    Serialize a payload to JSON and store it, replacing any previous object.

    Args:
        client: MinIO client instance
        bucket: Target bucket name (must exist)
        object_name: Object key (e.g., "gcmd-science-keywords.json")
        payload: JSON-serializable payload
        ttl: Optional cache TTL in seconds, stored as object metadata

    Returns:
        S3 URI of the stored object (e.g., "s3://thesauri/gcmd-platforms.json")

    Raises:
        S3Error: If upload fails
    """
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    metadata = {"cache-ttl": str(ttl)} if ttl is not None else None

    try:
        client.put_object(
            bucket,
            object_name,
            BytesIO(data),
            length=len(data),
            content_type=JSON_CONTENT_TYPE,
            metadata=metadata
        )
        logger.info(f"Uploaded {object_name} to {bucket} ({len(data)} bytes)")
        return f"s3://{bucket}/{object_name}"
    except S3Error as e:
        logger.error(f"Failed to upload {object_name} to {bucket}: {e}")
        raise


def get_text_content(client: Minio, bucket: str, object_name: str) -> Optional[str]:
    """
    Get object content as a UTF-8 string.

    Returns:
        Object content, or None if the object (or bucket) does not exist

    Raises:
        S3Error: For any other storage failure

    Note:
        Properly closes and releases HTTP connection after reading.
    """
    try:
        response = client.get_object(bucket, object_name)
    except S3Error as e:
        if e.code in MISSING_OBJECT_CODES:
            logger.info(f"{object_name} not found in {bucket}")
            return None
        logger.error(f"Failed to get {object_name} from {bucket}: {e}")
        raise

    try:
        return response.read().decode("utf-8")
    finally:
        response.close()
        response.release_conn()


def get_json_content(client: Minio, bucket: str, object_name: str) -> Optional[Any]:
    """
    Get object content as parsed JSON.

    Returns:
        Parsed JSON, or None if the object is missing, empty or not valid JSON

    Raises:
        S3Error: For storage failures other than a missing object
    """
    content = get_text_content(client, bucket, object_name)
    if not content:
        return None

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        logger.warning(f"{object_name} in {bucket} is not valid JSON: {e}")
        return None
