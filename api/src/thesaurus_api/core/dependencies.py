#!/usr/bin/env python3

from minio import Minio

from .env_utils import getenv_clean


def get_s3_client() -> Minio:
    """Get MinIO/S3 client for the thesaurus store"""
    endpoint = getenv_clean("MINIO_ENDPOINT", "localhost:9000")
    access_key = getenv_clean("MINIO_ACCESS_KEY", "minio")
    secret_key = getenv_clean("MINIO_SECRET_KEY", "minio123")
    secure = getenv_clean("MINIO_SECURE", "false").lower() == "true"

    # The Minio client wants host:port without a scheme
    if endpoint.startswith("http://"):
        endpoint = endpoint[len("http://"):]
        secure = False
    elif endpoint.startswith("https://"):
        endpoint = endpoint[len("https://"):]
        secure = True

    return Minio(
        endpoint,
        access_key=access_key,
        secret_key=secret_key,
        secure=secure
    )
