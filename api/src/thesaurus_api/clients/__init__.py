"""
Client Layer

Low-level client wrappers for external services. Clients handle communication
with external systems but contain no vocabulary logic.

Modules:
- s3_client: MinIO/S3 thesaurus store
"""

from .s3_client import create_bucket, get_json_content, get_text_content, upload_json

__all__ = [
    'create_bucket',
    'upload_json',
    'get_text_content',
    'get_json_content',
]
