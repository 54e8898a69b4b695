#!/usr/bin/env python3

import os
import uuid
from datetime import datetime, timezone

import pytest
from minio import Minio

from tests.fixtures.rdf_fixtures import science_keywords_document
from thesaurus_api.clients.s3_client import create_bucket
from thesaurus_api.core.config import VocabularyConfig
from thesaurus_api.services.thesaurus_service import ThesaurusService


@pytest.mark.integration
class TestThesaurusStoreIntegration:
    """Integration tests for storing thesauri in a running MinIO"""

    @pytest.fixture
    def minio_client(self):
        """MinIO client connected to service (GitHub Actions or local)"""
        endpoint = os.getenv("MINIO_ENDPOINT", "localhost:9000")
        access_key = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
        secret_key = os.getenv("MINIO_SECRET_KEY", "minioadmin")
        secure = os.getenv("MINIO_SECURE", "false").lower() == "true"

        client = Minio(endpoint, access_key=access_key, secret_key=secret_key, secure=secure)
        try:
            client.list_buckets()
        except Exception as e:
            pytest.skip(f"MinIO not reachable at {endpoint}: {e}")
        return client

    @pytest.fixture
    def config(self, minio_client):
        """Config pointing at a throwaway bucket, removed after the test"""
        config = VocabularyConfig()
        config.BUCKET = f"thesauri-it-{uuid.uuid4().hex[:8]}"
        yield config

        for obj in minio_client.list_objects(config.BUCKET):
            minio_client.remove_object(config.BUCKET, obj.object_name)
        minio_client.remove_bucket(config.BUCKET)

    @pytest.mark.asyncio
    async def test_rebuild_then_read(self, minio_client, config):
        """A rebuilt thesaurus can be read back with its status"""
        await create_bucket(minio_client, config.BUCKET)
        service = ThesaurusService(minio_client, config)

        assert service.get_status("science_keywords")["exists"] is False

        built_at = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)
        await service.rebuild("science_keywords", [science_keywords_document()], clock=lambda: built_at)

        payload = service.get_thesaurus("science_keywords")
        assert payload["lastUpdated"] == built_at.isoformat()
        assert payload["data"][0]["text"] == "EARTH SCIENCE"

        stat = minio_client.stat_object(config.BUCKET, "gcmd-science-keywords.json")
        assert stat.content_type == "application/json"

        assert service.get_status("science_keywords") == {
            "exists": True,
            "conceptCount": 3,
            "lastUpdated": built_at.isoformat(),
        }
