#!/usr/bin/env python3

import json
import os
from unittest.mock import Mock, patch

import pytest
from fastapi.testclient import TestClient
from minio import Minio

from tests.fixtures.rdf_fixtures import rdf_document, science_keywords_document
from thesaurus_api.core.dependencies import get_s3_client
from thesaurus_api.main import app

AUTH = {"Authorization": "Bearer devtoken"}

STORED_PAYLOAD = {
    "lastUpdated": "2025-01-10T12:00:00+00:00",
    "data": [{
        "id": "https://gcmd.earthdata.nasa.gov/kms/concept/a",
        "text": "EARTH SCIENCE",
        "language": "en",
        "scheme": "NASA/GCMD Earth Science Keywords",
        "schemeURI": "https://gcmd.earthdata.nasa.gov/kms/concepts/concept_scheme/sciencekeywords",
        "description": "",
        "children": [],
    }],
}


def _stored(payload):
    response = Mock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    return response


@pytest.fixture
def mock_s3():
    return Mock(spec=Minio)


@pytest.fixture
def client(mock_s3):
    app.dependency_overrides[get_s3_client] = lambda: mock_s3
    with patch.dict(os.environ, {"ADMIN_TOKEN": "devtoken"}):
        yield TestClient(app)
    app.dependency_overrides.clear()


class TestGetThesaurus:
    """Test suite for reading stored thesauri."""

    def test_returns_stored_forest(self, client, mock_s3):
        mock_s3.get_object.return_value = _stored(STORED_PAYLOAD)

        response = client.get("/api/thesauri/science_keywords")

        assert response.status_code == 200
        assert response.json() == STORED_PAYLOAD

    def test_not_built_yet(self, client, mock_s3):
        mock_s3.get_object.return_value = _stored("")

        response = client.get("/api/thesauri/platforms")

        assert response.status_code == 404
        assert "has not been built" in response.json()["detail"]

    def test_unknown_type(self, client):
        response = client.get("/api/thesauri/projects")

        assert response.status_code == 404
        assert "Invalid thesaurus type" in response.json()["detail"]

    def test_status(self, client, mock_s3):
        mock_s3.get_object.return_value = _stored(STORED_PAYLOAD)

        response = client.get("/api/thesauri/science_keywords/status")

        assert response.status_code == 200
        assert response.json() == {
            "exists": True,
            "conceptCount": 1,
            "lastUpdated": "2025-01-10T12:00:00+00:00",
        }


class TestCompareThesaurus:
    """Test suite for comparing with the KMS concept count."""

    def test_update_available(self, client, mock_s3):
        mock_s3.get_object.return_value = _stored(STORED_PAYLOAD)

        response = client.post(
            "/api/thesauri/science_keywords/compare", data={"remote_hits": "2"}, headers=AUTH
        )

        assert response.status_code == 200
        assert response.json()["updateAvailable"] is True
        assert response.json()["localCount"] == 1

    def test_negative_count_rejected(self, client):
        response = client.post(
            "/api/thesauri/science_keywords/compare", data={"remote_hits": "-1"}, headers=AUTH
        )

        assert response.status_code == 400

    def test_requires_token(self, client):
        response = client.post(
            "/api/thesauri/science_keywords/compare",
            data={"remote_hits": "2"},
            headers={"Authorization": "Bearer wrong"},
        )

        assert response.status_code == 401


class TestRebuildThesaurus:
    """Test suite for rebuilding from uploaded RDF pages."""

    def test_rebuild(self, client, mock_s3):
        files = [("files", ("page1.rdf", science_keywords_document().encode("utf-8"), "application/rdf+xml"))]

        response = client.post("/api/thesauri/science_keywords/rebuild", files=files, headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["thesaurusType"] == "science_keywords"
        assert body["conceptCount"] == 3
        assert body["objectName"] == "gcmd-science-keywords.json"
        mock_s3.put_object.assert_called_once()

    def test_multiple_pages(self, client, mock_s3):
        files = [
            ("files", ("page1.rdf", science_keywords_document().encode("utf-8"), "application/rdf+xml")),
            ("files", ("page2.rdf", rdf_document(hits=3).encode("utf-8"), "application/rdf+xml")),
        ]

        response = client.post("/api/thesauri/science_keywords/rebuild", files=files, headers=AUTH)

        assert response.status_code == 200
        assert response.json()["conceptCount"] == 3

    def test_malformed_page(self, client, mock_s3):
        files = [("files", ("page1.rdf", b"<rdf:RDF", "application/rdf+xml"))]

        response = client.post("/api/thesauri/platforms/rebuild", files=files, headers=AUTH)

        assert response.status_code == 400
        mock_s3.put_object.assert_not_called()

    def test_unknown_type(self, client):
        files = [("files", ("page1.rdf", science_keywords_document().encode("utf-8"), "application/rdf+xml"))]

        response = client.post("/api/thesauri/projects/rebuild", files=files, headers=AUTH)

        assert response.status_code == 404

    def test_requires_token(self, client, mock_s3):
        files = [("files", ("page1.rdf", science_keywords_document().encode("utf-8"), "application/rdf+xml"))]

        response = client.post("/api/thesauri/platforms/rebuild", files=files)

        assert response.status_code in (401, 403)
        mock_s3.put_object.assert_not_called()


class TestHealth:
    """Test suite for probes."""

    def test_healthz(self, client):
        response = client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["vocabularies"] == ["science_keywords", "platforms", "instruments"]
        assert "X-API-Version" in response.headers
