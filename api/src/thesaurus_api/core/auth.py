#!/usr/bin/env python3

import logging
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .env_utils import getenv_clean

logger = logging.getLogger(__name__)
security = HTTPBearer()

# Development token for admin actions - override ADMIN_TOKEN in production
DEFAULT_ADMIN_TOKEN = "devtoken"


def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Verify the bearer token for admin actions (thesaurus rebuilds, comparisons)"""
    expected_token = getenv_clean("ADMIN_TOKEN", DEFAULT_ADMIN_TOKEN)

    if expected_token == DEFAULT_ADMIN_TOKEN:
        logger.warning("⚠️  Using default ADMIN_TOKEN. Set ADMIN_TOKEN environment variable for production!")

    if not secrets.compare_digest(credentials.credentials, expected_token):
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return credentials.credentials
