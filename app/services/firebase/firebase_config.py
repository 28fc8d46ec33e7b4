"""Firebase Admin SDK initialization"""

import os
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from app.utils.logger import get_logger

logger = get_logger(__name__)

_firebase_app: Optional[firebase_admin.App] = None


def _load_credentials() -> credentials.Base:
    """Service-account file if one is configured, else application default credentials.

    FIREBASE_CREDENTIALS_FILE wins; otherwise ``firebase-credentials.json`` is
    used in production and ``firebase-credentials-dev.json`` elsewhere, when present.
    """
    cred_file = os.getenv("FIREBASE_CREDENTIALS_FILE")
    if cred_file:
        if not os.path.exists(cred_file):
            raise FileNotFoundError(f"Firebase credentials file not found: {cred_file}")
        return credentials.Certificate(cred_file)

    default_file = (
        "firebase-credentials.json"
        if os.getenv("ENV", "local") == "production"
        else "firebase-credentials-dev.json"
    )
    if os.path.exists(default_file):
        return credentials.Certificate(default_file)

    logger.info("No Firebase credentials file found, using application default credentials")
    return credentials.ApplicationDefault()


def initialize_firebase() -> firebase_admin.App:
    """
    Initialize the Firebase Admin SDK once and cache the app.

    FIREBASE_PROJECT_ID, when set, pins the project used to validate ID tokens.
    """
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    options = {}
    project_id = os.getenv("FIREBASE_PROJECT_ID")
    if project_id:
        options["projectId"] = project_id

    try:
        _firebase_app = firebase_admin.initialize_app(_load_credentials(), options or None)
    except Exception as e:
        logger.error(f"Failed to initialize Firebase: {e}")
        raise

    logger.info(f"Firebase initialized (project={project_id or 'from credentials'})")
    return _firebase_app


def get_firebase_app() -> firebase_admin.App:
    """Get the Firebase app instance, initializing if necessary."""
    if _firebase_app is None:
        return initialize_firebase()
    return _firebase_app


def is_firebase_initialized() -> bool:
    return _firebase_app is not None
