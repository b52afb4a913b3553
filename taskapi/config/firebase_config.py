"""Firebase Admin SDK initialisation and Firestore client creation."""
import json
import logging
import os
from typing import Dict, Any

import firebase_admin
from firebase_admin import credentials
from google.cloud import firestore

logger = logging.getLogger(__name__)


def get_firebase_credentials() -> Dict[str, Any]:
    """Service account JSON from FIREBASE_CREDENTIALS_PATH, else GOOGLE_APPLICATION_CREDENTIALS"""
    for env_var in ('FIREBASE_CREDENTIALS_PATH', 'GOOGLE_APPLICATION_CREDENTIALS'):
        path = os.getenv(env_var)
        if path and os.path.isfile(path):
            with open(path, 'r') as f:
                return json.load(f)

    raise ValueError(
        "Firebase credentials not found. Point FIREBASE_CREDENTIALS_PATH (or "
        "GOOGLE_APPLICATION_CREDENTIALS) at a service account JSON file"
    )


def is_emulator_mode() -> bool:
    return bool(os.getenv("FIRESTORE_EMULATOR_HOST") or os.getenv("FIREBASE_AUTH_EMULATOR_HOST"))


def init_firebase(dev_mode: bool = False) -> bool:
    """Initialize the Firebase Admin app. Returns False when running without Firebase."""
    if dev_mode:
        logger.info("Running in DEV_MODE - Firebase disabled, using in-memory task storage")
        return False

    if firebase_admin._apps:
        return True

    if is_emulator_mode():
        project_id = os.getenv("GCLOUD_PROJECT") or os.getenv("FIREBASE_PROJECT_ID") or "demo-no-project"
        os.environ.setdefault("GCLOUD_PROJECT", project_id)
        try:
            firebase_admin.initialize_app(options={'projectId': project_id})
        except Exception as e:
            logger.error(f"Emulator initialization failed: {e}")
            return False
        logger.info(f"Firebase initialized for EMULATOR use (project {project_id})")
        return True

    try:
        cred = credentials.Certificate(get_firebase_credentials())
        firebase_admin.initialize_app(cred)
    except ValueError as e:
        logger.warning(f"{e}\nTo use emulators instead, set FIRESTORE_EMULATOR_HOST=localhost:8080 "
                       f"or run with DEV_MODE=true")
        return False
    except Exception as e:
        logger.error(f"Firebase initialization failed: {e}")
        return False

    logger.info("Firebase initialized successfully (CLOUD MODE)")
    return True


def get_async_client() -> firestore.AsyncClient:
    """
    Create a Firestore AsyncClient for the default Firebase app.

    Async clients hold gRPC channels tied to the event loop they first run
    on, so one is created per request rather than shared.
    """
    app = firebase_admin.get_app()
    project_id = app.project_id or os.getenv("GCLOUD_PROJECT")
    if is_emulator_mode():
        return firestore.AsyncClient(project=project_id)
    return firestore.AsyncClient(project=project_id, credentials=app.credential.get_credential())
