"""
Firebase Authentication Module

Verifies Firebase ID tokens with the Firebase Admin SDK. Every API entry
point resolves the caller through ``verify_firebase_token``; a missing or
invalid token is rejected with 401 before any core operation runs.
"""

from fastapi import Header, HTTPException, status
from firebase_admin import auth, credentials
import firebase_admin
import os
from typing import Dict, Any

from app.core.config import FIREBASE_SERVICE_ACCOUNT_PATH
from app.core.logging import get_logger

logger = get_logger(__name__)


def initialize_firebase():
    """
    Initialize Firebase Admin SDK

    Called once on application startup. Uses the service account file when
    FIREBASE_SERVICE_ACCOUNT_PATH points at one, default credentials otherwise.
    """
    if firebase_admin._apps:
        return

    if FIREBASE_SERVICE_ACCOUNT_PATH and os.path.exists(FIREBASE_SERVICE_ACCOUNT_PATH):
        cred = credentials.Certificate(FIREBASE_SERVICE_ACCOUNT_PATH)
        firebase_admin.initialize_app(cred)
        logger.info("Firebase Admin initialized", credentials="service_account")
    else:
        try:
            firebase_admin.initialize_app()
            logger.info("Firebase Admin initialized", credentials="default")
        except ValueError as e:
            logger.warning("Firebase Admin initialization failed", error=str(e))


def verify_firebase_token(
    authorization: str = Header(None)
) -> Dict[str, Any]:
    """
    Verify the Firebase ID token from the Authorization header.

    Returns:
        uid, email, name and picture of the caller

    Raises:
        HTTPException: 401 if the header is missing, malformed, or the token
        is invalid, expired or revoked
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: 'Bearer <token>'"
        )

    token = authorization.split(" ", 1)[1]

    try:
        decoded_token = auth.verify_id_token(token)
    except auth.ExpiredIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Firebase token has expired. Please sign in again."
        )
    except auth.RevokedIdTokenError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Firebase token has been revoked. Please sign in again."
        )
    except auth.InvalidIdTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid Firebase token: {str(e)}"
        )
    except (ValueError, auth.CertificateFetchError) as e:
        logger.error("Firebase token verification failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed. Please sign in again."
        )

    return {
        "uid": decoded_token["uid"],
        "email": decoded_token.get("email"),
        "name": decoded_token.get("name"),
        "picture": decoded_token.get("picture"),
    }
