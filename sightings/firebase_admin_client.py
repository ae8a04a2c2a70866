"""
Firebase Admin access for push delivery and ID token checks.

The app is created lazily from FIREBASE_SERVICE_ACCOUNT_FILE. Test runs never
initialise a real app unless FIREBASE_ALLOW_TEST_APP is set or
`firebase_admin.initialize_app` has been patched with a mock.
"""

import logging
import os
import sys
import firebase_admin
from firebase_admin import credentials, messaging

logger = logging.getLogger(__name__)

# FCM caps a multicast message at 500 registration tokens.
MULTICAST_BATCH_SIZE = 500

_app = None


def _is_mock(obj) -> bool:
    try:
        return type(obj).__module__.startswith("unittest.mock")
    except Exception:
        return False


def _flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def _is_running_tests() -> bool:
    """True under `manage.py test` or pytest."""
    return "test" in sys.argv or "pytest" in sys.argv or "pytest" in sys.modules


def _quiet() -> bool:
    # Missing credentials are expected in test runs; keep the output clean.
    return _is_running_tests() and not _flag("FIREBASE_VERBOSE_TEST_LOGS")


def _init_blocked() -> bool:
    if not _is_running_tests() or _flag("FIREBASE_ALLOW_TEST_APP"):
        return False
    return not _is_mock(firebase_admin.initialize_app)


def _credential_from_env():
    path = os.getenv("FIREBASE_SERVICE_ACCOUNT_FILE")
    if path and os.path.exists(path):
        return credentials.Certificate(path)
    if not _quiet():
        logger.warning("FIREBASE_SERVICE_ACCOUNT_FILE not found. Push delivery disabled.")
    return None


def get_app():
    """Return the Firebase app, creating it on first use; None when unavailable."""
    global _app
    if _app is not None:
        return _app
    if firebase_admin._apps:
        _app = firebase_admin.get_app()
        return _app
    if _init_blocked():
        return None

    try:
        cred = _credential_from_env()
        if cred is None:
            return None
        _app = firebase_admin.initialize_app(cred)
    except Exception as e:
        if not _quiet():
            logger.error("Firebase initialisation failed: %s", e)
        return None
    return _app


def is_configured():
    """True when pushes can actually be delivered."""
    return get_app() is not None


def _stringify(data):
    # FCM data payloads only accept string values.
    return {str(key): "" if value is None else str(value) for key, value in (data or {}).items()}


def _send_batch(tokens, title, body, data):
    message = messaging.MulticastMessage(
        tokens=tokens,
        notification=messaging.Notification(title=title, body=body),
        data=_stringify(data),
    )
    batch = messaging.send_each_for_multicast(message, app=get_app())
    results = []
    for token, response in zip(tokens, batch.responses):
        if response.success:
            results.append({"token": token, "success": True, "message_id": response.message_id})
            continue
        error = response.exception
        results.append({
            "token": token,
            "success": False,
            "error": str(error),
            "unregistered": isinstance(error, messaging.UnregisteredError),
        })
    return results


def send_to_devices(tokens, title, body, data=None):
    """
    Send one notification to many FCM registration tokens.

    Returns one result dict per token. A failed batch (network, auth) marks
    every token in it as failed instead of raising.
    """
    results = []
    tokens = list(tokens)
    for start in range(0, len(tokens), MULTICAST_BATCH_SIZE):
        batch_tokens = tokens[start:start + MULTICAST_BATCH_SIZE]
        try:
            results.extend(_send_batch(batch_tokens, title, body, data))
        except Exception as e:
            if not _quiet():
                logger.error("FCM multicast failed: %s", e)
            results.extend(
                {"token": token, "success": False, "error": str(e), "unregistered": False}
                for token in batch_tokens
            )
    return results
