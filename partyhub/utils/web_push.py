"""Web push delivery with VAPID signing."""

import json
import logging
from pathlib import Path
from typing import Optional

import http_ece
import requests
from pywebpush import WebPushException, webpush

from partyhub.config import settings

logger = logging.getLogger(__name__)


def read_key(path: Path) -> Optional[str]:
    try:
        return path.read_text().strip()
    except OSError as e:
        logger.error("Failed to read VAPID key %s: %s", path, e)
        return None


def get_public_key() -> Optional[str]:
    return read_key(settings.vapid_public_key_path)


def private_key_available() -> bool:
    if settings.vapid_private_key_path.is_file():
        return True
    logger.error("VAPID private key not found: %s", settings.vapid_private_key_path)
    return False


def send_push(endpoint: str, p256dh: str, auth: str, message: str, url: str) -> bool:
    """Push one message to one subscription. Returns False on delivery failure.

    Subscriptions are stored as sent by the browser, so malformed keys show up
    here as ValueError, TypeError or ECEException from the payload encryption.
    """
    subscription_info = {
        "endpoint": endpoint,
        "keys": {"p256dh": p256dh, "auth": auth},
    }
    payload = json.dumps({"message": message, "url": url})
    try:
        webpush(
            subscription_info=subscription_info,
            data=payload,
            vapid_private_key=str(settings.vapid_private_key_path),
            vapid_claims={"sub": settings.vapid_subject},
            content_encoding="aes128gcm",
        )
    except WebPushException as e:
        logger.warning("Web push to %s failed: %s", endpoint[:60], e)
        return False
    except requests.RequestException as e:
        logger.warning("Web push to %s could not be delivered: %s", endpoint[:60], e)
        return False
    except (ValueError, TypeError, http_ece.ECEException) as e:
        logger.warning("Web push to %s has an unusable subscription: %s", endpoint[:60], e)
        return False
    return True
