"""Webhook service for HelpScout Redirect Sync"""

import hashlib
import hmac
import json
import sys
import threading
from pathlib import Path
from typing import Any, Optional, Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from redirect_sync.config import Config, load_config, validate_config
from redirect_sync.core import RedirectSynchronizer
from redirect_sync.logger import setup_logger, get_logger
from redirect_sync.metadata_store import MetadataStoreError
from redirect_sync.models import is_error, result_to_dict

log = get_logger("web")

app = FastAPI(
    title="HelpScout Redirect Sync",
    description="Keeps HelpScout Docs redirects in step with CMS records",
    version="1.0.0"
)

# Global instances (initialized lazily)
_config: Optional[Config] = None
_synchronizer: Optional[RedirectSynchronizer] = None

# One sync at a time; the JSON store is a read-modify-write file
_sync_lock = threading.Lock()

# Payload keys that may carry the saved record's ID
RECORD_ID_KEYS = ('record_id', 'post_id', 'ID')


def get_config() -> Config:
    """Get or load configuration"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_synchronizer() -> RedirectSynchronizer:
    """Get or create the synchronizer instance"""
    global _synchronizer
    if _synchronizer is None:
        config = get_config()
        setup_logger(level=config.log_level, log_dir=config.data_dir)
        _synchronizer = RedirectSynchronizer.from_config(config)
    return _synchronizer


def verify_webhook_signature(request: Request, body: bytes) -> Tuple[bool, str]:
    """
    Verify the HMAC-SHA256 signature of a webhook body.

    Returns:
        (is_valid, error_message)
    """
    secret = get_config().webhook_secret

    # If secret is configured, signature is REQUIRED
    if not secret:
        return True, ""

    signature = (
        request.headers.get("X-Hub-Signature-256") or
        request.headers.get("X-Webhook-Signature") or
        ""
    )
    if not signature:
        return False, "Missing signature header"

    if signature.startswith("sha256="):
        signature = signature[7:]

    expected = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    if not hmac.compare_digest(signature, expected):
        log.warning(f"Signature mismatch: received={signature[:16]}...")
        return False, "Invalid signature"

    return True, ""


def extract_record_id(payload: Any) -> Optional[Any]:
    """Extract the saved record's ID from a webhook payload"""
    if not isinstance(payload, dict):
        return None

    for key in RECORD_ID_KEYS:
        value = payload.get(key)
        if value not in (None, ''):
            return value

    return None


def run_webhook_sync(record_id: Any):
    """Run the sync for a record while holding the sync lock"""
    with _sync_lock:
        return get_synchronizer().create(record_id)


@app.on_event("startup")
async def startup_event():
    """Validate configuration on startup"""
    log.info("Starting HelpScout Redirect Sync webhook service")
    errors = validate_config(get_config())
    if errors:
        log.error(f"Configuration errors: {errors}")
    else:
        log.info("Configuration validated successfully")


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/webhook/record")
async def webhook_record_verify():
    """Lets the CMS check the endpoint exists before registering it"""
    return {
        "status": "ok",
        "message": "Webhook endpoint is active",
        "endpoint": "/api/webhook/record",
        "method": "POST"
    }


@app.post("/api/webhook/record")
async def webhook_record_saved(request: Request):
    """
    Record saved hook: create or update the record's redirect.

    Uses HMAC signature verification when WEBHOOK_SECRET is set.
    The sync runs before the response is sent so the caller sees the result.
    """
    body = await request.body()

    is_valid, error_msg = verify_webhook_signature(request, body)
    if not is_valid:
        log.warning(f"Webhook signature verification failed: {error_msg}")
        raise HTTPException(status_code=401, detail=error_msg)

    try:
        payload = json.loads(body) if body else {}
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    record_id = extract_record_id(payload)
    if record_id is None:
        raise HTTPException(status_code=400, detail="Could not extract record ID from payload")

    log.info(f"Webhook received for record {record_id}")

    try:
        result = await run_in_threadpool(run_webhook_sync, record_id)
    except MetadataStoreError as e:
        log.error(f"Webhook sync failed for record {record_id}: {e}")
        raise HTTPException(status_code=500, detail="Metadata store unavailable")

    return {
        "status": "failed" if is_error(result) else "synced",
        "record_id": record_id,
        "result": result_to_dict(result)
    }


# Run with uvicorn if executed directly
if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        "app:app",
        host=config.web_host,
        port=config.web_port
    )
