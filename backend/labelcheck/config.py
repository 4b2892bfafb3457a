"""
Reference-data settings and centralized configuration.
All values are read lazily from the environment (.env loaded once at import).
"""
import os
import logging
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# backend/labelcheck/config.py -> parent=labelcheck, parent.parent=backend, parent.parent.parent=repo
_PACKAGE_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _PACKAGE_DIR.parent
_REPO_ROOT = _BACKEND_DIR.parent

load_dotenv(_BACKEND_DIR / ".env")

# --- Upstream tables ---
GRAS_TABLE = "gras_ingredients"
NDI_TABLE = "ndi_ingredients"
GRANDFATHER_TABLE = "old_dietary_ingredients"
ALLERGEN_TABLE = "major_allergens"
REGULATORY_DOCUMENT_TABLE = "regulatory_documents"

# Tables that carry an is_active column (ndi_ingredients does not)
TABLES_WITH_ACTIVE_FLAG = frozenset({
    GRAS_TABLE,
    GRANDFATHER_TABLE,
    ALLERGEN_TABLE,
    REGULATORY_DOCUMENT_TABLE,
})

# --- Cache / pagination defaults ---
REFERENCE_CACHE_TTL_SECONDS = int(os.environ.get("REFERENCE_CACHE_TTL_SECONDS", str(60 * 60 * 24)))
REGULATORY_DOCUMENT_CACHE_TTL_SECONDS = int(os.environ.get("REGULATORY_DOCUMENT_CACHE_TTL_SECONDS", str(60 * 60)))
REFERENCE_PAGE_SIZE = int(os.environ.get("REFERENCE_PAGE_SIZE", "1000"))

# Upstream page fetch retries
FETCH_MAX_RETRIES = int(os.environ.get("FETCH_MAX_RETRIES", "3"))
FETCH_INITIAL_BACKOFF = float(os.environ.get("FETCH_INITIAL_BACKOFF", "0.5"))
# Seconds a cache serves stale rows after a failed refresh before it retries the upstream
REFERENCE_FAILURE_COOLDOWN_SECONDS = float(os.environ.get("REFERENCE_FAILURE_COOLDOWN_SECONDS", "60"))


# --- Supabase (lazy read from env) ---
def get_supabase_url() -> str:
    return (
        os.environ.get("SUPABASE_URL")
        or os.environ.get("NEXT_PUBLIC_SUPABASE_URL")
        or ""
    ).strip()


def get_supabase_key() -> str:
    """Service role key preferred: reference tables are read server-side."""
    return (
        os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
        or os.environ.get("NEXT_PUBLIC_SUPABASE_ANON_KEY")
        or ""
    ).strip()


# --- Startup logging ---
def log_config() -> None:
    logger.info(
        "CONFIG: supabase_url=%s supabase_key=%s reference_ttl=%ds document_ttl=%ds "
        "page_size=%d fetch_retries=%d fetch_backoff=%.2fs failure_cooldown=%.0fs",
        bool(get_supabase_url()), bool(get_supabase_key()),
        REFERENCE_CACHE_TTL_SECONDS, REGULATORY_DOCUMENT_CACHE_TTL_SECONDS,
        REFERENCE_PAGE_SIZE, FETCH_MAX_RETRIES, FETCH_INITIAL_BACKOFF, REFERENCE_FAILURE_COOLDOWN_SECONDS,
    )
