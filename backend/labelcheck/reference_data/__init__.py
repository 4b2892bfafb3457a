"""
Reference tables mirrored from Supabase: paginated source, TTL cache, regulatory documents.
"""
from .cache import CacheEntry, ReferenceCache
from .regulatory_documents import get_active_documents, regulatory_document_cache

__all__ = [
    "CacheEntry",
    "ReferenceCache",
    "get_active_documents",
    "regulatory_document_cache",
]
