"""Supabase adapters (database, storage, auth, edge functions)."""

from .rest import SupabaseRestAdapter

__all__ = ["SupabaseRestAdapter"]
