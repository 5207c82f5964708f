"""Store adapters - Implementations of the store ports.

Available implementations:
- SupabaseStore: PostgREST RPC/upsert and GoTrue user lookup
"""

from .supabase_adapter import SupabaseStore

__all__ = ["SupabaseStore"]
