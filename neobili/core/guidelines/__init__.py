"""AAP 2022 reference tables, bucket resolution and threshold lookup"""

from .lookup import lookup_value
from .resolver import resolve_bucket_key
from .store import TableStore, get_default_store

__all__ = ["lookup_value", "resolve_bucket_key", "TableStore", "get_default_store"]
