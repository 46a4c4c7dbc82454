from .records import KeyValueRecordsMixin
from .schema import KeyValueSchemaMixin

__all__ = [
    "KeyValueSchemaMixin",
    "KeyValueRecordsMixin",
]
