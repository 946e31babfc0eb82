from grantgate.storage.base import KeyValueStore
from grantgate.storage.factory import build_store
from grantgate.storage.file import JsonFileStore
from grantgate.storage.keys import StoreKeys
from grantgate.storage.memory import InMemoryStore

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "StoreKeys",
    "build_store",
]
