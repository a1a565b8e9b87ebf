from ancestry_atlas.storage.base import AtlasStore, FamilyStore
from ancestry_atlas.storage.memory import InMemoryStore

__all__ = ["AtlasStore", "FamilyStore", "InMemoryStore"]
