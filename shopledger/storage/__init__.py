from .base import EntityKind, EntityStore
from .memory import MemoryStore
from .sql import SqlAlchemyStore
