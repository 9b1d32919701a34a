from listengraph.providers.listens.memory_listen_source import InMemoryListenSource
from listengraph.providers.listens.sqlite_listen_source import SQLiteListenSource

__all__ = ["InMemoryListenSource", "SQLiteListenSource"]
