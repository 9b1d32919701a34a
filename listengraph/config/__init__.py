from listengraph.config.loader import genre_table, load_config
from listengraph.config.settings import Settings

__all__ = ["Settings", "genre_table", "load_config"]
