"""CLI tools for listengraph.

- ``python -m listengraph.cli.listens`` — import listening history from a
  CSV export into the SQLite listen store, and show store statistics.
- ``python -m listengraph.cli.network`` — build an artist network graph
  from the listen store and print a summary or JSON.

Both use argparse and construct their own dependencies; they are one-shot
scripts, not long-lived servers.
"""
