"""Allow ``python -m listengraph.cli`` as a shortcut for the network command."""

from listengraph.cli.network import main

main()
