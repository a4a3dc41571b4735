"""Allow ``python -m src.cli`` as a shortcut for ``python -m src.cli.search``."""

from src.cli.search import main

main()
