"""CLI tools for gigScout.

- ``python -m src.cli.search`` -- search every configured event provider
  for a city and date range and print the deduplicated events together
  with the per-provider summary.

CLI modules use argparse and defer importing ``src.main`` until after
logging is configured.
"""
