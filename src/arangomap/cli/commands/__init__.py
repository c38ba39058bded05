"""CLI subcommands for arangomap.

- database: collection checks and provisioning, raw AQL queries
- graph: document identifiers and edge collection names
"""
