"""Command-line interface for arangomap.

This module provides a user interface built with Typer for checking and
provisioning collections, running raw AQL, and inspecting document
identifiers and edge collection names.
"""
