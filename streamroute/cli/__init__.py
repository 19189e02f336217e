"""streamroute CLI — Typer-based command-line interface.

Provides the ``streamroute`` command with subcommands for previewing
routing, delivering records to local files, and inspecting configuration.

All output uses Rich for formatted terminal display.
"""
