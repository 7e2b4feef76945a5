"""Synchronization engine for rfml-sync.

Nothing in this package talks to the terminal directly; commands live in
rfsync.cli.
"""
