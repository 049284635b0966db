"""Workspace traversal, incremental rescans and diagnostics publication."""
