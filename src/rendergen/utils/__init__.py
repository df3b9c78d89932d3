"""Shared utilities: code-text helpers, tag tables and terminal colors."""
