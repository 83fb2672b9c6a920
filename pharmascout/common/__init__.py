"""Shared utilities: logging, configuration, CSV, text helpers, rate limiting."""
