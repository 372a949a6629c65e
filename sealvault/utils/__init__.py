"""Shared utilities for sealvault."""
