"""CLI command groups for sealvault."""
