"""Configuration for sealvault."""
