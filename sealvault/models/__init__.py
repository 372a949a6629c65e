"""Entity models backed by the sealvault database."""
