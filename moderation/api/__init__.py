"""HTTP API for the moderation service."""
