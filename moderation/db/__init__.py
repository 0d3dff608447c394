"""Persistence layer for the moderation service."""
