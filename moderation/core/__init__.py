"""Core workflow, roles and configuration."""
