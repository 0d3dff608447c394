"""Moderation and crowd-sourced edit workflow for a content directory."""

__version__ = "0.1.0"
