"""Utility helpers for checklist services."""

from .filenames import sanitize_title, short_id, validate_vault_path

__all__ = ["sanitize_title", "short_id", "validate_vault_path"]
