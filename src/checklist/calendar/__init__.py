"""Calendar projection of due-dated tasks."""

from .frontmatter import Quoted, build_event_file, escape_yaml_string, patch_completed_field
from .projector import CalendarSyncProjector
from .vault import FileSystemVault, Vault

__all__ = [
    "CalendarSyncProjector",
    "FileSystemVault",
    "Quoted",
    "Vault",
    "build_event_file",
    "escape_yaml_string",
    "patch_completed_field",
]
