"""
Interactive editing of the configuration embedded in a credential.
"""

from tppctl.editing.editor import Editor, external_editor
from tppctl.editing.workflow import EditPhase, edit_credential, scratch_file

__all__ = [
    "Editor",
    "external_editor",
    "EditPhase",
    "edit_credential",
    "scratch_file",
]
