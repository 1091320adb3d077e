"""
Retrieve-edit-update workflow for a credential's embedded configuration.

The configuration payload of a Generic Credential is a YAML document stored
base64-encoded in the credential's first value. Editing it runs through
these phases, any of which can fail and end the workflow:

    FETCHING   retrieve the credential
    VALIDATING check the Result code and that there is a first value
    DECODING   base64-decode the first value
    EDITING    write it to a temporary file and run the editor on it
    ENCODING   read the file back and re-encode it into the credential
    UPDATING   push the full credential back

The temporary file is removed on every exit path once it has been created.
The payload is treated as opaque bytes: it is never parsed, and an unchanged
payload is still written back.
"""

from __future__ import annotations

import binascii
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from tppctl.api.results import raise_for_result
from tppctl.errors import StructuralError, TppError, UpdateError

if TYPE_CHECKING:
    from tppctl.api.client import TppClient
    from tppctl.editing.editor import Editor

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "vcp-"
TEMP_FILE_SUFFIX = ".yaml"


class EditPhase(Enum):
    """Phases of the edit workflow, in order."""

    FETCHING = "fetching"
    VALIDATING = "validating"
    DECODING = "decoding"
    EDITING = "editing"
    ENCODING = "encoding"
    UPDATING = "updating"
    DONE = "done"


@contextmanager
def scratch_file(content: bytes) -> Iterator[Path]:
    """
    Write content to a new, uniquely named temporary file.

    Yields:
        Path of the file. The file is removed when the context exits,
        whether normally or by an exception.
    """
    fd, name = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX, suffix=TEMP_FILE_SUFFIX)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {path}: {e}")


def _enter(phase: EditPhase, path: str) -> None:
    logger.debug(f"[{path}] {phase.value}")


def edit_credential(client: TppClient, path: str, editor: Editor) -> None:
    """
    Let the user edit the configuration embedded in a credential.

    Exactly two API calls are made (retrieve and update) when the workflow
    gets that far; nothing is retried.

    Args:
        client: API client.
        path: Credential path, e.g. "\\VED\\Policy\\creds\\foo".
        editor: Callable that edits a file in place.

    Raises:
        TransportError: If retrieving fails at the HTTP level.
        DecodeError: If the retrieve response is malformed.
        AttributeNotFoundError: If the credential attribute does not exist.
        ResultCodeError: If retrieve reports any other non-success code.
        StructuralError: If there is no first value or it is not base64.
        EditorError: If the editor fails.
        UpdateError: If the update call fails in any way.
    """
    _enter(EditPhase.FETCHING, path)
    credential = client.retrieve_credential(path)

    _enter(EditPhase.VALIDATING, path)
    raise_for_result(credential.result, path, "fetching")
    if not credential.values:
        raise StructuralError(f"no values found in '{path}'", path=path)

    _enter(EditPhase.DECODING, path)
    try:
        original = credential.blob()
    except binascii.Error as e:
        raise StructuralError(
            f"error base64-decoding the field 'Values[0].Value': {e}", path=path
        ) from e

    _enter(EditPhase.EDITING, path)
    with scratch_file(original) as scratch:
        editor(scratch)

        _enter(EditPhase.ENCODING, path)
        edited = scratch.read_bytes()

    if edited == original:
        logger.info(f"No changes made to '{path}', writing it back unchanged")
    credential.replace_blob(edited)

    _enter(EditPhase.UPDATING, path)
    try:
        client.update_credential(path, credential)
    except TppError as e:
        raise UpdateError(f"while updating '{path}': {e}", path=path) from e

    _enter(EditPhase.DONE, path)
