"""
Tests for the credential edit workflow.

The editor is replaced with plain callables and the client with a mock, so no
process is spawned and no request is sent.
"""

from __future__ import annotations

import base64
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from tppctl.api.client import TppClient
from tppctl.api.models import Contact, Credential, CredentialValue
from tppctl.config.settings import Settings
from tppctl.editing.workflow import edit_credential, scratch_file
from tppctl.errors import (
    AttributeNotFoundError,
    EditorError,
    ResultCodeError,
    StructuralError,
    TransportError,
    UpdateError,
)

CRED_PATH = "\\VED\\Policy\\creds\\foo"


def b64(text: str | bytes) -> str:
    data = text.encode() if isinstance(text, str) else text
    return base64.b64encode(data).decode()


def make_credential(value: str | None = None, result: int = 1) -> Credential:
    values = [] if value is None else [
        CredentialValue("Generic", "string", value),
        CredentialValue("Other", "string", b64("untouched")),
    ]
    return Credential(
        classname="Generic Credential",
        contacts=[Contact(prefix="local", prefixed_name="local:admin", state=1)],
        friendly_name="Generic",
        result=result,
        values=values,
    )


class RecordingEditor:
    """Fake editor that records the file it saw and optionally rewrites it."""

    def __init__(self, new_content: bytes | None = None, fail: bool = False) -> None:
        self.new_content = new_content
        self.fail = fail
        self.paths: list[Path] = []
        self.seen: list[bytes] = []

    def __call__(self, path: Path) -> None:
        self.paths.append(path)
        self.seen.append(path.read_bytes())
        if self.new_content is not None:
            path.write_bytes(self.new_content)
        if self.fail:
            raise EditorError("editor 'vim' exited with status 1", returncode=1)


class TestScratchFile(unittest.TestCase):
    """Tests for the temporary file context manager."""

    def test_written_and_removed(self) -> None:
        """Test the file holds the content and is gone afterwards."""
        with scratch_file(b"key: value") as path:
            self.assertEqual(path.read_bytes(), b"key: value")
            self.assertTrue(path.name.startswith("vcp-"))
            self.assertTrue(path.name.endswith(".yaml"))

        self.assertFalse(path.exists())

    def test_removed_on_exception(self) -> None:
        """Test the file is removed when the body raises."""
        with self.assertRaises(RuntimeError):
            with scratch_file(b"x") as path:
                raise RuntimeError("boom")

        self.assertFalse(path.exists())

    def test_unique_names(self) -> None:
        """Test concurrent scratch files do not collide."""
        with scratch_file(b"a") as first, scratch_file(b"b") as second:
            self.assertNotEqual(first, second)

    def test_tolerates_file_removed_by_editor(self) -> None:
        """Test cleanup does not fail if the file is already gone."""
        with scratch_file(b"x") as path:
            path.unlink()

        self.assertFalse(path.exists())


class TestEditCredential(unittest.TestCase):
    """Tests for edit_credential with a mocked client."""

    def setUp(self) -> None:
        self.client = MagicMock()
        self.client.retrieve_credential.return_value = make_credential(b64("key: value"))

    def updated_credential(self) -> Credential:
        self.client.update_credential.assert_called_once()
        path, credential = self.client.update_credential.call_args.args
        self.assertEqual(path, CRED_PATH)
        return credential

    def test_edit_is_written_back(self) -> None:
        """Test the edited content is re-encoded into Values[0]."""
        editor = RecordingEditor(new_content=b"key: other\n")

        edit_credential(self.client, CRED_PATH, editor)

        self.client.retrieve_credential.assert_called_once_with(CRED_PATH)
        self.assertEqual(editor.seen, [b"key: value"])
        credential = self.updated_credential()
        self.assertEqual(base64.b64decode(credential.values[0].value), b"key: other\n")

    def test_other_fields_unchanged(self) -> None:
        """Test contacts and other values pass through untouched."""
        edit_credential(self.client, CRED_PATH, RecordingEditor(new_content=b"x: 1"))

        credential = self.updated_credential()
        self.assertEqual(credential.values[1].value, b64("untouched"))
        self.assertEqual(credential.contacts[0].prefixed_name, "local:admin")
        self.assertEqual(credential.friendly_name, "Generic")

    def test_unchanged_content_still_updates(self) -> None:
        """Test an unmodified blob is written back byte-identical."""
        original = b64("key: value")

        edit_credential(self.client, CRED_PATH, RecordingEditor())

        self.assertEqual(self.updated_credential().values[0].value, original)

    def test_binary_content_round_trips(self) -> None:
        """Test non-text payloads survive an edit without changes."""
        original = b64(bytes(range(256)))
        self.client.retrieve_credential.return_value = make_credential(original)

        edit_credential(self.client, CRED_PATH, RecordingEditor())

        self.assertEqual(self.updated_credential().values[0].value, original)

    def test_line_wrapped_blob_is_editable(self) -> None:
        """Test a blob stored with 76-column line breaks is edited and written back unwrapped."""
        data = b"key: value\n" * 20
        flat = b64(data)
        wrapped = "\n".join(flat[i:i + 76] for i in range(0, len(flat), 76)) + "\n"
        self.client.retrieve_credential.return_value = make_credential(wrapped)
        editor = RecordingEditor()

        edit_credential(self.client, CRED_PATH, editor)

        self.assertEqual(editor.seen, [data])
        self.assertEqual(self.updated_credential().values[0].value, flat)

    def test_retrieve_failure_propagates(self) -> None:
        """Test a retrieve error ends the workflow before the editor runs."""
        self.client.retrieve_credential.side_effect = TransportError("retrieve failed: 500")
        editor = RecordingEditor()

        with self.assertRaises(TransportError):
            edit_credential(self.client, CRED_PATH, editor)

        self.assertEqual(editor.paths, [])
        self.client.update_credential.assert_not_called()

    def test_attribute_not_found(self) -> None:
        """Test AttributeNotFound raises the path-specific error."""
        self.client.retrieve_credential.return_value = make_credential(
            b64("key: value"), result=102
        )
        editor = RecordingEditor()

        with self.assertRaises(AttributeNotFoundError) as cm:
            edit_credential(self.client, CRED_PATH, editor)

        self.assertEqual(str(cm.exception), f"attribute not found: '{CRED_PATH}'")
        self.assertEqual(editor.paths, [])
        self.client.update_credential.assert_not_called()

    def test_other_result_code(self) -> None:
        """Test other Result codes surface the raw code."""
        self.client.retrieve_credential.return_value = make_credential(
            b64("key: value"), result=7
        )

        with self.assertRaises(ResultCodeError) as cm:
            edit_credential(self.client, CRED_PATH, RecordingEditor())

        self.assertIn("7", str(cm.exception))
        self.assertIn("fetching", str(cm.exception))
        self.client.update_credential.assert_not_called()

    def test_no_values(self) -> None:
        """Test a credential without values is rejected."""
        self.client.retrieve_credential.return_value = make_credential(None)

        with self.assertRaises(StructuralError) as cm:
            edit_credential(self.client, CRED_PATH, RecordingEditor())

        self.assertEqual(str(cm.exception), f"no values found in '{CRED_PATH}'")
        self.client.update_credential.assert_not_called()

    def test_result_checked_before_values(self) -> None:
        """Test a failing Result wins over an empty Values list."""
        self.client.retrieve_credential.return_value = make_credential(None, result=102)

        with self.assertRaises(AttributeNotFoundError):
            edit_credential(self.client, CRED_PATH, RecordingEditor())

    def test_invalid_base64(self) -> None:
        """Test a malformed blob is rejected before the editor runs."""
        self.client.retrieve_credential.return_value = make_credential("%%% not base64")
        editor = RecordingEditor()

        with self.assertRaises(StructuralError) as cm:
            edit_credential(self.client, CRED_PATH, editor)

        self.assertIn("Values[0].Value", str(cm.exception))
        self.assertEqual(editor.paths, [])
        self.client.update_credential.assert_not_called()

    def test_editor_failure_removes_file(self) -> None:
        """Test an editor failure propagates and the file is removed."""
        editor = RecordingEditor(fail=True)

        with self.assertRaises(EditorError):
            edit_credential(self.client, CRED_PATH, editor)

        self.assertEqual(len(editor.paths), 1)
        self.assertFalse(editor.paths[0].exists())
        self.client.update_credential.assert_not_called()

    def test_success_removes_file(self) -> None:
        """Test the temporary file is gone after a successful edit."""
        editor = RecordingEditor(new_content=b"a: b")

        edit_credential(self.client, CRED_PATH, editor)

        self.assertFalse(editor.paths[0].exists())

    def test_update_failure_is_wrapped(self) -> None:
        """Test update failures are wrapped with context and the file is removed."""
        cause = AttributeNotFoundError(f"attribute not found: '{CRED_PATH}'", path=CRED_PATH)
        self.client.update_credential.side_effect = cause
        editor = RecordingEditor()

        with self.assertRaises(UpdateError) as cm:
            edit_credential(self.client, CRED_PATH, editor)

        self.assertIn("while updating", str(cm.exception))
        self.assertIn(f"attribute not found: '{CRED_PATH}'", str(cm.exception))
        self.assertIs(cm.exception.__cause__, cause)
        self.assertFalse(editor.paths[0].exists())

    def test_exactly_one_retrieve_and_one_update(self) -> None:
        """Test nothing is retried."""
        edit_credential(self.client, CRED_PATH, RecordingEditor())

        self.assertEqual(self.client.retrieve_credential.call_count, 1)
        self.assertEqual(self.client.update_credential.call_count, 1)


class TestEditCredentialEndToEnd(unittest.TestCase):
    """Round trip through the real client with a mocked HTTP session."""

    @patch("tppctl.api.client.requests.Session")
    def test_unchanged_config_round_trip(self, mock_session_class: MagicMock) -> None:
        """Test an unedited 'key: value' blob is pushed back exactly."""
        mock_session = MagicMock()
        mock_session_class.return_value = mock_session

        retrieve = MagicMock(status_code=200)
        retrieve.json.return_value = {
            "Classname": "Generic Credential",
            "Contact": [],
            "FriendlyName": "Generic",
            "Result": 1,
            "Values": [{"Name": "Generic", "Type": "string", "Value": b64("key: value")}],
        }
        update = MagicMock(status_code=200)
        update.json.return_value = {"Result": 1}
        mock_session.post.side_effect = [retrieve, update]

        client = TppClient(Settings(tpp_url="https://tpp.example.com", token="t"))
        edit_credential(client, CRED_PATH, RecordingEditor())

        self.assertEqual(mock_session.post.call_count, 2)
        body = mock_session.post.call_args_list[1].kwargs["json"]
        self.assertEqual(body["CredentialPath"], CRED_PATH)
        self.assertEqual(base64.b64decode(body["Values"][0]["Value"]), b"key: value")


if __name__ == "__main__":
    unittest.main()
