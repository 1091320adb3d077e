"""
Data models for vedsdk request and response bodies.

The dataclasses mirror the JSON shapes used by the credentials and Config
endpoints. Attribute names are pythonic; ``to_dict`` and ``from_dict`` map
them to and from the wire key names.

Shape Rules:
    - Missing keys take the zero value of their type, as the API omits empty fields
    - Keys with the wrong JSON type raise ValueError
    - Unknown keys are ignored
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any

# Root of the policy tree searched by enumeration
POLICY_ROOT = "\\VED\\Policy"

# Object type names reported in Config/Enumerate results
TYPE_NAME_X509_SERVER_CERT = "X509 Server Certificate"
TYPE_NAME_POLICY = "Policy"
TYPE_NAME_GOOGLE_CREDENTIAL = "Google Credential"
TYPE_NAME_GENERIC_CREDENTIAL = "Generic Credential"
TYPE_NAME_USERNAME_PASSWORD_CREDENTIAL = "Username Password Credential"


def _get(data: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    """Fetch a key, checking its JSON type. Booleans never count as integers."""
    value = data.get(key)
    if value is None:
        return default
    if kind is int and isinstance(value, bool):
        raise ValueError(f"field '{key}' must be an integer, got {value!r}")
    if not isinstance(value, kind):
        raise ValueError(
            f"field '{key}' must be of type {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    return value


def _require_mapping(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(data).__name__}")
    return data


def decode_blob(value: str) -> bytes:
    """
    Decode a base64 blob using the standard alphabet with padding.

    Line breaks are skipped, so line-wrapped values decode. Any other
    character outside the alphabet is rejected.

    Raises:
        binascii.Error: If the value is not valid base64.
    """
    return base64.b64decode(value.replace("\r", "").replace("\n", ""), validate=True)


def encode_blob(data: bytes) -> str:
    """Encode bytes as standard base64 text."""
    return base64.b64encode(data).decode("ascii")


@dataclass
class Contact:
    """Ownership entry on a credential. Passed through untouched."""

    prefix: str = ""
    prefixed_name: str = ""
    prefixed_universal: str = ""
    state: int = 0
    universal: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Contact:
        data = _require_mapping(data, "Contact entry")
        return cls(
            prefix=_get(data, "Prefix", str, ""),
            prefixed_name=_get(data, "PrefixedName", str, ""),
            prefixed_universal=_get(data, "PrefixedUniversal", str, ""),
            state=_get(data, "State", int, 0),
            universal=_get(data, "Universal", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "Prefix": self.prefix,
            "PrefixedName": self.prefixed_name,
            "PrefixedUniversal": self.prefixed_universal,
            "State": self.state,
            "Universal": self.universal,
        }


@dataclass
class CredentialValue:
    """
    One named field of a credential.

    Attributes:
        name: Field name.
        type: Field type as reported by the platform.
        value: Base64-encoded payload.
    """

    name: str = ""
    type: str = ""
    value: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CredentialValue:
        data = _require_mapping(data, "Values entry")
        return cls(
            name=_get(data, "Name", str, ""),
            type=_get(data, "Type", str, ""),
            value=_get(data, "Value", str, ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"Name": self.name, "Type": self.type, "Value": self.value}


@dataclass
class Credential:
    """
    A credential object as returned by /vedsdk/credentials/retrieve.

    The configuration payload edited by tppctl always lives in ``values[0]``.

    Attributes:
        classname: Platform class name of the credential.
        contacts: Ownership entries, never modified by tppctl.
        friendly_name: Display name.
        result: Raw Result code from the retrieve call.
        values: Ordered name/type/value entries.
    """

    classname: str = ""
    contacts: list[Contact] = field(default_factory=list)
    friendly_name: str = ""
    result: int = 0
    values: list[CredentialValue] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Credential:
        """
        Build a Credential from a decoded response body.

        Raises:
            ValueError: If the body does not have the expected shape.
        """
        data = _require_mapping(data, "credential")
        return cls(
            classname=_get(data, "Classname", str, ""),
            contacts=[Contact.from_dict(c) for c in _get(data, "Contact", list, [])],
            friendly_name=_get(data, "FriendlyName", str, ""),
            result=_get(data, "Result", int, 0),
            values=[CredentialValue.from_dict(v) for v in _get(data, "Values", list, [])],
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {
            "Classname": self.classname,
            "Contact": [c.to_dict() for c in self.contacts],
            "FriendlyName": self.friendly_name,
            "Result": self.result,
            "Values": [v.to_dict() for v in self.values],
        }

    def blob(self) -> bytes:
        """
        Decode the primary value.

        Raises:
            IndexError: If the credential has no values.
            binascii.Error: If the primary value is not valid base64.
        """
        return decode_blob(self.values[0].value)

    def replace_blob(self, data: bytes) -> None:
        """Encode ``data`` and store it as the primary value."""
        self.values[0].value = encode_blob(data)


@dataclass
class CatalogEntry:
    """An object found by /vedsdk/Config/Enumerate."""

    absolute_guid: str = ""
    dn: str = ""
    guid: str = ""
    id: int = 0
    name: str = ""
    parent: str = ""
    revision: int = 0
    type_name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> CatalogEntry:
        data = _require_mapping(data, "Objects entry")
        return cls(
            absolute_guid=_get(data, "AbsoluteGUID", str, ""),
            dn=_get(data, "DN", str, ""),
            guid=_get(data, "GUID", str, ""),
            id=_get(data, "Id", int, 0),
            name=_get(data, "Name", str, ""),
            parent=_get(data, "Parent", str, ""),
            revision=_get(data, "Revision", int, 0),
            type_name=_get(data, "TypeName", str, ""),
        )

    def is_generic_credential(self) -> bool:
        """Substring match, so subtypes of Generic Credential are included too."""
        return TYPE_NAME_GENERIC_CREDENTIAL in self.type_name


@dataclass
class EnumerateResult:
    """Body of a /vedsdk/Config/Enumerate response."""

    objects: list[CatalogEntry] = field(default_factory=list)
    result: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> EnumerateResult:
        data = _require_mapping(data, "enumerate response")
        return cls(
            objects=[CatalogEntry.from_dict(o) for o in _get(data, "Objects", list, [])],
            result=_get(data, "Result", int, 0),
        )

