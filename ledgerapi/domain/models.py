"""Typed records exchanged with the organisation accounts API."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple


def _compact(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop ``None`` entries so optional fields are omitted on the wire."""
    return {key: value for key, value in values.items() if value is not None}


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise ValueError(f"{what}: expected JSON object, got {type(raw).__name__}")
    return raw


def _optional_list(raw: Any) -> Optional[List[str]]:
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ValueError(f"expected list of strings, got {type(raw).__name__}")
    return [str(item) for item in raw]


@dataclass(frozen=True)
class AccountAttributes:
    """Attribute block of an account resource.

    Every field is optional; keys the client does not know about are kept in
    ``extra`` and written back unchanged.
    """

    country: Optional[str] = None
    base_currency: Optional[str] = None
    bank_id: Optional[str] = None
    bank_id_code: Optional[str] = None
    bic: Optional[str] = None
    name: Optional[List[str]] = None
    alternative_names: Optional[List[str]] = None
    account_classification: Optional[str] = None
    account_matching_opt_out: Optional[bool] = None
    account_number: Optional[str] = None
    iban: Optional[str] = None
    joint_account: Optional[bool] = None
    secondary_identification: Optional[str] = None
    status: Optional[str] = None
    switched: Optional[bool] = None
    customer_id: Optional[str] = None
    processing_service: Optional[str] = None
    reference_mask: Optional[str] = None
    user_defined_information: Optional[str] = None
    validation_type: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    _LIST_FIELDS: ClassVar[Tuple[str, ...]] = ("name", "alternative_names")

    @classmethod
    def from_dict(cls, raw: Any) -> "AccountAttributes":
        data = _require_mapping(raw, "attributes")
        known = {f.name for f in fields(cls) if f.name != "extra"}
        kwargs: Dict[str, Any] = {}
        for key in known:
            if key not in data:
                continue
            value = data[key]
            kwargs[key] = _optional_list(value) if key in cls._LIST_FIELDS else value
        extra = {key: value for key, value in data.items() if key not in known}
        return cls(extra=extra, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        values = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extra"}
        payload = dict(self.extra)
        payload.update(_compact(values))
        return payload


@dataclass(frozen=True)
class AccountData:
    """Account resource as carried inside the ``data`` envelope key."""

    id: str
    organisation_id: str
    type: str = "accounts"
    version: Optional[int] = None
    attributes: AccountAttributes = field(default_factory=AccountAttributes)
    created_on: Optional[str] = None
    modified_on: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, raw: Any) -> "AccountData":
        data = _require_mapping(raw, "account data")
        version = data.get("version")
        if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
            raise ValueError(f"account data: version must be an integer, got {version!r}")
        attributes = data.get("attributes")
        known = {f.name for f in fields(cls) if f.name != "extra"}
        return cls(
            id=str(data.get("id") or ""),
            organisation_id=str(data.get("organisation_id") or ""),
            type=str(data.get("type") or "accounts"),
            version=version,
            attributes=(
                AccountAttributes.from_dict(attributes)
                if attributes is not None
                else AccountAttributes()
            ),
            created_on=data.get("created_on"),
            modified_on=data.get("modified_on"),
            extra={key: value for key, value in data.items() if key not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = dict(self.extra)
        payload.update(
            _compact(
                {
                    "id": self.id,
                    "organisation_id": self.organisation_id,
                    "type": self.type,
                    "version": self.version,
                    "created_on": self.created_on,
                    "modified_on": self.modified_on,
                }
            )
        )
        payload["attributes"] = self.attributes.to_dict()
        return payload


@dataclass(frozen=True)
class Envelope:
    """Single-record ``{"data": {...}}`` wrapper used for requests and responses."""

    data: AccountData

    @classmethod
    def from_dict(cls, raw: Any) -> "Envelope":
        payload = _require_mapping(raw, "envelope")
        if payload.get("data") is None:
            raise ValueError("envelope: missing data")
        return cls(data=AccountData.from_dict(payload["data"]))

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.data.to_dict()}


@dataclass(frozen=True)
class FailureRecord:
    """Error body returned by the API for 4xx responses.

    ``status_code`` never comes from the wire; the transport sets it from the
    HTTP status line.
    """

    error_message: str = ""
    status_code: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> "FailureRecord":
        if raw is None:
            return cls()
        data = _require_mapping(raw, "failure record")
        message = data.get("error_message")
        if message is not None and not isinstance(message, str):
            raise ValueError("failure record: error_message must be a string")
        return cls(error_message=message or "")

    def with_status(self, status_code: int) -> "FailureRecord":
        return FailureRecord(error_message=self.error_message, status_code=status_code)


__all__ = ["AccountAttributes", "AccountData", "Envelope", "FailureRecord"]
