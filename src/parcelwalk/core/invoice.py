"""
invoice.py
- Read-only record types for invoices (package manifests) and their parcels.
- Parsed from the server's JSON or from local YAML; both camelCase wire names
  and snake_case spellings are accepted.
- Any missing or wrongly shaped field raises InvalidInvoiceError.
- Annotation and feature maps are held as read-only mapping proxies.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from parcelwalk.core.errors import InvalidInvoiceError


def _pick(data, *keys):
    for key in keys:
        if key in data:
            return data[key]
    return None


def _section(value, what):
    if not isinstance(value, dict):
        raise InvalidInvoiceError(f"{what} must be a mapping, got {type(value).__name__}: {value!r}")
    return value


def _list(value, what):
    if not isinstance(value, (list, tuple)):
        raise InvalidInvoiceError(f"{what} must be a list, got {type(value).__name__}: {value!r}")
    return value


def _strings(value, what):
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in _list(value, what))


def _mapping(value, what):
    if value is None:
        return None
    return {str(k): str(v) for k, v in _section(value, what).items()}


def _frozen(mapping):
    if mapping is None or isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class Label:
    sha256: str
    name: str = ""
    media_type: str = "application/octet-stream"
    size: int = 0
    annotations: Optional[Mapping[str, str]] = None
    feature: Optional[Mapping[str, Mapping[str, str]]] = None

    def __post_init__(self):
        object.__setattr__(self, "annotations", _frozen(self.annotations))
        if self.feature is not None:
            feature = {k: _frozen(v) for k, v in self.feature.items()}
            object.__setattr__(self, "feature", _frozen(feature))

    def __hash__(self):
        return hash(self.sha256)

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Parcel label")
        sha256 = data.get("sha256")
        if not sha256:
            raise InvalidInvoiceError(f"Parcel label has no sha256: {data!r}")
        try:
            size = int(data.get("size", 0) or 0)
        except (TypeError, ValueError) as e:
            raise InvalidInvoiceError(f"Parcel {sha256} has a non-integer size: {data.get('size')!r}") from e
        feature = data.get("feature")
        if feature is not None:
            feature = {str(k): _mapping(v, f"Feature {k}") for k, v in _section(feature, "Feature").items()}
        return cls(
            sha256=str(sha256),
            name=str(data.get("name", "")),
            media_type=str(_pick(data, "mediaType", "media_type") or "application/octet-stream"),
            size=size,
            annotations=_mapping(data.get("annotations"), "Parcel annotations"),
            feature=feature,
        )

    def to_dict(self):
        out = {
            "sha256": self.sha256,
            "mediaType": self.media_type,
            "name": self.name,
            "size": self.size,
        }
        if self.annotations is not None:
            out["annotations"] = dict(self.annotations)
        if self.feature is not None:
            out["feature"] = {k: dict(v) for k, v in self.feature.items()}
        return out


@dataclass(frozen=True)
class Conditions:
    member_of: Optional[Tuple[str, ...]] = None
    requires: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Parcel conditions")
        return cls(
            member_of=_strings(_pick(data, "memberOf", "member_of"), "memberOf"),
            requires=_strings(data.get("requires"), "requires"),
        )

    def to_dict(self):
        out = {}
        if self.member_of is not None:
            out["memberOf"] = list(self.member_of)
        if self.requires is not None:
            out["requires"] = list(self.requires)
        return out


@dataclass(frozen=True, eq=False)
class Parcel:
    """
    One artifact entry in an invoice.

    Two parcels with the same label.sha256 compare (and hash) equal,
    whatever their other fields say.
    """

    label: Label
    conditions: Optional[Conditions] = None

    @property
    def sha256(self):
        return self.label.sha256

    def __eq__(self, other):
        if not isinstance(other, Parcel):
            return NotImplemented
        return self.label.sha256 == other.label.sha256

    def __hash__(self):
        return hash(self.label.sha256)

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Parcel")
        if "label" not in data:
            raise InvalidInvoiceError(f"Parcel has no label: {data!r}")
        conditions = data.get("conditions")
        return cls(
            label=Label.from_dict(data["label"]),
            conditions=Conditions.from_dict(conditions) if conditions is not None else None,
        )

    def to_dict(self):
        out = {"label": self.label.to_dict()}
        if self.conditions is not None:
            out["conditions"] = self.conditions.to_dict()
        return out


@dataclass(frozen=True)
class Group:
    name: str
    required: Optional[bool] = None
    satisfied_by: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Group")
        if not data.get("name"):
            raise InvalidInvoiceError(f"Group has no name: {data!r}")
        return cls(
            name=str(data["name"]),
            required=data.get("required"),
            satisfied_by=_pick(data, "satisfiedBy", "satisfied_by"),
        )

    def to_dict(self):
        out = {"name": self.name}
        if self.required is not None:
            out["required"] = self.required
        if self.satisfied_by is not None:
            out["satisfiedBy"] = self.satisfied_by
        return out


@dataclass(frozen=True)
class BindleSpec:
    name: str
    version: str
    description: Optional[str] = None
    authors: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Bindle section")
        if not data.get("name") or data.get("version") is None:
            raise InvalidInvoiceError(f"Bindle spec needs name and version: {data!r}")
        return cls(
            name=str(data["name"]),
            version=str(data["version"]),
            description=data.get("description"),
            authors=_strings(data.get("authors"), "authors"),
        )

    def to_dict(self):
        out = {"name": self.name, "version": self.version}
        if self.description is not None:
            out["description"] = self.description
        if self.authors is not None:
            out["authors"] = list(self.authors)
        return out


@dataclass(frozen=True)
class Invoice:
    """
    A package manifest: the bindle it describes plus its parcels and groups.

    parcel is None when the source had no parcel list at all.
    """

    bindle: BindleSpec
    bindle_version: str = "1.0.0"
    yanked: Optional[bool] = None
    annotations: Optional[Mapping[str, str]] = None
    parcel: Optional[Tuple[Parcel, ...]] = None
    group: Optional[Tuple[Group, ...]] = None

    def __post_init__(self):
        object.__setattr__(self, "annotations", _frozen(self.annotations))

    def __hash__(self):
        return hash((self.bindle, self.bindle_version, self.parcel))

    @property
    def invoice_id(self):
        return f"{self.bindle.name}/{self.bindle.version}"

    def find_parcel(self, sha256):
        for parcel in self.parcel or ():
            if parcel.sha256 == sha256:
                return parcel
        return None

    @classmethod
    def from_dict(cls, data):
        data = _section(data, "Invoice")
        if "bindle" not in data:
            raise InvalidInvoiceError("Invoice has no bindle section")
        parcels = data.get("parcel")
        groups = data.get("group")
        return cls(
            bindle=BindleSpec.from_dict(data["bindle"]),
            bindle_version=str(_pick(data, "bindleVersion", "bindle_version") or "1.0.0"),
            yanked=data.get("yanked"),
            annotations=_mapping(data.get("annotations"), "Invoice annotations"),
            parcel=tuple(Parcel.from_dict(p) for p in _list(parcels, "parcel")) if parcels is not None else None,
            group=tuple(Group.from_dict(g) for g in _list(groups, "group")) if groups is not None else None,
        )

    def to_dict(self):
        out = {"bindleVersion": self.bindle_version, "bindle": self.bindle.to_dict()}
        if self.yanked is not None:
            out["yanked"] = self.yanked
        if self.annotations is not None:
            out["annotations"] = dict(self.annotations)
        if self.parcel is not None:
            out["parcel"] = [p.to_dict() for p in self.parcel]
        if self.group is not None:
            out["group"] = [g.to_dict() for g in self.group]
        return out
