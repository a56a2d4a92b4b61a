"""Resource references, object metadata and JSON serialisation of API types."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def json_field(name: str, *, omitempty: bool = False, inline: bool = False, **kwargs: Any) -> Any:
    """Declare a dataclass field with its JSON name and serialisation flags."""
    return field(metadata={"json": name, "omitempty": omitempty, "inline": inline}, **kwargs)


def _format_time(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _is_empty(value: Any, pointer: bool) -> bool:
    if value is None:
        return True
    if pointer:
        # Optional values are only left out when unset, never for a set zero value.
        return False
    if isinstance(value, Enum):
        return value.value in ("", 0)
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def to_json_dict(value: Any) -> Any:
    """Convert an API value into plain JSON data, honouring field names and omitempty."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            meta = f.metadata
            if meta.get("inline"):
                nested = to_json_dict(item)
                if isinstance(nested, dict):
                    out.update(nested)
                continue
            if meta.get("omitempty") and _is_empty(item, pointer=f.default is None):
                continue
            out[meta.get("json", f.name)] = to_json_dict(item)
        return out
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return _format_time(value)
    if isinstance(value, Mapping):
        return {str(k): to_json_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_dict(v) for v in value]
    return value


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with its version."""

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version


GROUP_VERSION = GroupVersion(group="atlas.mongodb.com", version="v1")


@dataclass(frozen=True)
class ObjectKey:
    """Namespace and name that identify a Kubernetes object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}" if self.namespace else self.name


@dataclass
class ObjectMeta:
    """The subset of Kubernetes object metadata the Atlas resources rely on."""

    name: str = json_field("name", omitempty=True, default="")
    namespace: str = json_field("namespace", omitempty=True, default="")
    generation: int = json_field("generation", omitempty=True, default=0)


@dataclass(frozen=True)
class ResourceRef:
    """Reference to a Kubernetes resource by name."""

    name: str = json_field("name", default="")


@dataclass(frozen=True)
class ResourceRefNamespaced:
    """Reference to a Kubernetes resource with an optional namespace."""

    name: str = json_field("name", default="")
    namespace: str = json_field("namespace", default="")


@dataclass(frozen=True)
class LabelSpec:
    """Key-value pair that tags and categorises a cluster or database user."""

    key: str = json_field("key", default="")
    value: str = json_field("value", default="")