"""Status types of the Atlas custom resources, their conditions and status options."""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from atlaskube.common import json_field
from atlaskube.project import IPAccessList
from atlaskube.provider import ProviderName

# JSON name of the field holding the resource version of the user's credentials Secret.
_VERSION_JSON_NAME = "passwordVersion"


class ConditionType(str, Enum):
    READY = "Ready"
    PROJECT_READY = "ProjectReady"
    IP_ACCESS_LIST_READY = "IPAccessListReady"
    CLUSTER_READY = "ClusterReady"
    DATABASE_USER_READY = "DatabaseUserReady"


class ConditionStatus(str, Enum):
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Condition:
    """State of an Atlas custom resource at a certain point."""

    type: ConditionType = json_field("type")
    status: ConditionStatus = json_field("status")
    last_transition_time: Optional[datetime] = json_field(
        "lastTransitionTime", omitempty=True, default=None
    )
    reason: str = json_field("reason", omitempty=True, default="")
    message: str = json_field("message", omitempty=True, default="")

    def with_reason(self, reason: str) -> Condition:
        return replace(self, reason=reason)

    def with_message_regexp(self, msg: str) -> Condition:
        return replace(self, message=msg)


def true_condition(condition_type: ConditionType) -> Condition:
    """Return a condition of the given type with status True and no reason or message."""
    return Condition(type=condition_type, status=ConditionStatus.TRUE, last_transition_time=_now())


def false_condition(condition_type: ConditionType) -> Condition:
    """Return a condition of the given type with status False."""
    return Condition(type=condition_type, status=ConditionStatus.FALSE, last_transition_time=_now())


def ensure_condition_exists(condition: Condition, source: Iterable[Condition]) -> list[Condition]:
    """Return a copy of ``source`` with ``condition`` added or replacing one of the same type.

    The transition time is kept from the existing condition when the status has not changed.
    """
    condition = replace(condition, last_transition_time=_now())
    target = list(source)
    for i, existing in enumerate(target):
        if existing.type == condition.type:
            if existing.status == condition.status:
                condition = replace(condition, last_transition_time=existing.last_transition_time)
            target[i] = condition
            return target
    target.append(condition)
    return target


@dataclass
class Common:
    """Status fields shared by all Atlas custom resources."""

    conditions: list[Condition] = json_field("conditions", default_factory=list)
    observed_generation: int = json_field("observedGeneration", omitempty=True, default=0)


@dataclass
class Endpoint:
    """Endpoint through which a client connects to Atlas."""

    endpoint_id: str = json_field("endpointId", omitempty=True, default="")
    provider_name: str = json_field("providerName", omitempty=True, default="")
    region: str = json_field("region", omitempty=True, default="")


@dataclass
class PrivateEndpoint:
    """Connection strings usable through one private endpoint."""

    connection_string: str = json_field("connectionString", omitempty=True, default="")
    endpoints: list[Endpoint] = json_field("endpoints", omitempty=True, default_factory=list)
    srv_connection_string: str = json_field("srvConnectionString", omitempty=True, default="")
    type: str = json_field("type", omitempty=True, default="")


@dataclass
class ConnectionStrings:
    """Connection strings that applications use to reach a cluster."""

    standard: str = json_field("standard", omitempty=True, default="")
    standard_srv: str = json_field("standardSrv", omitempty=True, default="")
    private_endpoint: list[PrivateEndpoint] = json_field(
        "privateEndpoint", omitempty=True, default_factory=list
    )
    private: str = json_field("private", omitempty=True, default="")
    private_srv: str = json_field("privateSrv", omitempty=True, default="")


@dataclass
class AtlasClusterStatus(Common):
    """Observed state of an Atlas cluster."""

    state_name: str = json_field("stateName", omitempty=True, default="")
    mongodb_version: str = json_field("mongoDBVersion", omitempty=True, default="")
    connection_strings: Optional[ConnectionStrings] = json_field(
        "connectionStrings", omitempty=True, default=None
    )
    mongo_uri_updated: str = json_field("mongoURIUpdated", omitempty=True, default="")


@dataclass
class AtlasDatabaseUserStatus(Common):
    """Observed state of an Atlas database user."""

    password_version: str = json_field(_VERSION_JSON_NAME, omitempty=True, default_factory=str)
    user_name: str = json_field("name", omitempty=True, default="")


@dataclass
class AtlasProjectStatus(Common):
    """Observed state of an Atlas project."""

    id: str = json_field("id", omitempty=True, default="")
    expired_ip_access_list: list[IPAccessList] = json_field(
        "expiredIpAccessList", omitempty=True, default_factory=list
    )
    private_endpoints: list[PrivateEndpoint] = json_field(
        "privateEndpoints", omitempty=True, default_factory=list
    )


@dataclass
class ProjectPrivateEndpoint:
    """Private endpoint service that Atlas manages for a project."""

    provider: ProviderName = json_field("provider")
    region: str = json_field("region")
    service_name: str = json_field("serviceName", omitempty=True, default="")
    service_resource_id: str = json_field("serviceResourceId", omitempty=True, default="")


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key!r} must be a string")
    return value


def _items(data: Mapping[str, Any], key: str) -> list[Mapping[str, Any]]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(
        item is None or isinstance(item, Mapping) for item in value
    ):
        raise TypeError(f"{key!r} must be a list of objects")
    return [item or {} for item in value]


def _endpoint_from_json(data: Mapping[str, Any]) -> Endpoint:
    return Endpoint(
        endpoint_id=_text(data, "endpointId"),
        provider_name=_text(data, "providerName"),
        region=_text(data, "region"),
    )


def _private_endpoint_from_json(data: Mapping[str, Any]) -> PrivateEndpoint:
    return PrivateEndpoint(
        connection_string=_text(data, "connectionString"),
        endpoints=[_endpoint_from_json(e) for e in _items(data, "endpoints")],
        srv_connection_string=_text(data, "srvConnectionString"),
        type=_text(data, "type"),
    )


def _connection_strings_from_json(data: Optional[Mapping[str, Any]]) -> ConnectionStrings:
    if data is None:
        return ConnectionStrings()
    if not isinstance(data, Mapping):
        raise TypeError("connection strings must be an object")
    return ConnectionStrings(
        standard=_text(data, "standard"),
        standard_srv=_text(data, "standardSrv"),
        private_endpoint=[
            _private_endpoint_from_json(p) for p in _items(data, "privateEndpoint")
        ],
        private=_text(data, "private"),
        private_srv=_text(data, "privateSrv"),
    )


ClusterStatusOption = Callable[[AtlasClusterStatus], None]
DatabaseUserStatusOption = Callable[[AtlasDatabaseUserStatus], None]
ProjectStatusOption = Callable[[AtlasProjectStatus], None]


def atlas_cluster_state_name_option(state_name: str) -> ClusterStatusOption:
    def apply(status: AtlasClusterStatus) -> None:
        status.state_name = state_name

    return apply


def atlas_cluster_mongodb_version_option(mongodb_version: str) -> ClusterStatusOption:
    def apply(status: AtlasClusterStatus) -> None:
        status.mongodb_version = mongodb_version

    return apply


def atlas_cluster_connection_strings_option(
    connection_strings: Optional[Mapping[str, Any]],
) -> ClusterStatusOption:
    """Set the connection strings from Atlas API JSON; malformed data leaves the status unchanged."""

    def apply(status: AtlasClusterStatus) -> None:
        try:
            parsed = _connection_strings_from_json(connection_strings)
        except TypeError:
            return
        status.connection_strings = parsed

    return apply


def atlas_cluster_mongo_uri_updated_option(mongo_uri_updated: str) -> ClusterStatusOption:
    def apply(status: AtlasClusterStatus) -> None:
        status.mongo_uri_updated = mongo_uri_updated

    return apply


def atlas_database_user_password_version(password_version: str) -> DatabaseUserStatusOption:
    def apply(status: AtlasDatabaseUserStatus) -> None:
        status.password_version = password_version

    return apply


def atlas_database_user_name_option(name: str) -> DatabaseUserStatusOption:
    def apply(status: AtlasDatabaseUserStatus) -> None:
        status.user_name = name

    return apply


def atlas_project_id_option(project_id: str) -> ProjectStatusOption:
    def apply(status: AtlasProjectStatus) -> None:
        status.id = project_id

    return apply


def atlas_project_expired_ip_access_option(lists: Iterable[IPAccessList]) -> ProjectStatusOption:
    entries = list(lists)

    def apply(status: AtlasProjectStatus) -> None:
        status.expired_ip_access_list = list(entries)

    return apply