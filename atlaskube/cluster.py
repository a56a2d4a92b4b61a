"""The AtlasCluster custom resource: its specification, status handling and builders."""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from atlaskube.common import (
    ObjectKey,
    ObjectMeta,
    LabelSpec,
    ResourceRefNamespaced,
    json_field,
    to_json_dict,
)
from atlaskube.provider import ProviderName
from atlaskube.status import AtlasClusterStatus, Condition


class ClusterType(str, Enum):
    """Topology of an Atlas cluster."""

    REPLICASET = "REPLICASET"
    SHARDED = "SHARDED"
    GEOSHARDED = "GEOSHARDED"

    def __str__(self) -> str:
        return self.value


@dataclass
class ComputeSpec:
    """Whether and how the cluster tier scales automatically."""

    enabled: Optional[bool] = json_field("enabled", omitempty=True, default=None)
    scale_down_enabled: Optional[bool] = json_field("scaleDownEnabled", omitempty=True, default=None)
    min_instance_size: str = json_field("minInstanceSize", omitempty=True, default="")
    max_instance_size: str = json_field("maxInstanceSize", omitempty=True, default="")


@dataclass
class AutoScalingSpec:
    """Automatic scaling of a cluster's storage and tier."""

    auto_indexing_enabled: Optional[bool] = json_field(
        "autoIndexingEnabled", omitempty=True, default=None
    )
    disk_gb_enabled: Optional[bool] = json_field("diskGBEnabled", omitempty=True, default=None)
    compute: Optional[ComputeSpec] = json_field("compute", omitempty=True, default=None)


@dataclass
class BiConnectorSpec:
    """BI Connector configuration of a cluster."""

    enabled: Optional[bool] = json_field("enabled", omitempty=True, default=None)
    read_preference: str = json_field("readPreference", omitempty=True, default="")


@dataclass
class ProviderSettingsSpec:
    """Configuration of the provisioned hosts on which MongoDB runs."""

    backing_provider_name: str = json_field("backingProviderName", omitempty=True, default="")
    disk_iops: Optional[int] = json_field("diskIOPS", omitempty=True, default=None)
    disk_type_name: str = json_field("diskTypeName", omitempty=True, default="")
    encrypt_ebs_volume: Optional[bool] = json_field("encryptEBSVolume", omitempty=True, default=None)
    instance_size_name: str = json_field("instanceSizeName", default="")
    provider_name: Union[ProviderName, str] = json_field("providerName", default="")
    region_name: str = json_field("regionName", omitempty=True, default="")
    volume_type: str = json_field("volumeType", omitempty=True, default="")
    auto_scaling: Optional[AutoScalingSpec] = json_field("autoScaling", omitempty=True, default=None)


@dataclass
class RegionsConfig:
    """Election priority and node counts of one region."""

    analytics_nodes: Optional[int] = json_field("analyticsNodes", omitempty=True, default=None)
    electable_nodes: Optional[int] = json_field("electableNodes", omitempty=True, default=None)
    priority: Optional[int] = json_field("priority", omitempty=True, default=None)
    read_only_nodes: Optional[int] = json_field("readOnlyNodes", omitempty=True, default=None)


@dataclass
class ReplicationSpec:
    """Configuration of a cluster's regions."""

    num_shards: Optional[int] = json_field("numShards", omitempty=True, default=None)
    zone_name: str = json_field("zoneName", omitempty=True, default="")
    regions_config: dict[str, RegionsConfig] = json_field(
        "regionsConfig", omitempty=True, default_factory=dict
    )


def _drop_empty(data: dict[str, Any], keys: Iterable[str]) -> None:
    for key in keys:
        if key in data and data[key] in ("", None):
            del data[key]


@dataclass
class AtlasClusterSpec:
    """Desired state of an Atlas cluster."""

    project: ResourceRefNamespaced = json_field(
        "projectRef", default_factory=ResourceRefNamespaced
    )
    auto_scaling: Optional[AutoScalingSpec] = json_field("autoScaling", omitempty=True, default=None)
    bi_connector: Optional[BiConnectorSpec] = json_field("biConnector", omitempty=True, default=None)
    cluster_type: Union[ClusterType, str] = json_field("clusterType", omitempty=True, default="")
    disk_size_gb: Optional[int] = json_field("diskSizeGB", omitempty=True, default=None)
    encryption_at_rest_provider: str = json_field(
        "encryptionAtRestProvider", omitempty=True, default=""
    )
    labels: list[LabelSpec] = json_field("labels", omitempty=True, default_factory=list)
    mongodb_major_version: str = json_field("mongoDBMajorVersion", omitempty=True, default="")
    name: str = json_field("name", default="")
    num_shards: Optional[int] = json_field("numShards", omitempty=True, default=None)
    paused: Optional[bool] = json_field("paused", omitempty=True, default=None)
    pit_enabled: Optional[bool] = json_field("pitEnabled", omitempty=True, default=None)
    provider_backup_enabled: Optional[bool] = json_field(
        "providerBackupEnabled", omitempty=True, default=None
    )
    provider_settings: Optional[ProviderSettingsSpec] = json_field(
        "providerSettings", default=None
    )
    replication_specs: list[ReplicationSpec] = json_field(
        "replicationSpecs", omitempty=True, default_factory=list
    )

    def to_atlas(self) -> dict[str, Any]:
        """Return the specification in the Atlas API's cluster JSON form."""
        data = to_json_dict(self)
        data.pop("projectRef", None)
        _drop_empty(data, ("name", "providerSettings"))
        settings = data.get("providerSettings")
        if isinstance(settings, dict):
            _drop_empty(settings, ("instanceSizeName", "providerName"))
        return data


ClusterStatusOption = Callable[[AtlasClusterStatus], None]

_M2_REGIONS = {
    ProviderName.AWS: "US_EAST_1",
    ProviderName.AZURE: "US_EAST_2",
    ProviderName.GCP: "CENTRAL_US",
}


def _as_provider(name: Union[ProviderName, str]) -> Optional[ProviderName]:
    try:
        return ProviderName(name)
    except ValueError:
        return None


@dataclass
class AtlasCluster:
    """An Atlas cluster custom resource."""

    metadata: ObjectMeta = json_field("metadata", omitempty=True, default_factory=ObjectMeta)
    spec: AtlasClusterSpec = json_field("spec", omitempty=True, default_factory=AtlasClusterSpec)
    status: AtlasClusterStatus = json_field(
        "status", omitempty=True, default_factory=AtlasClusterStatus
    )

    def atlas_project_object_key(self) -> ObjectKey:
        """Key of the project resource; the cluster's own namespace unless the reference names one."""
        namespace = self.spec.project.namespace or self.metadata.namespace
        return ObjectKey(namespace=namespace, name=self.spec.project.name)

    def update_status(self, conditions: Iterable[Condition], *args: ClusterStatusOption) -> None:
        """Replace the conditions, record the observed generation and apply status options."""
        self.status.conditions = list(conditions)
        self.status.observed_generation = self.metadata.generation
        for option in args:
            if not callable(option):
                raise TypeError(f"not a cluster status option: {option!r}")
            option(self.status)

    def _settings(self) -> ProviderSettingsSpec:
        if self.spec.provider_settings is None:
            self.spec.provider_settings = ProviderSettingsSpec()
        return self.spec.provider_settings

    def with_name(self, name: str) -> AtlasCluster:
        self.metadata.name = name
        return self

    def with_atlas_name(self, name: str) -> AtlasCluster:
        self.spec.name = name
        return self

    def with_project_name(self, project_name: str) -> AtlasCluster:
        self.spec.project = ResourceRefNamespaced(name=project_name)
        return self

    def with_provider_name(self, name: Union[ProviderName, str]) -> AtlasCluster:
        self._settings().provider_name = name
        return self

    def with_region_name(self, name: str) -> AtlasCluster:
        self._settings().region_name = name
        return self

    def with_instance_size(self, name: str) -> AtlasCluster:
        self._settings().instance_size_name = name
        return self

    def with_backing_provider(self, name: str) -> AtlasCluster:
        self._settings().backing_provider_name = name
        return self

    def lightweight(self) -> AtlasCluster:
        """Switch the cluster to a shared M2 instance in a region that supports it."""
        self.with_instance_size("M2")
        current = self._settings().provider_name
        region = _M2_REGIONS.get(_as_provider(current))
        if region is not None:
            self.with_region_name(region)
        self.with_backing_provider(str(getattr(current, "value", current)))
        self.with_provider_name(ProviderName.TENANT)
        return self


@dataclass
class AtlasClusterList:
    """A list of AtlasCluster resources."""

    items: list[AtlasCluster] = json_field("items", default_factory=list)


def new_cluster(namespace: str, name: str, name_in_atlas: str) -> AtlasCluster:
    """Return a cluster resource with an M10 instance size."""
    return AtlasCluster(
        metadata=ObjectMeta(name=name, namespace=namespace),
        spec=AtlasClusterSpec(
            name=name_in_atlas,
            provider_settings=ProviderSettingsSpec(instance_size_name="M10"),
        ),
    )


def default_gcp_cluster(namespace: str, project_name: str) -> AtlasCluster:
    return (
        new_cluster(namespace, "test-cluster-gcp-k8s", "test-cluster-gcp")
        .with_project_name(project_name)
        .with_provider_name(ProviderName.GCP)
        .with_region_name("EASTERN_US")
    )


def default_aws_cluster(namespace: str, project_name: str) -> AtlasCluster:
    return (
        new_cluster(namespace, "test-cluster-aws-k8s", "test-cluster-aws")
        .with_project_name(project_name)
        .with_provider_name(ProviderName.AWS)
        .with_region_name("US_WEST_2")
    )


def default_azure_cluster(namespace: str, project_name: str) -> AtlasCluster:
    return (
        new_cluster(namespace, "test-cluster-azure-k8s", "test-cluster-azure")
        .with_project_name(project_name)
        .with_provider_name(ProviderName.AZURE)
        .with_region_name("EUROPE_NORTH")
    )