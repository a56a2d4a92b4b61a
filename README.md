# atlaskube

Python models for the custom resources used to manage MongoDB Atlas from
Kubernetes: clusters, projects, database users and the status information
reported back on them. The package has no dependencies beyond the standard
library.

## Installation

```
pip install .
```

## Modules

- `atlaskube.provider`: `ProviderName`, the cloud providers Atlas runs on
  (`AWS`, `GCP`, `AZURE`, `TENANT`).
- `atlaskube.common`: shared pieces: `ObjectKey`, `ObjectMeta`,
  `ResourceRef`, `ResourceRefNamespaced`, `LabelSpec`, `GroupVersion` (with
  `GROUP_VERSION` for `atlas.mongodb.com/v1`), and `to_json_dict`, which turns
  any model into plain JSON data using the API field names and leaving out
  empty optional fields.
- `atlaskube.project`: `IPAccessList` and `PrivateEndpoint` entries of an
  Atlas project, each with `to_atlas()` giving its Atlas API JSON form.
- `atlaskube.status`: conditions (`Condition`, `ConditionType`,
  `ConditionStatus`, `true_condition`, `false_condition`,
  `ensure_condition_exists`), the status records `AtlasClusterStatus`,
  `AtlasProjectStatus` and `AtlasDatabaseUserStatus`, and the option
  functions that update them (`atlas_cluster_state_name_option`,
  `atlas_cluster_connection_strings_option`, `atlas_project_id_option`,
  `atlas_database_user_name_option` and others).
- `atlaskube.cluster`: `AtlasCluster` and its specification
  (`AtlasClusterSpec`, `ProviderSettingsSpec`, `ReplicationSpec`, ...), with
  builder methods, `lightweight()` for a shared M2 instance, and
  `new_cluster`, `default_aws_cluster`, `default_gcp_cluster` and
  `default_azure_cluster`.

## Example

```python
from atlaskube.cluster import default_aws_cluster
from atlaskube.status import (
    ConditionType,
    atlas_cluster_state_name_option,
    true_condition,
)

cluster = default_aws_cluster("my-namespace", "my-project").lightweight()
print(cluster.spec.provider_settings.instance_size_name)   # M2
print(cluster.spec.provider_settings.region_name)          # US_EAST_1
print(cluster.spec.provider_settings.provider_name)        # TENANT

atlas_payload = cluster.spec.to_atlas()   # dict in the Atlas API format

cluster.update_status(
    [true_condition(ConditionType.READY)],
    atlas_cluster_state_name_option("IDLE"),
)
print(cluster.status.state_name)           # IDLE
print(cluster.atlas_project_object_key())  # my-namespace/my-project
```

`ensure_condition_exists` returns a new list with a condition added, or
replacing the one of the same type; the transition time of an existing
condition is kept when its status does not change.

IP access list entries are immutable and built step by step:

```python
from atlaskube.project import IPAccessList

entry = IPAccessList().with_cidr("192.0.2.0/24").with_comment("office")
print(entry.identifier())   # 192.0.2.0/24
print(entry.to_atlas())     # {'cidrBlock': '192.0.2.0/24', 'comment': 'office'}
```

## What it does not do

This package only describes resources and their status. It does not talk to
the Atlas API or to a Kubernetes cluster, does not reconcile resources, and
provides no command-line program or long-running service.

## Running the tests

```
pip install .[test]
pytest
```