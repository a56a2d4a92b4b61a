from datetime import datetime, timezone

import pytest

from atlaskube.common import to_json_dict
from atlaskube.project import IPAccessList
from atlaskube.provider import ProviderName
from atlaskube.status import (
    AtlasClusterStatus,
    AtlasDatabaseUserStatus,
    AtlasProjectStatus,
    Common,
    Condition,
    ConditionStatus,
    ConditionType,
    ConnectionStrings,
    Endpoint,
    PrivateEndpoint,
    ProjectPrivateEndpoint,
    atlas_cluster_connection_strings_option,
    atlas_cluster_mongo_uri_updated_option,
    atlas_cluster_mongodb_version_option,
    atlas_cluster_state_name_option,
    atlas_database_user_name_option,
    atlas_database_user_password_version,
    atlas_project_expired_ip_access_option,
    atlas_project_id_option,
    ensure_condition_exists,
    false_condition,
    true_condition,
)

OLD = datetime(2020, 12, 15, 20, 46, 55, tzinfo=timezone.utc)
RESOURCE_VERSION = "7"


@pytest.mark.parametrize(
    "member, value",
    [
        (ConditionType.READY, "Ready"),
        (ConditionType.IP_ACCESS_LIST_READY, "IPAccessListReady"),
        (ConditionType.DATABASE_USER_READY, "DatabaseUserReady"),
    ],
)
def test_condition_type_values(member, value):
    assert ConditionType(value) is member
    condition = true_condition(ConditionType(value))
    assert condition.type is member
    assert to_json_dict(condition)["type"] == value


def test_true_condition_has_no_reason_or_message():
    before = datetime.now(timezone.utc)
    c = true_condition(ConditionType.READY)
    assert c.status is ConditionStatus.TRUE
    assert c.type is ConditionType.READY
    assert c.reason == "" and c.message == ""
    assert c.last_transition_time >= before


def test_false_condition_with_reason_and_message():
    c = false_condition(ConditionType.PROJECT_READY).with_reason("AtlasApiError").with_message_regexp("boom")
    assert c.status is ConditionStatus.FALSE
    assert c.reason == "AtlasApiError"
    assert c.message == "boom"


def test_condition_json_form():
    c = Condition(type=ConditionType.READY, status=ConditionStatus.TRUE, last_transition_time=OLD)
    assert to_json_dict(c) == {
        "type": "Ready",
        "status": "True",
        "lastTransitionTime": "2020-12-15T20:46:55Z",
    }


def test_ensure_appends_missing_condition_without_touching_source():
    source = [Condition(ConditionType.READY, ConditionStatus.TRUE, OLD)]
    result = ensure_condition_exists(false_condition(ConditionType.CLUSTER_READY), source)
    assert len(source) == 1
    assert [c.type for c in result] == [ConditionType.READY, ConditionType.CLUSTER_READY]


def test_ensure_keeps_time_when_status_unchanged():
    source = [Condition(ConditionType.READY, ConditionStatus.TRUE, OLD)]
    result = ensure_condition_exists(true_condition(ConditionType.READY).with_reason("r"), source)
    assert len(result) == 1
    assert result[0].last_transition_time == OLD
    assert result[0].reason == "r"


def test_ensure_updates_time_when_status_changes():
    source = [
        Condition(ConditionType.READY, ConditionStatus.TRUE, OLD),
        Condition(ConditionType.PROJECT_READY, ConditionStatus.TRUE, OLD),
    ]
    result = ensure_condition_exists(false_condition(ConditionType.PROJECT_READY), source)
    assert result[0] == source[0]
    assert result[1].status is ConditionStatus.FALSE
    assert result[1].last_transition_time > OLD
    assert source[1].status is ConditionStatus.TRUE


def test_common_defaults_and_json():
    common = Common()
    assert common.conditions == []
    assert to_json_dict(common) == {"conditions": []}


def test_cluster_status_options():
    status = AtlasClusterStatus()
    for option in (
        atlas_cluster_state_name_option("IDLE"),
        atlas_cluster_mongodb_version_option("4.4"),
        atlas_cluster_mongo_uri_updated_option("2021-01-01"),
    ):
        option(status)
    assert status.state_name == "IDLE"
    assert status.mongodb_version == "4.4"
    assert status.mongo_uri_updated == "2021-01-01"
    result = to_json_dict(status)
    assert result["stateName"] == "IDLE"
    assert result["mongoDBVersion"] == "4.4"
    assert result["mongoURIUpdated"] == "2021-01-01"


def test_connection_strings_option_parses_api_json():
    status = AtlasClusterStatus()
    data = {
        "standard": "mongodb://host",
        "standardSrv": "mongodb+srv://host",
        "privateEndpoint": [
            {"connectionString": "mongodb://pe", "type": "MONGOD",
             "endpoints": [{"endpointId": "e1", "providerName": "AWS", "region": "r"}]}
        ],
        "awsPrivateLink": {"ignored": "x"},
    }
    atlas_cluster_connection_strings_option(data)(status)
    cs = status.connection_strings
    assert cs.standard == "mongodb://host"
    assert cs.standard_srv == "mongodb+srv://host"
    assert cs.private_endpoint == [
        PrivateEndpoint(connection_string="mongodb://pe", type="MONGOD",
                        endpoints=[Endpoint(endpoint_id="e1", provider_name="AWS", region="r")])
    ]


def test_connection_strings_round_trip():
    data = {"standard": "mongodb://host", "privateSrv": "mongodb+srv://p"}
    status = AtlasClusterStatus()
    atlas_cluster_connection_strings_option(data)(status)
    assert to_json_dict(status.connection_strings) == data


def test_connection_strings_option_with_none_sets_empty():
    status = AtlasClusterStatus()
    atlas_cluster_connection_strings_option(None)(status)
    assert status.connection_strings == ConnectionStrings()


def test_connection_strings_option_ignores_malformed_data():
    status = AtlasClusterStatus()
    atlas_cluster_connection_strings_option({"standard": 5})(status)
    assert status.connection_strings is None


def test_database_user_options():
    status = AtlasDatabaseUserStatus()
    atlas_database_user_password_version(RESOURCE_VERSION)(status)
    atlas_database_user_name_option("admin")(status)
    assert status.password_version == RESOURCE_VERSION
    expected = {"conditions": [], "name": "admin"}
    expected["passwordVersion"] = RESOURCE_VERSION
    assert to_json_dict(status) == expected


def test_project_options():
    status = AtlasProjectStatus()
    expired = [IPAccessList().with_ip("10.0.0.1")]
    atlas_project_id_option("abc")(status)
    atlas_project_expired_ip_access_option(expired)(status)
    assert status.id == "abc"
    assert status.expired_ip_access_list == expired
    assert to_json_dict(status)["expiredIpAccessList"] == [{"ipAddress": "10.0.0.1"}]


def test_project_private_endpoint_json():
    pe = ProjectPrivateEndpoint(provider=ProviderName.AWS, region="r", service_resource_id="sid")
    assert to_json_dict(pe) == {"provider": "AWS", "region": "r", "serviceResourceId": "sid"}


@pytest.mark.parametrize("value", ["True", "False", "Unknown"])
def test_condition_status_lookup(value):
    assert ConditionStatus(value).value == value