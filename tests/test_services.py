"""Resource service tests (respx mocks)."""

import json

import httpx
import pytest
import respx
from split_admin.api import SplitApi
from split_admin.attributes import AttributeListParams
from split_admin.config import SplitConfig
from split_admin.exceptions import NotFoundError, SplitAdminErrorCodes, SplitApiError
from split_admin.models import (
    ApiKeyRequest,
    ApiKeyType,
    AttributeRequest,
    EnvironmentRequest,
    FlagSetRequest,
    GroupRequest,
    SegmentRequest,
    SplitCreateRequest,
    UserCreateRequest,
    UserStatus,
    UserUpdateRequest,
    WorkspaceRequest,
)

BASE_URL = "https://api.split.test/internal/api/v2"
FLAG_SETS_URL = "https://api.split.test/api/v3/flag-sets"


def make_api() -> SplitApi:
    return SplitApi(
        SplitConfig(base_url=BASE_URL, flag_sets_url=FLAG_SETS_URL, api_key="admin-key")
    )


def body_of(route: respx.Route):
    return json.loads(route.calls.last.request.content)


@respx.mock
def test_workspace_find_by_id() -> None:
    """find_by_id scans the listing."""
    respx.get(f"{BASE_URL}/workspaces").mock(
        return_value=httpx.Response(
            200,
            json={"objects": [{"id": "x", "name": "X"}, {"id": "y", "name": "Y"}], "totalCount": 2},
        )
    )
    ws = make_api().workspaces.find_by_id("y")
    assert ws.name == "Y"


@respx.mock
def test_workspace_find_by_id_not_found() -> None:
    """A missing id raises NotFoundError naming the kind and key."""
    respx.get(f"{BASE_URL}/workspaces").mock(
        return_value=httpx.Response(200, json={"objects": [{"id": "x"}, {"id": "y"}]})
    )
    with pytest.raises(NotFoundError) as exc_info:
        make_api().workspaces.find_by_id("z")
    assert exc_info.value.code == SplitAdminErrorCodes.NOT_FOUND
    assert "workspace [z] not found" in str(exc_info.value)


@respx.mock
def test_workspace_update_sends_json_patch() -> None:
    """Workspace updates are JSON patch replace operations."""
    route = respx.patch(f"{BASE_URL}/workspaces/ws1").mock(
        return_value=httpx.Response(200, json={"id": "ws1", "name": "Renamed"})
    )
    ws = make_api().workspaces.update("ws1", WorkspaceRequest(name="Renamed"))
    assert ws.name == "Renamed"
    assert body_of(route) == [{"op": "replace", "path": "/name", "value": "Renamed"}]


@respx.mock
def test_http_error_raises_split_api_error() -> None:
    """Statuses of 400 and above raise SplitApiError with the status code."""
    respx.post(f"{BASE_URL}/workspaces").mock(return_value=httpx.Response(409, text="conflict"))
    with pytest.raises(SplitApiError) as exc_info:
        make_api().workspaces.create(WorkspaceRequest(name="dup"))
    assert exc_info.value.code == SplitAdminErrorCodes.HTTP_ERROR
    assert exc_info.value.status_code == 409
    assert not exc_info.value.is_not_found
    assert "create_workspace" in str(exc_info.value)


@respx.mock
def test_environment_update_sends_string_booleans() -> None:
    """The production flag is patched as the string "true"."""
    route = respx.patch(f"{BASE_URL}/environments/ws/ws1/env1").mock(
        return_value=httpx.Response(200, json={"id": "env1", "name": "prod", "production": True})
    )
    env = make_api().environments.update(
        "ws1", "env1", EnvironmentRequest(name="prod", production=True)
    )
    assert env.production is True
    assert body_of(route) == [
        {"op": "replace", "path": "/name", "value": "prod"},
        {"op": "replace", "path": "/production", "value": "true"},
    ]


@respx.mock
def test_environment_find_by_name() -> None:
    """Environments are looked up by name in the workspace listing."""
    respx.get(f"{BASE_URL}/environments/ws/ws1").mock(
        return_value=httpx.Response(
            200, json=[{"id": "e1", "name": "staging"}, {"id": "e2", "name": "prod"}]
        )
    )
    assert make_api().environments.find_by_name("ws1", "prod").id == "e2"


@respx.mock
def test_environment_delete() -> None:
    """Deleting an environment with an empty response body returns None."""
    route = respx.delete(f"{BASE_URL}/environments/ws/ws1/env1").mock(
        return_value=httpx.Response(200)
    )
    assert make_api().environments.delete("ws1", "env1") is None
    assert route.call_count == 1


@respx.mock
def test_list_all_segment_keys_walks_offsets() -> None:
    """Keys are fetched page by page until count is reached."""
    route = respx.get(f"{BASE_URL}/segments/env1/beta/keys").mock(
        side_effect=[
            httpx.Response(
                200, json={"keys": [{"key": "a"}, {"key": "b"}], "count": 3, "offset": 0, "limit": 2}
            ),
            httpx.Response(200, json={"keys": [{"key": "c"}], "count": 3, "offset": 2, "limit": 2}),
        ]
    )
    keys = make_api().environments.list_all_segment_keys("env1", "beta", limit=2)
    assert keys == ["a", "b", "c"]
    assert route.call_count == 2
    assert route.calls[1].request.url.params["offset"] == "2"


@respx.mock
def test_add_segment_keys_replace_flag() -> None:
    """Uploads carry the replace flag and the comment."""
    route = respx.put(f"{BASE_URL}/segments/env1/beta/uploadKeys").mock(
        return_value=httpx.Response(200)
    )
    make_api().environments.add_segment_keys("env1", "beta", ["a"], replace=True, comment="c")
    request = route.calls.last.request
    assert request.url.params["replace"] == "true"
    assert json.loads(request.content) == {"keys": ["a"], "comment": "c"}


@respx.mock
def test_traffic_type_create_and_delete() -> None:
    """Traffic types are created per workspace and deleted by id."""
    respx.post(f"{BASE_URL}/trafficTypes/ws/ws1").mock(
        return_value=httpx.Response(200, json={"id": "tt1", "name": "user"})
    )
    delete = respx.delete(f"{BASE_URL}/trafficTypes/tt1").mock(return_value=httpx.Response(200))
    api = make_api()
    tt = api.traffic_types.create("ws1", "user")
    api.traffic_types.delete(tt.id)
    assert delete.call_count == 1


@respx.mock
def test_attribute_list_marker_params() -> None:
    """Marker pagination options are passed as query parameters."""
    route = respx.get(f"{BASE_URL}/schema/ws/ws1/trafficTypes/tt1").mock(
        return_value=httpx.Response(
            200, json=[{"id": "plan", "trafficTypeId": "tt1", "dataType": "STRING"}]
        )
    )
    attrs = make_api().attributes.list(
        "ws1", "tt1", AttributeListParams(paginate=True, search_prefix="pl", marker_limit=10)
    )
    assert attrs[0].id == "plan"
    params = route.calls.last.request.url.params
    assert params["paginate"] == "true"
    assert params["searchPrefix"] == "pl"
    assert params["markerLimit"] == "10"


@respx.mock
def test_attribute_create() -> None:
    """Attribute requests use camelCase keys and drop unset fields."""
    route = respx.post(f"{BASE_URL}/schema/ws/ws1/trafficTypes/tt1").mock(
        return_value=httpx.Response(200, json={"id": "plan", "trafficTypeId": "tt1"})
    )
    make_api().attributes.create(
        "ws1", "tt1", AttributeRequest(id="plan", traffic_type_id="tt1", display_name="Plan")
    )
    assert body_of(route) == {"id": "plan", "trafficTypeId": "tt1", "displayName": "Plan"}


@respx.mock
def test_segment_lifecycle() -> None:
    """Segments are created per traffic type and activated per environment."""
    respx.post(f"{BASE_URL}/segments/ws/ws1/trafficTypes/tt1").mock(
        return_value=httpx.Response(200, json={"name": "beta", "description": "d"})
    )
    activate = respx.post(f"{BASE_URL}/segments/env1/beta").mock(
        return_value=httpx.Response(200, json={"name": "beta"})
    )
    deactivate = respx.delete(f"{BASE_URL}/segments/env1/beta").mock(
        return_value=httpx.Response(200)
    )
    api = make_api()
    segment = api.segments.create("ws1", "tt1", SegmentRequest(name="beta", description="d"))
    assert api.segments.activate("env1", segment.name).name == "beta"
    api.segments.deactivate("env1", "beta")
    assert activate.call_count == 1
    assert deactivate.call_count == 1


@respx.mock
def test_splits_list_all_walks_offsets() -> None:
    """list_all keeps requesting until totalCount splits are collected."""
    route = respx.get(f"{BASE_URL}/splits/ws/ws1").mock(
        side_effect=[
            httpx.Response(
                200,
                json={"objects": [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}], "totalCount": 3},
            ),
            httpx.Response(200, json={"objects": [{"id": "3", "name": "c"}], "totalCount": 3}),
        ]
    )
    splits = make_api().splits.list_all("ws1", limit=2)
    assert [s.name for s in splits] == ["a", "b", "c"]
    assert route.calls[1].request.url.params["offset"] == "2"


@respx.mock
def test_split_create_and_update_description() -> None:
    """Splits are created under a traffic type and described by name."""
    respx.post(f"{BASE_URL}/splits/ws/ws1/trafficTypes/tt1").mock(
        return_value=httpx.Response(200, json={"id": "s1", "name": "checkout"})
    )
    update = respx.put(f"{BASE_URL}/splits/ws/ws1/checkout/updateDescription").mock(
        return_value=httpx.Response(200, json={"id": "s1", "name": "checkout", "description": "new"})
    )
    api = make_api()
    split = api.splits.create("ws1", "tt1", SplitCreateRequest(name="checkout"))
    updated = api.splits.update_description("ws1", split.name, "new")
    assert updated.description == "new"
    assert json.loads(update.calls.last.request.content) == "new"


@respx.mock
def test_kill_and_restore_definition() -> None:
    """Kill and restore hit the definition sub-resources."""
    base = f"{BASE_URL}/splits/ws/ws1/checkout/environments/env1"
    kill = respx.put(f"{base}/kill").mock(return_value=httpx.Response(200))
    restore = respx.put(f"{base}/restore").mock(return_value=httpx.Response(200))
    api = make_api()
    api.splits.kill_definition("ws1", "checkout", "env1", comment="incident")
    api.splits.restore_definition("ws1", "checkout", "env1")
    assert body_of(kill) == {"comment": "incident"}
    assert restore.call_count == 1


@respx.mock
def test_flag_set_create_uses_v3_url() -> None:
    """Flag sets are created against the v3 endpoint with a workspace reference."""
    route = respx.post(FLAG_SETS_URL).mock(
        return_value=httpx.Response(
            200, json={"id": "fs1", "name": "backend", "workspace": {"id": "ws1", "type": "workspace"}}
        )
    )
    fs = make_api().flag_sets.create(FlagSetRequest(name="backend", workspace_id="ws1"))
    assert fs.workspace_id == "ws1"
    assert body_of(route) == {"name": "backend", "workspace": {"type": "workspace", "id": "ws1"}}


@respx.mock
def test_flag_set_find_by_name_follows_markers() -> None:
    """find_by_name pages through nextMarker."""
    route = respx.get(FLAG_SETS_URL).mock(
        side_effect=[
            httpx.Response(200, json={"objects": [{"id": "1", "name": "a"}], "nextMarker": "m1"}),
            httpx.Response(200, json={"objects": [{"id": "2", "name": "b"}], "nextMarker": None}),
        ]
    )
    assert make_api().flag_sets.find_by_name("ws1", "b").id == "2"
    assert route.calls[0].request.url.params["workspace_id"] == "ws1"
    assert route.calls[1].request.url.params["after"] == "m1"


@respx.mock
def test_flag_set_find_by_name_not_found() -> None:
    """An absent flag set name raises NotFoundError."""
    respx.get(FLAG_SETS_URL).mock(return_value=httpx.Response(200, json={"objects": []}))
    with pytest.raises(NotFoundError):
        make_api().flag_sets.find_by_name("ws1", "missing")


@respx.mock
def test_users_list_all_follows_markers() -> None:
    """Users are listed from the data key until there is no next marker."""
    route = respx.get(f"{BASE_URL}/users").mock(
        side_effect=[
            httpx.Response(
                200,
                json={"data": [{"id": "u1", "email": "a@x.test", "status": "ACTIVE"}], "nextMarker": "n1"},
            ),
            httpx.Response(200, json={"data": [{"id": "u2", "email": "b@x.test", "status": "PENDING"}]}),
        ]
    )
    users = make_api().users.list_all(status=UserStatus.ACTIVE)
    assert [u.id for u in users] == ["u1", "u2"]
    assert users[1].status is UserStatus.PENDING
    assert route.calls[0].request.url.params["status"] == "ACTIVE"
    assert route.calls[1].request.url.params["after"] == "n1"


@respx.mock
def test_user_invite_update_delete() -> None:
    """Users are invited with group references, updated and deleted when pending."""
    invite = respx.post(f"{BASE_URL}/users").mock(
        return_value=httpx.Response(200, json={"id": "u1", "email": "a@x.test", "status": "PENDING"})
    )
    update = respx.put(f"{BASE_URL}/users/u1").mock(
        return_value=httpx.Response(200, json={"id": "u1", "email": "a@x.test", "2fa": True})
    )
    delete = respx.delete(f"{BASE_URL}/users/u1").mock(return_value=httpx.Response(200))
    api = make_api()
    user = api.users.invite(UserCreateRequest(email="a@x.test", group_ids=["g1"]))
    assert body_of(invite) == {"email": "a@x.test", "groups": [{"id": "g1", "type": "group"}]}
    assert api.users.update(user.id, UserUpdateRequest(tfa=True)).tfa is True
    assert body_of(update) == {"2fa": True}
    api.users.delete_pending(user.id)
    assert delete.call_count == 1


@respx.mock
def test_groups_crud() -> None:
    """Groups support create, get, update and delete."""
    respx.post(f"{BASE_URL}/groups").mock(
        return_value=httpx.Response(200, json={"id": "g1", "name": "eng"})
    )
    respx.get(f"{BASE_URL}/groups/g1").mock(
        return_value=httpx.Response(200, json={"id": "g1", "name": "eng"})
    )
    update = respx.put(f"{BASE_URL}/groups/g1").mock(
        return_value=httpx.Response(200, json={"id": "g1", "name": "eng", "description": "d"})
    )
    respx.delete(f"{BASE_URL}/groups/g1").mock(return_value=httpx.Response(200))
    api = make_api()
    group = api.groups.create(GroupRequest(name="eng"))
    assert api.groups.get(group.id).name == "eng"
    assert api.groups.update(group.id, GroupRequest(name="eng", description="d")).description == "d"
    assert body_of(update) == {"name": "eng", "description": "d"}
    api.groups.delete(group.id)


@respx.mock
def test_api_key_create_and_delete() -> None:
    """API keys reference their environments and workspace."""
    create = respx.post(f"{BASE_URL}/apiKeys").mock(
        return_value=httpx.Response(200, json={"id": "k1", "name": "server", "key": "secret-key"})
    )
    delete = respx.delete(f"{BASE_URL}/apiKeys/secret-key").mock(
        return_value=httpx.Response(404, text="missing")
    )
    api = make_api()
    key = api.api_keys.create(
        ApiKeyRequest(
            name="server",
            key_type=ApiKeyType.SERVER_SIDE,
            workspace_id="ws1",
            environment_ids=["env1"],
        )
    )
    assert body_of(create) == {
        "name": "server",
        "apiKeyType": "server_side",
        "roles": [],
        "environments": [{"type": "environment", "id": "env1"}],
        "workspace": {"type": "workspace", "id": "ws1"},
    }
    with pytest.raises(SplitApiError) as exc_info:
        api.api_keys.delete(key.key)
    assert exc_info.value.is_not_found
    assert "secret-key" not in str(exc_info.value)
    assert delete.call_count == 1
