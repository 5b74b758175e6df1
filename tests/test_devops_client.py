import pytest
from fakes import FakeResponse, FakeSession

from devops_app.core.config import DevOpsSettings
from devops_app.core.devops_client import AzureDevOpsAPI
from devops_app.core.errors import AzureDevOpsError, ConfigurationError, ResponseShapeError


def _api(routes, settings=None):
    session = FakeSession(routes)
    settings = settings or DevOpsSettings(organization="contoso", project="Web", pat="secret")
    return AzureDevOpsAPI(settings, session=session), session


def test_session_uses_pat_basic_auth():
    _, session = _api([])
    assert session.auth == ("", "secret")
    assert session.headers["Accept"] == "application/json"


def test_incomplete_settings_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        AzureDevOpsAPI(DevOpsSettings(organization="contoso"), session=FakeSession([]))
    assert "AZURE_DEVOPS_PAT" in exc_info.value.missing


def test_run_wiql_posts_query_and_returns_ids():
    api, session = _api([("POST", "/wiql", FakeResponse(200, {"workItems": [{"id": 3}, {"id": 1}]}))])
    assert api.run_wiql("Select [System.Id] From WorkItems") == [3, 1]
    call = session.calls[0]
    assert call["url"] == "https://dev.azure.com/contoso/Web/_apis/wit/wiql"
    assert call["params"] == {"api-version": "7.1-preview.2"}
    assert call["json"] == {"query": "Select [System.Id] From WorkItems"}


def test_run_wiql_without_work_items_is_empty():
    api, _ = _api([("POST", "/wiql", FakeResponse(200, {"queryType": "flat"}))])
    assert api.run_wiql("q") == []


def test_run_wiql_bad_shape():
    api, _ = _api([("POST", "/wiql", FakeResponse(200, {"workItems": [{"url": "x"}]}))])
    with pytest.raises(ResponseShapeError):
        api.run_wiql("q")


def test_get_work_items_batches_ids_and_fields():
    api, session = _api([("GET", "/_apis/wit/workitems", FakeResponse(200, {"value": [{"id": 1, "fields": {}}]}))])
    assert api.get_work_items([1, 2], ["System.Id", "System.Title"]) == [{"id": 1, "fields": {}}]
    params = session.calls[0]["params"]
    assert params["ids"] == "1,2"
    assert params["fields"] == "System.Id,System.Title"
    assert params["api-version"] == "7.1-preview.3"


def test_get_work_items_empty_ids_makes_no_request():
    api, session = _api([])
    assert api.get_work_items([], ["System.Id"]) == []
    assert session.calls == []


def test_update_work_item_sends_json_patch():
    api, session = _api([("PATCH", "/_apis/wit/workitems/7", FakeResponse(200, {"id": 7}))])
    ops = [{"op": "add", "path": "/fields/System.AssignedTo", "value": "Bob"}]
    assert api.update_work_item(7, ops) == {"id": 7}
    call = session.calls[0]
    assert call["json"] == ops
    assert call["headers"] == {"Content-Type": "application/json-patch+json"}


def test_non_success_raises_with_status_and_body():
    api, _ = _api(
        [("PATCH", "/workitems/9", FakeResponse(404, text="TF401232: Work item 9 does not exist", reason="Not Found"))]
    )
    with pytest.raises(AzureDevOpsError) as exc_info:
        api.update_work_item(9, [])
    err = exc_info.value
    assert err.status_code == 404
    assert err.body == "TF401232: Work item 9 does not exist"
    assert str(err) == "Reassign bug failed: 404 Not Found - TF401232: Work item 9 does not exist"


def test_non_json_body_is_shape_error():
    api, _ = _api([("GET", "/teams", FakeResponse(200, text="<html>sign in</html>"))])
    with pytest.raises(ResponseShapeError):
        api.list_teams()


def test_team_urls_encode_project():
    settings = DevOpsSettings(organization="contoso", project="Web Shop", pat="x")
    api, session = _api(
        [
            ("GET", "/members", FakeResponse(200, {"value": []})),
            ("GET", "/teams", FakeResponse(200, {"value": [{"id": "t1"}]})),
        ],
        settings,
    )
    assert api.list_teams() == [{"id": "t1"}]
    assert api.list_team_members("t1") == []
    assert session.calls[0]["url"] == "https://dev.azure.com/contoso/_apis/projects/Web%20Shop/teams"
    assert session.calls[1]["url"] == "https://dev.azure.com/contoso/_apis/projects/Web%20Shop/teams/t1/members"


def test_graph_users_follow_continuation_token():
    pages = [
        FakeResponse(200, {"value": [{"displayName": "A"}]}, headers={"x-ms-continuationtoken": "tok"}),
        FakeResponse(200, {"value": [{"displayName": "B"}]}),
    ]
    api, session = _api([("GET", "vssps.dev.azure.com/contoso/_apis/graph/users", pages)])
    assert [u["displayName"] for u in api.list_graph_users()] == ["A", "B"]
    assert "continuationToken" not in session.calls[0]["params"]
    assert session.calls[1]["params"]["continuationToken"] == "tok"
