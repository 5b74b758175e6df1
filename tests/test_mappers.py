import pandas as pd

from devops_app.core.mappers import (
    bugs_to_dataframe,
    map_graph_user,
    map_team_identity,
    map_work_item,
    priority_label,
    state_badge_color,
)
from devops_app.core.models import BugRecord


def test_map_work_item_full_record():
    raw = {
        "id": 42,
        "fields": {
            "System.Title": "Checkout button misaligned",
            "System.AssignedTo": {"displayName": "Alice Smith", "uniqueName": "alice@contoso.com"},
            "Microsoft.VSTS.Common.Priority": 3,
            "System.State": "Active",
            "System.ChangedDate": "2024-09-02T10:00:00.123Z",
        },
    }
    bug = map_work_item(raw)
    assert bug == BugRecord(
        id=42,
        title="Checkout button misaligned",
        assigned_to="Alice Smith",
        priority=3,
        state="Active",
        changed_date="2024-09-02T10:00:00.123Z",
    )


def test_map_work_item_defaults_missing_assignee_and_priority():
    bug = map_work_item({"id": 7, "fields": {"System.Title": "No owner", "System.State": "New"}})
    assert bug.assigned_to == "Unassigned"
    assert bug.priority == 2
    assert bug.state == "New"


def test_map_work_item_is_total_on_garbage():
    assert map_work_item({}) == BugRecord(id=0, title=None)
    assert map_work_item({"id": "9", "fields": None}).id == 9
    bug = map_work_item({"id": 1, "fields": {"System.AssignedTo": {"displayName": ""}}})
    assert bug.assigned_to == "Unassigned"


def test_map_work_item_string_identity_is_unassigned_and_numeric_string_priority_converted():
    bug = map_work_item(
        {"id": 3, "fields": {"System.AssignedTo": "Bob <bob@contoso.com>", "Microsoft.VSTS.Common.Priority": "1"}}
    )
    assert bug.assigned_to == "Unassigned"
    assert bug.priority == 1


def test_map_work_item_zero_priority_falls_back_to_medium():
    assert map_work_item({"id": 4, "fields": {"Microsoft.VSTS.Common.Priority": 0}}).priority == 2
    assert map_work_item({"id": 5, "fields": {"Microsoft.VSTS.Common.Priority": "0"}}).priority == 2
    assert map_work_item({"id": 6, "fields": {"Microsoft.VSTS.Common.Priority": 4}}).priority == 4


def test_team_and_graph_mapping():
    member = map_team_identity({"identity": {"id": "u1", "displayName": "Alice", "uniqueName": "alice@c.com"}})
    assert member.to_dict() == {"id": "u1", "displayName": "Alice", "uniqueName": "alice@c.com"}
    user = map_graph_user({"descriptor": "aad.X", "displayName": "Bob", "mailAddress": "bob@c.com"})
    assert user.unique_name == "bob@c.com"


def test_priority_and_state_badges():
    assert priority_label(1) == "Low"
    assert priority_label(3) == "High"
    assert priority_label(4) == "Low"
    assert priority_label(None) == "Low"
    assert state_badge_color("New") == "blue"
    assert state_badge_color("Resolved") == "gray"


def test_bugs_to_dataframe_derives_display_columns():
    bugs = [
        BugRecord(id=1, title="A", priority=3, state="New", changed_date="2024-09-01T10:00:00Z"),
        {"id": 2, "title": "B", "assignedTo": "Bob", "priority": 2, "state": "Active", "changedDate": None},
    ]
    df = bugs_to_dataframe(bugs, timezone="America/Santiago")
    assert list(df["id"]) == [1, 2]
    assert list(df["priority_label"]) == ["High", "Medium"]
    assert str(df["changed"].dt.tz) == "America/Santiago"
    assert pd.isna(df.loc[1, "changed"])
    assert df.loc[0, "days_since_change"] > 0


def test_bugs_to_dataframe_empty():
    df = bugs_to_dataframe([])
    assert df.empty
    assert "assignedTo" in df.columns
