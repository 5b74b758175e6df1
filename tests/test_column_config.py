from devops_app.core.column_config import get_columns, load_column_sets


def test_column_sets_load():
    sets = load_column_sets(reload=True)
    assert "bug_list" in sets and "core" in sets
    assert isinstance(get_columns("bug_list"), list)
    assert get_columns("missing") == []


def test_column_sets_from_yaml(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets:\n  bug_list: [title, state]\n")
    try:
        sets = load_column_sets(tmp_path, reload=True)
        assert sets["bug_list"] == ["title", "state"]
        assert "assignedTo" in sets["core"]
    finally:
        load_column_sets(reload=True)


def test_unreadable_yaml_falls_back(tmp_path):
    (tmp_path / "columns.yaml").write_text("sets: [unclosed\n")
    try:
        sets = load_column_sets(tmp_path, reload=True)
        assert "Work Item" in sets["bug_list"]
    finally:
        load_column_sets(reload=True)
