from erold_mcp.core.mappers import (
    project_from_wire,
    project_to_wire,
    projects_from_wire,
)


def test_from_wire_renames_title():
    assert project_from_wire({"id": "p1", "title": "Alpha"}) == {
        "id": "p1",
        "name": "Alpha",
    }


def test_from_wire_keeps_existing_name():
    out = project_from_wire({"id": "p1", "title": "Wire", "name": "Tool"})
    assert out["name"] == "Tool"
    assert "title" not in out


def test_to_wire_renames_and_drops_unset():
    assert project_to_wire({"name": "Alpha", "description": None, "status": "active"}) == {
        "title": "Alpha",
        "status": "active",
    }


def test_to_wire_keeps_empty_description():
    assert project_to_wire({"description": ""}) == {"description": ""}


def test_round_trip():
    tool_side = {"name": "Alpha", "slug": "alpha", "status": "planning"}
    assert project_from_wire(project_to_wire(tool_side)) == tool_side


def test_list_and_non_dict_payloads():
    assert projects_from_wire([{"title": "A"}, {"title": "B"}]) == [
        {"name": "A"},
        {"name": "B"},
    ]
    assert projects_from_wire(None) is None
