from codechat.a2ui.children import ChildRef, referenced_child_ids, resolve_children
from codechat.a2ui.data_model import ReactiveStore


def _ids(refs):
    return [ref.id for ref in refs]


def test_flat_list_and_explicit_list():
    store = ReactiveStore()
    assert _ids(resolve_children({"children": ["a", "b"]}, store)) == ["a", "b"]
    assert _ids(resolve_children({"children": {"explicitList": ["c", "d"]}}, store)) == ["c", "d"]


def test_non_string_ids_are_skipped():
    store = ReactiveStore()
    assert _ids(resolve_children({"children": ["a", 3, None, "", "b"]}, store)) == ["a", "b"]


def test_singular_child_used_when_no_plural_form():
    store = ReactiveStore()
    assert resolve_children({"child": "label"}, store, "/items/2") == [ChildRef("label", "/items/2")]
    assert resolve_children({}, store) == []


def test_plural_form_wins_over_singular_child():
    store = ReactiveStore()
    refs = resolve_children({"children": ["a"], "child": "b"}, store)
    assert _ids(refs) == ["a"]


def test_template_repeats_component_per_item():
    store = ReactiveStore({"items": [{"name": "x"}, {"name": "y"}, {"name": "z"}]})
    refs = resolve_children(
        {"children": {"template": {"dataBinding": "/items", "componentId": "row"}}},
        store,
    )
    assert refs == [
        ChildRef("row", "/items/0"),
        ChildRef("row", "/items/1"),
        ChildRef("row", "/items/2"),
    ]


def test_template_over_non_list_or_missing_value_yields_nothing():
    store = ReactiveStore({"items": {"not": "a list"}})
    template = {"children": {"template": {"dataBinding": "/items", "componentId": "row"}}}
    assert resolve_children(template, store) == []

    missing = {"children": {"template": {"dataBinding": "/nothing", "componentId": "row"}}}
    assert resolve_children(missing, store) == []


def test_nested_template_binds_relative_to_enclosing_item():
    store = ReactiveStore({"groups": [{"members": ["a"]}, {"members": ["b", "c"]}]})
    refs = resolve_children(
        {"children": {"template": {"dataBinding": "/members", "componentId": "member"}}},
        store,
        "/groups/1",
    )
    assert refs == [
        ChildRef("member", "/groups/1/members/0"),
        ChildRef("member", "/groups/1/members/1"),
    ]


def test_referenced_child_ids_covers_every_encoding():
    assert referenced_child_ids({"children": ["a", "b"]}) == ["a", "b"]
    assert referenced_child_ids({"children": {"explicitList": ["c"]}}) == ["c"]
    assert referenced_child_ids(
        {"children": {"template": {"dataBinding": "/x", "componentId": "row"}}}
    ) == ["row"]
    assert referenced_child_ids({"child": "d"}) == ["d"]
    assert referenced_child_ids({"text": "no children"}) == []
