import pytest
from pydantic import ValidationError

from codechat.a2ui.catalog import (
    INTERACTIVE_COMPONENT_TYPES,
    ComponentType,
    component_type_of,
    get_component_catalog,
    supported_component_types,
)
from codechat.a2ui.protocol import A2UIAction, OutboundAction, SurfaceComponent, message_kind


def test_catalog_is_closed_over_sixteen_tags():
    assert len(ComponentType) == 16
    assert supported_component_types() == {member.value for member in ComponentType}
    assert component_type_of("MultipleChoice") is ComponentType.MULTIPLE_CHOICE
    assert component_type_of("Chart") is None
    assert component_type_of("text") is None
    assert component_type_of(None) is None


def test_interactive_types():
    assert ComponentType.BUTTON in INTERACTIVE_COMPONENT_TYPES
    assert ComponentType.TEXT not in INTERACTIVE_COMPONENT_TYPES


def test_get_component_catalog_returns_a_copy():
    catalog = get_component_catalog()
    assert catalog["catalogId"] == "standard"
    catalog["components"]["Text"]["props"]["text"] = "changed"
    assert get_component_catalog()["components"]["Text"]["props"]["text"] == "DynamicString"


def test_surface_component_keeps_extra_properties():
    component = SurfaceComponent.model_validate({"id": "t", "component": "Text", "text": {"path": "/x"}})
    assert component.properties() == {"text": {"path": "/x"}}


def test_action_requires_exactly_one_variant():
    assert A2UIAction.model_validate({"event": {"name": "go"}}).event.context == {}
    assert A2UIAction.model_validate({"functionCall": {"call": "openUrl"}}).functionCall.args == {}
    with pytest.raises(ValidationError):
        A2UIAction.model_validate({})
    with pytest.raises(ValidationError):
        A2UIAction.model_validate({"event": {"name": "a"}, "functionCall": {"call": "b"}})


def test_outbound_action_wire_shape():
    outbound = OutboundAction(surfaceId="demo", action=A2UIAction.model_validate({"event": {"name": "go"}}))
    assert outbound.to_wire() == {"surfaceId": "demo", "action": {"event": {"name": "go", "context": {}}}}
    with pytest.raises(ValidationError):
        OutboundAction(surfaceId="demo", action={"event": {"name": "go"}}, extra=True)


def test_message_kind():
    assert message_kind({"updateDataModel": {"surfaceId": "s", "value": {}}}) == "updateDataModel"
    assert message_kind({"other": {}}) is None
    assert message_kind(["not", "a", "message"]) is None
    assert message_kind({"deleteSurface": {}}) == "deleteSurface"
