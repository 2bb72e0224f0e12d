import json
import logging

import pytest
import yaml
from click.testing import CliRunner

from codechat.command import codechat_render
from codechat.command.codechat_render import build_render_report, run

ALICE_MESSAGES = [
    {"createSurface": {"surfaceId": "profile", "catalogId": "standard"}},
    {
        "updateComponents": {
            "surfaceId": "profile",
            "components": [
                {"id": "root", "component": "Column", "children": ["greeting"]},
                {"id": "greeting", "component": "Text", "text": {"path": "/user/name"}},
            ],
        }
    },
    {"updateDataModel": {"surfaceId": "profile", "value": {"user": {"name": "Alice"}}}},
]


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(codechat_render, "setup_logging", lambda **kwargs: None)
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)


def test_build_render_report_for_message_list():
    report = build_render_report(ALICE_MESSAGES, surface_id="profile", tool_name="render_ui")

    assert report["source"] == "messages"
    surface = report["surfaces"][0]
    assert surface["surfaceId"] == "profile"
    assert surface["interactive"] is False
    assert surface["tree"]["children"][0]["props"]["text"] == "Alice"


def test_build_render_report_for_history_object():
    history = {
        "messages": [
            {"role": "user", "content": "Show profile"},
            {
                "role": "assistant",
                "content": [
                    {
                        "type": "toolCall",
                        "id": "tc1",
                        "name": "render_ui",
                        "arguments": {"surface_id": "profile", "messages": ALICE_MESSAGES},
                    }
                ],
            },
        ]
    }

    report = build_render_report(history, surface_id="unused", tool_name="render_ui")

    assert report["source"] == "history"
    assert [surface["surfaceId"] for surface in report["surfaces"]] == ["profile"]


def test_build_render_report_rejects_other_documents():
    with pytest.raises(ValueError):
        build_render_report({"not": "messages"}, surface_id="s", tool_name="render_ui")


def test_cli_prints_json_tree(tmp_path):
    input_path = tmp_path / "messages.json"
    input_path.write_text(json.dumps(ALICE_MESSAGES), encoding="utf-8")

    result = CliRunner().invoke(run, [str(input_path), "--surface-id", "profile"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["surfaces"][0]["tree"]["id"] == "root"
    assert report["surfaces"][0]["dataModel"] == {"user": {"name": "Alice"}}


def test_cli_reads_yaml_and_writes_output_file(tmp_path):
    input_path = tmp_path / "messages.yaml"
    input_path.write_text(yaml.safe_dump(ALICE_MESSAGES), encoding="utf-8")
    output_path = tmp_path / "out" / "report.json"

    result = CliRunner().invoke(run, [str(input_path), "-o", str(output_path)])

    assert result.exit_code == 0, result.output
    assert "surfaces: 1" in result.output
    report = json.loads(output_path.read_text(encoding="utf-8"))
    assert report["surfaces"][0]["surfaceId"] == "surface"


def test_cli_uses_render_tool_name_from_config(tmp_path):
    history = [
        {
            "role": "assistant",
            "content": [
                {
                    "type": "toolCall",
                    "id": "tc1",
                    "name": "show_ui",
                    "arguments": {"surface_id": "profile", "messages": ALICE_MESSAGES},
                }
            ],
        }
    ]
    input_path = tmp_path / "history.json"
    input_path.write_text(json.dumps(history), encoding="utf-8")
    config_path = tmp_path / "client.yaml"
    config_path.write_text("a2ui_config:\n  render_tool_name: show_ui\n", encoding="utf-8")

    result = CliRunner().invoke(run, [str(input_path), "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert [surface["surfaceId"] for surface in json.loads(result.output)["surfaces"]] == ["profile"]


def test_cli_reports_bad_input(tmp_path):
    input_path = tmp_path / "bad.json"
    input_path.write_text(json.dumps({"not": "messages"}), encoding="utf-8")

    result = CliRunner().invoke(run, [str(input_path)])

    assert result.exit_code == 1
    assert "Expected a list" in result.output


def test_cli_reports_catalog_id_with_config_default(tmp_path):
    bare = [message for message in ALICE_MESSAGES if "createSurface" not in message]
    input_path = tmp_path / "bare.json"
    input_path.write_text(json.dumps(bare), encoding="utf-8")
    config_path = tmp_path / "client.json"
    config_path.write_text(json.dumps({"a2ui_config": {"catalog_id": "internal"}}), encoding="utf-8")

    result = CliRunner().invoke(run, [str(input_path), "-c", str(config_path)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["surfaces"][0]["catalogId"] == "internal"

    report = build_render_report(ALICE_MESSAGES, surface_id="profile", tool_name="render_ui", catalog_id="internal")
    assert report["surfaces"][0]["catalogId"] == "standard"
