from __future__ import annotations

import pytest

from relay_providers.base.models import (
    CompletionRequest,
    CompletionResponse,
    ContentPart,
    Message,
    TokenUsage,
    ToolCall,
    ToolSpec,
)


def test_message_rejects_unknown_role():
    with pytest.raises(ValueError):
        Message(role="robot", content="hi")  # type: ignore[arg-type]


def test_tool_calls_only_on_assistant():
    call = ToolCall(id="c1", name="lookup", arguments="{}")
    with pytest.raises(ValueError):
        Message(role="user", content="hi", tool_calls=[call])
    msg = Message.assistant("", tool_calls=[call])
    assert msg.tool_calls == [call]  # nosec B101


def test_assistant_without_tool_calls_normalizes_to_none():
    assert Message.assistant("ok", tool_calls=[]).tool_calls is None  # nosec B101


def test_text_or_joined_uses_parts_and_image_placeholders():
    msg = Message.user(parts=[ContentPart.of_text("look at"), ContentPart.of_image("https://x/cat.png")])
    assert msg.has_parts()  # nosec B101
    assert msg.text_or_joined() == "look at\n[Image: https://x/cat.png]"  # nosec B101
    assert Message.user("plain").text_or_joined() == "plain"  # nosec B101


def test_tool_result_attribution_fallbacks():
    both = Message.tool("42", tool_call_id="c1", name="calc")
    assert both.tool_result_label() == "calc"  # nosec B101
    assert both.tool_result_id() == "c1"  # nosec B101
    only_id = Message.tool("42", tool_call_id="c1")
    assert only_id.tool_result_label() == "c1"  # nosec B101
    bare = Message.tool("42")
    assert bare.tool_result_label() == "unknown"  # nosec B101
    assert bare.tool_result_id() == "unknown"  # nosec B101


def test_tool_call_parsed_arguments():
    assert ToolCall(id="c", name="f", arguments="").parsed_arguments() == {}  # nosec B101
    assert ToolCall(id="c", name="f", arguments='{"a": 1}').parsed_arguments() == {"a": 1}  # nosec B101
    with pytest.raises(ValueError):
        ToolCall(id="c", name="f", arguments="[1, 2]").parsed_arguments()


def test_tool_spec_defaults_to_empty_object_schema():
    spec = ToolSpec(name="noop")
    assert spec.parameters == {"type": "object", "properties": {}}  # nosec B101


def test_token_usage_of_computes_total():
    assert TokenUsage.of(5, 3) == TokenUsage(5, 3, 8)  # nosec B101


def test_request_and_response_to_dict():
    req = CompletionRequest(
        model="gpt-4o",
        messages=[Message.user("hi")],
        tools=[ToolSpec(name="lookup")],
        max_tokens=10,
    )
    assert req.has_tools()  # nosec B101
    assert req.to_dict()["tools"] == ["lookup"]  # nosec B101
    resp = CompletionResponse(
        message=Message.assistant("", tool_calls=[ToolCall(id="c", name="lookup", arguments="{}")]),
        finish_reason="tool_calls",
        usage=TokenUsage.of(1, 2),
    )
    data = resp.to_dict()
    assert data["finish_reason"] == "tool_calls"  # nosec B101
    assert data["tool_calls"][0]["name"] == "lookup"  # nosec B101
    assert data["usage"] == {"prompt_tokens": 1, "completion_tokens": 2, "total_tokens": 3}  # nosec B101
