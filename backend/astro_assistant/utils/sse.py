# Wire format of the chat stream
SSE_DATA_PREFIX = "data: "
SSE_DONE_SENTINEL = "[DONE]"


def extract_delta_content(data) -> str | None:
    """Return choices[0].delta.content from a parsed frame payload, if present."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    delta = choice.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None
