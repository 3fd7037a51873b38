"""Message list utilities for the assistant conversation."""

from typing import Any, List, Optional, Sequence

from astro_assistant.models.request import Message

# Prefix marking an error shown in place of an assistant reply
ERROR_MARKER = "⚠️"


def append_fragment(messages: Sequence[Message], fragment: str) -> List[Message]:
    """
    Fold a streamed fragment into the conversation.

    Extends the content of the last message when it is an assistant message,
    otherwise starts a new assistant message. The input list is left untouched.

    Args:
        messages: Conversation so far, oldest first
        fragment: Text to append

    Returns:
        New list where only the last element differs

    Examples:
        >>> append_fragment([Message(role="user", content="Hi")], "Hel")
        [Message(role='user', content='Hi'), Message(role='assistant', content='Hel')]
    """
    updated = list(messages)
    if updated and updated[-1].role == "assistant":
        last = updated[-1]
        updated[-1] = last.model_copy(update={"content": last.content + fragment})
    else:
        updated.append(Message(role="assistant", content=fragment))
    return updated


def last_assistant_message(messages: Sequence[Message]) -> Optional[Message]:
    """Return the trailing assistant message, if the conversation ends with one."""
    if messages and messages[-1].role == "assistant":
        return messages[-1]
    return None


def format_error_text(error: str) -> str:
    """Render an error as assistant text."""
    return f"{ERROR_MARKER} {error}"


def build_upstream_messages(
    messages: Sequence[Message], system_prompt: Optional[str] = None
) -> List[dict[str, Any]]:
    """
    Convert conversation messages into OpenAI chat format.

    The system prompt, when given, goes first.
    """
    formatted = []
    if system_prompt:
        formatted.append({"role": "system", "content": system_prompt})
    formatted.extend({"role": m.role, "content": m.content} for m in messages)
    return formatted
