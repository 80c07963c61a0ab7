"""Rendering of chat messages into the text prompt format used by Jurassic-2."""

from __future__ import annotations

from collections.abc import Iterable

from bedrock_autoconfig.chat_types import Message, MessageType

HUMAN_PROMPT = "Human:"
ASSISTANT_PROMPT = "Assistant:"


def render_message(message: Message) -> str:
    """Render a user or assistant turn with its speaker prefix."""
    if message.type is MessageType.USER:
        return f"{HUMAN_PROMPT} {message.content}"
    if message.type is MessageType.ASSISTANT:
        return f"{ASSISTANT_PROMPT} {message.content}"
    raise ValueError(f"Cannot render {message.type} message as a dialogue turn")


def messages_to_prompt(messages: Iterable[Message]) -> str:
    """Build a completion prompt from chat messages.

    System messages lead, followed by the dialogue turns and a trailing
    assistant cue; blocks are separated by a blank line.

    Example:
        >>> messages_to_prompt([Message.system("Be brief."), Message.user("Hi")])
        'Be brief.\\n\\nHuman: Hi\\n\\nAssistant:'
    """
    messages = list(messages)
    system_block = "\n".join(m.content for m in messages if m.type is MessageType.SYSTEM)
    dialogue_block = "\n".join(
        render_message(m) for m in messages if m.type is not MessageType.SYSTEM
    )

    blocks = [block for block in (system_block, dialogue_block) if block]
    blocks.append(ASSISTANT_PROMPT)
    return "\n\n".join(blocks)
