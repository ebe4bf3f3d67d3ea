import pytest
from pydantic import ValidationError

from moviechat.conversation import GREETING, Conversation
from moviechat.schemas.chat_schemas import ChatMessage


def test_start_seeds_greeting():
    conversation = Conversation.start()
    (greeting,) = conversation.snapshot()
    assert greeting.role == "assistant"
    assert greeting.content == GREETING


def test_append_preserves_order():
    conversation = Conversation()
    a = conversation.add_user_message("A")
    b = conversation.add_assistant_message("B")
    assert conversation.snapshot() == (a, b)
    assert len(conversation) == 2


def test_snapshot_is_a_copy():
    conversation = Conversation()
    before = conversation.snapshot()
    conversation.add_user_message("later")
    assert before == ()
    assert len(conversation.snapshot()) == 1


def test_message_ids_are_unique():
    conversation = Conversation()
    ids = {conversation.add_user_message("same").id for _ in range(50)}
    assert len(ids) == 50


def test_messages_are_immutable():
    message = ChatMessage(content="hi", role="user")
    with pytest.raises(ValidationError):
        message.content = "changed"


def test_role_is_restricted():
    with pytest.raises(ValidationError):
        ChatMessage(content="hi", role="system")


def test_from_messages_keeps_client_transcript():
    messages = [ChatMessage(content="one", role="assistant"),
                ChatMessage(content="two", role="user")]
    conversation = Conversation.from_messages(messages)
    assert [m.content for m in conversation.snapshot()] == ["one", "two"]
    assert conversation.busy is False
