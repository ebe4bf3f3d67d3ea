from typing import Iterable, List, Tuple
from .schemas.chat_schemas import ChatMessage

GREETING = (
    "Hi! I'm your movie recommendation assistant. Tell me about your mood, "
    "favorite genres, or any specific preferences you have in mind!"
)


class Conversation:
    """
    Append-only transcript of chat messages.

    Messages are kept in the order they were appended. There is no way to
    edit or remove one. `busy` is set while a recommendation is in flight so
    the caller can refuse a second submission.
    """

    def __init__(self, messages: Iterable[ChatMessage] = ()):
        self._messages: List[ChatMessage] = list(messages)
        self.busy = False

    @classmethod
    def start(cls) -> "Conversation":
        return cls([ChatMessage(content=GREETING, role='assistant')])

    @classmethod
    def from_messages(cls, messages: Iterable[ChatMessage]) -> "Conversation":
        return cls(messages)

    def append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    def add_user_message(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(content=content, role='user'))

    def add_assistant_message(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(content=content, role='assistant'))

    def snapshot(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)
