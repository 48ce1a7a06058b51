"""Chat response generation conditioned on retrieved site context."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.llm.prompts import build_system_prompt
from src.retrieval.retriever import RetrievalService

logger = logging.getLogger(__name__)


@dataclass
class ChatMessage:
    """One turn of the conversation as sent by the chat widget."""

    role: str
    content: str

    def __post_init__(self):
        if self.role not in ("user", "assistant"):
            raise ValueError(f"role must be 'user' or 'assistant', got {self.role!r}")


@dataclass
class ChatReply:
    reply: str
    context_used: bool


class ChatResponder:
    """Answers the latest user message using retrieved context.

    The context comes from the retrieval service; when it is empty the model
    answers without context. The responder has no side effects: persisting
    the conversation is the caller's next step.
    """

    def __init__(self, retriever: RetrievalService, llm: BaseChatModel):
        self.retriever = retriever
        self.llm = llm

    def build_messages(self, messages: list[ChatMessage]) -> tuple[list[BaseMessage], bool]:
        """Return the LangChain message list and whether context was found."""
        if not messages:
            raise ValueError("messages must not be empty")
        last = messages[-1]
        if last.role != "user":
            raise ValueError("last message must be from the user")

        context = self.retriever.retrieve(last.content)
        prompt: list[BaseMessage] = [SystemMessage(content=build_system_prompt(context))]
        for message in messages:
            if message.role == "user":
                prompt.append(HumanMessage(content=message.content))
            else:
                prompt.append(AIMessage(content=message.content))
        return prompt, bool(context)

    def respond(self, messages: list[ChatMessage]) -> ChatReply:
        prompt, context_used = self.build_messages(messages)
        response = self.llm.invoke(prompt)
        logger.info("Generated reply (context used: %s)", context_used)
        return ChatReply(reply=_content_text(response.content), context_used=context_used)

    def stream(self, messages: list[ChatMessage]) -> Iterator[str]:
        """Yield the reply text as the model produces it."""
        prompt, _ = self.build_messages(messages)
        for piece in self.llm.stream(prompt):
            text = _content_text(piece.content)
            if text:
                yield text


def _content_text(content) -> str:
    # Some providers return a list of content blocks instead of a string
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
