"""
Backend session binding the persona and model to an LLM provider.

The session is built once per process and shared by every concurrent
reply. Only the optional per-conversation history changes after
construction.
"""

from collections import OrderedDict, deque
from typing import Any

from loguru import logger

from linerelay.providers.base import LLMProvider


class BackendSession:
    """
    Completion session with a fixed system instruction.

    With ``history_turns=0`` (the default) every call is independent. With
    ``history_turns=N`` the last N user/assistant exchanges are kept in
    memory per conversation key, so users never see each other's turns.
    At most ``max_conversations`` keys are kept; the least recently used
    conversation is forgotten first.
    """

    def __init__(
        self,
        provider: LLMProvider,
        persona: str = "",
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        history_turns: int = 0,
        max_conversations: int = 1000,
    ):
        """
        Initialize the session.

        Args:
            provider: LLM provider used for completions.
            persona: System instruction; empty string means none.
            model: Model identifier, defaults to the provider's default.
            max_tokens: Maximum tokens per reply.
            temperature: Sampling temperature.
            history_turns: Exchanges to remember per conversation.
            max_conversations: Conversations to remember at once.
        """
        self._provider = provider
        self._persona = persona
        self._model = model or provider.get_default_model()
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._history_turns = max(history_turns, 0)
        self._max_conversations = max(max_conversations, 1)
        self._histories: OrderedDict[str, deque[tuple[str, str]]] = OrderedDict()

    @property
    def persona(self) -> str:
        return self._persona

    @property
    def model(self) -> str:
        return self._model

    @property
    def provider(self) -> LLMProvider:
        return self._provider

    @property
    def is_stateful(self) -> bool:
        return self._history_turns > 0

    def build_messages(
        self,
        text: str,
        conversation_key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Assemble system instruction, remembered turns and the new user text."""
        messages: list[dict[str, Any]] = []

        if self._persona:
            messages.append({"role": "system", "content": self._persona})

        if self.is_stateful and conversation_key:
            for user_text, assistant_text in self._histories.get(conversation_key, ()):
                messages.append({"role": "user", "content": user_text})
                messages.append({"role": "assistant", "content": assistant_text})

        messages.append({"role": "user", "content": text})
        return messages

    async def complete(self, text: str, conversation_key: str | None = None) -> str:
        """
        Generate a completion for one user text.

        Returns:
            The completion text, or an empty string when the backend
            produced none.

        Raises:
            ProviderError: Propagated from the provider.
        """
        messages = self.build_messages(text, conversation_key)
        response = await self._provider.chat(
            messages=messages,
            model=self._model,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        content = response.content or ""

        if self.is_stateful and conversation_key and content.strip():
            self._remember(conversation_key, text, content)

        return content

    def _remember(self, conversation_key: str, user_text: str, assistant_text: str) -> None:
        history = self._histories.get(conversation_key)
        if history is None:
            history = deque(maxlen=self._history_turns)
            self._histories[conversation_key] = history
            while len(self._histories) > self._max_conversations:
                evicted, _ = self._histories.popitem(last=False)
                logger.debug(f"Evicted history for {evicted}")
        else:
            self._histories.move_to_end(conversation_key)
        history.append((user_text, assistant_text))
        logger.debug(f"History for {conversation_key}: {len(history)} turns")

    def get_history(self, conversation_key: str) -> list[tuple[str, str]]:
        """Get remembered exchanges for a conversation."""
        return list(self._histories.get(conversation_key, ()))

    def clear_history(self, conversation_key: str | None = None) -> None:
        """Forget one conversation, or all of them."""
        if conversation_key is None:
            self._histories.clear()
        else:
            self._histories.pop(conversation_key, None)

    def get_status(self) -> dict[str, Any]:
        """Get session status information."""
        return {
            "model": self._model,
            "has_persona": bool(self._persona),
            "stateful": self.is_stateful,
            "history_turns": self._history_turns,
            "max_conversations": self._max_conversations,
            "conversations": len(self._histories),
        }
