"""Chat service layer for component generation.

Handles:
- Prompt assembly (system contract + bounded history + current component)
- Streaming relay of the completion service's output
- Recording the finished reply and any component it carries
"""
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional
import asyncio
import logging
import time

from openai import AsyncOpenAI
from sqlmodel import Session

from app.config import Settings
from app.models.component import ComponentVersion
from app.models.conversation import ChatMessage, ChatRole
from app.services import session_service
from app.services.artifact_parser import parse_component_payload

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an expert React component generator. Generate clean, modern React components based on user requests.

Rules:
1. Always return valid JSX/TSX code
2. Use modern React patterns (functional components, hooks)
3. Include proper TypeScript types when applicable
4. Use Tailwind CSS for styling
5. Make components responsive and accessible
6. If modifying existing code, apply only the requested changes

Current component context:
{context}

Format your response as JSON with this structure:
{{
  "jsx": "// Your JSX/TSX code here",
  "css": "/* Your CSS code here (if needed) */",
  "explanation": "Brief explanation of what you created/changed"
}}"""


class ChatService:
    """Generation proxy in front of the completion service."""

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        """
        Initialize chat service.

        Args:
            settings: Model, temperature, timeout and history limits
            client: AsyncOpenAI-compatible client; built from settings if omitted
        """
        self.settings = settings
        self._client = client

    @property
    def client(self) -> Any:
        """Completion client, created on first use."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.settings.OPENAI_API_KEY or None,
                timeout=self.settings.OPENAI_TIMEOUT,
                max_retries=0,
            )
        return self._client

    def build_system_prompt(self, latest: Optional[ComponentVersion]) -> str:
        """Inline the latest component so the model edits rather than regenerates."""
        if latest:
            context = f"JSX: {latest.jsx_code or ''}\nCSS: {latest.css_code or ''}"
        else:
            context = "No existing component"
        return SYSTEM_PROMPT.format(context=context)

    def build_messages(
        self,
        history: list[ChatMessage],
        latest: Optional[ComponentVersion],
    ) -> list[Dict[str, str]]:
        """
        Convert stored messages to OpenAI format.

        Only the last CHAT_HISTORY_LIMIT turns are sent.
        """
        recent = history[-self.settings.CHAT_HISTORY_LIMIT:]
        messages = [{"role": "system", "content": self.build_system_prompt(latest)}]
        for msg in recent:
            messages.append({"role": msg.role, "content": msg.content})
        return messages

    async def open_stream(self, messages: list[Dict[str, str]]) -> Any:
        """
        Start a streaming completion.

        Errors from the completion service propagate; no retry here.
        """
        return await self.client.chat.completions.create(
            model=self.settings.OPENAI_MODEL,
            messages=messages,
            temperature=self.settings.OPENAI_TEMPERATURE,
            stream=True,
        )

    async def relay(
        self,
        stream: Any,
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> AsyncIterator[str]:
        """
        Yield text deltas in arrival order.

        Stops when the client goes away or GENERATION_MAX_SECONDS elapse,
        including while waiting on a stalled upstream.
        The upstream stream is always closed on exit.
        """
        deadline = time.monotonic() + self.settings.GENERATION_MAX_SECONDS
        chunks = stream.__aiter__()
        try:
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        f"Generation exceeded {self.settings.GENERATION_MAX_SECONDS}s, cutting off"
                    )
                    break
                try:
                    chunk = await asyncio.wait_for(chunks.__anext__(), timeout=remaining)
                except StopAsyncIteration:
                    break
                except asyncio.TimeoutError:
                    logger.warning(
                        f"Generation exceeded {self.settings.GENERATION_MAX_SECONDS}s, cutting off"
                    )
                    break

                if await is_disconnected():
                    logger.info("Client disconnected, stopping generation relay")
                    break

                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta.content
                if delta:
                    yield delta
        finally:
            await stream.close()

    def record_reply(
        self,
        session: Session,
        session_id: int,
        text: str,
    ) -> tuple[ChatMessage, Optional[ComponentVersion]]:
        """
        Store the assembled assistant reply.

        The reply is always stored as a message. A new component version is
        saved only when the reply parses to a payload with JSX.
        """
        message = session_service.add_chat_message(
            session, session_id, ChatRole.ASSISTANT, text
        )

        payload = parse_component_payload(text)
        if payload is None:
            logger.debug(f"Reply in session={session_id} carried no component payload")
            return message, None

        component = session_service.save_component_version(
            session,
            session_id,
            payload.jsx,
            payload.css,
            max_attempts=self.settings.VERSION_SAVE_ATTEMPTS,
        )
        return message, component
