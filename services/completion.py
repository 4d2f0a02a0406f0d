import logging
import openai
from openai import AsyncOpenAI

from utils.config import Settings
from utils.errors import UpstreamError

logger = logging.getLogger(__name__)


class CompletionClient:
    """Chat completion calls against an OpenAI-compatible API (OpenRouter by default)."""

    def __init__(self, settings: Settings, http_client=None):
        self.model = settings.completion_model
        self.client = AsyncOpenAI(
            api_key=settings.completion_api_key or "missing-key",
            base_url=settings.completion_base_url,
            max_retries=0,
            http_client=http_client,
        )

    async def complete(self, messages: list[dict], temperature: float, timeout: float) -> str:
        try:
            res = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                timeout=timeout,
            )
        except openai.APITimeoutError as e:
            logger.error(f"Completion API timed out after {timeout}s")
            raise UpstreamError(details=f"Completion API timed out: {e}") from e
        except openai.APIError as e:
            logger.error(f"Completion API request failed: {e}")
            raise UpstreamError(details=str(e)) from e
        except ValueError as e:
            # a body that claims to be JSON but is not, e.g. a proxy error page
            logger.error(f"Completion API returned an unreadable body: {e}")
            raise UpstreamError(details=f"Malformed completion response: {e}") from e

        try:
            content = res.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise UpstreamError(details=f"Malformed completion response: {e}") from e
        if content is None:
            raise UpstreamError(details="Completion API returned no content")
        return content

    async def close(self):
        await self.client.close()
