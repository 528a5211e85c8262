"""
Text-completion transport for the oracle
Supports Gemini (google-genai) and OpenAI-compatible chat completions
"""

import os

import openai
from dotenv import load_dotenv
from google import genai
from google.genai import errors as genai_errors
from loguru import logger

from thepaper.errors import ConfigError, OracleError, OracleOverloadedError

DEFAULT_MODELS = {
    "gemini": "gemini-2.0-flash",
    "openai": "gpt-4o-mini",
}
OVERLOADED_STATUS = {429, 503, 529}


class AIProvider:
    """Single synchronous call: prompt in, plain text out"""

    def __init__(self, provider: str, api_key: str, model: str = None, base_url: str = None):
        provider = (provider or "gemini").lower()
        if provider not in DEFAULT_MODELS:
            raise ConfigError(f"Unsupported AI_PROVIDER: {provider}")
        if not api_key:
            raise ConfigError("GPT_API_KEY environment variable is required")

        self.provider = provider
        self.model = model or DEFAULT_MODELS[provider]
        if provider == "gemini":
            self.client = genai.Client(api_key=api_key)
        else:
            self.client = openai.OpenAI(api_key=api_key, base_url=base_url)
        logger.info(f"AI provider: {self.provider} ({self.model})")

    @staticmethod
    def build_from_envs():
        load_dotenv()
        return AIProvider(
            provider=os.environ.get("AI_PROVIDER", "gemini"),
            api_key=os.environ.get("GPT_API_KEY", ""),
            model=os.environ.get("GPT_MODEL_NAME") or None,
            base_url=os.environ.get("GPT_BASE_URL") or None,
        )

    def request(self, prompt: str, content: str = "") -> str:
        text = f"{prompt}\n\n{content}" if content else prompt
        if self.provider == "gemini":
            return self._request_gemini(text)
        return self._request_openai(text)

    def _request_gemini(self, text: str) -> str:
        try:
            response = self.client.models.generate_content(model=self.model, contents=text)
        except genai_errors.APIError as e:
            if e.code in OVERLOADED_STATUS:
                raise OracleOverloadedError(f"{e.code} {e.status}: {e.message}") from e
            raise OracleError(f"Gemini request failed: {e}") from e
        return response.text or ""

    def _request_openai(self, text: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": text}],
            )
        except openai.RateLimitError as e:
            raise OracleOverloadedError(f"429: {e}") from e
        except openai.APIStatusError as e:
            if e.status_code in OVERLOADED_STATUS:
                raise OracleOverloadedError(f"{e.status_code}: {e}") from e
            raise OracleError(f"OpenAI request failed: {e}") from e
        except openai.APIError as e:
            raise OracleError(f"OpenAI request failed: {e}") from e
        return response.choices[0].message.content or ""
