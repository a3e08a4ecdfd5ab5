"""Model Invoker — the only place that talks to the inference service.

One prompt in, raw text out. No retries: a failed call surfaces as
UpstreamError and the caller decides what to do.
"""

import os

from langchain_anthropic import ChatAnthropic
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from pma.config import get_config
from pma.errors import ConfigError, UpstreamError

DEFAULT_KEY_ENV = {
    "openrouter": "OPENROUTER_API_KEY",
    "google": "GOOGLE_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def api_key_env() -> str:
    """Name of the environment variable holding the configured provider's key."""
    config = get_config()
    provider = config.get("provider", "openrouter")
    if provider not in DEFAULT_KEY_ENV:
        raise ConfigError(
            f"Unknown provider '{provider}'. Must be one of: {', '.join(DEFAULT_KEY_ENV)}"
        )
    return config.get("api_key_env") or DEFAULT_KEY_ENV[provider]


def get_api_key() -> str:
    """Return the configured API key or raise ConfigError."""
    env_name = api_key_env()
    key = os.environ.get(env_name, "").strip()
    if not key:
        raise ConfigError(f"Missing {env_name}. Set it in the environment or a .env file.")
    return key


def model_settings(stage: str) -> tuple[str, float]:
    """Return (model_id, temperature) configured for a stage."""
    models = get_config().get("models", {})
    if stage not in models:
        raise ConfigError(f"No model configured for stage '{stage}'.")
    entry = models[stage]
    if not isinstance(entry, dict) or not entry.get("model"):
        raise ConfigError(f"Stage '{stage}' has no model id configured.")
    try:
        temperature = float(entry.get("temperature", 0.7))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Stage '{stage}' has an invalid temperature: {exc}") from exc
    return entry["model"], temperature


def _build_llm(model_id: str, temperature: float, api_key: str):
    config = get_config()
    provider = config.get("provider", "openrouter")
    timeout = config.get("request_timeout")

    if provider == "google":
        return ChatGoogleGenerativeAI(
            model=model_id, temperature=temperature, google_api_key=api_key, timeout=timeout,
        )
    if provider == "anthropic":
        return ChatAnthropic(
            model=model_id, temperature=temperature, api_key=api_key, timeout=timeout,
        )
    return ChatOpenAI(
        model=model_id,
        temperature=temperature,
        api_key=api_key,
        base_url=config.get("openrouter_base_url", "https://openrouter.ai/api/v1"),
        timeout=timeout,
    )


def _response_text(response) -> str:
    """Flatten a chat model response into plain text."""
    content = response.content
    if isinstance(content, str):
        return content
    # Some providers return a list of content blocks
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


async def invoke(model_id: str, prompt: str, temperature: float) -> str:
    """Send one prompt to the named model and return the raw text.

    Raises ConfigError before any network call when no credential is set
    or the client cannot be built, UpstreamError when the call itself fails.
    """
    api_key = get_api_key()
    try:
        llm = _build_llm(model_id, temperature, api_key)
    except Exception as exc:
        raise ConfigError(f"Could not create a client for {model_id}: {exc}") from exc

    try:
        response = await llm.ainvoke([{"role": "user", "content": prompt}])
    except Exception as exc:
        raise UpstreamError(f"{model_id} API error: {exc}") from exc

    return _response_text(response)
