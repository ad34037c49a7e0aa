"""Adapters around local model runtimes (Model Runner / Ollama)."""

from __future__ import annotations

import ipaddress
import json
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from .base import GenerationError, join_prompt_sections

_AUTO_BASE_URL = object()
_AUTO_API_KEY = object()


@dataclass
class LLMRequest:
    """Represents an inference request for the local runner."""

    prompt: str
    system: Optional[str]
    model: str
    temperature: Optional[float]
    max_tokens: Optional[int]
    executable: Optional[str]
    base_url: Optional[str]
    api_key: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Executes prompts against the configured local model runtime."""

    DEFAULT_MODEL = "ai/smollm2:360M-Q4_K_M"
    DEFAULT_BASE_URL = "http://localhost:12434/engines/v1"
    ENV_MODEL_KEYS = ("BLOCKDOC_LLM_MODEL", "MODEL_RUNNER_MODEL", "OPENAI_MODEL")
    ENV_BASE_URL_KEYS = (
        "BLOCKDOC_LLM_BASE_URL",
        "MODEL_RUNNER_BASE_URL",
        "OPENAI_BASE_URL",
    )
    ENV_API_KEY_KEYS = (
        "BLOCKDOC_LLM_API_KEY",
        "MODEL_RUNNER_API_KEY",
        "OPENAI_API_KEY",
    )

    def __init__(
        self,
        model: str | None = None,
        *,
        base_url: str | None | object = _AUTO_BASE_URL,
        executable: str = "ollama",
        temperature: Optional[float] = 0.2,
        max_tokens: Optional[int] = None,
        api_key: str | None | object = _AUTO_API_KEY,
        request_timeout: Optional[float] = 60.0,
        system_prompt: str | None = None,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = self._resolve_model(model)
        self.base_url = self._resolve_base_url(base_url)
        self.executable = executable
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = self._resolve_api_key(api_key)
        self.request_timeout = request_timeout
        self.system_prompt = system_prompt
        if runner is not None:
            self._runner = runner
        else:
            self._runner = self._http_runner if self.base_url else self._cli_runner

    @classmethod
    def environment_configured(cls) -> bool:
        """Return True when any runner environment variable is set."""
        keys = (*cls.ENV_MODEL_KEYS, *cls.ENV_BASE_URL_KEYS, *cls.ENV_API_KEY_KEYS)
        return cls._first_env_value(keys) is not None

    def generate(self, prompt_sections: Sequence[str]) -> str:
        """Join prompt sections and run them with the configured system prompt."""
        prompt = join_prompt_sections(prompt_sections)
        if not prompt:
            raise GenerationError("Refusing to send an empty prompt")
        return self.run(prompt, system=self.system_prompt)

    def run(self, prompt: str, *, system: str | None = None) -> str:
        """Send the prompt to the configured local model and return the response text."""
        request = LLMRequest(
            prompt=prompt,
            system=system,
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            executable=self.executable,
            base_url=self.base_url,
            api_key=self.api_key,
            request_timeout=self.request_timeout,
        )
        return self._runner(request)

    @staticmethod
    def _cli_runner(request: LLMRequest) -> str:
        args = [request.executable or "ollama", "run", request.model]
        if request.system:
            args.extend(["--system", request.system])
        if request.temperature is not None:
            args.extend(["--temperature", str(request.temperature)])
        if request.max_tokens is not None:
            args.extend(["--num-predict", str(request.max_tokens)])
        args.append(request.prompt)
        try:
            completed = subprocess.run(
                args,
                check=True,
                capture_output=True,
                text=True,
                timeout=request.request_timeout,
            )
        except FileNotFoundError as exc:  # pragma: no cover - depends on environment
            raise GenerationError(
                f"Unable to locate '{request.executable}'. Install Ollama or configure llm.base_url."
            ) from exc
        except subprocess.CalledProcessError as exc:  # pragma: no cover - depends on environment
            raise GenerationError(
                f"LLM runner failed with exit code {exc.returncode}: {exc.stderr.strip()}"
            ) from exc
        except subprocess.TimeoutExpired as exc:  # pragma: no cover - depends on environment
            raise GenerationError(f"LLM runner timed out after {exc.timeout}s") from exc
        output = completed.stdout.strip()
        if not output:
            raise GenerationError("LLM runner returned no output")
        return output

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        if not request.base_url:
            raise GenerationError("HTTP runner requires a base_url to be configured.")
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": LLMRunner._build_messages(request.system, request.prompt),
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature
        if request.max_tokens is not None:
            payload["max_tokens"] = request.max_tokens

        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"

        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or 60.0

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:  # pragma: no cover - depends on runtime
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = detail.strip() or exc.reason
            raise GenerationError(
                f"LLM HTTP runner failed with status {exc.code}: {message}"
            ) from exc
        except URLError as exc:  # pragma: no cover - depends on runtime
            raise GenerationError(f"LLM HTTP runner failed: {exc.reason}") from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise GenerationError("LLM HTTP runner returned invalid JSON") from exc

        content = LLMRunner._extract_content(response_payload)
        if not content:
            raise GenerationError("LLM HTTP runner returned an empty response")
        return content.strip()

    @staticmethod
    def _build_messages(system: str | None, prompt: str) -> list[dict[str, str]]:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        text = first.get("text")
        if isinstance(text, str):
            return text
        return ""

    def _resolve_model(self, model: str | None) -> str:
        if model:
            return model
        return self._first_env_value(self.ENV_MODEL_KEYS) or self.DEFAULT_MODEL

    def _resolve_base_url(self, base_url: str | None | object) -> str | None:
        if base_url is None:
            return None
        if base_url is not _AUTO_BASE_URL:
            return self._ensure_local_url(str(base_url))
        env_value = self._first_env_value(self.ENV_BASE_URL_KEYS)
        return self._ensure_local_url(env_value or self.DEFAULT_BASE_URL)

    def _resolve_api_key(self, api_key: str | None | object) -> str | None:
        if api_key is _AUTO_API_KEY:
            return self._first_env_value(self.ENV_API_KEY_KEYS)
        return api_key  # type: ignore[return-value]

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None

    @classmethod
    def _ensure_local_url(cls, url: str) -> str:
        normalized = url.rstrip("/")
        host = urlparse(normalized).hostname
        if host is None or cls._is_local_host(host):
            return normalized
        raise GenerationError(
            f"Remote base_url '{url}' is not permitted. Configure a local model runner."
        )

    @staticmethod
    def _is_local_host(host: str) -> bool:
        lowered = host.lower()
        if lowered in {"localhost", "127.0.0.1", "0.0.0.0", "::1", "model-runner.docker.internal"}:
            return True
        if lowered.endswith((".local", ".localdomain")):
            return True
        try:
            return ipaddress.ip_address(lowered).is_loopback
        except ValueError:
            return False


__all__ = ["LLMRequest", "LLMRunner"]
