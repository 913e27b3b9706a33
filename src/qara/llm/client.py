"""
LLM Client Wrapper - async interface to LiteLLM.

Provides one awaitable completion call with optional structured output
parsed into a Pydantic schema. Every call is a single attempt: failures are
raised as LLMError and never retried here.
"""

import time
import uuid
from typing import Any, Dict, List, Optional, Type

import litellm
from pydantic import BaseModel, ValidationError

from ..exceptions import LLMError
from ..models.contracts import LLMResponse
from ..models.enums import EventType, Lane
from ..observability.emitter import EventEmitter


class LLMClient:
    """
    Async LLM client using LiteLLM for multi-provider support.

    Example:
        client = LLMClient(default_model="gemini/gemini-2.0-flash-exp")

        response = await client.acomplete(
            messages=[{"role": "user", "content": "Hello"}],
            response_schema=OutputSchema,
        )
    """

    def __init__(
        self,
        default_model: str = "gemini/gemini-2.0-flash-exp",
        timeout: int = 60,
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        """
        Initialize LLM client.

        Args:
            default_model: Default model to use (LiteLLM format: "provider/model")
            timeout: Request timeout in seconds, enforced by LiteLLM
            temperature: Default sampling temperature
            max_tokens: Default maximum tokens to generate
            emitter: Receives llm.request / llm.response events
        """
        self.default_model = default_model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.emitter = emitter if emitter is not None else EventEmitter()

    async def acomplete(
        self,
        messages: List[Dict[str, str]],
        response_schema: Optional[Type[BaseModel]] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        function_name: Optional[str] = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """
        Call the LLM with messages and optional structured output.

        Args:
            messages: List of messages in chat format
            response_schema: Optional Pydantic model for structured output
            model: Optional model override
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature override
            function_name: Label used in trace events
            **kwargs: Additional parameters for litellm.acompletion()

        Returns:
            LLMResponse; ``content`` is a ``response_schema`` instance when a
            schema was given, otherwise the raw text

        Raises:
            LLMError: If the call or schema parsing fails
        """
        model = model or self.default_model
        request_id = uuid.uuid4().hex[:12]
        label = function_name or (response_schema.__name__ if response_schema else "completion")
        start_time = time.perf_counter()

        self.emitter.emit(
            EventType.LLM_REQUEST,
            Lane.LLM,
            {"request_id": request_id, "client": model, "function": label},
        )

        completion_kwargs: Dict[str, Any] = {
            "model": model,
            "messages": messages,
            "timeout": self.timeout,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if max_tokens or self.max_tokens:
            completion_kwargs["max_tokens"] = max_tokens or self.max_tokens
        if response_schema:
            completion_kwargs.update(self._structured_output_kwargs(model, response_schema))
        completion_kwargs.update(kwargs)

        try:
            response = await litellm.acompletion(**completion_kwargs)
            content = self._extract_content(response, model, response_schema)
        except Exception as e:
            self.emitter.emit(
                EventType.LLM_RESPONSE,
                Lane.LLM,
                {
                    "request_id": request_id,
                    "client": model,
                    "duration_ms": (time.perf_counter() - start_time) * 1000,
                    "success": False,
                    "error": str(e),
                },
            )
            if isinstance(e, LLMError):
                raise
            raise LLMError(
                f"LLM completion failed: {str(e)}",
                details={"model": model, "function": label, "error_type": type(e).__name__},
                status_code=getattr(e, "status_code", None),
            ) from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        usage = getattr(response, "usage", None)
        input_tokens = usage.prompt_tokens if usage else 0
        output_tokens = usage.completion_tokens if usage else 0

        self.emitter.emit(
            EventType.LLM_RESPONSE,
            Lane.LLM,
            {
                "request_id": request_id,
                "client": model,
                "duration_ms": latency_ms,
                "output_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
                "success": True,
            },
        )

        return LLMResponse(
            content=content,
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            latency_ms=latency_ms,
            finish_reason=response.choices[0].finish_reason or "stop",
            raw_response=response,
        )

    @staticmethod
    def _provider(model: str) -> str:
        return model.split("/")[0] if "/" in model else "unknown"

    def _structured_output_kwargs(
        self, model: str, response_schema: Type[BaseModel]
    ) -> Dict[str, Any]:
        schema_json = response_schema.model_json_schema()

        # Gemini: enforce the schema through a forced function call
        if self._provider(model) == "gemini":
            return {
                "tools": [
                    {
                        "type": "function",
                        "function": {
                            "name": "format_response",
                            "description": "Format the response according to schema",
                            "parameters": schema_json,
                        },
                    }
                ],
                "tool_choice": {"type": "function", "function": {"name": "format_response"}},
            }

        return {
            "response_format": {
                "type": "json_schema",
                "json_schema": {"name": response_schema.__name__, "schema": schema_json},
            }
        }

    def _extract_content(
        self, response: Any, model: str, response_schema: Optional[Type[BaseModel]]
    ) -> Any:
        message = response.choices[0].message
        if response_schema is None:
            return message.content

        raw = message.content
        tool_calls = getattr(message, "tool_calls", None)
        if self._provider(model) == "gemini" and tool_calls:
            raw = tool_calls[0].function.arguments

        if not raw:
            raise LLMError(
                f"Empty response for {response_schema.__name__}",
                details={"model": model},
            )

        try:
            return response_schema.model_validate_json(raw)
        except ValidationError as e:
            raise LLMError(
                f"Failed to parse response into {response_schema.__name__}: {e}",
                details={"model": model, "raw_content": raw[:500]},
            ) from e
