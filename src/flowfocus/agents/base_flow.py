"""
Base Flow for FlowFocus AI generation.

This module provides the base class shared by every generation flow. A flow
validates a structured request, renders it into a prompt, runs a single
LangChain call and validates the JSON the model returns.
"""

import logging
import os
from abc import ABC
from pathlib import Path
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Sequence, Type, TypeVar, Union, get_args

import openai
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.output_parsers import JsonOutputParser
from langchain_core.prompts import PromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ValidationError

from ..exceptions import FlowValidationError, GenerationError
from ..models.config import FlowFocusConfig
from ..models.settings import DefaultSettings

# Set up module logger
logger = logging.getLogger(__name__)

# Generic type for request models
TInput = TypeVar('TInput', bound=BaseModel)
# Generic type for flow results
TOutput = TypeVar('TOutput')


def field_path(model: Type[BaseModel], loc: Sequence[Union[str, int]]) -> str:
    """
    Dotted path of a validation error location, using field names.

    Error locations name aliased fields by their alias; this maps each part
    back through the model (and nested models) to the Python field name.
    """
    parts: List[str] = []
    current: Any = model
    for part in loc:
        if isinstance(part, str) and isinstance(current, type) and issubclass(current, BaseModel):
            name = next(
                (key for key, info in current.model_fields.items() if part in (key, info.alias)),
                part
            )
            parts.append(name)
            info = current.model_fields.get(name)
            current = _nested_model(info.annotation) if info is not None else None
        else:
            parts.append(str(part))
    return ".".join(parts)


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    for arg in get_args(annotation):
        nested = _nested_model(arg)
        if nested is not None:
            return nested
    return None


class GenerationFlow(ABC, Generic[TInput, TOutput]):
    """
    Abstract base class for FlowFocus generation flows.

    Subclasses describe themselves with class attributes:

    - ``name``: flow name used in logs and errors
    - ``input_model``: pydantic model for the request
    - ``output_model``: pydantic model the model's JSON must match
    - ``template``: prompt text; must reference ``{format_instructions}``
    - ``temperature``: sampling temperature used by ``from_config``

    and may override ``_prompt_variables`` and ``_postprocess``.
    """

    name: ClassVar[str] = "generation"
    input_model: ClassVar[Type[BaseModel]]
    output_model: ClassVar[Type[BaseModel]]
    template: ClassVar[str] = ""
    temperature: ClassVar[float] = DefaultSettings.DEFAULT_TEMPERATURE

    def __init__(self, chat_model: BaseChatModel) -> None:
        """
        Initialize the flow with LangChain components.

        Args:
            chat_model: Chat model the prompt is sent to
        """
        self.chat_model = chat_model

        # Set up output parser for structured responses
        self.output_parser = JsonOutputParser(pydantic_object=self.output_model)

        self.prompt = PromptTemplate.from_template(self.template)

        # Create the generation chain
        self.chain = self.prompt | self.chat_model | self.output_parser

    @classmethod
    def from_config(cls, config: FlowFocusConfig) -> "GenerationFlow[TInput, TOutput]":
        """
        Create the flow with an OpenAI chat model built from configuration.

        Args:
            config: FlowFocus configuration

        Returns:
            Configured flow instance
        """
        return cls(create_chat_model(config, temperature=cls.temperature))

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def validate_input(self, data: Union[TInput, Mapping[str, Any]]) -> TInput:
        """
        Validate a request against the flow's input model.

        Args:
            data: Request model instance or mapping of field values

        Returns:
            Validated request

        Raises:
            FlowValidationError: Listing the dotted paths of the offending fields
        """
        if isinstance(data, self.input_model):
            return data

        try:
            return self.input_model.model_validate(data)
        except ValidationError as e:
            fields: List[str] = []
            for error in e.errors():
                path = field_path(self.input_model, error["loc"]) or "input"
                if path not in fields:
                    fields.append(path)
            raise FlowValidationError(self.name, fields, details=f"{e.error_count()} error(s)") from e

    def _prompt_variables(self, request: TInput) -> Dict[str, Any]:
        """Template variables for a request; defaults to the request's fields."""
        return request.model_dump()

    def _build_variables(self, request: TInput) -> Dict[str, Any]:
        variables = self._prompt_variables(request)
        variables["format_instructions"] = self.output_parser.get_format_instructions()
        return variables

    def render_prompt(self, data: Union[TInput, Mapping[str, Any]]) -> str:
        """
        Render the prompt a request would send, without calling the model.

        Args:
            data: Request model instance or mapping of field values

        Returns:
            Prompt text
        """
        request = self.validate_input(data)
        return self.prompt.format(**self._build_variables(request))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self, data: Union[TInput, Mapping[str, Any]]) -> TOutput:
        """
        Run the flow once.

        Args:
            data: Request model instance or mapping of field values

        Returns:
            Validated, post-processed result

        Raises:
            FlowValidationError: If the request is invalid
            GenerationError: If the call fails or the model's output is malformed
        """
        request = self.validate_input(data)
        logger.info(f"{self.name} started")

        try:
            raw = self.chain.invoke(self._build_variables(request))
        except OutputParserException as e:
            logger.error(f"{self.name} returned unparseable output: {e}")
            raise GenerationError(f"{self.name} returned malformed output") from e
        except openai.OpenAIError as e:
            logger.error(f"{self.name} call failed: {e}", exc_info=True)
            raise GenerationError(f"{self.name} failed: {e}") from e

        return self._finish(request, raw)

    async def arun(self, data: Union[TInput, Mapping[str, Any]]) -> TOutput:
        """
        Run the flow once without blocking the event loop.

        Same contract as ``run``.
        """
        request = self.validate_input(data)
        logger.info(f"{self.name} started")

        try:
            raw = await self.chain.ainvoke(self._build_variables(request))
        except OutputParserException as e:
            logger.error(f"{self.name} returned unparseable output: {e}")
            raise GenerationError(f"{self.name} returned malformed output") from e
        except openai.OpenAIError as e:
            logger.error(f"{self.name} call failed: {e}", exc_info=True)
            raise GenerationError(f"{self.name} failed: {e}") from e

        return self._finish(request, raw)

    def _finish(self, request: TInput, raw: Any) -> TOutput:
        logger.debug(f"{self.name} raw output: {raw!r}")
        output = self._parse_output(raw)
        result = self._postprocess(request, output)
        logger.info(f"{self.name} completed")
        return result

    def _parse_output(self, raw: Any) -> BaseModel:
        """
        Validate the parsed JSON against the output model.

        Raises:
            GenerationError: If the JSON does not match the output model
        """
        try:
            return self.output_model.model_validate(raw)
        except ValidationError as e:
            logger.error(f"{self.name} output does not match {self.output_model.__name__}: {e}")
            raise GenerationError(f"{self.name} returned malformed output") from e

    def _postprocess(self, request: TInput, output: BaseModel) -> TOutput:
        """Turn validated output into the flow's result; identity by default."""
        return output  # type: ignore[return-value]


def load_api_key(config: FlowFocusConfig) -> str:
    """
    Load the OpenAI API key.

    The configured key file wins; without one the ``OPENAI_API_KEY``
    environment variable is used.

    Args:
        config: FlowFocus configuration

    Returns:
        The API key

    Raises:
        FileNotFoundError: If no key file is configured or found and the
            environment variable is unset
    """
    if config.openai_key_path is not None:
        key_path = Path(config.openai_key_path).expanduser()
        if key_path.exists():
            return key_path.read_text().strip()

    env_key = os.environ.get("OPENAI_API_KEY")
    if env_key:
        return env_key

    raise FileNotFoundError(
        f"OpenAI API key file not found at {config.openai_key_path}. "
        f"Run 'flowfocus wizard' to configure."
    )


def create_chat_model(
    config: FlowFocusConfig,
    temperature: float = DefaultSettings.DEFAULT_TEMPERATURE,
    model: Optional[str] = None
) -> ChatOpenAI:
    """
    Factory function to create the OpenAI chat model used by the flows.

    Args:
        config: FlowFocus configuration
        temperature: Sampling temperature
        model: Model name; the configured default when None

    Returns:
        Configured ChatOpenAI instance
    """
    return ChatOpenAI(
        model=model or config.default_model,
        temperature=temperature,
        api_key=load_api_key(config),
    )
