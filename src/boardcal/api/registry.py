from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type, get_type_hints

from pydantic import BaseModel, ConfigDict, ValidationError, create_model

logger = logging.getLogger(__name__)

JsonSchema = Dict[str, Any]


class ApiArgumentError(ValueError):
    """Arguments passed to a registered function failed validation."""


def _model_name(name: str) -> str:
    return "".join(part.title() for part in name.split("_")) + "Arguments"


def _arguments_model(name: str, func: Callable[..., Any]) -> Type[BaseModel]:
    """Build a pydantic model mirroring ``func``'s keyword parameters."""

    hints = get_type_hints(func)
    fields: Dict[str, Any] = {}
    for param in inspect.signature(func).parameters.values():
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (hints.get(param.name, Any), default)
    return create_model(_model_name(name), __config__=ConfigDict(extra="forbid"), **fields)


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    arguments: Type[BaseModel]

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.func)

    @property
    def writes(self) -> bool:
        return "write" in self.tags

    @property
    def parameter_schema(self) -> JsonSchema:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        return schema

    def bind(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Validate and coerce raw arguments, e.g. ``"2"`` to ``2`` for integers."""

        try:
            validated = self.arguments.model_validate(arguments)
        except ValidationError as exc:
            raise ApiArgumentError(f"{self.name}: {_describe(exc)}") from exc
        return dict(validated)


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            arguments=_arguments_model(name, func),
        )
        return func

    return decorator


def get_api_functions(category: Optional[str] = None) -> List[ApiFunction]:
    return [function for function in REGISTRY.values() if category is None or function.category == category]


def _lookup(name: str) -> ApiFunction:
    if name not in REGISTRY:
        raise KeyError(f"API function '{name}' is not registered.")
    return REGISTRY[name]


async def acall_api(name: str, **kwargs: Any) -> Any:
    """Validate arguments and invoke a registered function inside a running loop."""

    api_function = _lookup(name)
    bound = api_function.bind(kwargs)
    if api_function.writes:
        logger.info("Calling %s for %s", name, bound.get("item_id"))
    result = api_function.func(**bound)
    if inspect.isawaitable(result):
        return await result
    return result


def call_api(name: str, **kwargs: Any) -> Any:
    """Synchronous entry point for the CLI; runs coroutines to completion."""

    return asyncio.run(acall_api(name, **kwargs))
