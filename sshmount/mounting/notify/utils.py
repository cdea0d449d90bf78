# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Plugin registration and discovery for notifiers."""

import importlib
import inspect
import logging
import pkgutil
import textwrap
from types import ModuleType
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Type,
    TypeVar,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
Factory = Callable[..., T]
ClassDecorator = Callable[[Type[T]], Type[T]]
Register = Callable[[str], ClassDecorator[T]]

T_co = TypeVar("T_co", covariant=True)


def discover(package: ModuleType) -> Dict[str, ModuleType]:
    """Import every module of a namespace package so their `@register` decorators
    run. Returns the imported modules by qualified name.
    """
    if not hasattr(package, "__path__"):
        raise RuntimeError(f"{package.__name__} is not a package")

    modules = {}
    for info in pkgutil.iter_modules(package.__path__, package.__name__ + "."):
        logger.debug(f"Importing plugin module {info.name}")
        modules[info.name] = importlib.import_module(info.name)
    return modules


def make_register(registry: MutableMapping[str, Factory[T_co]]) -> Register[T_co]:
    """Make a decorator factory which records classes in `registry` by name.

    >>> registry: Dict[str, Factory[object]] = {}
    >>> register = make_register(registry)
    >>> @register("impl")
    ... class Impl:
    ...     pass
    >>> registry["impl"] is Impl
    True
    """

    def register(name: str) -> ClassDecorator[T_co]:
        def decorator(cls: Type[T_co]) -> Type[T_co]:
            existing = registry.get(name)
            if existing is not None:
                raise RuntimeError(f"'{name}' is already registered to {existing}")
            registry[name] = cls
            return cls

        return decorator

    return register


def factory_signature(factory: Factory[Any]) -> inspect.Signature:
    """The signature of a factory as users call it, i.e. without `self`."""
    if isinstance(factory, type) and factory.__init__ is object.__init__:  # type: ignore[misc]
        return inspect.Signature()
    return inspect.signature(factory)


def keyword_only_params(factory: Factory[Any]) -> Dict[str, inspect.Parameter]:
    return {
        name: p
        for name, p in factory_signature(factory).parameters.items()
        if p.kind is inspect.Parameter.KEYWORD_ONLY
    }


def describe_factories(registry: Mapping[str, Factory[Any]]) -> str:
    """One paragraph per factory, sorted by name: its module, the options it
    accepts and its docstring.
    """
    paragraphs = []
    for name in sorted(registry):
        factory = registry[name]
        options = ", ".join(str(p) for p in keyword_only_params(factory).values())
        doc = inspect.getdoc(factory) or "No documentation found."
        paragraphs.append(
            "\n".join(
                [
                    f"{name} (module {factory.__module__})",
                    textwrap.indent(f"Options: {options or 'none'}\n{doc}", "  "),
                ]
            )
        )
    return "\n\n".join(paragraphs)


def explain_init_error(
    exc: TypeError,
    plugin_name: str,
    factory: Factory[Any],
    kwargs: Mapping[str, Any],
) -> Optional[str]:
    """Turn the `TypeError` raised by a factory called with bad options into a
    message naming the offending options, or `None` if it has another cause.
    """
    accepted = keyword_only_params(factory)
    unexpected: List[str] = sorted(set(kwargs) - set(accepted))
    missing: List[str] = sorted(
        name
        for name, p in accepted.items()
        if p.default is inspect.Parameter.empty and name not in kwargs
    )
    text = str(exc)

    if unexpected and "unexpected keyword argument" in text:
        valid = ", ".join(sorted(accepted)) or "none"
        return (
            f"Notifier '{plugin_name}' got unrecognized options: "
            f"{', '.join(unexpected)}. Valid options: {valid}"
        )
    if missing and "required keyword-only argument" in text:
        return (
            f"Notifier '{plugin_name}' is missing required options: "
            f"{', '.join(missing)}"
        )
    return None
