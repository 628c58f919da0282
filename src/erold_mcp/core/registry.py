from __future__ import annotations

import importlib
import inspect
import logging
import pkgutil
from types import ModuleType
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, get_type_hints

from .client import EroldClient
from .guidelines import GuidelineService

log = logging.getLogger("erold_mcp.core.registry")

# First-parameter names that are supplied by the server, never by the caller.
INJECTABLES = ("client", "guidelines")


# --- Discovery helpers ----------------------------------------------------- #


def discover_tool_modules(
    package_name: str = "erold_mcp.core.tools",
) -> List[ModuleType]:
    """Import all modules under the given tools package, skipping failures."""
    modules: List[ModuleType] = []
    base_pkg = importlib.import_module(package_name)

    for finder in pkgutil.iter_modules(base_pkg.__path__, base_pkg.__name__ + "."):
        name = finder.name
        if name.rsplit(".", 1)[-1].startswith("_"):
            continue
        try:
            module = importlib.import_module(name)
            modules.append(module)
        except Exception as exc:  # pragma: no cover - logged, not fatal
            log.error("Failed importing tool module %s: %s", name, exc)
            continue

    return modules


def iter_tool_functions(module: ModuleType) -> Iterable[Callable]:
    """Yield coroutine functions whose first parameter is an injectable."""
    for _, func in inspect.getmembers(module, inspect.iscoroutinefunction):
        if func.__name__.startswith("_"):
            continue
        if func.__module__ != module.__name__:
            # Skip imported functions
            continue

        params = list(inspect.signature(func).parameters.values())
        if not params or params[0].name not in INJECTABLES:
            log.debug(
                "Skipping %s.%s: first parameter must be one of %s",
                module.__name__,
                func.__name__,
                ", ".join(INJECTABLES),
            )
            continue

        yield func


# --- Wrapping / registration ---------------------------------------------- #


def _wrap_tool(func: Callable, providers: Dict[str, Callable[[], Any]]) -> Callable:
    """Return a wrapper that injects the first argument and hides it."""
    original_sig = inspect.signature(func)
    type_hints = get_type_hints(func, include_extras=True)
    params = list(original_sig.parameters.items())
    injected = params[0][0]
    provider = providers[injected]

    new_params = []
    for name, param in params[1:]:
        ann = type_hints.get(name, param.annotation)
        new_params.append(param.replace(annotation=ann))

    return_ann = type_hints.get("return", original_sig.return_annotation)
    new_sig = inspect.Signature(parameters=new_params, return_annotation=return_ann)

    async def wrapped(*args, **kwargs):
        return await func(provider(), *args, **kwargs)

    wrapped.__name__ = func.__name__
    wrapped.__doc__ = func.__doc__
    wrapped.__module__ = func.__module__
    wrapped.__signature__ = new_sig  # type: ignore[attr-defined]
    return wrapped


def _as_provider(value: Any, kind: type) -> Optional[Callable[[], Any]]:
    if value is None:
        return None
    if isinstance(value, kind):
        return lambda: value
    return value


def register_discovered_tools(
    app,
    client_provider: Callable[[], EroldClient] | EroldClient,
    modules: List[ModuleType] | None = None,
    guidelines_provider: Callable[[], GuidelineService] | GuidelineService | None = None,
) -> List[str]:
    """
    Register discovered tools on an app that exposes a .tool decorator.

    Returns the registered tool names in registration order.
    """
    if not hasattr(app, "tool"):
        raise TypeError("app must expose a 'tool' decorator")

    guideline_service: Optional[GuidelineService] = None

    def default_guidelines() -> GuidelineService:
        nonlocal guideline_service
        if guideline_service is None:
            guideline_service = GuidelineService()
        return guideline_service

    providers: Dict[str, Callable[[], Any]] = {
        "client": _as_provider(client_provider, EroldClient),
        "guidelines": _as_provider(guidelines_provider, GuidelineService)
        or default_guidelines,
    }

    modules = modules or discover_tool_modules()
    seen_names: Set[str] = set()
    registered: List[str] = []

    for module in modules:
        for func in iter_tool_functions(module):
            name = func.__name__
            if name in seen_names:
                raise ValueError(f"Duplicate tool name detected: {name}")

            wrapped = _wrap_tool(func, providers)
            app.tool(name=name)(wrapped)
            seen_names.add(name)
            registered.append(name)
            log.info("Registered tool: %s (%s)", name, module.__name__)

    return registered


__all__ = [
    "INJECTABLES",
    "discover_tool_modules",
    "iter_tool_functions",
    "register_discovered_tools",
]
