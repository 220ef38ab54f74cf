"""
Route table assembly.

Walks a ``routes/`` directory, imports every route module, compiles its
exported ``router`` (a RouteBuilder) and installs the result at the endpoint
derived from the file path:

    routes/index.py             -> /
    routes/echo.py              -> /echo
    routes/users/_id.py         -> /users/:id

The table is seeded with the health endpoints and finished with a catch-all
404 entry. A module that fails to import or compile is logged and skipped so
the rest of the service still starts; two files deriving the same endpoint
abort assembly.
"""

import importlib.util
import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType, ModuleType
from typing import Iterator, Optional, Union

from fastapi import Request
from fastapi.responses import Response

from filerouter.routing.builder import RouteBuilder
from filerouter.routing.endpoints import ROUTE_FILE_SUFFIX, derive_endpoint
from filerouter.routing.errors import (
    ConfigurationError,
    EndpointCollisionError,
    RouteLoadError,
)
from filerouter.routing.health import SYSTEM_ENDPOINTS
from filerouter.routing.responses import not_found
from filerouter.routing.types import CATCH_ALL, RouteEntry

logger = logging.getLogger(__name__)

# Name each route module must bind its RouteBuilder to
ROUTER_ATTRIBUTE = "router"

# Dotted prefix for imported route modules: routes/users/_id.py -> filerouter_routes.users._id
MODULE_PREFIX = "filerouter_routes"

SYSTEM_SOURCE = "<system>"


async def not_found_handler(request: Request) -> Response:
    """Catch-all entry: any pathname missing from the table."""
    return not_found()


def _freeze_entry(entry: RouteEntry) -> RouteEntry:
    if isinstance(entry, Mapping):
        return MappingProxyType(dict(entry))
    return entry


class RouteTable(Mapping):
    """
    Immutable mapping of endpoint pattern to route entry.

    An entry is either a single callable (health checks, the catch-all) that
    answers every method, or a read-only method table
    ``{"GET": compiled, ...}``. The catch-all lives under ``"*"``.
    """

    __slots__ = ("_entries", "_sources")

    def __init__(
        self,
        entries: Mapping[str, RouteEntry],
        sources: Optional[Mapping[str, str]] = None,
    ):
        if CATCH_ALL not in entries:
            raise ConfigurationError("Route table requires a catch-all entry")

        self._entries = MappingProxyType(
            {endpoint: _freeze_entry(entry) for endpoint, entry in entries.items()}
        )
        self._sources = MappingProxyType(dict(sources or {}))

    def __getitem__(self, endpoint: str) -> RouteEntry:
        return self._entries[endpoint]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def catch_all(self) -> RouteEntry:
        return self._entries[CATCH_ALL]

    def source_of(self, endpoint: str) -> Optional[str]:
        """File (or "<system>") that defined the endpoint, if known."""
        return self._sources.get(endpoint)

    def describe(self, endpoint: str) -> str:
        """Summary line used in startup logs, e.g. ``↪ [GET, POST] /users/:id``."""
        entry = self._entries[endpoint]
        verbs = ", ".join(entry) if isinstance(entry, Mapping) else "FN"
        return f"↪ [{verbs}] {endpoint}"

    def __repr__(self) -> str:
        return f"RouteTable({list(self._entries)})"


def discover_route_files(routes_dir: Path) -> list[Path]:
    """
    Return every route module under routes_dir, sorted for a stable load order.

    Skips ``__init__.py`` files and ``__pycache__`` directories.
    """
    return sorted(
        path
        for path in routes_dir.rglob(f"*{ROUTE_FILE_SUFFIX}")
        if path.is_file()
        and path.name != "__init__.py"
        and "__pycache__" not in path.parts
    )


def _module_name(py_file: Path, routes_dir: Path) -> str:
    relative = py_file.relative_to(routes_dir).with_suffix("")
    return MODULE_PREFIX + "." + ".".join(relative.parts)


def _import_file(py_file: Path, routes_dir: Path) -> ModuleType:
    module_name = _module_name(py_file, routes_dir)

    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        raise RouteLoadError(py_file, "not an importable Python module")

    module = importlib.util.module_from_spec(spec)
    # Registered so dataclasses and pydantic models defined in the module resolve
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise RouteLoadError(py_file, f"{type(exc).__name__}: {exc}", exc) from exc

    return module


def load_route_module(py_file: Path, routes_dir: Path) -> RouteBuilder:
    """
    Import one route module and return its exported RouteBuilder.

    Raises:
        RouteLoadError: If the module fails to import or has no ``router``
            RouteBuilder.
    """
    module = _import_file(py_file, routes_dir)

    builder = getattr(module, ROUTER_ATTRIBUTE, None)
    if builder is None:
        raise RouteLoadError(py_file, f"module does not define '{ROUTER_ATTRIBUTE}'")
    if not isinstance(builder, RouteBuilder):
        raise RouteLoadError(
            py_file,
            f"'{ROUTER_ATTRIBUTE}' must be a RouteBuilder, got {type(builder).__name__}"
        )
    return builder


def assemble_routes(routes_dir: Union[str, Path]) -> RouteTable:
    """
    Build the frozen route table for a routes directory.

    Args:
        routes_dir: Root of the route module tree

    Returns:
        RouteTable with the health endpoints, every loadable route and the
        catch-all.

    Raises:
        EndpointCollisionError: If two sources derive the same endpoint.
    """
    routes_dir = Path(routes_dir)
    entries: dict[str, RouteEntry] = dict(SYSTEM_ENDPOINTS)
    sources: dict[str, str] = {endpoint: SYSTEM_SOURCE for endpoint in entries}
    installed: list[str] = []

    if not routes_dir.is_dir():
        logger.warning(f"Routes directory {routes_dir} not found; serving system endpoints only")
        route_files: list[Path] = []
    else:
        route_files = discover_route_files(routes_dir)

    for py_file in route_files:
        try:
            endpoint = derive_endpoint(py_file, routes_dir)
        except ConfigurationError as exc:
            logger.error(f"Skipping {py_file}: {exc}")
            continue

        try:
            method_table = load_route_module(py_file, routes_dir).compile()
        except RouteLoadError as exc:
            logger.error(str(exc), exc_info=exc.cause)
            continue
        except Exception:
            logger.exception(f"Failed to compile {py_file}")
            continue

        if endpoint in entries:
            error = EndpointCollisionError(endpoint, sources[endpoint], str(py_file))
            logger.error(str(error))
            raise error

        if not method_table:
            logger.warning(f"{py_file} registers no handlers; every method on {endpoint} will answer 405")

        entries[endpoint] = method_table
        sources[endpoint] = str(py_file)
        installed.append(endpoint)

    entries[CATCH_ALL] = not_found_handler
    table = RouteTable(entries, sources)

    for endpoint in installed:
        logger.info(table.describe(endpoint))
    logger.info(f"Route table assembled: {len(installed)} routes from {routes_dir}")

    return table
