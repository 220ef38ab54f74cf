"""
Endpoint derivation: route file path -> URL pattern.

    routes/index.py                  -> /
    routes/users/_id.py              -> /users/:id
    routes/posts/_slug/comments.py   -> /posts/:slug/comments
    routes/admin/ROOT.py             -> /admin

Segments starting with ``_`` become named parameters. A trailing ``index``
or ``root`` segment (any case) maps to its parent directory.
"""

import posixpath
from pathlib import PurePath
from typing import Union

from filerouter.routing.errors import ConfigurationError

ROUTE_FILE_SUFFIX = ".py"

PARAM_PREFIX = ":"

_FILE_PARAM_PREFIX = "_"

_INDEX_NAMES = frozenset({"index", "root"})

PathLike = Union[str, PurePath]


def normalize_separators(path: PathLike) -> str:
    """Use forward slashes regardless of the platform the path came from."""
    return str(path).replace("\\", "/")


def _clean(path: str) -> str:
    return posixpath.normpath(path) if path else path


def _to_segment(name: str) -> str:
    if not name.startswith(_FILE_PARAM_PREFIX):
        return name

    param = name[len(_FILE_PARAM_PREFIX):]
    if not param:
        raise ConfigurationError(f"Route segment {name!r} has an empty parameter name")
    return PARAM_PREFIX + param


def derive_endpoint(file_path: PathLike, routes_root: PathLike) -> str:
    """
    Derive the URL pattern for a route file.

    Args:
        file_path: Path of the route module (absolute or relative)
        routes_root: The routes directory the file was discovered under

    Returns:
        Endpoint pattern, always starting with "/"

    Raises:
        ConfigurationError: If the file is outside routes_root or a parameter
            segment has no name.
    """
    path = _clean(normalize_separators(file_path))
    root = _clean(normalize_separators(routes_root)).rstrip("/")

    if root and root != ".":
        if path == root:
            path = ""
        elif path.startswith(root + "/"):
            path = path[len(root):]
        else:
            raise ConfigurationError(f"Route file {file_path} is not under {routes_root}")

    if path.lower().endswith(ROUTE_FILE_SUFFIX):
        path = path[: -len(ROUTE_FILE_SUFFIX)]

    segments = [_to_segment(part) for part in path.split("/") if part and part != "."]

    if segments and segments[-1].lower() in _INDEX_NAMES:
        segments.pop()

    return "/" + "/".join(segments)


def split_endpoint(endpoint: str) -> tuple[str, ...]:
    """Split an endpoint pattern (or a request path) into its segments."""
    stripped = endpoint.strip("/")
    return tuple(stripped.split("/")) if stripped else ()


def is_parameter(segment: str) -> bool:
    return segment.startswith(PARAM_PREFIX)


def is_parameterized(endpoint: str) -> bool:
    """True when the pattern has at least one ``:name`` segment."""
    return any(is_parameter(segment) for segment in split_endpoint(endpoint))
