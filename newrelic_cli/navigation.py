"""Tolerant accessors for untyped JSON response trees.

NerdGraph and REST responses are shape-variable: optional fields, union
types and schema drift. The ``as_*`` accessors never raise; they degrade to a
zero value so a missing field and a present-but-default field look the same.

Mappers walk multi-level paths with ``expect_object``/``expect_list``, which
raise a ``ResponseError`` naming the first key that did not match.
"""

from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .exceptions import ResponseError


JSONObject = Dict[str, Any]
JSONList = List[Any]

# List elements that are not objects are dropped while mapping, they never
# fail the call. The containing list itself must still be present.
SKIP_MALFORMED_LIST_ITEMS = True


class ShapeError(ResponseError):
    """Shape mismatch reported by the ``lookup_*`` accessors."""


def as_object(node: Any) -> Tuple[JSONObject, bool]:
    """Return ``(node, True)`` for an object node, else ``({}, False)``."""
    if isinstance(node, dict):
        return node, True
    return {}, False


def as_list(node: Any) -> Tuple[JSONList, bool]:
    """Return ``(node, True)`` for a list node, else ``([], False)``."""
    if isinstance(node, list):
        return node, True
    return [], False


def as_string(node: Any) -> str:
    """Return the node if it is a string, else ``""``."""
    if isinstance(node, str):
        return node
    return ""


def as_int(node: Any) -> int:
    """Truncate a numeric node to int, else 0.

    JSON numbers decode as int or float; booleans are not numbers here.
    """
    if isinstance(node, bool):
        return 0
    if isinstance(node, (int, float)):
        return int(node)
    return 0


def as_bool(node: Any) -> bool:
    """Return True only for a literal JSON ``true``."""
    return node is True


def lookup_object(parent: JSONObject, key: str) -> Union[JSONObject, ShapeError]:
    """Strict variant of ``as_object(parent.get(key))``.

    Returns the child object, or a ``ShapeError`` value (not raised) that the
    caller may raise or discard.
    """
    child, ok = as_object(parent.get(key))
    if not ok:
        return ShapeError(f"unexpected response format: missing {key}", missing=key)
    return child


def lookup_list(parent: JSONObject, key: str) -> Union[JSONList, ShapeError]:
    """Strict variant of ``as_list(parent.get(key))``."""
    child, ok = as_list(parent.get(key))
    if not ok:
        return ShapeError(f"unexpected response format: missing {key}", missing=key)
    return child


def expect_object(parent: JSONObject, key: str) -> JSONObject:
    """Return ``parent[key]`` as an object or raise a path-specific error."""
    child = lookup_object(parent, key)
    if isinstance(child, ShapeError):
        raise child
    return child


def expect_list(parent: JSONObject, key: str) -> JSONList:
    """Return ``parent[key]`` as a list or raise a path-specific error."""
    child = lookup_list(parent, key)
    if isinstance(child, ShapeError):
        raise child
    return child


def expect_path(root: JSONObject, *keys: str) -> JSONObject:
    """Walk nested objects, failing at the first key that is not an object."""
    node = root
    for key in keys:
        node = expect_object(node, key)
    return node


def objects_in(items: JSONList) -> Iterator[JSONObject]:
    """Yield the object elements of a list, dropping anything else."""
    for item in items:
        obj, ok = as_object(item)
        if ok:
            yield obj
        elif not SKIP_MALFORMED_LIST_ITEMS:
            raise ResponseError("unexpected response format: list element is not an object")


def first_error_message(payload: JSONObject) -> Optional[str]:
    """Return the first embedded mutation error, or None when there are none.

    Mutation payloads carry their own ``errors`` list next to the result.
    Later errors are discarded. Both ``message`` and ``description`` are used
    by different mutations.
    """
    errors, ok = as_list(payload.get("errors"))
    if not ok or not errors:
        return None
    first, _ = as_object(errors[0])
    return as_string(first.get("message")) or as_string(first.get("description"))
