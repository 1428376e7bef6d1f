"""
CityInfo API: JSON Patch Application
====================================

What:  Applies an ordered list of JSON Patch (RFC 6902) operations to a flat
       representation with a fixed set of members.
How:   Works on a copy of the input dict. Each operation is resolved against
       the allowed members and applied in order; an operation that cannot be
       applied is recorded and skipped. The caller receives the patched copy
       only when every operation succeeded.
Who:   Used by the PATCH handler on the transient PointOfInterestForUpdate view.

Operation semantics on a fixed-member object:
    add      → set the member to value
    replace  → set the member to value
    remove   → reset the member to null
    move     → copy from-member to path-member, then reset from-member
    copy     → copy from-member to path-member
    test     → fail unless the member equals value

Member names in paths are matched case-insensitively ("/Name" == "/name").
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from cityinfo.schemas.point_of_interest import PatchOperation

logger = logging.getLogger(__name__)


class JsonPatchError(Exception):
    """An operation could not be applied. `member` is the error's field key."""

    def __init__(self, message: str, member: str):
        self.message = message
        self.member = member
        super().__init__(message)


def parse_pointer(pointer: str) -> List[str]:
    """
    Split a JSON Pointer into unescaped reference tokens.

    "" → [], "/name" → ["name"], "/a~1b" → ["a/b"], "/m~0n" → ["m~n"]
    """
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise JsonPatchError(f"The path '{pointer}' is not a valid JSON Pointer.", "Patch")
    return [
        token.replace("~1", "/").replace("~0", "~")
        for token in pointer[1:].split("/")
    ]


def _resolve_member(pointer: str, members: Dict[str, str]) -> str:
    """Map a pointer to the canonical member name it targets."""
    tokens = parse_pointer(pointer)
    if len(tokens) != 1:
        raise JsonPatchError(
            f"The target location specified by path '{pointer}' was not found.",
            "Patch",
        )
    member = members.get(tokens[0].lower())
    if member is None:
        raise JsonPatchError(
            f"The target location specified by path segment '{tokens[0]}' was not found.",
            tokens[0][:1].upper() + tokens[0][1:],
        )
    return member


def _field_key(member: str) -> str:
    return member[:1].upper() + member[1:]


def _apply_operation(
    document: Dict[str, Any],
    operation: PatchOperation,
    members: Dict[str, str],
) -> None:
    target = _resolve_member(operation.path, members)

    if operation.op in ("add", "replace", "test") and not operation.has_value:
        raise JsonPatchError(
            f"The '{operation.op}' operation requires a 'value' member.",
            _field_key(target),
        )

    if operation.op in ("add", "replace"):
        document[target] = copy.deepcopy(operation.value)
    elif operation.op == "remove":
        document[target] = None
    elif operation.op == "test":
        if document.get(target) != operation.value:
            raise JsonPatchError(
                f"The current value '{document.get(target)}' at path '{operation.path}' "
                f"is not equal to the test value '{operation.value}'.",
                _field_key(target),
            )
    else:  # move / copy
        if operation.from_ is None:
            raise JsonPatchError(
                f"The '{operation.op}' operation requires a 'from' member.",
                _field_key(target),
            )
        source = _resolve_member(operation.from_, members)
        value = copy.deepcopy(document.get(source))
        if operation.op == "move" and source != target:
            document[source] = None
        document[target] = value


def apply_patch(
    document: Dict[str, Any],
    operations: Sequence[PatchOperation],
    members: Iterable[str],
) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
    """
    Apply operations in order to a copy of `document`.

    Args:
        document: Current representation (left untouched).
        operations: Ordered patch operations. An empty sequence is a no-op.
        members: Names of the members paths may address.

    Returns:
        (patched copy, errors). `errors` maps field keys to messages and is
        empty when every operation applied.
    """
    allowed = {m.lower(): m for m in members}
    patched = copy.deepcopy(document)
    errors: Dict[str, List[str]] = {}

    for index, operation in enumerate(operations):
        try:
            _apply_operation(patched, operation, allowed)
        except JsonPatchError as e:
            logger.debug("Patch operation %d (%s %s) failed: %s", index, operation.op, operation.path, e.message)
            errors.setdefault(e.member, []).append(e.message)

    return patched, errors
