"""Partial update documents for users.

A patch document is a JSON array of RFC 6902 style operations, limited to
the three editable user fields::

    [{"op": "replace", "path": "/login", "value": "trinity"}]

``replace`` and ``add`` set a field, ``remove`` clears it and ``test``
checks its current value. Problems with individual operations are
collected per path instead of aborting the document, so the caller can
report them together with field validation errors.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from app.utils.errors import MalformedRequestError

# Lower-cased JSON pointer -> wire field name.
PATCHABLE_FIELDS = {
    "/login": "login",
    "/firstname": "firstName",
    "/lastname": "lastName",
}


class PatchOperation(BaseModel):
    """One edit operation of a patch document."""

    model_config = ConfigDict(extra="ignore")

    op: str
    path: str
    value: Any = None


def parse_patch_document(document: Any) -> list[PatchOperation]:
    """Validate the structure of a patch document.

    Raises:
        MalformedRequestError: the document is absent, not a list, or one of
            its entries is not an operation object.
    """
    if document is None:
        raise MalformedRequestError("Patch document is required")
    if not isinstance(document, list):
        raise MalformedRequestError("Patch document must be a list of operations")

    try:
        return [PatchOperation.model_validate(entry) for entry in document]
    except ValidationError as exc:
        raise MalformedRequestError("Patch document contains an invalid operation") from exc


def set_login(fields: dict[str, Any], value: Any) -> None:
    fields["login"] = value


def set_first_name(fields: dict[str, Any], value: Any) -> None:
    fields["firstName"] = value


def set_last_name(fields: dict[str, Any], value: Any) -> None:
    fields["lastName"] = value


SETTERS = {
    "login": set_login,
    "firstName": set_first_name,
    "lastName": set_last_name,
}


def apply_patch(fields: dict[str, Any], operations: list[PatchOperation]) -> dict[str, list[str]]:
    """Apply ``operations`` to ``fields`` in place and return per-path errors."""
    errors: dict[str, list[str]] = {}
    for operation in operations:
        field_name = PATCHABLE_FIELDS.get(operation.path.strip().lower())
        if field_name is None:
            error_key = operation.path.strip().lstrip("/") or "path"
            errors.setdefault(error_key, []).append(
                f"The target location '{operation.path}' was not found"
            )
            continue

        op = operation.op.strip().lower()
        setter = SETTERS[field_name]
        if op in {"replace", "add"}:
            setter(fields, operation.value)
        elif op == "remove":
            setter(fields, None)
        elif op == "test":
            if fields.get(field_name) != operation.value:
                errors.setdefault(field_name, []).append(
                    f"The current value of '{operation.path}' does not match the test value"
                )
        else:
            errors.setdefault(field_name, []).append(f"Operation '{operation.op}' is not supported")
    return errors
