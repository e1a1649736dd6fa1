"""Input validation on top of pydantic models.

Request shapes are pydantic models (see ``launchpad.schemas.input_schemas``).
``validate`` runs one against raw input and turns pydantic's errors into
``FieldError`` entries with readable messages and dotted paths, in field
declaration order. Absent, null and blank values all count as missing, and
every violated constraint of a field is reported, not only the first.
"""
from __future__ import annotations

import enum
import types
from dataclasses import dataclass, field
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    Union,
    get_args,
    get_origin,
)

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo
from pydantic_core import PydanticCustomError

from launchpad.domain.errors import FieldError, ValidationFailedError

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)

# Constraint failures after which the field's other constraints are checked too
_CONSTRAINT_ERRORS = {
    "string_too_short",
    "string_too_long",
    "string_pattern_mismatch",
    "greater_than",
    "greater_than_equal",
    "less_than",
    "less_than_equal",
    "url_parsing",
}

# Order of messages within one field
_RANK = {
    "string_too_short": 1,
    "string_too_long": 2,
    "string_pattern_mismatch": 3,
    "greater_than": 4,
    "greater_than_equal": 4,
    "less_than": 5,
    "less_than_equal": 5,
    "literal_error": 6,
    "enum": 6,
    "url_parsing": 7,
}


def check_http_url(value: str) -> str:
    """AfterValidator body: accept only absolute http(s) URLs, keep the string."""
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("url_parsing", "Input should be a valid URL") from None
    return value


@dataclass(frozen=True)
class ValidationResult:
    value: Dict[str, Any] = field(default_factory=dict)
    errors: Tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def validate(model: Type[BaseModel], data: Any) -> ValidationResult:
    """Validate raw input against a pydantic model.

    Args:
        model: Declared input shape
        data: Untyped input, normally a mapping of strings to values

    Returns:
        ValidationResult with the normalised value (unset optional fields
        left out), or with every FieldError found (declaration order, then
        unknown fields in input order)
    """
    if not isinstance(data, Mapping):
        return ValidationResult(errors=(FieldError("input", "Expected an object"),))

    try:
        instance = model.model_validate(_drop_blank(model, data))
    except ValidationError as exc:
        return ValidationResult(errors=tuple(field_errors(exc.errors(), model)))
    return ValidationResult(value=instance.model_dump(exclude_none=True))


def validate_or_raise(model: Type[BaseModel], data: Any) -> Dict[str, Any]:
    """Validate and return the normalised value, raising ValidationFailedError."""
    result = validate(model, data)
    if not result.ok:
        raise ValidationFailedError(result.errors)
    return result.value


def field_errors(
    errors: Iterable[Mapping[str, Any]], model: Optional[Type[BaseModel]] = None
) -> List[FieldError]:
    """Translate pydantic error dicts into FieldErrors.

    Errors are grouped per location, keeping pydantic's order; unknown-field
    errors go last. With ``model`` given, labels come from field titles and
    a field that broke one constraint is checked against the others as well.
    """
    grouped: Dict[Tuple[str, ...], List[Mapping[str, Any]]] = {}
    for error in errors:
        loc = tuple(str(part) for part in error.get("loc", ()))
        grouped.setdefault(loc, []).append(error)

    declared: List[FieldError] = []
    unknown: List[FieldError] = []
    for loc, loc_errors in grouped.items():
        path = ".".join(loc) or "input"
        info = _field_info(model, loc) if model is not None else None
        label = _label(loc, info)

        found = [(error["type"], _message(error, loc, label, info)) for error in loc_errors]
        first = loc_errors[0]
        if info is not None and first["type"] in _CONSTRAINT_ERRORS:
            found.extend(_other_violations(model, info, first.get("input"), loc, label))

        messages: List[str] = []
        for _, message in sorted(found, key=lambda item: _RANK.get(item[0], 0)):
            if message not in messages:
                messages.append(message)

        target = unknown if first["type"] == "extra_forbidden" else declared
        target.extend(FieldError(path, message) for message in messages)
    return declared + unknown


def _drop_blank(model: Type[BaseModel], data: Mapping[str, Any]) -> Dict[str, Any]:
    """Remove declared fields whose value is None or blank, recursing into nested models."""
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        info = model.model_fields.get(key)
        if info is not None:
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            nested = _nested_model(info.annotation)
            if nested is not None and isinstance(value, Mapping):
                value = _drop_blank(nested, value)
        cleaned[key] = value
    return cleaned


def _other_violations(
    model: Type[BaseModel], info: FieldInfo, raw: Any, loc: Sequence[str], label: str
) -> List[Tuple[str, str]]:
    base = _unwrap_optional(info.annotation)
    constraints = list(info.metadata)
    if get_origin(base) is Annotated:
        base, *inner = get_args(base)
        constraints = inner + constraints
    config = ConfigDict(str_strip_whitespace=bool(model.model_config.get("str_strip_whitespace")))
    found = []
    for constraint in constraints:
        try:
            TypeAdapter(Annotated[base, constraint], config=config).validate_python(raw)
        except ValidationError as exc:
            found.extend((error["type"], _message(error, loc, label, info)) for error in exc.errors())
    return found


def _message(error: Mapping[str, Any], loc: Sequence[str], label: str, info: Optional[FieldInfo]) -> str:
    kind = error["type"]
    ctx = error.get("ctx") or {}

    if kind == "missing":
        return f"{label} is required"
    if kind == "extra_forbidden":
        return f"Unknown field '{loc[-1]}'"
    if kind == "string_type":
        return f"{label} must be a string"
    if kind == "string_too_short":
        return f"{label} must be at least {ctx['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} must be at most {ctx['max_length']} characters"
    if kind == "string_pattern_mismatch":
        return f"{label} has an invalid format"
    if kind in ("greater_than_equal", "greater_than"):
        bound = ctx.get("ge", ctx.get("gt"))
        return f"{label} must be {'at least' if 'ge' in ctx else 'greater than'} {_number(bound)}"
    if kind in ("less_than_equal", "less_than"):
        bound = ctx.get("le", ctx.get("lt"))
        return f"{label} must be {'at most' if 'le' in ctx else 'less than'} {_number(bound)}"
    if kind == "int_from_float":
        return f"{label} must be an integer"
    if kind == "int_type":
        value = error.get("input")
        if isinstance(value, float):
            return f"{label} must be an integer"
        return f"{label} must be a number"
    if kind in ("int_parsing", "int_parsing_size", "float_type", "float_parsing", "finite_number"):
        return f"{label} must be a number"
    if kind in ("bool_type", "bool_parsing"):
        return f"{label} must be true or false"
    if kind in ("literal_error", "enum"):
        return f"{label} must be one of: {_choices(info, ctx)}"
    if kind in ("model_type", "model_attributes_type", "dict_type"):
        return f"{label} must be an object"
    if kind.startswith("url"):
        return f"{label} must be a valid URL (e.g. https://example.com)"
    return f"{label} is invalid"


def _label(loc: Sequence[str], info: Optional[FieldInfo]) -> str:
    if info is not None and info.title:
        return info.title
    name = loc[-1] if loc else "input"
    return name.replace("_", " ").capitalize()


def _choices(info: Optional[FieldInfo], ctx: Mapping[str, Any]) -> str:
    if info is not None:
        annotation = _unwrap_optional(info.annotation)
        if get_origin(annotation) is Literal:
            return ", ".join(str(choice) for choice in get_args(annotation))
        if isinstance(annotation, type) and issubclass(annotation, enum.Enum):
            return ", ".join(str(member.value) for member in annotation)
    return str(ctx.get("expected", "")).replace("'", "").replace(" or ", ", ")


def _field_info(model: Type[BaseModel], loc: Sequence[str]) -> Optional[FieldInfo]:
    current: Optional[Type[BaseModel]] = model
    info = None
    for part in loc:
        if current is None or part not in current.model_fields:
            return None
        info = current.model_fields[part]
        current = _nested_model(info.annotation)
    return info


def _nested_model(annotation: Any) -> Optional[Type[BaseModel]]:
    annotation = _unwrap_optional(annotation)
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
