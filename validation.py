"""
Input schema handling for tool calls.

Two operations the registry needs from a tool's input_schema:
- shape_of(): flat mapping of field name → field validator, for transports
  that want a field listing instead of an opaque schema object
- parse_input(): validate raw call arguments into the typed value the
  handler receives

Supported schema kinds:
- pydantic model class (the normal case): uses the public `model_fields`
- pydantic TypeAdapter: shape read from its JSON schema when the root is
  an object (TypedDict, dataclass), empty otherwise
- any object implementing InputSchema: declares its own fields
"""

from typing import Annotated, Any, Mapping, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, TypeAdapter, ValidationError
from pydantic.fields import FieldInfo

from models import DevtoolsError, ErrorKind

# JSON schema "type" → annotation for fields read from a TypeAdapter
JSON_TYPES: dict[str, Any] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "array": list,
    "object": dict,
}


@runtime_checkable
class InputSchema(Protocol):
    """
    Schema that validates and describes itself without pydantic models.

    validate() raises pydantic.ValidationError or ValueError on bad input.
    shape() returns field name → field validator. pydantic FieldInfo works
    best; other objects may carry `annotation`, `description` and `default`
    attributes, and a field with a `default` attribute is optional.
    """

    def validate(self, raw: Any) -> Any: ...

    def shape(self) -> Mapping[str, Any]: ...


def _is_model_class(schema: Any) -> bool:
    return isinstance(schema, type) and issubclass(schema, BaseModel)


def is_supported_schema(schema: Any) -> bool:
    """True for the schema kinds parse_input() can validate against."""
    return (
        _is_model_class(schema)
        or isinstance(schema, (BaseModel, TypeAdapter))
        or isinstance(schema, InputSchema)
    )


# =============================================================================
# SHAPE EXTRACTION
# =============================================================================

def _json_field(prop: Mapping[str, Any], required: bool) -> FieldInfo:
    json_type = prop.get("type")
    annotation = JSON_TYPES.get(json_type, Any) if isinstance(json_type, str) else Any
    description = prop.get("description")
    if required:
        return FieldInfo.from_annotation(Annotated[annotation, Field(description=description)])
    # Optional fields default to the schema default, else None
    return FieldInfo.from_annotated_attribute(
        Optional[annotation], Field(default=prop.get("default"), description=description)
    )


def _adapter_shape(adapter: TypeAdapter) -> dict[str, Any]:
    """Fields of a TypeAdapter whose JSON schema has an object root."""
    schema = adapter.json_schema()
    ref = schema.get("$ref", "")
    if ref.startswith("#/$defs/"):
        schema = schema.get("$defs", {}).get(ref[len("#/$defs/"):], {})
    if schema.get("type") != "object":
        return {}
    required = set(schema.get("required", ()))
    return {
        name: _json_field(prop, name in required)
        for name, prop in schema.get("properties", {}).items()
    }


def shape_of(schema: Any) -> dict[str, Any]:
    """
    Extract the top-level field shape of a schema.

    Returns:
        Field name → pydantic FieldInfo (or whatever an InputSchema declares).
        Empty dict for schemas without an object root (TypeAdapter over a
        list or scalar, unknown objects). Never raises.
    """
    if _is_model_class(schema):
        return dict(schema.model_fields)
    if isinstance(schema, BaseModel):
        return dict(type(schema).model_fields)
    try:
        if isinstance(schema, TypeAdapter):
            return _adapter_shape(schema)
        if isinstance(schema, InputSchema):
            return dict(schema.shape())
    except Exception:
        return {}
    return {}


# =============================================================================
# VALIDATION
# =============================================================================

def format_validation_error(exc: ValidationError) -> str:
    """
    Readable one-line summary of a pydantic ValidationError.

    Example:
        "name: Input should be a valid string; count: Field required"
    """
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or str(exc)


def parse_input(schema: Any, raw: Any) -> Any:
    """
    Validate raw arguments against a tool's input schema.

    Args:
        schema: Model class or instance, TypeAdapter, or InputSchema
        raw: Arguments as received from the transport

    Returns:
        Parsed value: a model instance for model schemas, with defaults
        applied and values coerced

    Raises:
        DevtoolsError(INVALID_INPUT): Arguments don't satisfy the schema
        DevtoolsError(INVALID_TOOL_SHAPE): Schema kind not supported
    """
    try:
        if _is_model_class(schema):
            return schema.model_validate(raw)
        if isinstance(schema, BaseModel):
            return type(schema).model_validate(raw)
        if isinstance(schema, TypeAdapter):
            return schema.validate_python(raw)
        if isinstance(schema, InputSchema):
            return schema.validate(raw)
    except ValidationError as e:
        raise DevtoolsError(ErrorKind.INVALID_INPUT, format_validation_error(e)) from e
    except (ValueError, TypeError) as e:
        raise DevtoolsError(ErrorKind.INVALID_INPUT, str(e)) from e

    raise DevtoolsError(
        ErrorKind.INVALID_TOOL_SHAPE,
        f"Unsupported input schema type: {type(schema).__name__}",
    )
