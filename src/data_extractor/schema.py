"""
Schema module for data_extractor.

Pydantic models for the extraction grammar. A schema is a mapping of output
keys to nodes; each node is tagged by its ``type`` field. Nodes may be written
as plain mappings (for example loaded from JSON) and are only turned into
models when the extraction walk reaches them, so authoring mistakes surface
as InvalidSchema during extraction rather than up front.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidSchema


class SchemaNode(BaseModel):
    """Base class for all schema nodes."""
    type: str
    convert: Optional[Callable[[Any], Any]] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def parse(cls, definition: Any) -> "SchemaNode":
        """
        Build a node of this class from a mapping or return an existing model.

        Args:
            definition: Mapping or SchemaNode instance

        Returns:
            Validated node

        Raises:
            InvalidSchema: If the definition does not describe this node type
        """
        if isinstance(definition, cls):
            return definition
        if isinstance(definition, SchemaNode):
            raise InvalidSchema(
                f'Expected a "{cls.model_fields["type"].default}" node, got "{definition.type}".'
            )
        if not isinstance(definition, Mapping):
            raise InvalidSchema(
                f"Schema node must be a mapping, got {type(definition).__name__}."
            )

        try:
            return cls.model_validate(dict(definition))
        except ValidationError as e:
            raise InvalidSchema(f'Invalid "{definition.get("type")}" node: {e}') from e


class StringNode(SchemaNode):
    """Text of the first element matching ``selector``, or of the scope itself."""
    type: Literal["string"] = "string"
    selector: Optional[str] = None
    optional: bool = False


class NumberNode(SchemaNode):
    type: Literal["number"] = "number"
    selector: Optional[str] = None
    optional: bool = False


class BooleanNode(SchemaNode):
    type: Literal["boolean"] = "boolean"
    selector: Optional[str] = None
    optional: bool = False


class ArrayNode(SchemaNode):
    """One item mapping per element matching ``selector``, in document order."""
    type: Literal["array"] = "array"
    selector: str
    optional: bool = False
    items: Dict[str, Any]


class ObjectNode(SchemaNode):
    type: Literal["object"] = "object"
    selector: Optional[str] = None
    optional: bool = False
    properties: Dict[str, Any]


class TableNode(SchemaNode):
    """
    Rows of an HTML table split into head, body and foot sections.

    Each section has its own list of column specs. Columns past the end of a
    list reuse its last spec; an empty list reads every column as a string.
    """
    type: Literal["table"] = "table"
    selector: str
    head: List[Any] = Field(default_factory=list)
    body: List[Any] = Field(default_factory=list)
    foot: List[Any] = Field(default_factory=list)


class CustomNode(SchemaNode):
    """Value computed by ``extract`` from the matched element."""
    type: Literal["custom"] = "custom"
    selector: Optional[str] = None
    optional: bool = False
    # Checked when the node runs, see CustomResolver.
    extract: Any = None


class SwitchCase(BaseModel):
    if_: str = Field(alias="if")
    then: Any

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class SwitchNode(SchemaNode):
    """Resolves the ``then`` node of the first case whose ``if`` selector matches."""
    type: Literal["switch"] = "switch"
    cases: List[SwitchCase]


def node_type(definition: Any) -> Optional[str]:
    """
    Read the ``type`` tag of a node without validating it.

    Args:
        definition: Mapping or SchemaNode instance

    Returns:
        The tag, or None if the mapping has none

    Raises:
        InvalidSchema: If the definition is neither a mapping nor a node
    """
    if isinstance(definition, SchemaNode):
        return definition.type
    if isinstance(definition, Mapping):
        return definition.get("type")
    raise InvalidSchema(f"Schema node must be a mapping, got {type(definition).__name__}.")
