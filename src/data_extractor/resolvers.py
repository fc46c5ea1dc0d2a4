"""
Resolvers module for data_extractor.

One resolver per schema node type. Resolvers recurse into nested nodes
through the ResolverRegistry they are handed, never through shared state, and
every nested node resolves relative to the element its parent matched.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Type

from .converters import identity, to_boolean, to_number
from .document import QueryScope
from .exceptions import ElementNotFound, InvalidSchema, NoCaseMatched
from .schema import (
    ArrayNode,
    BooleanNode,
    CustomNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
    SwitchNode,
    TableNode,
    node_type,
)

logger = logging.getLogger(__name__)

DEFAULT_COLUMN = StringNode()

TABLE_SECTIONS = ("head", "body", "foot")


def spec_at(specs: Sequence[Any], index: int) -> Any:
    """
    Pick the column spec for a cell index.

    Indexes past the end of ``specs`` reuse its last entry, and an empty list
    reads every column as a string.

    Args:
        specs: Declared column specs for a table section
        index: Zero-based cell index within the row

    Returns:
        The spec to resolve the cell with
    """
    if index < len(specs):
        return specs[index]
    if specs:
        return specs[-1]
    return DEFAULT_COLUMN


def apply_convert(node: SchemaNode, value: Any) -> Any:
    if node.convert is None:
        return value
    return node.convert(value)


async def locate(scope: QueryScope, selector: Optional[str], optional: bool) -> Optional[QueryScope]:
    """
    Narrow a scope to the first element matching ``selector``.

    Args:
        scope: Scope to search within
        selector: CSS selector; when empty the scope itself is the target
        optional: Whether a missing element is acceptable

    Returns:
        The target scope, or None for an optional miss

    Raises:
        ElementNotFound: If nothing matches and the node is required
    """
    if not selector:
        return scope

    element = await scope.match_one(selector)
    if element is None and not optional:
        raise ElementNotFound(selector)
    return element


class Resolver(ABC):
    """Turns one kind of schema node into a value."""

    type_name: str
    node_model: Type[SchemaNode]

    @abstractmethod
    async def resolve(self, scope: QueryScope, node: SchemaNode, registry: "ResolverRegistry") -> Any:
        """
        Resolve a node against a scope.

        Args:
            scope: Element or document the node's selector is relative to
            node: Validated schema node
            registry: Registry for resolving nested nodes

        Returns:
            JSON-compatible value, or None for an optional miss
        """
        pass


class StringResolver(Resolver):
    type_name = "string"
    node_model = StringNode
    coerce: Callable[[Optional[str]], Any] = staticmethod(identity)

    async def resolve(self, scope, node, registry):
        target = await locate(scope, node.selector, node.optional)
        if target is None:
            return None

        value = self.coerce(await target.text_of())
        return apply_convert(node, value)


class NumberResolver(StringResolver):
    type_name = "number"
    node_model = NumberNode
    coerce = staticmethod(to_number)


class BooleanResolver(StringResolver):
    type_name = "boolean"
    node_model = BooleanNode
    coerce = staticmethod(to_boolean)


class ObjectResolver(Resolver):
    type_name = "object"
    node_model = ObjectNode

    async def resolve(self, scope, node, registry):
        target = await locate(scope, node.selector, node.optional)
        if target is None:
            return None

        result = await registry.resolve_properties(target, node.properties)
        return apply_convert(node, result)


class ArrayResolver(Resolver):
    type_name = "array"
    node_model = ArrayNode

    async def resolve(self, scope, node, registry):
        elements = await scope.match_all(node.selector)

        if not elements:
            if node.optional:
                return None
            raise ElementNotFound(node.selector)

        result = []
        for element in elements:
            result.append(await registry.resolve_properties(element, node.items))

        return apply_convert(node, result)


class TableResolver(Resolver):
    """
    Reads ``thead``, ``tbody`` and ``tfoot`` rows of the table matching the
    node's selector. Missing sections produce no rows rather than an error.
    """
    type_name = "table"
    node_model = TableNode

    async def resolve(self, scope, node, registry):
        result: Dict[str, List[List[Any]]] = {}

        for section in TABLE_SECTIONS:
            specs = getattr(node, section)
            rows = await scope.match_all(f"{node.selector} > t{section} > tr")
            result[section] = [await self._resolve_row(row, specs, registry) for row in rows]

        return apply_convert(node, result)

    async def _resolve_row(self, row: QueryScope, specs: Sequence[Any], registry: "ResolverRegistry") -> List[Any]:
        cells = await row.match_all("td,th")
        values = []
        for index, cell in enumerate(cells):
            values.append(await registry.resolve(cell, spec_at(specs, index)))
        return values


class CustomResolver(Resolver):
    type_name = "custom"
    node_model = CustomNode

    async def resolve(self, scope, node, registry):
        if not callable(node.extract):
            raise InvalidSchema("extract must be a function")

        target = await locate(scope, node.selector, node.optional)
        if target is None:
            return None

        value = await target.invoke(node.extract)
        return apply_convert(node, value)


class SwitchResolver(Resolver):
    type_name = "switch"
    node_model = SwitchNode

    async def resolve(self, scope, node, registry):
        for case in node.cases:
            if await scope.matches(case.if_):
                logger.debug(f'Switch case "{case.if_}" matched')
                return await registry.resolve(scope, case.then)

        raise NoCaseMatched(case.if_ for case in node.cases)


def default_resolvers() -> List[Resolver]:
    return [
        StringResolver(),
        NumberResolver(),
        BooleanResolver(),
        ArrayResolver(),
        ObjectResolver(),
        TableResolver(),
        CustomResolver(),
        SwitchResolver(),
    ]


class ResolverRegistry:
    """
    Read-only lookup of resolvers by node type.

    The registry is shared by every resolver taking part in one extraction
    and is the only way they reach each other.
    """

    def __init__(self, resolvers: Optional[Iterable[Resolver]] = None, concurrent_keys: bool = False):
        """
        Initialize ResolverRegistry.

        Args:
            resolvers: Resolvers to register; defaults to the built-in set
            concurrent_keys: Resolve sibling keys of a property map concurrently
        """
        if resolvers is None:
            resolvers = default_resolvers()
        self._resolvers: Mapping[str, Resolver] = MappingProxyType(
            {resolver.type_name: resolver for resolver in resolvers}
        )
        self.concurrent_keys = concurrent_keys

    def __contains__(self, type_name: Any) -> bool:
        return type_name in self._resolvers

    @property
    def type_names(self) -> List[str]:
        return list(self._resolvers)

    async def resolve(self, scope: QueryScope, definition: Any) -> Any:
        """
        Validate a node and dispatch it to the resolver for its type.

        Args:
            scope: Scope to resolve against
            definition: Node mapping or SchemaNode instance

        Returns:
            The resolved value

        Raises:
            InvalidSchema: If the type is unknown or the node is malformed
        """
        type_name = node_type(definition)
        resolver = self._resolvers.get(type_name)
        if resolver is None:
            raise InvalidSchema(f'Unknown schema type "{type_name}".')

        node = resolver.node_model.parse(definition)
        return await resolver.resolve(scope, node, self)

    async def resolve_properties(self, scope: QueryScope, properties: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Resolve every entry of a key-to-node mapping against one scope.

        Entries whose type has no registered resolver are left out of the
        result. Keys resolve in schema order, or all at once when
        ``concurrent_keys`` is set; either way the first error aborts.

        Args:
            scope: Scope shared by all entries
            properties: Mapping of output key to node

        Returns:
            Mapping of output key to resolved value
        """
        entries = []
        for key, definition in properties.items():
            type_name = node_type(definition)
            if type_name not in self._resolvers:
                logger.debug(f'Skipping "{key}": unknown schema type "{type_name}"')
                continue
            entries.append((key, definition))

        if self.concurrent_keys:
            tasks = [asyncio.ensure_future(self.resolve(scope, definition)) for _, definition in entries]
            try:
                values = await asyncio.gather(*tasks)
            except BaseException:
                # siblings of a failed key must not outlive the call
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        else:
            values = [await self.resolve(scope, definition) for _, definition in entries]

        return {key: value for (key, _), value in zip(entries, values)}
