# checkin/forwarding/analyzer.py
"""
Query document analysis for forwarded fields.

Everything here works on graphql-core's typed AST, whose nodes carry their
source span. The functions are pure: they take nodes and return nodes or
names, and the stitcher turns the results back into text by slicing the
original document source.

Fragment spreads and inline fragments are folded into every walk, so a
selection reached through `...UserFields` is treated exactly like one
written inline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from graphql import parse
from graphql.language import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    Node,
    OperationDefinitionNode,
    SelectionNode,
    VariableDefinitionNode,
    Visitor,
    visit,
)


@dataclass
class QueryDocument:
    """The parts of a client request the forwarder needs, engine independent."""

    source: str
    field_nodes: Sequence[FieldNode]
    fragments: Dict[str, FragmentDefinitionNode] = field(default_factory=dict)
    variable_definitions: Sequence[VariableDefinitionNode] = ()

    @classmethod
    def from_info(cls, info: Any) -> "QueryDocument":
        """Builds the document from a resolver's Strawberry or graphql-core info."""
        # Strawberry's Info wraps graphql-core's GraphQLResolveInfo
        raw = getattr(info, "_raw_info", info)
        operation = raw.operation
        return cls(
            source=operation.loc.source.body,
            field_nodes=list(raw.field_nodes),
            fragments=dict(raw.fragments),
            variable_definitions=list(operation.variable_definitions or ()),
        )

    @classmethod
    def parse(
        cls, source: str, field_name: str, operation_name: Optional[str] = None
    ) -> "QueryDocument":
        """
        Parses a raw document and positions it at the top-level field
        `field_name` of the chosen (or first) operation.
        """
        document = parse(source)
        operation = None
        fragments: Dict[str, FragmentDefinitionNode] = {}
        for definition in document.definitions:
            if isinstance(definition, FragmentDefinitionNode):
                fragments[definition.name.value] = definition
            elif isinstance(definition, OperationDefinitionNode) and operation is None:
                if operation_name is None or (
                    definition.name and definition.name.value == operation_name
                ):
                    operation = definition
        if operation is None:
            raise ValueError(f"Operation {operation_name!r} not found in document")

        field_nodes = [
            node
            for node in expand_selections(operation.selection_set.selections, fragments)
            if node.name.value == field_name
        ]
        return cls(
            source=source,
            field_nodes=field_nodes,
            fragments=fragments,
            variable_definitions=list(operation.variable_definitions or ()),
        )


def source_slice(source: str, node: Node) -> str:
    """Returns the exact text a node was parsed from."""
    return source[node.loc.start : node.loc.end]


def expand_selections(
    selections: Iterable[SelectionNode],
    fragments: Dict[str, FragmentDefinitionNode],
    _seen: frozenset = frozenset(),
) -> Iterator[FieldNode]:
    """Yields field nodes, descending into inline fragments and named spreads."""
    for selection in selections:
        if isinstance(selection, FieldNode):
            yield selection
        elif isinstance(selection, InlineFragmentNode):
            yield from expand_selections(
                selection.selection_set.selections, fragments, _seen
            )
        elif isinstance(selection, FragmentSpreadNode):
            name = selection.name.value
            fragment = fragments.get(name)
            # Unknown or self-referencing fragments contribute nothing
            if fragment is None or name in _seen:
                continue
            yield from expand_selections(
                fragment.selection_set.selections, fragments, _seen | {name}
            )


def find_target_field(
    document: QueryDocument, path: Optional[str]
) -> Optional[FieldNode]:
    """
    Follows `path` segment by segment from the current field. Each segment
    must name a field that has its own sub-selection; the last one is the
    target. Without a path the current field itself is the target.
    """
    if not path:
        return next(iter(document.field_nodes), None)

    selections: Iterable[SelectionNode] = document.field_nodes
    target = None
    for segment in path.split("."):
        target = next(
            (
                node
                for node in expand_selections(selections, document.fragments)
                if node.name.value == segment and node.selection_set is not None
            ),
            None,
        )
        if target is None:
            return None
        selections = target.selection_set.selections
    return target


def selected_field_names(
    node: FieldNode, fragments: Dict[str, FragmentDefinitionNode]
) -> List[str]:
    """Names of the unaliased fields directly selected under `node`."""
    if node.selection_set is None:
        return []
    return [
        child.name.value
        for child in expand_selections(node.selection_set.selections, fragments)
        if child.alias is None
    ]


class _UsageCollector(Visitor):
    def __init__(self):
        super().__init__()
        self.variables: List[str] = []
        self.spreads: List[str] = []

    def enter_variable(self, node, *_args):
        if node.name.value not in self.variables:
            self.variables.append(node.name.value)

    def enter_fragment_spread(self, node, *_args):
        if node.name.value not in self.spreads:
            self.spreads.append(node.name.value)


def collect_usages(
    nodes: Iterable[Node], fragments: Dict[str, FragmentDefinitionNode]
) -> Tuple[List[str], List[str]]:
    """
    Returns (variable names, fragment names) reachable from `nodes`, in
    first-use order. Fragments are followed transitively, so a variable used
    only inside a nested fragment is still reported.
    """
    collector = _UsageCollector()
    pending = list(nodes)
    used_fragments: List[str] = []
    while pending:
        visit(pending.pop(0), collector)
        for name in collector.spreads:
            if name in used_fragments or name not in fragments:
                continue
            used_fragments.append(name)
            pending.append(fragments[name])
    return collector.variables, used_fragments
