# checkin/forwarding/stitcher.py
"""
Builds the standalone query sent to the registration service.

A stitched query is made of four parts:

- head: the upstream field call, either a literal from the ForwardSpec or
  the client's own call text up to the opening brace of its selection;
- body: the source text of the target field's selection, with the
  ForwardSpec's `include` fields injected after the opening brace;
- signature: only the operation variables the head, body and fragments
  actually reference;
- fragments: the definitions transitively spread from the body.

The result never references a variable or fragment it does not declare.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from graphql import parse
from graphql.language import FieldNode, Node

from checkin.forwarding.analyzer import (
    QueryDocument,
    collect_usages,
    find_target_field,
    selected_field_names,
    source_slice,
)
from checkin.forwarding.spec import ForwardSpec

logger = logging.getLogger(__name__)

# Sent when the configured path is missing from the client's selection, so
# the forwarded call stays well formed.
PROBE_BODY = "{ __typename }"


@dataclass
class StitchedQuery:
    query: str
    variables: Dict[str, Any] = field(default_factory=dict)
    fragments: List[str] = field(default_factory=list)


def derive_head(source: str, node: FieldNode) -> str:
    """The field's call text (alias, name, arguments, directives) without its selection."""
    if node.selection_set is None:
        return source_slice(source, node).strip()
    return source[node.loc.start : node.selection_set.loc.start].strip()


def inject_fields(body: str, names: Sequence[str]) -> str:
    """Inserts field names right after the opening brace of a selection."""
    if not names:
        return body
    brace = body.index("{")
    return body[: brace + 1] + "".join(f" {name}" for name in names) + body[brace + 1 :]


def _literal_head_nodes(head: str) -> List[Node]:
    # The head is parsed on its own only to find the variables it mentions
    operation = parse(f"{{ {head} }}").definitions[0]
    return list(operation.selection_set.selections)


def stitch(
    document: QueryDocument,
    spec: ForwardSpec,
    variable_values: Optional[Dict[str, Any]] = None,
) -> Optional[StitchedQuery]:
    """
    Returns the query forwarding `document`'s current field according to
    `spec`, or None when there is no field to forward at all.
    """
    if not document.field_nodes:
        logger.warning("No field selection to forward")
        return None

    source = document.source
    current = document.field_nodes[0]

    # --- body ---
    target = find_target_field(document, spec.path)
    if target is None:
        logger.warning(
            f"Path '{spec.path}' not selected by the client; forwarding a typename probe"
        )
        body = PROBE_BODY
        body_nodes: List[Node] = []
        present: List[str] = []
    elif target.selection_set is None:
        # Scalar pass-through such as question_branches
        body = ""
        body_nodes = []
        present = []
    else:
        body = source_slice(source, target.selection_set)
        body_nodes = [target.selection_set]
        present = selected_field_names(target, document.fragments)

    if body:
        body = inject_fields(body, [name for name in spec.include if name not in present])

    # --- head ---
    if spec.head is not None:
        head = spec.head.strip()
        head_variables, _ = collect_usages(_literal_head_nodes(head), {})
    else:
        head = derive_head(source, current)
        head_variables, _ = collect_usages(
            [*(current.arguments or ()), *(current.directives or ())], {}
        )

    # --- signature and fragments ---
    body_variables, fragment_names = collect_usages(body_nodes, document.fragments)
    used = head_variables + [name for name in body_variables if name not in head_variables]

    declared = {
        definition.variable.name.value: definition
        for definition in document.variable_definitions
    }
    for name in used:
        if name not in declared:
            logger.warning(f"Variable ${name} is used but never declared; not forwarded")
    used = [name for name in used if name in declared]

    signature = ", ".join(source_slice(source, declared[name]) for name in used)
    operation = f"query({signature})" if signature else "query"
    selection = " ".join(part for part in (head, body) if part)
    query = f"{operation} {{ {selection} }}"

    fragment_sources = [
        source_slice(source, document.fragments[name]) for name in fragment_names
    ]
    if fragment_sources:
        query = "\n".join([query, *fragment_sources])

    values = variable_values or {}
    variables = {name: values[name] for name in used if name in values}
    return StitchedQuery(query=query, variables=variables, fragments=fragment_names)
