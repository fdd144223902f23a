# checkin/forwarding/spec.py
from dataclasses import dataclass, replace
from typing import Optional, Tuple


@dataclass(frozen=True)
class ForwardSpec:
    """
    How one GraphQL field is delegated to the registration service.

    path:    dotted route from the forwarded field to the node whose
             sub-selection is sent upstream, e.g. "check_in.user". Without
             a path the field's own selection is forwarded and the upstream
             value is returned unchanged.
    include: field names always requested from upstream, even when the
             client did not select them.
    head:    literal upstream field call replacing the client's own call
             text, e.g. 'user(id: "42")'.
    """

    path: Optional[str] = None
    include: Tuple[str, ...] = ()
    head: Optional[str] = None

    def with_head(self, head: str) -> "ForwardSpec":
        return replace(self, head=head)
