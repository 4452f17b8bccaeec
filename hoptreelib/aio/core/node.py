"""Node descriptors and the records the crawler keeps about them.

A NodeDescriptor is the decoded body of one fetched node. The remote side
is loose about its payloads, so decoding normalizes two things before
anything is interpreted: field-name casing ("next", "NeXT", ...) and the
children field, which arrives either as a bare string or as a list.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ...config import NO_SECRET
from ...errors import DecodeError


def normalize_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Lower-case every top-level field name of a decoded payload.

    Values are left untouched.
    """
    return {str(key).lower(): value for key, value in payload.items()}


def normalize_children(value: Any, node_id: Optional[str] = None) -> Tuple[str, ...]:
    """Normalize the children field into an ordered tuple of identifiers.

    Args:
        value: Raw field value (None, a string, or a list of strings)
        node_id: Identifier being decoded, for error reporting

    Returns:
        Tuple of child identifiers in listed order

    Raises:
        DecodeError: If the value is neither a string nor a list of strings
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list):
        for item in value:
            if not isinstance(item, str):
                raise DecodeError(
                    node_id, f"child identifier must be a string, got {type(item).__name__}"
                )
        return tuple(value)
    raise DecodeError(
        node_id, f"'next' must be a string or a list, got {type(value).__name__}"
    )


def _string_field(fields: Dict[str, Any], name: str, default: str, node_id: Optional[str]) -> str:
    value = fields.get(name)
    if value is None:
        return default
    if not isinstance(value, str):
        raise DecodeError(node_id, f"'{name}' must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class NodeDescriptor:
    """Decoded result of fetching one node identifier.

    Attributes:
        id: Identifier the source reports for itself (may be empty, never
            used to index results)
        depth: Depth the source reports, used only as a sanity check
        fragment: Partial output of this node, or the sentinel
        message: Diagnostic text, only expected on the root response
        children: Identifiers to fetch next, in listed order
    """

    id: str = ""
    depth: int = 0
    fragment: str = NO_SECRET
    message: str = ""
    children: Tuple[str, ...] = ()

    @classmethod
    def from_payload(
        cls,
        payload: Any,
        sentinel: str = NO_SECRET,
        node_id: Optional[str] = None,
    ) -> "NodeDescriptor":
        """Decode a JSON payload into a descriptor.

        A missing "secret" field means the node carries no fragment, so it
        decodes to the sentinel.

        Args:
            payload: Decoded JSON value
            sentinel: Fragment value meaning "no secret present"
            node_id: Identifier that was requested, for error reporting

        Returns:
            NodeDescriptor

        Raises:
            DecodeError: If the payload is not an object or a field has the
                wrong type
        """
        if not isinstance(payload, Mapping):
            raise DecodeError(
                node_id, f"expected a JSON object, got {type(payload).__name__}"
            )
        fields = normalize_keys(payload)

        depth = fields.get("depth", 0)
        if depth is None:
            depth = 0
        # bool is an int subclass but never a depth
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise DecodeError(node_id, f"'depth' must be an integer, got {depth!r}")

        return cls(
            id=_string_field(fields, "id", "", node_id),
            depth=depth,
            fragment=_string_field(fields, "secret", sentinel, node_id),
            message=_string_field(fields, "message", "", node_id),
            children=normalize_children(fields.get("next"), node_id),
        )

    def is_leaf(self, sentinel: str = NO_SECRET) -> bool:
        """A node carrying any fragment other than the sentinel ends its branch."""
        return self.fragment != sentinel


@dataclass(frozen=True)
class CollectedEntry:
    """What the crawler records for one fetched node.

    Attributes:
        child_id: Identifier used to perform the fetch (authoritative)
        fragment: The descriptor's fragment, or the sentinel
        order_index: Position of this node in its parent's children list
    """

    child_id: str
    fragment: str
    order_index: int


@dataclass(frozen=True)
class FetchJob:
    """One scheduled unit of work and the lineage assigned when scheduling it."""

    node_id: str
    parent_id: str
    order_index: int
    depth: int = 0


@dataclass(frozen=True)
class FetchOutcome:
    """Tagged result of a unit of work: a descriptor or the error that ended it."""

    job: FetchJob
    descriptor: Optional[NodeDescriptor] = None
    error: Optional[BaseException] = field(default=None, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None
