from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Union

from tree_sitter import Node

from jsxlint.config import DIRECTIVE_NAMESPACE

_DOM_ELEMENT_NAME = re.compile(r"^[a-z]")

JSX_OPENING_NODE_TYPES = {"jsx_opening_element", "jsx_self_closing_element"}


def is_dom_element_name(name: str) -> bool:
    """Lowercase tags (`div`, `my-element`) are host elements, not components."""
    return _DOM_ELEMENT_NAME.match(name) is not None


class Role(str, Enum):
    COMPONENT = "component"
    IDENTIFIER = "identifier"
    CUSTOM_DIRECTIVE = "customDirective"


@dataclass(frozen=True)
class Candidate:
    name: str
    role: Role
    node: Node


# --- Tag name shapes ---

@dataclass(frozen=True)
class IdentifierTag:
    node: Node
    name: str


@dataclass(frozen=True)
class MemberTag:
    # Left-most object of `A.B.C` (an identifier or `this`), if there is one.
    root: Optional[Node]


@dataclass(frozen=True)
class OtherTag:
    pass


TagName = Union[IdentifierTag, MemberTag, OtherTag]


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="ignore")


def classify_tag_name(name_node: Optional[Node]) -> TagName:
    if name_node is None:
        # Fragment: <>...</>
        return OtherTag()

    if name_node.type == "identifier":
        return IdentifierTag(node=name_node, name=_text(name_node))

    if name_node.type in {"member_expression", "nested_identifier"}:
        curr: Optional[Node] = name_node
        while curr is not None and curr.type in {"member_expression", "nested_identifier"}:
            obj = curr.child_by_field_name("object")
            if obj is None:
                obj = curr.named_children[0] if curr.named_children else None
            curr = obj
        if curr is not None and curr.type in {"identifier", "this"}:
            return MemberTag(root=curr)
        return MemberTag(root=None)

    # Namespaced tags like <svg:rect> never refer to bindings.
    return OtherTag()


def _directive_name(attribute: Node) -> Optional[Node]:
    """For `use:name` attributes, return the `name` token."""
    if not attribute.named_children:
        return None
    attr_name = attribute.named_children[0]
    if attr_name.type != "jsx_namespace_name":
        return None
    parts = attr_name.named_children
    if len(parts) != 2:
        return None
    namespace, name = parts
    if namespace.type != "identifier" or name.type != "identifier":
        return None
    if _text(namespace) != DIRECTIVE_NAMESPACE:
        return None
    return name


def tag_candidates(element: Node) -> List[Candidate]:
    tag = classify_tag_name(element.child_by_field_name("name"))
    if isinstance(tag, IdentifierTag):
        if is_dom_element_name(tag.name):
            return []
        return [Candidate(name=tag.name, role=Role.COMPONENT, node=tag.node)]
    if isinstance(tag, MemberTag) and tag.root is not None:
        # Only the root needs a binding; `Foo.Bar` member access is not checked.
        return [Candidate(name=_text(tag.root), role=Role.IDENTIFIER, node=tag.root)]
    return []


def iter_candidates(root: Node) -> Iterator[Candidate]:
    """Yield every identifier in JSX that must resolve to a binding, in document order."""

    def walk(n: Node) -> Iterator[Candidate]:
        if n.type in JSX_OPENING_NODE_TYPES:
            yield from tag_candidates(n)
        elif n.type == "jsx_attribute":
            name = _directive_name(n)
            if name is not None:
                yield Candidate(name=_text(name), role=Role.CUSTOM_DIRECTIVE, node=name)

        for c in n.children:
            yield from walk(c)

    yield from walk(root)
