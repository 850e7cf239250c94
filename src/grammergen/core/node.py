"""
Grammar trees and their backtracking matcher.

A grammar is a tree of four node kinds. Parsing is non-deterministic:
each node returns every suffix of the input that remains after it
consumes some prefix, so alternatives are never pruned greedily.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from grammergen.core.context import EvaluationContext

MAX_ARITY = 2
LITERAL_SIZE = 16


class NodeKind(Enum):
    """Closed set of node kinds with their display symbol and arity."""
    JOIN = ("cat", 2)
    ALTERNATION = ("or", 2)
    OPTIONAL = ("opt", 1)
    LITERAL = ("word", 0)

    def __init__(self, symbol: str, arity: int):
        self.symbol = symbol
        self.arity = arity


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _empty_children() -> list:
    return [None] * MAX_ARITY


@dataclass(eq=False)
class GrammarNode:
    """
    A node of a grammar tree.

    Every node carries a two-slot child list. Slots below the kind's
    arity hold children; the rest stay empty once the tree is repaired.
    Only LITERAL nodes use the payload.
    """
    kind: NodeKind
    children: list[GrammarNode | None] = field(default_factory=_empty_children)
    payload: bytes = b""

    def __post_init__(self):
        self.payload = _as_bytes(self.payload)
        if len(self.children) != MAX_ARITY:
            self.children = (list(self.children) + _empty_children())[:MAX_ARITY]

    # -- constructors --------------------------------------------------

    @classmethod
    def join(cls, first: GrammarNode, second: GrammarNode) -> GrammarNode:
        return cls(NodeKind.JOIN, [first, second])

    @classmethod
    def alternation(cls, first: GrammarNode, second: GrammarNode) -> GrammarNode:
        return cls(NodeKind.ALTERNATION, [first, second])

    @classmethod
    def optional(cls, child: GrammarNode) -> GrammarNode:
        return cls(NodeKind.OPTIONAL, [child, None])

    @classmethod
    def literal(cls, payload: bytes | str) -> GrammarNode:
        return cls(NodeKind.LITERAL, payload=_as_bytes(payload))

    # -- structure -----------------------------------------------------

    @property
    def arity(self) -> int:
        return self.kind.arity

    @property
    def name(self) -> str:
        return self.kind.symbol

    @property
    def first(self) -> GrammarNode | None:
        return self.children[0]

    @property
    def second(self) -> GrammarNode | None:
        return self.children[1]

    def iter_children(self) -> Iterator[GrammarNode]:
        """Yield the occupied child slots in order."""
        for child in self.children:
            if child is not None:
                yield child

    def size(self) -> int:
        """
        Cost metric used for comparison accounting.

        OPTIONAL counts its child twice since it explores two parse paths.
        LITERAL has a fixed baseline cost whatever its payload length.
        """
        if self.kind is NodeKind.LITERAL:
            return LITERAL_SIZE
        weight = 2 if self.kind is NodeKind.OPTIONAL else 1
        return 1 + weight * sum(child.size() for child in self.iter_children())

    def node_count(self) -> int:
        return 1 + sum(child.node_count() for child in self.iter_children())

    def depth(self) -> int:
        return 1 + max((child.depth() for child in self.iter_children()), default=0)

    def clone(self) -> GrammarNode:
        """Deep copy. The copy shares no node with the source."""
        return GrammarNode(
            kind=self.kind,
            children=[child.clone() if child is not None else None for child in self.children],
            payload=self.payload,
        )

    # -- matching ------------------------------------------------------

    def parse(self, data: bytes, ctx: EvaluationContext) -> list[bytes]:
        """
        Return every suffix of data reachable by this node.

        Args:
            data: Input remaining at this point of the parse
            ctx: Counters for the current evaluation

        Returns:
            Candidate continuations; may contain duplicates
        """
        ctx.comparison_count += self.size()
        kind = self.kind

        if kind is NodeKind.LITERAL:
            if data.startswith(self.payload):
                ctx.match_count += 1
                return [data[len(self.payload):]]
            return []

        first, second = self.children

        if kind is NodeKind.JOIN:
            rests = first.parse(data, ctx) if first is not None else [data]
            if second is None:
                return rests
            candidates = []
            for rest in rests:
                candidates.extend(second.parse(rest, ctx))
            return candidates

        if kind is NodeKind.ALTERNATION:
            candidates = []
            if first is not None:
                candidates.extend(first.parse(data, ctx))
            if second is not None:
                candidates.extend(second.parse(data, ctx))
            return candidates

        # OPTIONAL
        candidates = first.parse(data, ctx) if first is not None else []
        candidates.append(data)
        return candidates

    def match(self, data: bytes | str) -> bool:
        """True if some parse consumes the whole input."""
        return b"" in self.parse(_as_bytes(data), EvaluationContext())

    def evaluate(self, data: bytes | str, ctx: EvaluationContext | None = None) -> float:
        """
        Score one corpus entry.

        A full match scores 1.0. Otherwise literal hits give partial
        credit of match_count / (match_count + 1), which stays below 1.0.

        Args:
            data: Input to score
            ctx: Fresh context to record counters into (created if omitted)
        """
        if ctx is None:
            ctx = EvaluationContext()
        candidates = self.parse(_as_bytes(data), ctx)
        if b"" in candidates:
            return 1.0
        return ctx.match_count / (ctx.match_count + 1)

    # -- display -------------------------------------------------------

    def serialize(self) -> str:
        """Parenthesized prefix form, e.g. (cat (word "foo") (word "bar"))."""
        if self.kind is NodeKind.LITERAL:
            return f"({self.name} {_quote(self.payload)})"
        parts = [self.name]
        parts.extend(child.serialize() for child in self.iter_children())
        return "(" + " ".join(parts) + ")"

    def __str__(self) -> str:
        return self.serialize()


def _quote(payload: bytes) -> str:
    text = payload.decode("latin-1")
    escaped = []
    for char in text:
        if char in ('"', "\\"):
            escaped.append("\\" + char)
        elif " " <= char <= "~":
            escaped.append(char)
        else:
            escaped.append(f"\\x{ord(char):02x}")
    return '"' + "".join(escaped) + '"'
