"""EBNF tree, Production and Grammar definitions.

An EBNF node is a tagged variant: an ``EBNFKind`` tag plus either a string
payload (terminals, references) or an ordered tuple of children (repetition,
choice, sequence). Every node also carries layout trivia that never takes
part in canonicalization.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator


class MalformedTreeError(ValueError):
    """An EBNF node whose shape does not match its kind."""


class EBNFKind(Enum):
    TERMINAL = "terminal"                    # 'abc'
    EXTENDED_TERMINAL = "extended_terminal"  # named character class, e.g. UnicodeClassLu
    REFERENCE = "reference"                  # production name
    ONE_OR_MORE = "one_or_more"              # x+
    ZERO_OR_MORE = "zero_or_more"            # x*
    ZERO_OR_ONE = "zero_or_one"              # x?
    CHOICE = "choice"                        # a | b
    SEQUENCE = "sequence"                    # a b


SCALAR_KINDS = frozenset({
    EBNFKind.TERMINAL, EBNFKind.EXTENDED_TERMINAL, EBNFKind.REFERENCE,
})

REPETITION_KINDS = frozenset({
    EBNFKind.ONE_OR_MORE, EBNFKind.ZERO_OR_MORE, EBNFKind.ZERO_OR_ONE,
})

# Children of these kinds are parenthesized inside a repetition
GROUPING_KINDS = frozenset({EBNFKind.CHOICE, EBNFKind.SEQUENCE})

REPETITION_OPS = {
    EBNFKind.ONE_OR_MORE: "+",
    EBNFKind.ZERO_OR_MORE: "*",
    EBNFKind.ZERO_OR_ONE: "?",
}


# --- EBNF node ---

@dataclass(frozen=True)
class EBNF:
    kind: EBNFKind
    text: str | None = None              # payload for scalar kinds
    children: tuple[EBNF, ...] = ()
    # Trivia: layout only
    whitespace: str = ""                 # trailing whitespace
    comment: str | None = None           # trailing comment (without //)
    newline: bool = False                # body continues on a new line

    def __post_init__(self) -> None:
        if not isinstance(self.kind, EBNFKind):
            raise MalformedTreeError(f"Unknown EBNF kind: {self.kind!r}")
        # Accept any iterable of children but always store a tuple
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

        if self.kind in SCALAR_KINDS:
            if not isinstance(self.text, str):
                raise MalformedTreeError(
                    f"{self.kind.value} node needs a string payload, got {self.text!r}"
                )
            if self.children:
                raise MalformedTreeError(f"{self.kind.value} node cannot have children")
        elif self.text is not None:
            raise MalformedTreeError(f"{self.kind.value} node cannot have a text payload")
        elif self.kind in REPETITION_KINDS:
            if len(self.children) != 1:
                raise MalformedTreeError(
                    f"{self.kind.value} node needs exactly one child, "
                    f"got {len(self.children)}"
                )
        elif not self.children:
            raise MalformedTreeError(f"{self.kind.value} node needs at least one child")

        for child in self.children:
            if not isinstance(child, EBNF):
                raise MalformedTreeError(
                    f"{self.kind.value} child is not an EBNF node: {child!r}"
                )

    @property
    def child(self) -> EBNF:
        """The single child of a repetition node."""
        return self.children[0]

    def walk(self) -> Iterator[EBNF]:
        """Yield this node and all descendants, depth first."""
        yield self
        for c in self.children:
            yield from c.walk()


def terminal(text: str, **trivia) -> EBNF:
    return EBNF(EBNFKind.TERMINAL, text=text, **trivia)


def extended_terminal(text: str, **trivia) -> EBNF:
    return EBNF(EBNFKind.EXTENDED_TERMINAL, text=text, **trivia)


def reference(name: str, **trivia) -> EBNF:
    return EBNF(EBNFKind.REFERENCE, text=name, **trivia)


def one_or_more(child: EBNF, **trivia) -> EBNF:
    return EBNF(EBNFKind.ONE_OR_MORE, children=(child,), **trivia)


def zero_or_more(child: EBNF, **trivia) -> EBNF:
    return EBNF(EBNFKind.ZERO_OR_MORE, children=(child,), **trivia)


def zero_or_one(child: EBNF, **trivia) -> EBNF:
    return EBNF(EBNFKind.ZERO_OR_ONE, children=(child,), **trivia)


def choice(*alternatives: EBNF, **trivia) -> EBNF:
    return EBNF(EBNFKind.CHOICE, children=alternatives, **trivia)


def sequence(*elements: EBNF, **trivia) -> EBNF:
    return EBNF(EBNFKind.SEQUENCE, children=elements, **trivia)


def with_trivia(node: EBNF, whitespace: str = "", comment: str | None = None,
                newline: bool = False) -> EBNF:
    """Return a copy of ``node`` with its trivia replaced."""
    return replace(node, whitespace=whitespace, comment=comment, newline=newline)


# --- Production ---

@dataclass(frozen=True)
class Production:
    """A named rule, or a documentation-only entry when ``body`` is None."""
    name: str | None = None
    body: EBNF | None = None
    comment: str | None = None
    starts_on_new_line: bool = False


@dataclass
class ProductionLink:
    """Cross-reference into the prose document that defines a production."""
    target: str | None = None     # anchor / URL
    name: str | None = None       # display name, e.g. section title


# --- Grammar ---

@dataclass
class Grammar:
    productions: tuple[Production, ...] = ()
    name: str | None = None
    # Side-table of link annotations keyed by production name. This is the
    # only part of a Grammar that changes after construction.
    links: dict[str, ProductionLink] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.productions, tuple):
            self.productions = tuple(self.productions)

    def lookup(self, name: str) -> Production | None:
        """First production called ``name`` (duplicates: first wins)."""
        for p in self.productions:
            if p.name == name:
                return p
        return None

    def names(self) -> Iterator[str]:
        for p in self.productions:
            if p.name is not None:
                yield p.name

    def link_for(self, name: str) -> ProductionLink | None:
        return self.links.get(name)
