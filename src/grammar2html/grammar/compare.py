"""Cross-validation of two grammars and link transplanting.

The authority grammar (typically read from the .g4 file) is ground truth;
the copy is the grammar extracted from the prose document. Both are keyed
by production name, so the order of productions in either source does not
matter. Differences are reported as data, never raised.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field

from grammar2html.ebnf_nodes import (
    EBNFKind, Grammar, Production, ProductionLink,
)
from grammar2html.grammar.canonical import canonicalize_production

log = logging.getLogger("grammar2html.compare")

START_SYMBOL = "start"


@dataclass
class Mismatch:
    """A production present in both grammars with different bodies."""
    name: str
    authority_canonical: str
    copy_canonical: str

    def __str__(self) -> str:
        return (
            f"MISMATCH for '{self.name}'\n"
            f"AUTHORITY:\n{self.authority_canonical}\n"
            f"COPY:\n{self.copy_canonical}\n"
        )


@dataclass
class ComparisonReport:
    mismatches: list[Mismatch] = field(default_factory=list)
    missing_in_copy: list[str] = field(default_factory=list)
    missing_in_authority: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.mismatches or self.missing_in_copy or self.missing_in_authority)

    def summary(self) -> str:
        if self.ok:
            return "Grammars match."
        return (
            f"{len(self.mismatches)} mismatch(es), "
            f"{len(self.missing_in_copy)} missing in copy, "
            f"{len(self.missing_in_authority)} missing in authority"
        )

    def format(self) -> str:
        """Return a detailed listing of every difference."""
        if self.ok:
            return self.summary()
        lines = [str(m) for m in self.mismatches]
        for name in self.missing_in_copy:
            lines.append(f"Copy doesn't contain '{name}'")
        for name in self.missing_in_authority:
            lines.append(f"Authority doesn't contain '{name}'")
        lines.append("")
        lines.append(self.summary())
        return "\n".join(lines)


def index_productions(grammar: Grammar) -> dict[str, Production]:
    """Map production name -> first production with that name."""
    index: dict[str, Production] = {}
    for p in grammar.productions:
        if p.name is not None and p.name not in index:
            index[p.name] = p
    return index


def compare(authority: Grammar, copy: Grammar,
            start_symbol: str = START_SYMBOL) -> ComparisonReport:
    """Compare two grammars production by production."""
    dauthority = index_productions(authority)
    dcopy = index_productions(copy)
    report = ComparisonReport()

    for name, p in dauthority.items():
        if name not in dcopy:
            continue
        pauthority = canonicalize_production(p)
        pcopy = canonicalize_production(dcopy[name])
        if pauthority == pcopy:
            continue
        report.mismatches.append(Mismatch(name, pauthority, pcopy))
        log.debug("mismatch for %r: %r != %r", name, pauthority, pcopy)

    for name in dauthority:
        if name != start_symbol and name not in dcopy:
            report.missing_in_copy.append(name)
    for name in dcopy:
        if name != start_symbol and name not in dauthority:
            report.missing_in_authority.append(name)

    log.info("compared %d authority / %d copy productions: %s",
             len(dauthority), len(dcopy), report.summary())
    return report


def enrich_links(authority: Grammar, copy: Grammar) -> Grammar:
    """Copy each production's link annotation from ``copy`` into ``authority``.

    Matching is by name, first match wins. A production with no counterpart
    (or a counterpart without a link) ends up with no link.
    """
    for name in authority.names():
        src = copy.lookup(name)
        link = copy.link_for(name) if src is not None else None
        if link is None:
            authority.links.pop(name, None)
            continue
        authority.links[name] = ProductionLink(target=link.target, name=link.name)
    return authority


def validate_grammar(grammar: Grammar,
                     start_symbol: str = START_SYMBOL) -> list[str]:
    """Check a grammar for structural problems.

    Returns a list of warning messages (empty if valid).
    """
    warnings: list[str] = []

    counts: Counter[str] = Counter(grammar.names())
    for name, n in counts.items():
        if n > 1:
            warnings.append(f"Production '{name}' defined {n} times (first wins)")

    defined = set(counts)
    for i, p in enumerate(grammar.productions):
        if p.name is None and p.body is None and not p.comment:
            warnings.append(f"Production #{i} is empty")
            continue
        if p.name is None and p.body is not None:
            warnings.append(f"Production #{i} has a body but no name")
        if p.body is None:
            continue
        for node in p.body.walk():
            if node.kind == EBNFKind.REFERENCE and node.text not in defined:
                warnings.append(
                    f"Production '{p.name}' references undefined '{node.text}'"
                )

    refs = collect_references(grammar)
    for name in counts:
        if name != start_symbol and name not in refs:
            warnings.append(f"Production '{name}' is never referenced")
    return warnings


def collect_references(grammar: Grammar) -> set[str]:
    """Collect every production name referenced from a body."""
    refs: set[str] = set()
    for p in grammar.productions:
        if p.body is None:
            continue
        for node in p.body.walk():
            if node.kind == EBNFKind.REFERENCE:
                refs.add(node.text)
    return refs
