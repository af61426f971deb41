"""Pronunciation substitution with a script table and a per-compiler overlay."""

import re

from ttsscript.errors import PronunciationError


class PronunciationResolver:
    """Replace terms with language-specific spoken forms.

    Lookups merge three tables, later ones winning on the same term:
    the base (script) table, an optional segment table, and the overlay
    filled by add_pronunciation(). The base table is copied and never
    mutated.

    Matching is case-sensitive and whole-term: a term only matches when no
    word character touches it on either side. When terms overlap ("API"
    and "REST API") the longest one wins, and replaced text is never
    scanned again.
    """

    def __init__(self, base: dict[str, dict[str, str]] | None = None):
        self._base = {term: dict(by_lang) for term, by_lang in (base or {}).items()}
        self._overlay: dict[str, dict[str, str]] = {}

    @property
    def overlay(self) -> dict[str, dict[str, str]]:
        return {term: dict(by_lang) for term, by_lang in self._overlay.items()}

    def add_pronunciation(self, term: str, language: str, replacement: str) -> None:
        """Register or overwrite an overlay rule."""
        if not term:
            raise PronunciationError("pronunciation term must not be empty")
        if not language:
            raise PronunciationError(f"pronunciation '{term}' needs a language code")
        if not replacement:
            raise PronunciationError(f"pronunciation '{term}' needs a replacement for '{language}'")
        self._overlay.setdefault(term, {})[language] = replacement

    def add_pronunciations(self, language: str, rules: dict[str, str]) -> None:
        for term, replacement in rules.items():
            self.add_pronunciation(term, language, replacement)

    def with_base(self, base: dict[str, dict[str, str]]) -> "PronunciationResolver":
        """Return a resolver over a different base table sharing a copy of this overlay."""
        resolver = PronunciationResolver(base)
        resolver._overlay = self.overlay
        return resolver

    def copy(self) -> "PronunciationResolver":
        return self.with_base(self._base)

    def rules_for(
        self,
        language: str,
        segment_table: dict[str, dict[str, str]] | None = None,
    ) -> dict[str, str]:
        """Merged term -> replacement map for one language."""
        rules = {}
        for table in (self._base, segment_table or {}, self._overlay):
            for term, by_lang in table.items():
                replacement = by_lang.get(language)
                if term and replacement:
                    rules[term] = replacement
        return rules

    def resolve(
        self,
        text: str,
        language: str,
        segment_table: dict[str, dict[str, str]] | None = None,
    ) -> str:
        rules = self.rules_for(language, segment_table)
        if not rules or not text:
            return text

        # Longest first so the alternation prefers "REST API" over "API"
        terms = sorted(rules, key=lambda t: (-len(t), t))
        pattern = re.compile(r"(?<!\w)(?:" + "|".join(re.escape(t) for t in terms) + r")(?!\w)")
        return pattern.sub(lambda m: rules[m.group(0)], text)
