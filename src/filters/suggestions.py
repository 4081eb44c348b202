# src/filters/suggestions.py

"""Fallback search suggestions for empty result sets."""

from src.config.settings import Settings


class SuggestionProvider:
    """Suggest category-adjacent terms, then popular searches."""

    def __init__(
        self,
        categories: list[str] | None = None,
        popular: list[str] | None = None,
    ) -> None:
        self.categories = (
            categories
            if categories is not None
            else Settings.LOCAL_CATEGORIES
        )
        self.popular = (
            popular if popular is not None else Settings.POPULAR_SEARCHES
        )

    def popular_searches(self) -> list[str]:
        return self.popular[: Settings.MAX_POPULAR_SUGGESTIONS]

    def related_categories(self, term: str) -> list[str]:
        """Categories sharing the term's first three characters.

        Categories already contained in the term are skipped.
        """
        prefix = term[:3]
        if not prefix:
            return []
        related = [
            cat
            for cat in self.categories
            if cat not in term and prefix in cat
        ]
        return related[: Settings.MAX_CATEGORY_SUGGESTIONS]

    def suggest(self, term: str) -> list[str]:
        """Related categories first, followed by popular searches."""
        suggestions: list[str] = []
        for candidate in [
            *self.related_categories(term),
            *self.popular_searches(),
        ]:
            if candidate not in suggestions:
                suggestions.append(candidate)
        return suggestions
