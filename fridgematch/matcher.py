"""Classify a recipe's ingredients as used or missed against a user's list.

Each (recipe ingredient, user ingredient) pair is tried against an ordered
list of strategies; the first one that accepts gives the pair its score.
Exact and synonym hits are always accepted, substring and fuzzy hits only
when they reach the tolerance.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .normalize import dedupe_ingredients, normalize_ingredient
from .similarity import similarity
from .synonyms import SynonymResolver, SynonymTable

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 0.8
SYNONYM_SCORE = 0.95


def clamp_tolerance(tolerance) -> float:
    if tolerance is None:
        return DEFAULT_TOLERANCE
    return min(1.0, max(0.0, float(tolerance)))


class MatchStrategy:
    """One way of deciding whether two normalized names are the same food.

    `score` returns a value in [0, 1] when the strategy recognizes the pair,
    or None to let the next strategy try. Gated strategies only count when
    their score reaches the caller's tolerance.
    """

    name = "base"
    gated = True

    def score(self, recipe_name: str, user_name: str) -> Optional[float]:
        raise NotImplementedError

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class ExactMatch(MatchStrategy):
    name = "exact"
    gated = False

    def score(self, recipe_name, user_name):
        return 1.0 if recipe_name == user_name else None


class SynonymMatch(MatchStrategy):
    name = "synonym"
    gated = False

    def __init__(self, resolver: Optional[SynonymResolver] = None,
                 weight: float = SYNONYM_SCORE):
        self.resolver = resolver or SynonymResolver()
        self.weight = weight

    def score(self, recipe_name, user_name):
        if self.resolver.is_synonym(recipe_name, user_name):
            return self.weight
        return None


class SubstringMatch(MatchStrategy):
    name = "substring"

    def score(self, recipe_name, user_name):
        if user_name in recipe_name or recipe_name in user_name:
            shorter, longer = sorted((len(recipe_name), len(user_name)))
            return shorter / longer
        return None


class FuzzyMatch(MatchStrategy):
    name = "fuzzy"

    def score(self, recipe_name, user_name):
        return similarity(recipe_name, user_name)


def default_strategies(synonyms: Optional[SynonymTable] = None) -> List[MatchStrategy]:
    return [
        ExactMatch(),
        SynonymMatch(SynonymResolver(synonyms)),
        SubstringMatch(),
        FuzzyMatch(),
    ]


@dataclass(frozen=True)
class IngredientMatch:
    recipe_ingredient: str
    user_ingredient: str
    score: float
    strategy: str


@dataclass(frozen=True)
class IngredientMatchResult:
    used_ingredients: Tuple[str, ...] = ()
    missed_ingredients: Tuple[str, ...] = ()
    matches: Tuple[IngredientMatch, ...] = ()
    match_score: float = 0.0

    @property
    def used_count(self) -> int:
        return len(self.used_ingredients)

    @property
    def missed_count(self) -> int:
        return len(self.missed_ingredients)

    @property
    def is_complete(self) -> bool:
        """True when nothing is missing (and there was something to match)."""
        return self.missed_count == 0 and self.used_count > 0


class IngredientMatcher:
    """Match user ingredients against one recipe's ingredient list.

    Args:
        synonyms: table for the synonym strategy; the built-in table when
            omitted. Ignored if `strategies` is given.
        strategies: ordered strategies to try for every pair.
        report: "user" records the matched user ingredient in
            `used_ingredients`, "recipe" records the recipe's own name.
    """

    def __init__(self, synonyms: Optional[SynonymTable] = None,
                 strategies: Optional[Sequence[MatchStrategy]] = None,
                 report: str = "user"):
        if report not in ("user", "recipe"):
            raise ValueError(f"report must be 'user' or 'recipe', not {report!r}")
        self.strategies = list(strategies) if strategies is not None else default_strategies(synonyms)
        self.report = report

    def best_match(self, recipe_name: str, user_names: Iterable[str],
                   tolerance: float) -> Optional[IngredientMatch]:
        """Best accepted pairing for one recipe ingredient, or None.

        Both sides must already be normalized. Every user ingredient is
        considered; on equal scores the earlier one is kept.
        """
        best = None
        if not recipe_name:
            return None
        for user_name in user_names:
            for strategy in self.strategies:
                s = strategy.score(recipe_name, user_name)
                if s is None:
                    continue
                if strategy.gated and s < tolerance:
                    continue
                if best is None or s > best.score:
                    best = IngredientMatch(recipe_name, user_name, s, strategy.name)
                break
        return best

    def match(self, user_ingredients: Optional[Iterable[str]],
              recipe_ingredients: Optional[Iterable[str]],
              tolerance: float = DEFAULT_TOLERANCE) -> IngredientMatchResult:
        tolerance = clamp_tolerance(tolerance)
        have = dedupe_ingredients(user_ingredients)
        needed = [normalize_ingredient(r) for r in (recipe_ingredients or [])]
        if not needed:
            return IngredientMatchResult()

        used, missed, matches = [], [], []
        total = 0.0
        for r in needed:
            m = self.best_match(r, have, tolerance)
            if m is None:
                missed.append(r)
                continue
            matches.append(m)
            used.append(m.user_ingredient if self.report == "user" else m.recipe_ingredient)
            total += m.score

        result = IngredientMatchResult(
            used_ingredients=tuple(used),
            missed_ingredients=tuple(missed),
            matches=tuple(matches),
            match_score=total / len(needed),
        )
        logger.debug(
            "matched %d/%d ingredients (score %.3f)",
            result.used_count, len(needed), result.match_score,
        )
        return result


_default_matcher = None


def get_default_matcher() -> IngredientMatcher:
    global _default_matcher
    if _default_matcher is None:
        _default_matcher = IngredientMatcher()
    return _default_matcher


def match_ingredients(user_ingredients, recipe_ingredients,
                      tolerance: float = DEFAULT_TOLERANCE) -> IngredientMatchResult:
    return get_default_matcher().match(user_ingredients, recipe_ingredients, tolerance)
