import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .matcher import DEFAULT_TOLERANCE, IngredientMatcher, clamp_tolerance
from .normalize import dedupe_ingredients
from .ranking import FilterSpec, RankedRecipe, RecipeRanker, SortKey
from .schemas import Recipe

logger = logging.getLogger(__name__)


class MatchOrchestrator:
    """Match user ingredients against every candidate recipe, then rank.

    Args:
        matcher: IngredientMatcher to use (default one if omitted).
        ranker: RecipeRanker to use.
        max_workers: run the per-recipe step on a thread pool when > 1.
        time_budget: seconds allowed for the matching loop. Candidates not
            reached in time are left out and a warning is logged.
    """

    def __init__(self, matcher: Optional[IngredientMatcher] = None,
                 ranker: Optional[RecipeRanker] = None,
                 max_workers: Optional[int] = None,
                 time_budget: Optional[float] = None):
        self.matcher = matcher or IngredientMatcher()
        self.ranker = ranker or RecipeRanker()
        self.max_workers = max_workers
        self.time_budget = time_budget

    def _evaluate(self, have: List[str], recipe: Recipe, tolerance: float) -> RankedRecipe:
        result = self.matcher.match(have, recipe.ingredient_names(), tolerance)
        return RankedRecipe(recipe=recipe, match=result)

    def _evaluate_all(self, have, recipes, tolerance) -> List[RankedRecipe]:
        deadline = None
        if self.time_budget is not None:
            deadline = time.monotonic() + self.time_budget

        if self.max_workers and self.max_workers > 1 and len(recipes) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = [executor.submit(self._evaluate, have, r, tolerance) for r in recipes]
                out = []
                for i, future in enumerate(futures):
                    if deadline is not None and time.monotonic() > deadline:
                        for f in futures[i:]:
                            f.cancel()
                        self._warn_budget(len(out), len(recipes))
                        break
                    out.append(future.result())
                return out

        out = []
        for r in recipes:
            if deadline is not None and time.monotonic() > deadline:
                self._warn_budget(len(out), len(recipes))
                break
            out.append(self._evaluate(have, r, tolerance))
        return out

    def _warn_budget(self, done: int, total: int):
        logger.warning(
            "match time budget of %.3fs spent after %d of %d recipes",
            self.time_budget, done, total,
        )

    def find_matches(self, user_ingredients: Optional[Iterable[str]],
                     candidate_recipes: Optional[Iterable[Recipe]],
                     tolerance: float = DEFAULT_TOLERANCE,
                     filters: Optional[FilterSpec] = None,
                     sort_key=SortKey.RELEVANCE) -> List[RankedRecipe]:
        recipes = list(candidate_recipes or [])
        if not recipes:
            return []
        sort_key = SortKey.parse(sort_key)
        tolerance = clamp_tolerance(tolerance)
        have = dedupe_ingredients(user_ingredients)

        started = time.monotonic()
        evaluated = self._evaluate_all(have, recipes, tolerance)
        ranked = self.ranker.rank(evaluated, filters, sort_key)
        logger.info(
            "matched %d ingredient(s) against %d recipe(s): %d kept, sort=%s, %.1f ms",
            len(have), len(recipes), len(ranked), sort_key.value,
            (time.monotonic() - started) * 1000,
        )
        return ranked


def find_matches(user_ingredients, candidate_recipes, tolerance=DEFAULT_TOLERANCE,
                 filters=None, sort_key=SortKey.RELEVANCE) -> List[RankedRecipe]:
    return MatchOrchestrator().find_matches(
        user_ingredients, candidate_recipes, tolerance, filters, sort_key
    )
