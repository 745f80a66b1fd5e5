import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from .matcher import IngredientMatchResult
from .schemas import Recipe

logger = logging.getLogger(__name__)


class SortKey(str, Enum):
    RELEVANCE = "relevance"
    MISSING_COUNT = "missing"
    TIME = "time"
    CALORIES = "calories"

    @classmethod
    def parse(cls, value) -> "SortKey":
        """Accept a SortKey, its value or its name ("missing", "MISSING_COUNT")."""
        if value is None or value == "":
            return cls.RELEVANCE
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for key in cls:
            if text in (key.value, key.name.lower()):
                return key
        raise ValueError(
            f"unknown sort key {value!r}; expected one of "
            + ", ".join(k.value for k in cls)
        )


@dataclass(frozen=True)
class RankedRecipe:
    recipe: Recipe
    match: IngredientMatchResult

    @property
    def ready_in_minutes(self) -> int:
        return self.recipe.ready_in_minutes or 0

    @property
    def calories(self) -> float:
        return self.recipe.calorie_value() or 0.0


# intolerance keyword -> Recipe flag that must not be False
INTOLERANCE_FLAGS = {
    "dairy": "dairy_free",
    "gluten": "gluten_free",
    "vegan": "vegan",
    "vegetarian": "vegetarian",
}

# meal types also recognised from the recipe title
TITLE_MEAL_KEYWORDS = ("breakfast", "lunch", "dinner", "snack", "dessert", "appetizer")


@dataclass
class FilterSpec:
    """Filters applied before sorting. Unset (None/empty) fields do nothing."""

    max_ready_time: Optional[int] = None
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    max_missing_ingredients: Optional[int] = None
    min_match_score: Optional[float] = None
    max_calories: Optional[float] = None
    intolerances: List[str] = field(default_factory=list)
    query: Optional[str] = None
    meal_type: Optional[str] = None

    def accepts(self, item: RankedRecipe) -> bool:
        recipe = item.recipe
        if self.max_ready_time is not None and item.ready_in_minutes > self.max_ready_time:
            return False
        if _given(self.cuisine) and not _contains(recipe.cuisines, self.cuisine):
            return False
        if _given(self.diet) and not _contains(recipe.diets, self.diet):
            return False
        if (self.max_missing_ingredients is not None
                and item.match.missed_count > self.max_missing_ingredients):
            return False
        if self.min_match_score is not None and item.match.match_score < self.min_match_score:
            return False
        if self.max_calories is not None and item.calories > self.max_calories:
            return False
        if self.intolerances and _violates_intolerance(recipe, self.intolerances):
            return False
        if self.query and not _mentions(recipe, self.query):
            return False
        if _given(self.meal_type) and not _is_meal_type(recipe, self.meal_type):
            return False
        return True


def _given(value: Optional[str]) -> bool:
    return bool(value and value.strip())


def _contains(values: Iterable[str], wanted: str) -> bool:
    wanted = wanted.strip().lower()
    return any((v or "").strip().lower() == wanted for v in values)


def _is_meal_type(recipe: Recipe, meal_type: str) -> bool:
    wanted = meal_type.strip().lower()
    if any(wanted in (d or "").lower() for d in recipe.dish_types):
        return True
    return wanted in TITLE_MEAL_KEYWORDS and wanted in recipe.title.lower()


def _violates_intolerance(recipe: Recipe, intolerances: Iterable[str]) -> bool:
    for intolerance in intolerances:
        lower = (intolerance or "").lower()
        for keyword, flag in INTOLERANCE_FLAGS.items():
            if keyword in lower and getattr(recipe, flag) is False:
                return True
    return False


def _mentions(recipe: Recipe, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    if q in recipe.title.lower():
        return True
    if recipe.summary and q in recipe.summary.lower():
        return True
    return any(q in i.name.lower() for i in recipe.ingredients)


SORT_KEYS = {
    SortKey.RELEVANCE: lambda item: -item.match.match_score,
    SortKey.MISSING_COUNT: lambda item: item.match.missed_count,
    SortKey.TIME: lambda item: item.ready_in_minutes,
    SortKey.CALORIES: lambda item: item.calories,
}


class RecipeRanker:
    def filter(self, recipes: Iterable[RankedRecipe],
               filters: Optional[FilterSpec] = None) -> List[RankedRecipe]:
        if filters is None:
            return list(recipes)
        return [r for r in recipes if filters.accepts(r)]

    def sort(self, recipes: Iterable[RankedRecipe],
             sort_key=SortKey.RELEVANCE) -> List[RankedRecipe]:
        # sorted() is stable, equal keys keep their input order
        return sorted(recipes, key=SORT_KEYS[SortKey.parse(sort_key)])

    def rank(self, recipes: Iterable[RankedRecipe],
             filters: Optional[FilterSpec] = None,
             sort_key=SortKey.RELEVANCE) -> List[RankedRecipe]:
        recipes = list(recipes or [])
        kept = self.filter(recipes, filters)
        if len(kept) != len(recipes):
            logger.debug("filters dropped %d of %d recipes",
                         len(recipes) - len(kept), len(recipes))
        return self.sort(kept, sort_key)


def rank(recipes, filters=None, sort_key=SortKey.RELEVANCE) -> List[RankedRecipe]:
    return RecipeRanker().rank(recipes, filters, sort_key)
