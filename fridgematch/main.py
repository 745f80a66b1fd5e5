import argparse
import sys

from . import config
from .catalog import CatalogUnavailable, JsonRecipeCatalog
from .logging_config import configure_logging
from .normalize import split_ingredient_text
from .orchestrator import MatchOrchestrator
from .ranking import FilterSpec, SortKey


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fridgematch",
        description="Show which recipes you can cook with what is in your fridge.",
    )
    parser.add_argument("ingredients", nargs="*", help="ingredients you have (space or comma separated)")
    parser.add_argument("--data", default=str(config.DATA_FILE), help="recipes JSON file")
    parser.add_argument("--tolerance", type=float, default=config.MATCH_TOLERANCE)
    parser.add_argument("--sort", default=SortKey.RELEVANCE.value, choices=[k.value for k in SortKey])
    parser.add_argument("--max-time", type=int, default=None, help="maximum ready time in minutes")
    parser.add_argument("--cuisine", default=None)
    parser.add_argument("--diet", default=None)
    parser.add_argument("--max-missing", type=int, default=None)
    parser.add_argument("--meal-type", default=None, help="e.g. breakfast, main course, dessert")
    parser.add_argument("--limit", type=int, default=10)
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "WARNING")

    have = []
    for chunk in args.ingredients:
        have.extend(split_ingredient_text(chunk))
    if not have:
        print("No ingredients given.", file=sys.stderr)
        return 2

    try:
        recipes = JsonRecipeCatalog(args.data).list_recipes()
    except CatalogUnavailable as exc:
        print(f"Could not load recipes: {exc}", file=sys.stderr)
        return 1

    filters = FilterSpec(
        max_ready_time=args.max_time,
        cuisine=args.cuisine,
        diet=args.diet,
        max_missing_ingredients=args.max_missing,
        meal_type=args.meal_type,
    )
    ranked = MatchOrchestrator(max_workers=config.MAX_WORKERS).find_matches(
        have, recipes, args.tolerance, filters, args.sort
    )
    if not ranked:
        print("No recipes found.")
        return 0

    print(f"Loaded {len(recipes)} recipe(s), {len(ranked)} match(es).")
    for item in ranked[:args.limit]:
        m = item.match
        print(f"- {item.recipe.title} ({m.match_score:.0%}, missing {m.missed_count})")
        if m.missed_ingredients:
            print(f"    missing: {', '.join(m.missed_ingredients)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
