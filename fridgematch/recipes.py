import json
import logging
from pathlib import Path
from typing import List

from pydantic import ValidationError

from .schemas import Recipe

logger = logging.getLogger(__name__)


def load_recipe_dicts(path) -> List[dict]:
    """Load raw recipe records from a JSON file.

    Args:
        path (str or Path): Path to the JSON file.

    Returns:
        list: list of recipe dictionaries, empty if the file does not exist.
    """
    p = Path(path)
    if not p.exists():
        return []
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        # {"recipes": [...]} or {"results": [...]} wrappers
        data = data.get("recipes") or data.get("results") or []
    return data


def load_recipes(path) -> List[Recipe]:
    """Load and validate recipes from a JSON file.

    Records without an id get their 1-based position. Invalid records are
    skipped with a warning.
    """
    recipes = []
    for pos, raw in enumerate(load_recipe_dicts(path), start=1):
        if not isinstance(raw, dict):
            logger.warning("skipping recipe #%d in %s: not an object", pos, path)
            continue
        raw = dict(raw)
        raw.setdefault("id", pos)
        # legacy files use "name" for the title
        if "title" not in raw and "name" in raw:
            raw["title"] = raw["name"]
        try:
            recipes.append(Recipe.model_validate(raw))
        except ValidationError as exc:
            logger.warning("skipping recipe #%d in %s: %s", pos, path, exc.errors()[0].get("msg"))
    return recipes
