"""Where candidate recipes come from.

The matching engine only needs an in-memory list of recipes. Catalogs hide
whether that list was read from the database or a JSON file, and
FallbackCatalog keeps the app answering when the primary source is down.
"""
import logging
from pathlib import Path
from typing import List, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud
from .recipes import load_recipes
from .schemas import Recipe

logger = logging.getLogger(__name__)


class CatalogUnavailable(Exception):
    """The recipe source could not be read."""


class RecipeCatalog(Protocol):
    def list_recipes(self) -> List[Recipe]:
        ...


class SqlRecipeCatalog:
    def __init__(self, db: Session, limit: Optional[int] = None):
        self.db = db
        self.limit = limit

    def list_recipes(self) -> List[Recipe]:
        try:
            rows = crud.get_recipes(self.db, skip=0, limit=self.limit)
        except SQLAlchemyError as exc:
            raise CatalogUnavailable(f"recipe table not readable: {exc}") from exc
        return [crud.to_schema(r) for r in rows]


class JsonRecipeCatalog:
    def __init__(self, path):
        self.path = Path(path)

    def list_recipes(self) -> List[Recipe]:
        try:
            return load_recipes(self.path)
        except (OSError, ValueError) as exc:
            raise CatalogUnavailable(f"cannot read {self.path}: {exc}") from exc


class StaticCatalog:
    def __init__(self, recipes=None):
        self.recipes = list(recipes or [])

    def list_recipes(self) -> List[Recipe]:
        return list(self.recipes)


class FallbackCatalog:
    """Read from `primary`; on failure log it and read from `fallback`.

    `last_used_fallback` tells the caller which source the last call used.
    """

    def __init__(self, primary: RecipeCatalog, fallback: Optional[RecipeCatalog] = None):
        self.primary = primary
        self.fallback = fallback
        self.last_used_fallback = False

    def list_recipes(self) -> List[Recipe]:
        self.last_used_fallback = False
        try:
            return self.primary.list_recipes()
        except CatalogUnavailable as exc:
            if self.fallback is None:
                raise
            logger.warning("primary recipe catalog failed, using fallback: %s", exc)
        self.last_used_fallback = True
        return self.fallback.list_recipes()
