import json
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from . import models, schemas


def _loads(text, default):
    if not text:
        return default
    try:
        return json.loads(text)
    except ValueError:
        return default


def to_schema(db_recipe: models.Recipe) -> schemas.Recipe:
    """Turn a stored row (JSON text columns) into a Recipe record."""
    nutrition = None
    if db_recipe.calories is not None:
        nutrition = {"calories": db_recipe.calories}
    return schemas.Recipe(
        id=db_recipe.id,
        title=db_recipe.title,
        ingredients=_loads(db_recipe.ingredients, []),
        ready_in_minutes=db_recipe.ready_in_minutes,
        cuisines=_loads(db_recipe.cuisines, []),
        diets=_loads(db_recipe.diets, []),
        dish_types=_loads(db_recipe.dish_types, []),
        vegetarian=db_recipe.vegetarian,
        vegan=db_recipe.vegan,
        gluten_free=db_recipe.gluten_free,
        dairy_free=db_recipe.dairy_free,
        nutrition=nutrition,
        summary=db_recipe.summary,
        image=db_recipe.image,
    )


def _apply(db_recipe: models.Recipe, recipe: schemas.RecipeCreate):
    db_recipe.title = recipe.title
    db_recipe.ingredients = json.dumps(
        [i.model_dump(exclude_none=True) for i in recipe.ingredients]
    )
    db_recipe.ready_in_minutes = recipe.ready_in_minutes
    db_recipe.cuisines = json.dumps(recipe.cuisines or [])
    db_recipe.diets = json.dumps(recipe.diets or [])
    db_recipe.dish_types = json.dumps(recipe.dish_types or [])
    db_recipe.calories = recipe.calorie_value()
    db_recipe.vegetarian = recipe.vegetarian
    db_recipe.vegan = recipe.vegan
    db_recipe.gluten_free = recipe.gluten_free
    db_recipe.dairy_free = recipe.dairy_free
    db_recipe.summary = recipe.summary
    db_recipe.image = recipe.image


def _search(db: Session, q: Optional[str]):
    query = db.query(models.Recipe)
    if q:
        like = f"%{q}%"
        query = query.filter(
            or_(models.Recipe.title.ilike(like), models.Recipe.ingredients.ilike(like))
        )
    return query


def get_recipe(db: Session, recipe_id: int):
    return db.query(models.Recipe).filter(models.Recipe.id == recipe_id).first()


def get_recipe_by_title(db: Session, title: str):
    return db.query(models.Recipe).filter(models.Recipe.title == title).first()


def get_recipes(db: Session, skip: int = 0, limit: int = 100, q: Optional[str] = None):
    return _search(db, q).order_by(models.Recipe.id).offset(skip).limit(limit).all()


def count_recipes(db: Session, q: Optional[str] = None) -> int:
    return _search(db, q).count()


def create_recipe(db: Session, recipe: schemas.RecipeCreate):
    db_recipe = models.Recipe()
    _apply(db_recipe, recipe)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def update_recipe(db: Session, recipe_id: int, recipe: schemas.RecipeCreate):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return None
    _apply(db_recipe, recipe)
    db.add(db_recipe)
    db.commit()
    db.refresh(db_recipe)
    return db_recipe


def delete_recipe(db: Session, recipe_id: int):
    db_recipe = get_recipe(db, recipe_id)
    if not db_recipe:
        return False
    db.delete(db_recipe)
    db.commit()
    return True
