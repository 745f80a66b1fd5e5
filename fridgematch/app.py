import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import config, crud, schemas
from .catalog import CatalogUnavailable, FallbackCatalog, JsonRecipeCatalog, SqlRecipeCatalog
from .db import SessionLocal, init_db
from .logging_config import configure_logging
from .normalize import dedupe_ingredients
from .orchestrator import MatchOrchestrator
from .ranking import FilterSpec, SortKey

logger = logging.getLogger(__name__)

FILTER_OPTIONS = {
    "cuisines": [
        "American", "Italian", "Mexican", "Asian", "Mediterranean", "Greek",
        "French", "Japanese", "Chinese", "Thai", "Indian", "Middle Eastern",
    ],
    "diets": [
        "Vegetarian", "Vegan", "Gluten-Free", "Dairy-Free", "Keto", "Paleo",
        "Low-Carb", "High-Protein",
    ],
    "intolerances": [
        "Nuts", "Dairy", "Shellfish", "Eggs", "Soy", "Wheat", "Fish", "Sesame",
    ],
    "meal_types": ["main course", "breakfast", "side dish", "dessert", "snack"],
    "time_preferences": [
        {"name": "Quick (15-30 min)", "value": "15-30"},
        {"name": "Medium (30-60 min)", "value": "30-60"},
        {"name": "Long (60+ min)", "value": "60+"},
    ],
    "sort": [k.value for k in SortKey],
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    # Initialize DB once at startup
    init_db()
    yield


app = FastAPI(title="fridgematch", lifespan=lifespan)

# Allow CORS for API clients (adjust origins for production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_catalog(db: Session = Depends(get_db)):
    # database first, bundled JSON recipes when the table can't be read
    return FallbackCatalog(SqlRecipeCatalog(db), JsonRecipeCatalog(config.DATA_FILE))


def get_orchestrator():
    return MatchOrchestrator(max_workers=config.MAX_WORKERS, time_budget=config.TIME_BUDGET)


def _link_header(request: Request, page: int, page_size: int, total: int) -> str:
    links = []
    if page > 1:
        url = request.url.include_query_params(page=page - 1, page_size=page_size)
        links.append(f'<{url}>; rel="prev"')
    if page * page_size < total:
        url = request.url.include_query_params(page=page + 1, page_size=page_size)
        links.append(f'<{url}>; rel="next"')
    return ", ".join(links)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/filters")
def filter_options():
    return FILTER_OPTIONS


@app.get("/api/recipes", response_model=schemas.RecipePage)
def list_recipes(
    request: Request,
    response: Response,
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    total = crud.count_recipes(db, q=q)
    rows = crud.get_recipes(db, skip=(page - 1) * page_size, limit=page_size, q=q)
    link = _link_header(request, page, page_size, total)
    if link:
        response.headers["Link"] = link
    return {
        "items": [crud.to_schema(r) for r in rows],
        "total": total,
        "page": page,
        "page_size": page_size,
    }


@app.post("/api/recipes", response_model=schemas.Recipe)
def create_recipe(recipe: schemas.RecipeCreate, db: Session = Depends(get_db)):
    if crud.get_recipe_by_title(db, recipe.title):
        raise HTTPException(status_code=400, detail="Recipe with this title already exists")
    return crud.to_schema(crud.create_recipe(db, recipe))


@app.get("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    r = crud.get_recipe(db, recipe_id)
    if not r:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return crud.to_schema(r)


@app.put("/api/recipes/{recipe_id}", response_model=schemas.Recipe)
def update_recipe(recipe_id: int, recipe: schemas.RecipeCreate, db: Session = Depends(get_db)):
    existing = crud.get_recipe_by_title(db, recipe.title)
    if existing and existing.id != recipe_id:
        raise HTTPException(status_code=400, detail="Recipe with this title already exists")
    r = crud.update_recipe(db, recipe_id, recipe)
    if not r:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return crud.to_schema(r)


@app.delete("/api/recipes/{recipe_id}")
def delete_recipe(recipe_id: int, db: Session = Depends(get_db)):
    if not crud.delete_recipe(db, recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"deleted": True}


@app.post("/api/match", response_model=schemas.MatchResponse)
def match(
    body: schemas.MatchRequest,
    catalog=Depends(get_catalog),
    orchestrator: MatchOrchestrator = Depends(get_orchestrator),
):
    try:
        sort_key = SortKey.parse(body.sort)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    have = dedupe_ingredients(body.ingredients)
    try:
        candidates = catalog.list_recipes()
    except CatalogUnavailable as exc:
        # no recipes is a normal "nothing found" answer, not a server error
        logger.warning("no recipe catalog available: %s", exc)
        candidates = []

    tolerance = body.tolerance if body.tolerance is not None else config.MATCH_TOLERANCE
    filters = FilterSpec(
        max_ready_time=body.max_ready_time,
        cuisine=body.cuisine,
        diet=body.diet,
        max_missing_ingredients=body.max_missing_ingredients,
        min_match_score=body.min_match_score,
        max_calories=body.max_calories,
        intolerances=body.intolerances,
        query=body.query,
        meal_type=body.meal_type,
    )
    ranked = orchestrator.find_matches(have, candidates, tolerance, filters, sort_key)

    start = (body.page - 1) * body.page_size
    results = []
    for item in ranked[start:start + body.page_size]:
        m = item.match
        results.append(schemas.MatchItem(
            id=item.recipe.id,
            title=item.recipe.title,
            match=m.is_complete,
            match_score=round(m.match_score, 4),
            used=list(m.used_ingredients),
            used_count=m.used_count,
            missed=list(m.missed_ingredients),
            missed_count=m.missed_count,
            ready_in_minutes=item.recipe.ready_in_minutes,
            calories=item.recipe.calorie_value(),
        ))
    return schemas.MatchResponse(
        have=have,
        total=len(ranked),
        page=body.page,
        page_size=body.page_size,
        fallback=getattr(catalog, "last_used_fallback", False),
        results=results,
    )
