# flake8: noqa
import sys
from pathlib import Path

# Ensure project root is on sys.path so `fridgematch` can be imported when tests are run
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))  # noqa: E402

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient  # noqa: E402

from fridgematch import app as app_module
from fridgematch import models
from fridgematch.catalog import CatalogUnavailable, FallbackCatalog, StaticCatalog
from fridgematch.schemas import Recipe


SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"
# Use StaticPool so the same in-memory database is shared across connections
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create tables in the in-memory database
models.Base.metadata.create_all(bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app_module.app.dependency_overrides[app_module.get_db] = override_get_db
client = TestClient(app_module.app)


class BrokenCatalog:
    def list_recipes(self):
        raise CatalogUnavailable("provider down")


def find(results, title):
    return next((r for r in results if r["title"] == title), None)


def test_health_and_filter_options():
    assert client.get("/health").json() == {"status": "ok"}
    data = client.get("/api/filters").json()
    assert "Italian" in data["cuisines"]
    assert "Vegan" in data["diets"]
    assert data["sort"] == ["relevance", "missing", "time", "calories"]


def test_json_api_crud():
    # create
    payload = {"title": "JsonCRUD", "ingredients": ["a"], "ready_in_minutes": 5}
    res = client.post("/api/recipes", json=payload)
    assert res.status_code == 200
    obj = res.json()
    rid = obj["id"]
    assert obj["ingredients"] == [{"name": "a", "amount": None, "unit": None, "original": None}]

    # get
    res = client.get(f"/api/recipes/{rid}")
    assert res.status_code == 200
    assert res.json()["title"] == "JsonCRUD"

    # update
    payload2 = {"title": "JsonCRUD-Updated", "ingredients": ["x"]}
    res = client.put(f"/api/recipes/{rid}", json=payload2)
    assert res.status_code == 200
    assert res.json()["title"] == "JsonCRUD-Updated"
    assert res.json()["ready_in_minutes"] is None

    # delete
    res = client.delete(f"/api/recipes/{rid}")
    assert res.status_code == 200
    assert res.json().get("deleted") is True

    assert client.get(f"/api/recipes/{rid}").status_code == 404
    assert client.delete(f"/api/recipes/{rid}").status_code == 404
    assert client.put(f"/api/recipes/{rid}", json=payload2).status_code == 404


def test_duplicate_recipe_title():
    res1 = client.post("/api/recipes", json={"title": "DupRecipe", "ingredients": ["i1"]})
    assert res1.status_code == 200

    # second create with same title should return 400
    res2 = client.post("/api/recipes", json={"title": "DupRecipe", "ingredients": ["i2"]})
    assert res2.status_code == 400


def test_missing_title_validation():
    res = client.post("/api/recipes", json={"ingredients": ["a", "b"]})
    assert res.status_code == 422


def test_search_api():
    client.post("/api/recipes", json={"title": "Apple Pie", "ingredients": ["apple"]})
    client.post("/api/recipes", json={"title": "Banana Bread", "ingredients": ["banana"]})
    client.post("/api/recipes", json={"title": "Cherry Tart", "ingredients": ["cherry"]})

    res = client.get("/api/recipes?q=Banana&page=1&page_size=10")
    assert res.status_code == 200
    data = res.json()
    assert data["total"] == 1
    assert data["items"][0]["title"] == "Banana Bread"


def test_link_headers_pagination():
    # ensure we have multiple items
    for i in range(1, 12):
        client.post("/api/recipes", json={"title": f"Lnk{i}", "ingredients": ["x"]})

    # request page 2 with page_size 5 -> should have prev and next
    res = client.get("/api/recipes?page=2&page_size=5")
    assert res.status_code == 200
    link = res.headers.get("Link")
    assert link is not None
    assert 'rel="prev"' in link and 'rel="next"' in link

    # first page should not have prev
    res = client.get("/api/recipes?page=1&page_size=5")
    link = res.headers.get("Link")
    assert link is not None
    assert 'rel="prev"' not in link and 'rel="next"' in link


def test_match_api():
    client.post("/api/recipes", json={"title": "Match1", "ingredients": ["egg", "flour"]})
    client.post("/api/recipes", json={"title": "Match2", "ingredients": ["milk", "sugar"]})

    res = client.post("/api/match", json={"ingredients": ["egg", "flour", "butter"], "page_size": 100})
    assert res.status_code == 200
    data = res.json()
    assert data["have"] == ["egg", "flour", "butter"]
    assert data["fallback"] is False
    found = find(data["results"], "Match1")
    assert found is not None and found["match"] is True
    assert found["match_score"] == 1.0
    other = find(data["results"], "Match2")
    assert other["match"] is False
    assert other["missed"] == ["milk", "sugar"]
    assert other["used_count"] + other["missed_count"] == 2


def test_match_synonyms_and_typos():
    client.post("/api/recipes", json={"title": "TomatoSalad", "ingredients": ["tomatoes", "onion", "garlic"]})
    client.post("/api/recipes", json={"title": "RoastChicken", "ingredients": ["chicken"]})

    res = client.post("/api/match", json={"ingredients": ["Tomato", "onion", "chiken"], "page_size": 100})
    data = res.json()
    salad = find(data["results"], "TomatoSalad")
    assert salad["used"] == ["tomato", "onion"]
    assert salad["missed"] == ["garlic"]
    assert abs(salad["match_score"] - 0.65) < 1e-3
    chicken = find(data["results"], "RoastChicken")
    assert chicken["match"] is True

    strict = client.post("/api/match", json={"ingredients": ["chiken"], "tolerance": 0.9, "page_size": 100}).json()
    assert find(strict["results"], "RoastChicken")["match"] is False


def test_match_filters_and_sort():
    client.post("/api/recipes", json={"title": "QuickOmelette", "ingredients": ["eggs", "butter"], "ready_in_minutes": 10})
    client.post("/api/recipes", json={"title": "SlowOmelette", "ingredients": ["eggs", "butter", "cheese"], "ready_in_minutes": 25})

    res = client.post("/api/match", json={
        "ingredients": ["egg", "butter"],
        "max_ready_time": 20,
        "sort": "missing",
        "page_size": 100,
    })
    data = res.json()
    assert find(data["results"], "QuickOmelette") is not None
    assert find(data["results"], "SlowOmelette") is None
    missed = [r["missed_count"] for r in data["results"]]
    assert missed == sorted(missed)
    assert all((r["ready_in_minutes"] or 0) <= 20 for r in data["results"])


def test_match_pagination():
    res = client.post("/api/match", json={"ingredients": ["x"], "page": 1, "page_size": 2}).json()
    assert len(res["results"]) <= 2
    assert res["total"] >= len(res["results"])


def test_match_rejects_bad_input():
    assert client.post("/api/match", json={"ingredients": ["egg"], "sort": "popularity"}).status_code == 422
    assert client.post("/api/match", json={"ingredients": ["egg"], "tolerance": 1.5}).status_code == 422


def test_match_uses_fallback_catalog():
    backup = StaticCatalog([Recipe(id=900, title="Backup Eggs", ingredients=["egg"])])
    app_module.app.dependency_overrides[app_module.get_catalog] = lambda: FallbackCatalog(BrokenCatalog(), backup)
    try:
        data = client.post("/api/match", json={"ingredients": ["eggs"]}).json()
    finally:
        app_module.app.dependency_overrides.pop(app_module.get_catalog)
    assert data["fallback"] is True
    assert [r["title"] for r in data["results"]] == ["Backup Eggs"]


def test_match_without_any_catalog_is_empty_not_error():
    app_module.app.dependency_overrides[app_module.get_catalog] = lambda: BrokenCatalog()
    try:
        res = client.post("/api/match", json={"ingredients": ["eggs"]})
    finally:
        app_module.app.dependency_overrides.pop(app_module.get_catalog)
    assert res.status_code == 200
    assert res.json()["results"] == []
    assert res.json()["total"] == 0


def test_match_meal_type_filter():
    client.post("/api/recipes", json={"title": "MealPancakes", "ingredients": ["flour", "egg"], "dish_types": ["Breakfast"]})
    client.post("/api/recipes", json={"title": "MealStew", "ingredients": ["beef", "carrot"], "dish_types": ["main course"]})
    client.post("/api/recipes", json={"title": "Lazy Breakfast Toast", "ingredients": ["bread"]})

    data = client.post("/api/match", json={"ingredients": ["egg"], "meal_type": "breakfast", "page_size": 100}).json()
    titles = [r["title"] for r in data["results"]]
    assert "MealPancakes" in titles
    assert "Lazy Breakfast Toast" in titles
    assert "MealStew" not in titles

    data = client.post("/api/match", json={"ingredients": ["beef"], "meal_type": "Main Course", "page_size": 100}).json()
    titles = [r["title"] for r in data["results"]]
    assert "MealStew" in titles
    assert "MealPancakes" not in titles
