import sys
from pathlib import Path

# allow running as `python scripts/import_data.py` from the project root
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))  # noqa: E402

from fridgematch import config, crud  # noqa: E402
from fridgematch.db import SessionLocal, init_db  # noqa: E402
from fridgematch.logging_config import configure_logging  # noqa: E402
from fridgematch.recipes import load_recipes  # noqa: E402
from fridgematch.schemas import RecipeCreate  # noqa: E402


def main(path=None):
    configure_logging()
    init_db()
    p = Path(path) if path else config.DATA_FILE
    if not p.exists():
        print(f'{p} not found')
        return
    db = SessionLocal()
    added = 0
    try:
        for r in load_recipes(p):
            if crud.get_recipe_by_title(db, r.title):
                continue
            crud.create_recipe(db, RecipeCreate.model_validate(r.model_dump(exclude={'id'})))
            added += 1
    finally:
        db.close()
    print(f'Imported {added} recipes')


if __name__ == '__main__':
    main(sys.argv[1] if len(sys.argv) > 1 else None)
