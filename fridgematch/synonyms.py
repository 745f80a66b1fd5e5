from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .normalize import normalize_ingredient


# canonical -> aliases (plural forms, preparation and variety variants)
DEFAULT_SYNONYMS = {
    "tomato": ["tomatoes", "cherry tomato", "roma tomato"],
    "onion": ["onions", "red onion", "white onion", "yellow onion"],
    "garlic": ["garlic cloves", "garlic powder"],
    "olive oil": ["extra virgin olive oil", "evoo"],
    "salt": ["sea salt", "kosher salt", "table salt"],
    "pepper": ["black pepper", "white pepper", "ground pepper"],
    "chicken": ["chicken breast", "chicken thigh", "chicken meat"],
    "beef": ["ground beef", "beef steak", "beef meat"],
    "rice": ["white rice", "brown rice", "jasmine rice", "basmati rice"],
    "pasta": ["spaghetti", "penne", "fettuccine", "linguine"],
    "cheese": ["cheddar", "mozzarella", "parmesan", "gouda"],
    "milk": ["whole milk", "skim milk", "almond milk", "soy milk"],
    "egg": ["eggs", "large eggs", "egg whites"],
    "flour": ["all purpose flour", "bread flour", "cake flour"],
    "sugar": ["white sugar", "brown sugar", "granulated sugar"],
    "butter": ["unsalted butter", "salted butter", "margarine"],
    "lemon": ["lemons", "lemon juice", "lemon zest"],
    "lime": ["limes", "lime juice", "lime zest"],
    "bell pepper": [
        "bell peppers", "red pepper", "green pepper", "yellow pepper",
        "capsicum",
    ],
    "carrot": ["carrots", "baby carrots"],
    "potato": ["potatoes", "russet potato", "red potato"],
    "spinach": ["baby spinach", "fresh spinach"],
    "mushroom": ["mushrooms", "button mushrooms", "portobello"],
    "basil": ["fresh basil", "basil leaves"],
    "oregano": ["dried oregano", "fresh oregano"],
    "thyme": ["fresh thyme", "dried thyme"],
    "rosemary": ["fresh rosemary", "dried rosemary"],
    "parsley": ["fresh parsley", "dried parsley"],
    "cilantro": ["fresh cilantro", "coriander"],
    "ginger": ["fresh ginger", "ginger powder", "ginger root"],
    "cumin": ["ground cumin", "cumin seeds"],
    "paprika": ["smoked paprika", "sweet paprika"],
    "cinnamon": ["ground cinnamon", "cinnamon stick"],
    "nutmeg": ["ground nutmeg", "whole nutmeg"],
    "vanilla": ["vanilla extract", "vanilla bean"],
    "honey": ["raw honey", "clover honey"],
    "maple syrup": ["pure maple syrup"],
    "soy sauce": ["light soy sauce", "dark soy sauce", "tamari"],
    "vinegar": [
        "apple cider vinegar", "balsamic vinegar", "white vinegar",
    ],
    "mustard": ["dijon mustard", "yellow mustard", "whole grain mustard"],
    "mayonnaise": ["mayo", "light mayonnaise"],
    "ketchup": ["tomato ketchup", "catsup"],
    "hot sauce": ["sriracha", "tabasco", "chili sauce"],
    "worcestershire": ["worcestershire sauce"],
    "sesame oil": ["toasted sesame oil"],
    "coconut oil": ["virgin coconut oil", "refined coconut oil"],
    "avocado": ["avocados", "avocado oil"],
    "berries": [
        "mixed berries", "strawberries", "blueberries", "raspberries",
        "blackberries",
    ],
    "yogurt": ["greek yogurt", "plain yogurt", "vanilla yogurt"],
    "bread": ["whole grain bread", "white bread", "sourdough bread"],
    "oat": ["oats", "rolled oats", "steel cut oats"],
    "almond": ["almonds", "almond flour", "almond milk"],
    "coconut": ["coconut milk", "shredded coconut", "coconut oil"],
    "chocolate": [
        "dark chocolate", "milk chocolate", "chocolate chips",
    ],
    "cream": ["heavy cream", "whipping cream", "sour cream"],
    "sauce": ["tomato sauce", "pasta sauce", "marinara sauce"],
    "broth": ["chicken broth", "beef broth", "vegetable broth"],
    "stock": ["chicken stock", "beef stock", "vegetable stock"],
    "eggplant": ["eggplants", "aubergine"],
    "zucchini": ["courgette"],
    "green onion": ["scallion", "scallions", "spring onion"],
}


class SynonymTable:
    """Read-only canonical -> aliases mapping with case-insensitive lookups.

    Build one from a plain dict; it copies and normalizes the data, so
    later changes to the source dict are not seen.
    """

    def __init__(self, entries: Optional[Mapping[str, Iterable[str]]] = None):
        table: Dict[str, Tuple[str, ...]] = {}
        for canonical, aliases in (entries or {}).items():
            key = normalize_ingredient(canonical)
            if not key:
                continue
            ordered = list(table.get(key, ()))
            for alias in aliases:
                a = normalize_ingredient(alias)
                if a and a != key and a not in ordered:
                    ordered.append(a)
            table[key] = tuple(ordered)
        self._table = MappingProxyType(table)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, name) -> bool:
        return normalize_ingredient(name) in self._table

    def __iter__(self):
        return iter(self._table)

    def aliases(self, canonical: str) -> Tuple[str, ...]:
        return self._table.get(normalize_ingredient(canonical), ())


class SynonymResolver:
    """Answers "do these two names refer to the same ingredient".

    Only exact alias membership counts, looked up with either name as the
    canonical key. Unknown names simply resolve to False.
    """

    def __init__(self, table: Optional[SynonymTable] = None):
        self.table = table if table is not None else default_synonym_table()

    def is_synonym(self, candidate: str, known: str) -> bool:
        c = normalize_ingredient(candidate)
        k = normalize_ingredient(known)
        if not c or not k or c == k:
            return False
        # known typed as the canonical form
        if c in self.table.aliases(k):
            return True
        # candidate is the canonical form
        return k in self.table.aliases(c)


@lru_cache(maxsize=None)
def default_synonym_table() -> SynonymTable:
    return SynonymTable(DEFAULT_SYNONYMS)
