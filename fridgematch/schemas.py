from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class RecipeIngredient(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "cherry tomato"})
    amount: Optional[float] = None
    unit: Optional[str] = None
    original: Optional[str] = Field(
        default=None, json_schema_extra={"example": "1 cup cherry tomatoes"}
    )


class Nutrient(BaseModel):
    name: str
    amount: float = 0.0
    unit: Optional[str] = None


class Nutrition(BaseModel):
    calories: Optional[float] = None
    nutrients: List[Nutrient] = Field(default_factory=list)

    def calorie_value(self) -> Optional[float]:
        """Calories, either given directly or as a "Calories" nutrient."""
        if self.calories is not None:
            return self.calories
        for n in self.nutrients:
            if n.name.strip().lower() == "calories":
                return n.amount
        return None


class RecipeBase(BaseModel):
    title: str = Field(
        ..., min_length=1, json_schema_extra={"example": "Simple Pancakes"}
    )
    ingredients: List[RecipeIngredient] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ingredients", "extendedIngredients"),
        json_schema_extra={"example": ["flour", "milk", "egg"]},
    )
    ready_in_minutes: Optional[int] = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("ready_in_minutes", "readyInMinutes"),
        json_schema_extra={"example": 20},
    )
    cuisines: List[str] = Field(default_factory=list)
    diets: List[str] = Field(default_factory=list)
    dish_types: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("dish_types", "dishTypes"),
    )
    vegetarian: Optional[bool] = None
    vegan: Optional[bool] = None
    gluten_free: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("gluten_free", "glutenFree")
    )
    dairy_free: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("dairy_free", "dairyFree")
    )
    nutrition: Optional[Nutrition] = None
    summary: Optional[str] = None
    image: Optional[str] = None

    @field_validator("ingredients", mode="before")
    @classmethod
    def _accept_plain_names(cls, value):
        # ["flour", "egg"] is accepted as shorthand for [{"name": "flour"}, ...]
        if value is None:
            return []
        out = []
        for item in value:
            if isinstance(item, str):
                out.append({"name": item})
            else:
                out.append(item)
        return out

    def ingredient_names(self) -> List[str]:
        return [i.name for i in self.ingredients]

    def calorie_value(self) -> Optional[float]:
        if self.nutrition is None:
            return None
        return self.nutrition.calorie_value()


class RecipeCreate(RecipeBase):
    pass


class Recipe(RecipeBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class RecipePage(BaseModel):
    items: List[Recipe]
    total: int
    page: int
    page_size: int


class MatchRequest(BaseModel):
    ingredients: List[str] = Field(
        default_factory=list,
        json_schema_extra={"example": ["tomato", "onion", "chiken"]},
    )
    tolerance: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    sort: str = "relevance"
    max_ready_time: Optional[int] = Field(default=None, ge=0)
    cuisine: Optional[str] = None
    diet: Optional[str] = None
    max_missing_ingredients: Optional[int] = Field(default=None, ge=0)
    min_match_score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    max_calories: Optional[float] = Field(default=None, ge=0)
    intolerances: List[str] = Field(default_factory=list)
    query: Optional[str] = None
    meal_type: Optional[str] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)


class MatchItem(BaseModel):
    id: int
    title: str
    match: bool
    match_score: float
    used: List[str]
    used_count: int
    missed: List[str]
    missed_count: int
    ready_in_minutes: Optional[int] = None
    calories: Optional[float] = None


class MatchResponse(BaseModel):
    have: List[str]
    total: int
    page: int
    page_size: int
    fallback: bool = False
    results: List[MatchItem]
