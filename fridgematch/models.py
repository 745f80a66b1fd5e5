from sqlalchemy import Boolean, Column, Float, Integer, String, Text

from .db import Base


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), unique=True, index=True, nullable=False)
    ingredients = Column(Text, nullable=True)  # JSON-encoded list of dicts
    ready_in_minutes = Column(Integer, nullable=True)
    cuisines = Column(Text, nullable=True)  # JSON-encoded list
    diets = Column(Text, nullable=True)  # JSON-encoded list
    dish_types = Column(Text, nullable=True)  # JSON-encoded list
    calories = Column(Float, nullable=True)
    vegetarian = Column(Boolean, nullable=True)
    vegan = Column(Boolean, nullable=True)
    gluten_free = Column(Boolean, nullable=True)
    dairy_free = Column(Boolean, nullable=True)
    summary = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
