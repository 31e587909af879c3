from sqlalchemy.orm import relationship
from sqlalchemy import Column, String

from models.base_model import BaseModel, Base
from models.game import game_categories


class Category(BaseModel, Base):
    __tablename__ = "categories"

    name = Column(String(64), nullable=False, unique=True, index=True)

    games = relationship("Game", secondary=game_categories, back_populates="categories")
