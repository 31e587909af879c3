from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    Table,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

# Association table with CASCADE so join rows clean up when either parent is deleted
game_categories = Table(
    "game_categories",
    Base.metadata,
    Column("game_id", String(36), ForeignKey("games.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", String(36), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Game(BaseModel, Base):
    __tablename__ = "games"

    name = Column(String(255), nullable=False)
    additional_info = Column(JSON, nullable=True)

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="games")
    categories = relationship("Category", secondary=game_categories, back_populates="games")

    __table_args__ = (
        Index("ix_games_name", "name"),
    )
