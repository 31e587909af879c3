from models.base_model import Base, BaseModel
from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    # Single stored refresh token: one live session per user
    refresh_token = Column(Text, nullable=True)

    games = relationship(
        "Game",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def password(self):
        raise AttributeError("Password: Write-only field")
