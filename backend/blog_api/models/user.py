"""User ORM — account that authors posts and comments.

Invariants:
    - email is unique and stored lowercase
    - password holds a bcrypt hash, never plain text
    - deleting a user deletes their posts and comments (DB FK cascade + ORM cascade)
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blog_api.db.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False,
    )
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="author",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    comments: Mapped[list["Comment"]] = relationship(
        "Comment", back_populates="author",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
