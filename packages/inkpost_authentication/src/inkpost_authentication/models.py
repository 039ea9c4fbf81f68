import enum

from inkpost_db.models import CreatedAtMixin, Model
from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from .hasher import hash_password, verify_password

USER_TABLE_NAME = "users"


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Model, CreatedAtMixin):
    __tablename__ = USER_TABLE_NAME

    username: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    email: Mapped[str] = mapped_column(
        String(100), unique=True, index=True, nullable=False
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(
            Role,
            native_enum=False,
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        default=Role.USER,
        server_default=Role.USER.value,
        nullable=False,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def check_password(self, raw_password: str) -> bool:
        """Verify password against hash using Argon2."""
        return verify_password(self.password_hash, raw_password)

    def set_password(self, raw_password: str) -> None:
        self.password_hash = hash_password(raw_password)

    def __str__(self) -> str:
        return self.username

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id}, username='{self.username}')>"
