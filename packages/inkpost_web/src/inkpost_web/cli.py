"""
Command line entry point.

    inkpost serve --port 5000
    inkpost init-db
    inkpost create-user admin admin@example.com 'S3cret!' --role admin
"""

import argparse
import asyncio
import sys

import inkpost_blog.models  # noqa: F401  (registers the posts table)
import uvicorn
from inkpost_authentication.hasher import hash_password
from inkpost_authentication.models import Role, User
from inkpost_core.config import InkpostSettings
from inkpost_core.logging import setup_logging
from inkpost_db import Database, IntegrityViolationError
from sqlalchemy import or_, select


async def init_db(settings: InkpostSettings) -> None:
    database = Database.from_settings(settings)
    try:
        await database.create_all()
    finally:
        await database.close()


async def create_user(
    settings: InkpostSettings,
    *,
    username: str,
    email: str,
    password: str,
    role: Role,
) -> User | None:
    """Create a user, or return None when the username/email is taken."""
    database = Database.from_settings(settings)
    try:
        await database.create_all()
        async with database.session() as session:
            stmt = select(User).where(
                or_(User.username == username, User.email == email)
            )
            existing = await session.scalar(stmt)
            if existing:
                print(
                    f"User '{existing.username}' already exists "
                    f"(id={existing.id}, role={existing.role.value})."
                )
                return None

            try:
                user = await User.objects.create(
                    session,
                    username=username,
                    email=email,
                    role=role,
                    password_hash=hash_password(password),
                )
            except IntegrityViolationError:
                print(f"User '{username}' already exists.")
                return None
            print(f"Created user '{user.username}' (id={user.id}, role={role.value}).")
            return user
    finally:
        await database.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inkpost", description="Inkpost blog API")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")

    sub.add_parser("init-db", help="Create database tables")

    user = sub.add_parser("create-user", help="Create a user account")
    user.add_argument("username")
    user.add_argument("email")
    user.add_argument("password")
    user.add_argument(
        "--role",
        choices=[r.value for r in Role],
        default=Role.USER.value,
        help="User role (default: user)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = InkpostSettings()

    if args.command == "serve":
        setup_logging(settings.LOG_LEVEL, log_file=settings.LOG_FILE)
        uvicorn.run(
            "inkpost_web.app:create_app",
            factory=True,
            host=args.host or settings.HOST,
            port=args.port or settings.PORT,
            reload=args.reload,
            log_config=None,
        )
        return 0

    setup_logging(settings.LOG_LEVEL)
    if args.command == "init-db":
        asyncio.run(init_db(settings))
        print("Database tables initialized.")
        return 0

    if args.command == "create-user":
        try:
            user = asyncio.run(
                create_user(
                    settings,
                    username=args.username,
                    email=args.email,
                    password=args.password,
                    role=Role(args.role),
                )
            )
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
        return 0 if user is not None else 1

    return 2


if __name__ == "__main__":
    sys.exit(main())
