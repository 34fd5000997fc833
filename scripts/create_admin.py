#!/usr/bin/env python3
"""
Admin user management for the resume builder.
Creates admin users and promotes, demotes or re-keys existing ones.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List

import click

# Add the backend directory to the Python path
sys.path.append(str(Path(__file__).parent.parent / "backend"))

from sqlalchemy import select

from resume_builder.core.database import db_manager
from resume_builder.core.logging import setup_logging
from resume_builder.core.security import get_password_hash
from resume_builder.models.user import User
from resume_builder.schemas.user import UserCreate

logger = logging.getLogger(__name__)


class AdminUserManager:
    """Manager for creating and managing admin users."""

    async def open(self):
        await db_manager.initialize()
        await db_manager.create_all_tables()

    async def close(self):
        await db_manager.close()

    async def _get_user(self, session, email: str) -> User:
        result = await session.execute(select(User).where(User.email == email.lower()))
        user = result.scalars().first()
        if user is None:
            raise click.ClickException(f"User {email} not found")
        return user

    async def create_admin_user(self, email: str, name: str, password: str, force: bool = False) -> User:
        """Create a new admin user; with ``force`` an existing user is promoted and re-keyed."""
        # Same rules as self-registration
        details = UserCreate(email=email, name=name, password=password)

        async with db_manager.sessionmaker() as session:
            result = await session.execute(select(User).where(User.email == details.email.lower()))
            user = result.scalars().first()
            if user is not None and not force:
                raise click.ClickException(f"User with email {email} already exists")

            if user is None:
                user = User(email=details.email.lower(), name=details.name)
                session.add(user)
            else:
                logger.warning(f"User {email} exists, promoting because --force was given")

            user.hashed_password = get_password_hash(details.password)
            user.is_admin = True
            user.is_active = True
            await session.commit()
            await session.refresh(user)

        logger.info(f"Admin user created successfully: {user.email}")
        return user

    async def update_user_password(self, email: str, new_password: str) -> None:
        async with db_manager.sessionmaker() as session:
            user = await self._get_user(session, email)
            user.hashed_password = get_password_hash(new_password)
            await session.commit()
        logger.info(f"Password updated for user: {email}")

    async def set_admin(self, email: str, is_admin: bool) -> None:
        async with db_manager.sessionmaker() as session:
            user = await self._get_user(session, email)
            user.is_admin = is_admin
            if is_admin:
                user.is_active = True
            await session.commit()
        logger.info(f"Admin flag for {email} set to {is_admin}")

    async def list_admin_users(self) -> List[User]:
        async with db_manager.sessionmaker() as session:
            result = await session.execute(select(User).where(User.is_admin.is_(True)).order_by(User.id))
            return list(result.scalars().all())


def _run(action):
    """Open the database, run ``action(manager)`` and always close again."""
    setup_logging()

    async def _main():
        manager = AdminUserManager()
        await manager.open()
        try:
            return await action(manager)
        finally:
            await manager.close()

    return asyncio.run(_main())


@click.group()
def cli():
    """Admin user management for the resume builder."""


@cli.command()
@click.option("--email", "-e", prompt=True, help="Admin email address")
@click.option("--name", "-n", prompt=True, help="Display name")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="Admin password")
@click.option("--force", is_flag=True, help="Promote and re-key the user if it already exists")
def create(email: str, name: str, password: str, force: bool):
    """Create a new admin user."""
    try:
        user = _run(lambda m: m.create_admin_user(email, name, password, force))
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Admin user created: {user.email} (id {user.id})")


@cli.command("change-password")
@click.option("--email", "-e", prompt=True, help="User email address")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True, help="New password")
def change_password(email: str, password: str):
    """Change password for existing user."""
    _run(lambda m: m.update_user_password(email, password))
    click.echo(f"Password updated for {email}")


@cli.command()
@click.option("--email", "-e", prompt=True, help="User email address")
def promote(email: str):
    """Promote existing user to admin."""
    _run(lambda m: m.set_admin(email, True))
    click.echo(f"User {email} promoted to admin")


@cli.command()
@click.option("--email", "-e", prompt=True, help="Admin email address")
def revoke(email: str):
    """Revoke admin privileges from user."""
    _run(lambda m: m.set_admin(email, False))
    click.echo(f"Admin privileges revoked for {email}")


@cli.command("list")
def list_admins():
    """List all admin users."""
    admins = _run(lambda m: m.list_admin_users())
    if not admins:
        click.echo("No admin users found")
        return
    for user in admins:
        status = "active" if user.is_active else "inactive"
        click.echo(f"{user.id:>5}  {user.email:<40} {user.name} ({status})")


if __name__ == "__main__":
    cli()
