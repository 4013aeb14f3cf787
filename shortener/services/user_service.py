"""
User Service

Account registration, login, credential lookup and the default
(anonymous) account that owns mappings created without credentials.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shortener.core.exceptions import AuthenticationError, DatabaseError, UserAlreadyExistsError
from shortener.core.security import generate_api_key, hash_password, verify_password
from shortener.core.setting import settings
from shortener.db.models import User

logger = logging.getLogger(__name__)


class UserService:
    """Data access and credential checks for accounts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        statement = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_by_api_key(self, api_key: str) -> Optional[User]:
        if not api_key:
            return None
        statement = select(User).where(User.api_key == api_key)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def register(self, email: str, password: str) -> User:
        """
        Create an account with a fresh API key.

        Raises:
            UserAlreadyExistsError: If the email is already registered
        """
        email = email.strip().lower()
        if await self.get_by_email(email) is not None:
            raise UserAlreadyExistsError(email)

        user = User(
            email=email,
            password_hash=hash_password(password),
            api_key=generate_api_key(),
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise UserAlreadyExistsError(email)

        await self.session.refresh(user)
        logger.info(f"Registered user {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check email/password and make sure the account has an API key.

        Raises:
            AuthenticationError: On unknown email or wrong password
        """
        user = await self.get_by_email(email)
        if user is None or user.is_default or not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        if not user.api_key:
            user.api_key = generate_api_key()
            self.session.add(user)
            await self.session.commit()
            await self.session.refresh(user)

        return user

    async def get_or_create_default_user(self) -> User:
        """
        Return the default account, provisioning it on first use.

        Safe to call concurrently: the unique email index decides the
        winner and the loser re-reads the row.
        """
        email = settings.DEFAULT_USER_EMAIL.strip().lower()
        user = await self.get_by_email(email)
        if user is not None:
            return user

        user = User(
            email=email,
            # Random unusable password; the default account cannot log in
            password_hash=hash_password(generate_api_key()),
            api_key=generate_api_key(),
            is_default=True,
        )
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            user = await self.get_by_email(email)
            if user is None:
                raise DatabaseError("Failed to provision default user", original_error=e)
            return user

        await self.session.refresh(user)
        logger.info(f"Provisioned default user {user.id}")
        return user
