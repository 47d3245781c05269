"""Factories for user-related models."""

from __future__ import annotations

import factory

from sessionauth.core.extensions import db
from sessionauth.models.user import User

from . import SQLAlchemyFactory, faker

DEFAULT_PASSWORD = "password123"


class UserFactory(SQLAlchemyFactory):
    """Factory for :class:`sessionauth.models.user.User`."""

    class Meta:
        model = User
        sqlalchemy_session = db.session

    email = factory.LazyAttribute(lambda _: faker.unique.email())
    name = factory.LazyAttribute(lambda _: faker.first_name())
    password = DEFAULT_PASSWORD
