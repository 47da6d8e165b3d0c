"""
Tests for AccountService authentication and staff provisioning.
"""

import pytest

from conftest import READER_PASSWORD, STAFF_PASSWORD, password_hasher
from core.domain.content import ArticleStatus
from core.domain.user import UserRole
from core.errors import (
    InvalidCredentials,
    ResourceConflict,
    SubscriptionInactive,
    UserNotFound,
    ValidationError,
)
from core.security.password import PasswordHasher
from services.accounts import AccountService

pytestmark = pytest.mark.asyncio


@pytest.fixture
def service(service_db) -> AccountService:
    return AccountService(service_db, password_hasher)


class TestAuthenticate:
    async def test_reader_by_phone(self, service, reader_user):
        user = await service.authenticate(
            reader_user.phone, READER_PASSWORD, role=UserRole.READER, require_subscription=True
        )
        assert user.id == reader_user.id

    async def test_staff_email_is_case_insensitive(self, service, writer_user):
        user = await service.authenticate("Writer@Example.com", STAFF_PASSWORD, role=UserRole.WRITER)
        assert user.id == writer_user.id

    async def test_wrong_password(self, service, reader_user):
        with pytest.raises(InvalidCredentials):
            await service.authenticate(reader_user.phone, "wrongpass1")

    async def test_unknown_account(self, service):
        with pytest.raises(InvalidCredentials):
            await service.authenticate("0900000000", READER_PASSWORD)

    async def test_wrong_role(self, service, writer_user):
        with pytest.raises(InvalidCredentials):
            await service.authenticate(writer_user.email, STAFF_PASSWORD, role=UserRole.ADMIN)

    async def test_deactivated_account(self, service, make_user):
        user = await make_user(
            role=UserRole.WRITER, email="gone@example.com", password=STAFF_PASSWORD, is_active=False
        )
        with pytest.raises(InvalidCredentials):
            await service.authenticate(user.email, STAFF_PASSWORD)

    async def test_expired_reader_is_refused(self, service, expired_reader):
        with pytest.raises(SubscriptionInactive):
            await service.authenticate(
                expired_reader.phone, READER_PASSWORD, role=UserRole.READER, require_subscription=True
            )

    async def test_reader_without_subscription_is_refused(self, service, make_user):
        user = await make_user(phone="0911000077")
        with pytest.raises(SubscriptionInactive):
            await service.authenticate(user.phone, READER_PASSWORD, require_subscription=True)

    async def test_outdated_hash_is_upgraded(self, service_db, writer_user):
        stronger = PasswordHasher(rounds=5)
        service = AccountService(service_db, stronger)

        user = await service.authenticate(writer_user.email, STAFF_PASSWORD)

        assert not stronger.needs_rehash(user.password_hash)
        assert stronger.verify(STAFF_PASSWORD, user.password_hash)


class TestSignup:
    async def test_signup_starts_trial(self, service):
        user = await service.signup_reader("Abebe", "0933000001", "readerpass9")

        assert user.role == UserRole.READER.value
        assert user.subscription_status == "ACTIVE"
        assert user.subscription_end is not None

    async def test_duplicate_phone(self, service, reader_user):
        with pytest.raises(ResourceConflict):
            await service.signup_reader("Copy", reader_user.phone, "readerpass9")


class TestStaff:
    async def test_create_writer(self, service):
        user = await service.create_staff("Columnist", " Columnist@Example.com ", STAFF_PASSWORD, UserRole.WRITER)

        assert user.email == "columnist@example.com"
        assert user.role == UserRole.WRITER.value
        assert user.is_active is True

    async def test_duplicate_email(self, service, writer_user):
        with pytest.raises(ResourceConflict):
            await service.create_staff("Other", "WRITER@example.com", STAFF_PASSWORD, UserRole.WRITER)

    async def test_reader_role_rejected(self, service):
        with pytest.raises(ValidationError):
            await service.create_staff("Nope", "nope@example.com", STAFF_PASSWORD, UserRole.READER)

    async def test_list_writers_counts_articles(self, service, writer_user, make_article):
        await make_article()
        await make_article(status=ArticleStatus.PENDING)

        writers = await service.list_writers()

        assert [(user.id, count) for user, count in writers] == [(writer_user.id, 2)]

    async def test_deactivate_writer(self, service, writer_user):
        user = await service.deactivate_writer(writer_user.id)
        assert user.is_active is False

    async def test_deactivate_non_writer(self, service, admin_user):
        with pytest.raises(UserNotFound):
            await service.deactivate_writer(admin_user.id)

    async def test_count_by_role(self, service, writer_user, admin_user, reader_user):
        assert await service.count_by_role(UserRole.WRITER) == 1
        assert await service.count_by_role(UserRole.READER) == 1
