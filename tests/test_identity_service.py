"""Tests for IdentityService."""

import uuid

import pytest

from app.core.errors import NotFound, PermissionDenied, ValidationError
from app.core.security import verify_token
from app.db.repositories.user_repository import UserRepository
from app.domains.access.roles import RequesterContext, RoleLevel
from app.domains.identity.entities import UserLifecycle
from app.domains.identity.schemas import UserCreate, UserLogin
from app.domains.identity.services import IdentityService


@pytest.fixture
def service(session):
    return IdentityService(session)


def signup(email="jane@example.com"):
    return UserCreate(name="Jane Doe", email=email, password="correct-horse")


class TestRegisterAndLogin:
    """Test sign-up and JWT issuance."""

    @pytest.mark.asyncio
    async def test_register_hashes_password(self, service):
        user = await service.register_user(signup("Jane@Example.com"))

        assert user.email == "jane@example.com"
        assert user.password_hash != "correct-horse"
        assert user.role_level == RoleLevel.REGULAR
        assert user.lifecycle is UserLifecycle.ACTIVE

    @pytest.mark.asyncio
    async def test_duplicate_email(self, service):
        await service.register_user(signup())
        with pytest.raises(ValidationError) as exc_info:
            await service.register_user(signup())
        assert exc_info.value.errors[0].startswith("email:")

    @pytest.mark.asyncio
    async def test_login_issues_token_with_role(self, service):
        user = await service.register_user(signup())

        token = await service.login_user(UserLogin(email="jane@example.com", password="correct-horse"))

        payload = verify_token(token)
        assert payload["sub"] == str(user.id)
        assert payload["role"] == RoleLevel.REGULAR

    @pytest.mark.asyncio
    async def test_wrong_password(self, service):
        await service.register_user(signup())
        token = await service.login_user(UserLogin(email="jane@example.com", password="wrong-horse"))
        assert token is None


class TestDeleteUser:
    """Test soft deletion."""

    @pytest.mark.asyncio
    async def test_self_delete_is_soft(self, service, session):
        user = await service.register_user(signup())

        await service.delete_user(user.to_requester(), user.id)

        repository = UserRepository(session)
        assert await repository.get_by_id(user.id) is None
        kept = await repository.get_by_id(user.id, include_deleted=True)
        assert kept.lifecycle is UserLifecycle.DELETED
        assert not kept.is_visible_to(RequesterContext(id=uuid.uuid4(), role_level=RoleLevel.ADMIN))
        assert kept.is_visible_to(RequesterContext(id=uuid.uuid4(), role_level=RoleLevel.SUPER_ADMIN))

    @pytest.mark.asyncio
    async def test_deleted_user_cannot_log_in(self, service):
        user = await service.register_user(signup())
        await service.delete_user(user.to_requester(), user.id)

        token = await service.login_user(UserLogin(email="jane@example.com", password="correct-horse"))
        assert token is None

    @pytest.mark.asyncio
    async def test_other_regular_user_cannot_delete(self, service, factory, as_requester):
        target = await factory.user()
        stranger = await factory.user()
        with pytest.raises(PermissionDenied):
            await service.delete_user(as_requester(stranger), target.id)

    @pytest.mark.asyncio
    async def test_admin_deletes_unknown_user(self, service):
        admin = RequesterContext(id=uuid.uuid4(), role_level=RoleLevel.ADMIN)
        with pytest.raises(NotFound):
            await service.delete_user(admin, uuid.uuid4())
