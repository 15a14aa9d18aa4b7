"""
Unit tests for AuthService.

Exercises the login / refresh / logout state machine directly against an
in-memory database:
- Login issues distinct tokens bound to the admin
- Unknown email and wrong password fail identically
- Only the most recent session's refresh token works
- A rotated or logged-out refresh token is dead
- Failed calls never touch the stored hash
- Concurrent refreshes with one token: exactly one wins

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from datetime import timedelta

import pytest

from portfolio.core.errors import (
    AdminNotFoundError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UnauthorizedError,
)
from portfolio.core.security import (
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_refresh_token_hash,
)
from portfolio.repositories.admin import AdminRepository
from portfolio.services.auth import AuthContext, AuthService

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def auth_service(db_session, settings):
    return AuthService(AdminRepository(db_session), settings)


async def stored_hash(db_session, admin_id):
    admin = await AdminRepository(db_session).get_by_id(admin_id)
    return admin.refresh_token_hash


@pytest.mark.asyncio
class TestLogin:
    """Tests for AuthService.login."""

    async def test_login_issues_tokens_for_admin(self, auth_service, admin, settings):
        # Act
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        # Assert
        assert tokens.access_token != tokens.refresh_token
        assert decode_access_token(tokens.access_token, settings).admin_id == admin.id
        assert decode_refresh_token(tokens.refresh_token, settings).admin_id == admin.id

    async def test_login_stores_hash_of_refresh_token(self, auth_service, admin, db_session):
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        stored = await stored_hash(db_session, admin.id)
        assert stored is not None
        assert stored != tokens.refresh_token
        assert verify_refresh_token_hash(tokens.refresh_token, stored) is True

    async def test_login_email_case_insensitive(self, auth_service, admin):
        tokens = await auth_service.login(ADMIN_EMAIL.upper(), ADMIN_PASSWORD)

        assert tokens.access_token

    async def test_wrong_password_and_unknown_email_fail_identically(self, auth_service, admin):
        # Act
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await auth_service.login(ADMIN_EMAIL, "not-the-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await auth_service.login("stranger@example.com", ADMIN_PASSWORD)

        # Assert
        assert wrong_password.value.message == unknown_email.value.message == "Invalid credentials"
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401

    async def test_failed_login_does_not_touch_session(self, auth_service, admin, db_session):
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        before = await stored_hash(db_session, admin.id)

        for _ in range(3):
            with pytest.raises(InvalidCredentialsError):
                await auth_service.login(ADMIN_EMAIL, "not-the-password")

        assert await stored_hash(db_session, admin.id) == before
        assert await auth_service.refresh(tokens.refresh_token)


@pytest.mark.asyncio
class TestRefresh:
    """Tests for AuthService.refresh."""

    async def test_refresh_rotates(self, auth_service, admin, db_session, settings):
        # Arrange
        first = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        # Act
        second = await auth_service.refresh(first.refresh_token)

        # Assert
        assert second.refresh_token != first.refresh_token
        assert second.access_token != first.access_token
        assert decode_access_token(second.access_token, settings).admin_id == admin.id
        stored = await stored_hash(db_session, admin.id)
        assert verify_refresh_token_hash(second.refresh_token, stored) is True
        assert verify_refresh_token_hash(first.refresh_token, stored) is False

    async def test_replay_after_rotation_fails(self, auth_service, admin):
        first = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        await auth_service.refresh(first.refresh_token)

        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(first.refresh_token)

    async def test_single_session_invariant(self, auth_service, admin):
        # Arrange
        session_a = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        session_b = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        # Act / Assert
        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(session_a.refresh_token)
        assert await auth_service.refresh(session_b.refresh_token)

    async def test_missing_token(self, auth_service):
        with pytest.raises(UnauthorizedError) as exc_info:
            await auth_service.refresh(None)

        assert exc_info.value.message == "No refresh token"

    async def test_garbage_token(self, auth_service, admin):
        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh("garbage")

    async def test_expired_token(self, auth_service, admin, settings):
        await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        expired = create_refresh_token(admin.id, settings, expires_delta=timedelta(seconds=-1))

        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(expired)

    async def test_access_token_cannot_refresh(self, auth_service, admin):
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(tokens.access_token)

    async def test_validly_signed_token_not_in_store(self, auth_service, admin, settings):
        """A correctly signed refresh token that was never stored is rejected."""
        await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        forged = create_refresh_token(admin.id, settings)

        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(forged)

    async def test_unknown_admin(self, auth_service, settings):
        token = create_refresh_token("00000000-0000-0000-0000-000000000000", settings)

        with pytest.raises(AdminNotFoundError):
            await auth_service.refresh(token)

    async def test_failed_refresh_does_not_mutate_store(self, auth_service, admin, db_session, settings):
        # Arrange
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        before = await stored_hash(db_session, admin.id)
        stale = create_refresh_token(admin.id, settings)

        # Act
        for bad in ["garbage", stale, tokens.access_token]:
            with pytest.raises(InvalidRefreshTokenError):
                await auth_service.refresh(bad)

        # Assert
        assert await stored_hash(db_session, admin.id) == before
        assert await auth_service.refresh(tokens.refresh_token)

    async def test_concurrent_refresh_single_winner(self, session_maker, settings, admin):
        """
        Two refreshes racing with the same token: one rotates, the other
        fails with InvalidRefreshTokenError.
        """
        # Arrange
        async with session_maker() as login_session:
            tokens = await AuthService(AdminRepository(login_session), settings).login(
                ADMIN_EMAIL, ADMIN_PASSWORD
            )

        async with session_maker() as first_session, session_maker() as second_session:
            first = AuthService(AdminRepository(first_session), settings)
            second = AuthService(AdminRepository(second_session), settings)

            # Act
            results = await asyncio.gather(
                first.refresh(tokens.refresh_token),
                second.refresh(tokens.refresh_token),
                return_exceptions=True,
            )

        # Assert
        failures = [r for r in results if isinstance(r, Exception)]
        successes = [r for r in results if not isinstance(r, Exception)]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], InvalidRefreshTokenError)

        async with session_maker() as check_session:
            stored = await stored_hash(check_session, admin.id)
        assert verify_refresh_token_hash(successes[0].refresh_token, stored) is True


@pytest.mark.asyncio
class TestLogout:
    """Tests for AuthService.logout."""

    async def test_logout_clears_hash(self, auth_service, admin, db_session):
        await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        await auth_service.logout(AuthContext(admin_id=admin.id))

        assert await stored_hash(db_session, admin.id) is None

    async def test_refresh_after_logout_fails(self, auth_service, admin):
        tokens = await auth_service.login(ADMIN_EMAIL, ADMIN_PASSWORD)
        await auth_service.logout(AuthContext(admin_id=admin.id))

        with pytest.raises(InvalidRefreshTokenError):
            await auth_service.refresh(tokens.refresh_token)

    async def test_logout_without_session_is_harmless(self, auth_service, admin, db_session):
        await auth_service.logout(AuthContext(admin_id=admin.id))

        assert await stored_hash(db_session, admin.id) is None


@pytest.mark.asyncio
class TestExampleScenario:
    """Login, rotate, replay, logout, refresh-after-logout for a@b.com."""

    async def test_full_lifecycle(self, db_session, settings):
        # Arrange
        repository = AdminRepository(db_session)
        owner = await repository.create("a@b.com", get_password_hash("secret", rounds=4))
        await db_session.commit()
        service = AuthService(repository, settings)

        # Act / Assert: login stores hash(R1)
        r1 = (await service.login("a@b.com", "secret")).refresh_token
        assert verify_refresh_token_hash(r1, await stored_hash(db_session, owner.id))

        # refresh with R1 -> R2, stored hash now hash(R2)
        r2 = (await service.refresh(r1)).refresh_token
        assert verify_refresh_token_hash(r2, await stored_hash(db_session, owner.id))

        # R1 again -> InvalidRefreshToken
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(r1)

        # logout clears the hash; R2 is dead
        await service.logout(AuthContext(admin_id=owner.id))
        assert await stored_hash(db_session, owner.id) is None
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(r2)


@pytest.mark.asyncio
class TestGetAdmin:
    """Tests for AuthService.get_admin."""

    async def test_returns_admin(self, auth_service, admin):
        found = await auth_service.get_admin(AuthContext(admin_id=admin.id))

        assert found.email == ADMIN_EMAIL

    async def test_missing_admin(self, auth_service):
        context = AuthContext(admin_id="missing")

        with pytest.raises(AdminNotFoundError):
            await auth_service.get_admin(context)


@asynccontextmanager
async def loop_gaps(interval=0.005):
    """Record the delay between ticks of a task sleeping `interval` seconds."""
    gaps = []
    done = asyncio.Event()

    async def ticker():
        last = time.perf_counter()
        while not done.is_set():
            await asyncio.sleep(interval)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    task = asyncio.create_task(ticker())
    try:
        yield gaps
    finally:
        done.set()
        await task


@pytest.mark.asyncio
class TestEventLoopResponsiveness:
    """bcrypt work runs off the event loop."""

    async def test_login_keeps_loop_ticking(self, db_session, settings, admin):
        # Arrange
        service = AuthService(
            AdminRepository(db_session),
            settings.model_copy(update={"bcrypt_rounds": 12}),
        )

        # Act
        async with loop_gaps() as gaps:
            await service.login(ADMIN_EMAIL, ADMIN_PASSWORD)

        # Assert
        assert len(gaps) >= 5
        assert max(gaps) < 0.1

    async def test_unknown_email_keeps_loop_ticking(self, auth_service):
        async with loop_gaps() as gaps:
            with pytest.raises(InvalidCredentialsError):
                await auth_service.login("stranger@example.com", ADMIN_PASSWORD)

        assert max(gaps, default=0.0) < 0.1
