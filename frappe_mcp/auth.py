"""Authentication coordinator for the Frappe backend.

One instance per process. It owns the password-channel session state and
answers health checks for both channels:

- token channel: stateless, ``Authorization: token <key>:<secret>`` on every
  request; only its configuration can be validated locally
- password channel: a cookie session opened by ``login`` and reused until the
  TTL runs out

Concurrent callers of :meth:`AuthCoordinator.authenticate_with_password` share
one login attempt. The first caller creates a future, every later caller
awaits it, and the slot is cleared whatever way the attempt ends.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from typing import NamedTuple

from .client import FrappeClient
from .config import Settings
from .errors import FrappeMCPError, missing_credentials_message
from .models import HealthStatus

logger = logging.getLogger(__name__)

DEFAULT_AUTH_TTL = 1800


class CredentialCheck(NamedTuple):
    """Outcome of validating the API key/secret pair."""

    valid: bool
    message: str


class AuthCoordinator:
    """Single-flight password login, session TTL and dual-channel health."""

    def __init__(
        self,
        client: FrappeClient,
        *,
        api_key: str | None = None,
        api_secret: str | None = None,
        username: str | None = None,
        password: str | None = None,
        ttl: float = DEFAULT_AUTH_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client = client
        self._has_api_key = bool(api_key)
        self._has_api_secret = bool(api_secret)
        self._username = username
        self._password = password
        self.ttl = ttl
        self._clock = clock

        self.is_authenticated = False
        self.last_auth_attempt: float | None = None
        self._inflight: asyncio.Future[bool] | None = None

    @classmethod
    def from_settings(cls, settings: Settings, client: FrappeClient) -> "AuthCoordinator":
        return cls(
            client,
            api_key=settings.frappe_api_key.get_secret_value() if settings.frappe_api_key else None,
            api_secret=(
                settings.frappe_api_secret.get_secret_value()
                if settings.frappe_api_secret
                else None
            ),
            username=settings.frappe_username,
            password=(
                settings.frappe_password.get_secret_value() if settings.frappe_password else None
            ),
            ttl=settings.auth_ttl_seconds,
        )

    @property
    def password_configured(self) -> bool:
        return bool(self._username and self._password)

    @property
    def login_in_progress(self) -> bool:
        return self._inflight is not None

    def _session_valid(self) -> bool:
        if not self.is_authenticated or self.last_auth_attempt is None:
            return False
        return self._clock() - self.last_auth_attempt < self.ttl

    # ============ TOKEN CHANNEL ============

    def validate_api_credentials(self) -> CredentialCheck:
        """Check that both halves of the token credential are configured.

        The message names exactly what is missing and never carries the values.
        """
        presence = {"api_key": self._has_api_key, "api_secret": self._has_api_secret}
        missing = [name for name, present in presence.items() if not present]
        if missing:
            return CredentialCheck(False, missing_credentials_message(missing))
        return CredentialCheck(True, "API key/secret authentication is properly configured.")

    # ============ PASSWORD CHANNEL ============

    async def authenticate_with_password(self) -> bool:
        """Open (or reuse) the password-channel session.

        Returns:
            True when a session is live after the call. Failures of any kind
            (missing credentials, rejected login, network fault) return False.
        """
        if self._inflight is not None:
            logger.debug("Password login already in progress, awaiting its outcome")
            return await asyncio.shield(self._inflight)

        if self._session_valid():
            return True

        future: asyncio.Future[bool] = asyncio.get_running_loop().create_future()
        self._inflight = future
        outcome = False
        try:
            outcome = await self._login()
        except Exception as e:
            logger.error(f"Password authentication failed unexpectedly: {e}", exc_info=True)
        finally:
            self.is_authenticated = outcome
            self._inflight = None
            if not future.done():
                future.set_result(outcome)
        return outcome

    async def _login(self) -> bool:
        missing = [
            name
            for name, value in (("username", self._username), ("password", self._password))
            if not value
        ]
        if missing:
            logger.error(f"Password authentication not possible: missing {', '.join(missing)}")
            return False

        logger.info("Attempting password authentication")
        try:
            await self._client.login(self._username, self._password)
        except FrappeMCPError as e:
            logger.warning(f"Password authentication failed: {e.message}")
            return False

        self.last_auth_attempt = self._clock()
        logger.info("Password authentication successful")
        return True

    def invalidate(self) -> None:
        """Forget the current session so the next call logs in again."""
        self.is_authenticated = False
        self.last_auth_attempt = None

    # ============ HEALTH ============

    async def check_health(self) -> HealthStatus:
        """Check both channels independently and report their combined state."""
        check = self.validate_api_credentials()
        if not check.valid:
            logger.error(f"API health check failed: {check.message}")
            return HealthStatus(healthy=False, token_auth=False, message=check.message)

        token_ok = False
        try:
            await self._client.check_token_auth()
            token_ok = True
        except Exception as e:
            logger.warning(f"Token authentication health check failed: {e}")

        password_ok: bool | None = None
        if self.password_configured:
            password_ok = False
            try:
                password_ok = await self.authenticate_with_password()
            except Exception as e:
                logger.warning(f"Password authentication health check failed: {e}")

        healthy = token_ok or bool(password_ok)
        parts = [f"Token auth: {'ok' if token_ok else 'failed'}"]
        if password_ok is not None:
            parts.append(f"password auth: {'ok' if password_ok else 'failed'}")
        status = ", ".join(parts)

        if healthy:
            message = f"API connection healthy. {status}."
        else:
            message = (
                f"API connection unhealthy. {status}. "
                "Please ensure your API key and secret are correct."
            )
        return HealthStatus(
            healthy=healthy, token_auth=token_ok, password_auth=password_ok, message=message
        )
