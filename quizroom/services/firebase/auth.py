# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Firebase Authentication adapter over the Identity Toolkit REST API.

Holds the signed-in account in memory and refreshes its id token on demand
through the Secure Token endpoint, the way the Firebase client SDKs do.

Error codes reported by Firebase are mapped here, so nothing above this
module sees a Firebase-specific failure:
- credential and field errors -> AuthError with a readable message
- invalid, expired or disabled sessions -> SessionExpiredError
- anything else -> ApiError
"""

import logging
from typing import Any

import httpx

from quizroom.core.config.settings import FirebaseSettings
from quizroom.core.exceptions import ApiError, AuthError, QuizroomError, SessionExpiredError
from quizroom.domains.identity.backend import AuthBackend, AuthUser
from quizroom.services.firebase.base import FirebaseRestClient
from quizroom.utils.datetime import expires_within, seconds_from_now

logger = logging.getLogger(__name__)

AUTH_ERROR_MESSAGES = {
    "INVALID_LOGIN_CREDENTIALS": "Invalid password",
    "INVALID_PASSWORD": "Invalid password",
    "EMAIL_NOT_FOUND": "No account exists for this email",
    "INVALID_EMAIL": "The email address is badly formatted",
    "EMAIL_EXISTS": "The email address is already in use by another account",
    "WEAK_PASSWORD": "Password should be at least 6 characters",
    "MISSING_PASSWORD": "Email and password must not be empty",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later",
    "OPERATION_NOT_ALLOWED": "Password sign-in is disabled",
}

SESSION_ERROR_CODES = frozenset(
    {
        "INVALID_ID_TOKEN",
        "TOKEN_EXPIRED",
        "USER_NOT_FOUND",
        "USER_DISABLED",
        "INVALID_REFRESH_TOKEN",
        "CREDENTIAL_TOO_OLD_LOGIN_AGAIN",
    }
)

NOT_LOGGED_IN = "User is not logged in!"


def map_auth_error(response: httpx.Response) -> QuizroomError:
    """Map a failed Identity Toolkit or Secure Token response.

    Firebase reports ``{"error": {"code": 400, "message": "CODE : detail"}}``.
    """
    try:
        error = response.json().get("error", {})
        message = error.get("message", "") if isinstance(error, dict) else str(error)
    except (ValueError, AttributeError):
        message = response.text
    code = message.split(":", 1)[0].strip()

    if code in SESSION_ERROR_CODES:
        return SessionExpiredError("Your session has expired, please log in again", {"code": code})
    if response.status_code == 400:
        return AuthError(AUTH_ERROR_MESSAGES.get(code, message or "Authentication failed"), {"code": code})
    return ApiError(response.status_code, message or response.reason_phrase)


class FirebaseAuthBackend(FirebaseRestClient, AuthBackend):
    """AuthBackend backed by Firebase Authentication.

    Attributes:
        auth_url: Identity Toolkit base URL.
        token_url: Secure Token endpoint.
    """

    def __init__(
        self,
        settings: FirebaseSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Firebase configuration.
            transport: Optional httpx transport (used to stub the network).
        """
        super().__init__(settings.timeout, transport)
        self.auth_url = settings.auth_url.rstrip("/")
        self.token_url = settings.token_url
        self._api_key = settings.api_key.get_secret_value()
        self._refresh_margin = settings.token_refresh_margin_seconds
        self._user: AuthUser | None = None

    async def _call(self, url: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._send("POST", url, params={"key": self._api_key}, **kwargs)
        if not response.is_success:
            raise map_auth_error(response)
        return self._json(response)

    def _user_from_sign_in(self, data: dict[str, Any]) -> AuthUser:
        return AuthUser(
            uid=data["localId"],
            email=data.get("email", ""),
            id_token=data["idToken"],
            refresh_token=data.get("refreshToken", ""),
            expires_at=seconds_from_now(int(data.get("expiresIn", 3600))),
        )

    async def sign_in(self, email: str, password: str) -> AuthUser:
        data = await self._call(
            f"{self.auth_url}/accounts:signInWithPassword",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        self._user = self._user_from_sign_in(data)
        logger.info("Signed in: uid=%s", self._user.uid)
        return self._user

    async def sign_up(self, email: str, password: str) -> AuthUser:
        data = await self._call(
            f"{self.auth_url}/accounts:signUp",
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        self._user = self._user_from_sign_in(data)
        logger.info("Account created: uid=%s", self._user.uid)
        return self._user

    async def send_password_reset(self, email: str) -> None:
        await self._call(
            f"{self.auth_url}/accounts:sendOobCode",
            json={"requestType": "PASSWORD_RESET", "email": email},
        )

    def current_user(self) -> AuthUser | None:
        return self._user

    async def reload(self) -> AuthUser:
        """Re-validate the signed-in account.

        A session the backend no longer accepts is dropped locally too.
        """
        try:
            token = await self.get_id_token()
            data = await self._call(f"{self.auth_url}/accounts:lookup", json={"idToken": token})
            users = data.get("users") or []
            if not users or users[0].get("disabled"):
                raise SessionExpiredError("Your session has expired, please log in again")
        except SessionExpiredError:
            self._user = None
            raise

        if self._user is not None and users[0].get("email"):
            self._user = self._user.model_copy(update={"email": users[0]["email"]})
        return self._user

    async def get_id_token(self, force_refresh: bool = False) -> str:
        if self._user is None:
            raise AuthError(NOT_LOGGED_IN)

        if force_refresh or expires_within(self._user.expires_at, self._refresh_margin):
            await self._refresh()
        return self._user.id_token

    async def _refresh(self) -> None:
        """Mint a new id token from the refresh token."""
        data = await self._call(
            self.token_url,
            data={"grant_type": "refresh_token", "refresh_token": self._user.refresh_token},
        )
        self._user = self._user.model_copy(
            update={
                "id_token": data["id_token"],
                "refresh_token": data.get("refresh_token", self._user.refresh_token),
                "expires_at": seconds_from_now(int(data.get("expires_in", 3600))),
            }
        )
        logger.debug("Refreshed id token: uid=%s", self._user.uid)

    async def sign_out(self) -> None:
        self._user = None
