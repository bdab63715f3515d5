# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Profile picture URLs.

Pictures are served from a fixed host under the user id and the sha256 of
the uploaded image, so a new upload yields a new URL.
"""

from quizroom.core.config.settings import ProfileSettings
from quizroom.domains.identity.service import IdentitySession
from quizroom.services.quiz_api.client import QuizApiClient


def profile_picture_url(user_id: str, content_hash: str, base_url: str) -> str:
    """Build the URL of a user's profile picture. No network call."""
    return f"{base_url.rstrip('/')}/{user_id}/{content_hash}"


class ProfileService:
    """Looks up the current user's profile picture."""

    def __init__(
        self,
        client: QuizApiClient,
        session: IdentitySession,
        settings: ProfileSettings,
    ) -> None:
        self.client = client
        self.session = session
        self.base_url = settings.picture_base_url

    def picture_url_for(self, user_id: str, content_hash: str) -> str:
        return profile_picture_url(user_id, content_hash, self.base_url)

    async def get_profile_picture_url(self) -> str:
        """Fetch the current picture hash and build its URL.

        Raises:
            AuthError: If nobody is logged in.
        """
        identity = self.session.require_identity()
        token = await self.session.get_authorization_token()
        res = await self.client.get_profile_picture_hash(token)
        return self.picture_url_for(identity.id, res.sha256)
