"""
Google OAuth2 client.

Builds the consent URL, exchanges the authorization code for tokens and
verifies the returned ID token, yielding a provider-neutral profile.
"""

import logging
from urllib.parse import urlencode

import httpx
from google.auth.transport import requests
from google.oauth2 import id_token

from todo_api.core.config import settings
from todo_api.core.errors import ValidationError
from todo_api.schemas.user import ProfileValue, ProviderProfile


logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


class GoogleOAuthClient:
    """Thin client over Google's OAuth2 endpoints."""

    def __init__(
        self,
        client_id: str = None,
        client_secret: str = None,
        redirect_uri: str = None,
    ):
        self.client_id = client_id or settings.google_client_id
        self.client_secret = client_secret or settings.google_client_secret
        self.redirect_uri = redirect_uri or settings.google_redirect_uri

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def authorization_url(self, state: str) -> str:
        """
        Generate Google OAuth2 authorization URL.

        Args:
            state: Signed state string for CSRF protection.

        Returns:
            str: Google OAuth URL.
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": "openid email profile",
            "response_type": "code",
            "state": state,
            "access_type": "online",
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def fetch_profile(self, code: str) -> ProviderProfile:
        """
        Exchange an authorization code and verify the resulting ID token.

        Args:
            code: Authorization code from Google.

        Returns:
            ProviderProfile: Profile built from the verified ID token claims.

        Raises:
            ValidationError: If the exchange or token verification fails.
        """
        token_data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }

        try:
            async with httpx.AsyncClient() as client:
                token_response = await client.post(GOOGLE_TOKEN_URL, data=token_data)
                token_response.raise_for_status()
                token_info = token_response.json()
        except httpx.HTTPError as e:
            logger.error(f"Token exchange with Google failed: {e}")
            raise ValidationError(f"OAuth verification failed: {e}") from e

        id_token_value = token_info.get("id_token")
        if not id_token_value:
            raise ValidationError("ID token missing from response")

        try:
            # Add clock tolerance for development environments
            id_info = id_token.verify_oauth2_token(
                id_token_value,
                requests.Request(),
                self.client_id,
                clock_skew_in_seconds=10,
            )
        except ValueError as e:
            logger.error(f"ID token verification failed: {e}")
            raise ValidationError(f"OAuth verification failed: {e}") from e

        return self.profile_from_claims(id_info)

    @staticmethod
    def profile_from_claims(id_info: dict) -> ProviderProfile:
        """Map verified ID token claims onto a provider profile."""
        email = id_info.get("email")
        picture = id_info.get("picture")
        return ProviderProfile(
            id=id_info["sub"],
            display_name=id_info.get("name"),
            emails=[ProfileValue(value=email)] if email else [],
            photos=[ProfileValue(value=picture)] if picture else [],
        )
