"""
Google OAuth 2.0 authorization-code flow.

The API never keeps Google tokens: the code is exchanged once, the profile
is read, and the caller receives our own JWT.
"""
import logging
from urllib.parse import urlencode

import requests
from django.conf import settings

from .models import CustomUser, Role

logger = logging.getLogger('authentication')

GOOGLE_AUTHORIZATION_URL = 'https://accounts.google.com/o/oauth2/v2/auth'
GOOGLE_TOKEN_URL = 'https://oauth2.googleapis.com/token'
GOOGLE_USERINFO_URL = 'https://openidconnect.googleapis.com/v1/userinfo'


class GoogleAuthError(Exception):
    pass


def is_configured():
    return bool(settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET)


def build_authorization_url(state):
    params = {
        'client_id': settings.GOOGLE_CLIENT_ID,
        'redirect_uri': settings.GOOGLE_REDIRECT_URI,
        'response_type': 'code',
        'scope': 'openid email profile',
        'state': state,
        'prompt': 'select_account',
    }
    return f"{GOOGLE_AUTHORIZATION_URL}?{urlencode(params)}"


def exchange_code(code):
    """Trade an authorization code for Google's token response."""
    try:
        response = requests.post(
            GOOGLE_TOKEN_URL,
            data={
                'code': code,
                'client_id': settings.GOOGLE_CLIENT_ID,
                'client_secret': settings.GOOGLE_CLIENT_SECRET,
                'redirect_uri': settings.GOOGLE_REDIRECT_URI,
                'grant_type': 'authorization_code',
            },
            timeout=settings.GOOGLE_HTTP_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Google code exchange failed: {e}")
        raise GoogleAuthError('Google authentication failed') from e

    payload = response.json()
    if not payload.get('access_token'):
        raise GoogleAuthError('Google did not return an access token')
    return payload


def fetch_profile(access_token):
    try:
        response = requests.get(
            GOOGLE_USERINFO_URL,
            headers={'Authorization': f'Bearer {access_token}'},
            timeout=settings.GOOGLE_HTTP_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning(f"Google userinfo request failed: {e}")
        raise GoogleAuthError('Google authentication failed') from e
    return response.json()


def get_or_create_google_user(profile):
    """
    Find the account for a Google profile, creating a surveyor on first login.

    Existing accounts (including password accounts) are matched by email and
    left untouched. Only emails Google reports as verified are accepted.
    """
    email = (profile.get('email') or '').strip()
    if not email:
        raise GoogleAuthError('Google profile missing email')
    if profile.get('email_verified') is not True:
        raise GoogleAuthError('Google email not verified')

    user = CustomUser.objects.filter(email__iexact=email).first()
    if user is not None:
        return user, False

    user = CustomUser.objects.create_user(
        email=email,
        password=None,
        first_name=profile.get('given_name') or '',
        last_name=profile.get('family_name') or '',
        user_image=profile.get('picture') or None,
        role=Role.SURVEYOR,
    )
    logger.info(f"Created surveyor {user.pk} from Google login")
    return user, True
