"""
Identity providers for the dashboard.

FirebaseAuthClient talks to the Firebase Auth REST API; LocalAuth is the
offline stand-in used when no Firebase project is configured. Both notify
registered listeners whenever the signed-in user changes.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

import requests
from google.auth import credentials as ga_credentials
from google.auth import exceptions as ga_exceptions
from jose import JWTError, jwt

from league_hub.config import FirebaseSettings
from league_hub.errors import AuthError

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"
SECURE_TOKEN_URL = "https://securetoken.googleapis.com/v1/token"

# Refresh this long before the provider's stated expiry
EXPIRY_MARGIN = timedelta(minutes=5)


def _utcnow() -> datetime:
    # google-auth compares expiries as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class AuthUser:
    uid: str
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    anonymous: bool = True

    @property
    def expired(self) -> bool:
        if self.expires_at is None:
            return False
        return _utcnow() >= self.expires_at - EXPIRY_MARGIN


AuthListener = Callable[[Optional[AuthUser]], None]


class _ListenerRegistry:
    """Holds identity-change listeners and fans out user changes to them"""

    def __init__(self):
        self._listeners: List[AuthListener] = []
        self.current_user: Optional[AuthUser] = None

    def on_auth_state_changed(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener, call it with the current user, return its unsubscribe function"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        listener(self.current_user)
        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _set_user(self, user: Optional[AuthUser]):
        self.current_user = user
        for listener in list(self._listeners):
            listener(user)

    def sign_out(self):
        self._set_user(None)


class FirebaseAuthClient(_ListenerRegistry):
    """Anonymous and custom-token sign-in against the Firebase Auth REST API"""

    def __init__(self, settings: FirebaseSettings, timeout: int = 30):
        super().__init__()
        self.settings = settings
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'LeagueHub/1.0',
            'Accept': 'application/json'
        })

    def _post(self, url: str, **kwargs) -> dict:
        try:
            response = self.session.post(
                url, params={'key': self.settings.api_key}, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Identity provider unreachable: {e}") from e

        if response.status_code != 200:
            try:
                message = response.json().get('error', {}).get('message', response.text)
            except ValueError:
                message = response.text
            raise AuthError(f"Identity provider returned {response.status_code}: {message}")
        return response.json()

    @staticmethod
    def _expiry(expires_in) -> datetime:
        return _utcnow() + timedelta(seconds=int(expires_in or 3600))

    def sign_in_anonymously(self) -> AuthUser:
        logger.info("Signing in anonymously")
        payload = self._post(f"{IDENTITY_TOOLKIT_URL}/accounts:signUp", json={'returnSecureToken': True})
        user = AuthUser(
            uid=payload['localId'],
            id_token=payload['idToken'],
            refresh_token=payload.get('refreshToken'),
            expires_at=self._expiry(payload.get('expiresIn')),
            anonymous=True
        )
        self._set_user(user)
        return user

    def sign_in_with_custom_token(self, token: str) -> AuthUser:
        logger.info("Signing in with pre-provisioned token")
        payload = self._post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:signInWithCustomToken",
            json={'token': token, 'returnSecureToken': True}
        )
        id_token = payload['idToken']

        # The custom-token response carries no uid; read it from the ID token claims
        try:
            claims = jwt.get_unverified_claims(id_token)
        except JWTError as e:
            raise AuthError(f"Could not read ID token claims: {e}") from e
        uid = claims.get('user_id') or claims.get('sub')
        if not uid:
            raise AuthError("ID token has no user id claim")

        user = AuthUser(
            uid=uid,
            id_token=id_token,
            refresh_token=payload.get('refreshToken'),
            expires_at=self._expiry(payload.get('expiresIn')),
            anonymous=False
        )
        self._set_user(user)
        return user

    def refresh(self) -> AuthUser:
        """Exchange the refresh token for a fresh ID token"""
        user = self.current_user
        if user is None or not user.refresh_token:
            raise AuthError("No signed-in user to refresh")

        payload = self._post(
            SECURE_TOKEN_URL,
            data={'grant_type': 'refresh_token', 'refresh_token': user.refresh_token}
        )
        refreshed = AuthUser(
            uid=payload.get('user_id', user.uid),
            id_token=payload['id_token'],
            refresh_token=payload.get('refresh_token', user.refresh_token),
            expires_at=self._expiry(payload.get('expires_in')),
            anonymous=user.anonymous
        )
        # Same identity, so listeners are not notified
        self.current_user = refreshed
        return refreshed

    def id_token(self) -> AuthUser:
        """Current user with an unexpired ID token"""
        user = self.current_user
        if user is None:
            raise AuthError("Not signed in")
        if user.expired:
            user = self.refresh()
        return user


class LocalAuth(_ListenerRegistry):
    """Offline identity provider that mints a random uid per sign-in"""

    def sign_in_anonymously(self) -> AuthUser:
        user = AuthUser(uid=f"local-{uuid.uuid4().hex[:12]}")
        logger.info(f"Local anonymous session {user.uid}")
        self._set_user(user)
        return user

    def sign_in_with_custom_token(self, token: str) -> AuthUser:
        if not token:
            raise AuthError("Empty custom token")
        user = AuthUser(uid=f"local-{uuid.uuid5(uuid.NAMESPACE_OID, token).hex[:12]}", anonymous=False)
        logger.info(f"Local token session {user.uid}")
        self._set_user(user)
        return user


class FirebaseUserCredentials(ga_credentials.Credentials):
    """google-auth credentials that present the signed-in Firebase user's ID token"""

    def __init__(self, auth: FirebaseAuthClient):
        super().__init__()
        self._auth = auth

    def refresh(self, request):
        try:
            user = self._auth.id_token()
        except AuthError as e:
            raise ga_exceptions.RefreshError(str(e)) from e
        self.token = user.id_token
        self.expiry = user.expires_at - EXPIRY_MARGIN if user.expires_at else None
