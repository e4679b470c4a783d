"""
API Client for authentication.

Login and registration store the returned token and user id in the
preference store, where every other API client picks them up.
"""

from pathlib import Path
from typing import Optional, Any
from loguru import logger

from ...core.api_client import BaseAPIClient, APIError
from ...core.preferences import USER_ID
from .auth_models import User


class AuthAPIClient(BaseAPIClient):
    """API client for /api/auth and /api/users/profile"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.current_user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.get_token())

    def login(self, email: str, password: str) -> User:
        """
        Logs in and remembers the token.

        Raises:
            APIError: wrong credentials, HTTP or network failure
        """
        data = self._post('/api/auth/login', json={'email': email, 'password': password})
        return self._store_auth(data)

    def register(self, username: str, email: str, password: str) -> User:
        """
        Creates an account and logs in.

        Raises:
            APIError: on HTTP or network failure
        """
        payload = {'username': username, 'email': email, 'password': password}
        data = self._post('/api/auth/register', json=payload)
        return self._store_auth(data)

    def get_current_user(self) -> User:
        return self._parse_user(self._get('/api/auth/me'))

    def check_auth(self) -> Optional[User]:
        """
        Current user for a stored token.

        Returns:
            User, or None when there is no token or it was rejected
        """
        if not self.is_authenticated:
            return None
        try:
            self.current_user = self.get_current_user()
        except APIError as e:
            logger.error(f"[AUTH] Auth check failed: {e.message}")
            self.current_user = None
        return self.current_user

    def logout(self):
        self.clear_token()
        self.current_user = None
        logger.info("[AUTH] Logged out")

    # ==================== PROFILE ====================

    def get_profile(self) -> User:
        """Profile of the current user (theme, sound preference, bio)"""
        return self._parse_user(self._get('/api/users/profile'))

    def update_profile(
        self,
        username: Optional[str] = None,
        bio: Optional[str] = None,
        theme: Optional[str] = None,
        sound_enabled: Optional[bool] = None,
        avatar_path: Optional[Path] = None,
    ) -> User:
        """
        Updates profile fields; only the given ones are sent.

        The endpoint takes a multipart form, an avatar file is optional.

        Raises:
            ValueError: nothing to update
            FileNotFoundError: avatar file does not exist
            APIError: on HTTP or network failure
        """
        form = {}
        if username is not None:
            form['username'] = username
        if bio is not None:
            form['bio'] = bio
        if theme is not None:
            form['theme'] = theme
        if sound_enabled is not None:
            form['soundEnabled'] = 'true' if sound_enabled else 'false'
        if not form and avatar_path is None:
            raise ValueError("No profile fields to update")

        logger.debug(f"[AUTH] Updating profile: {list(form)}")
        if avatar_path is not None:
            avatar_path = Path(avatar_path)
            with open(avatar_path, 'rb') as f:
                data = self._patch('/api/users/profile', data=form, files={'file': (avatar_path.name, f)})
        else:
            data = self._patch('/api/users/profile', data=form)

        user = self._parse_user(data)
        self.current_user = user
        logger.info("[AUTH] Profile updated")
        return user

    def _store_auth(self, data: Any) -> User:
        if not isinstance(data, dict) or not isinstance(data.get('user'), dict):
            raise APIError(f"Unexpected auth payload: {data!r}")

        user = User.from_dict(data['user'])
        token = data.get('token')
        if token:
            self.set_token(token)
            if self.preferences is not None:
                self.preferences.set(USER_ID, user.id)

        self.current_user = user
        logger.info(f"[AUTH] Logged in as {user.email}")
        return user

    def _parse_user(self, data: Any) -> User:
        # {"user": {...}} or the bare record
        if isinstance(data, dict) and isinstance(data.get('user'), dict):
            data = data['user']
        if not isinstance(data, dict) or 'id' not in data:
            raise APIError(f"Unexpected user payload: {data!r}")
        return User.from_dict(data)
