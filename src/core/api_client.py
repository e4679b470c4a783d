"""
Base HTTP client shared by the module API clients.

Handles:
- Bearer token taken from the preference store on every request
- JSON requests and responses
- Clearing the stored token after a 401 Unauthorized
- Turning HTTP and network failures into APIError
"""

import requests
from typing import Optional, Any
from loguru import logger

from .preferences import PreferenceStore, TOKEN, USER_ID


class APIError(Exception):
    """Error raised for failed API calls (HTTP or network)"""

    def __init__(self, message: str, status_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data

    def __repr__(self) -> str:
        return f"<APIError status={self.status_code} message='{self.message}'>"


class BaseAPIClient:
    """
    Common plumbing for the REST API clients.

    Several clients may share one requests.Session and one PreferenceStore,
    so a login performed through one of them authorizes all the others.
    """

    def __init__(
        self,
        base_url: str,
        preferences: Optional[PreferenceStore] = None,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            base_url: Server URL (e.g. "http://localhost:3000")
            preferences: Store holding the auth token (optional)
            timeout: Request timeout in seconds
            session: Shared HTTP session (optional)
        """
        self.base_url = base_url.rstrip('/')
        self.preferences = preferences
        self.timeout = timeout
        self.session = session or requests.Session()

        # Content-Type is set per request by requests (JSON or multipart body)
        self.session.headers.update({
            'Accept': 'application/json',
        })

    # =========================================================================
    # TOKEN
    # =========================================================================

    def get_token(self) -> Optional[str]:
        if self.preferences is None:
            return None
        return self.preferences.get(TOKEN)

    def set_token(self, token: str):
        if self.preferences is not None:
            self.preferences.set(TOKEN, token)
        logger.debug("[API] Auth token updated")

    def clear_token(self):
        if self.preferences is not None:
            self.preferences.remove(TOKEN)
            self.preferences.remove(USER_ID)
        logger.debug("[API] Auth token cleared")

    def get_user_id(self) -> Optional[str]:
        if self.preferences is None:
            return None
        return self.preferences.get(USER_ID)

    # =========================================================================
    # REQUESTS
    # =========================================================================

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Raises:
            APIError: on network errors and non-2xx responses
        """
        url = f"{self.base_url}{path}"
        headers = dict(kwargs.pop('headers', None) or {})
        token = self.get_token()
        if token:
            headers['Authorization'] = f'Bearer {token}'

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.timeout,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"[API] Network error {method} {path}: {e}")
            raise APIError(f"Network error: {e}") from e

        if response.status_code == 401:
            logger.warning(f"[API] 401 Unauthorized for {method} {path}, clearing token")
            self.clear_token()

        return self._handle_response(response, method, path)

    def _handle_response(self, response: requests.Response, method: str, path: str) -> Any:
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            error_message = str(e)
            error_data = None
            try:
                error_data = response.json()
                if isinstance(error_data, dict):
                    error_message = error_data.get('message') or error_data.get('error') or error_message
            except ValueError:
                pass

            logger.error(f"[API] HTTP Error {response.status_code} {method} {path}: {error_message}")
            raise APIError(error_message, status_code=response.status_code, data=error_data) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIError(f"Invalid JSON in response: {e}", status_code=response.status_code) from e

    def _get(self, path: str, **kwargs) -> Any:
        return self._request('GET', path, **kwargs)

    def _post(self, path: str, **kwargs) -> Any:
        return self._request('POST', path, **kwargs)

    def _patch(self, path: str, **kwargs) -> Any:
        return self._request('PATCH', path, **kwargs)

    def _delete(self, path: str, **kwargs) -> Any:
        return self._request('DELETE', path, **kwargs)
