"""Palette REST API client for listing, inspecting and deleting cluster profiles."""
import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import requests
from cluster_profile_cleaner.config.settings import DEFAULT_TIMEOUT
from cluster_profile_cleaner.exceptions import ApiResponseError
from cluster_profile_cleaner.exceptions import PaletteApiError

from .datasource import IDataSource

logger = logging.getLogger(__name__)

# Returned for successful calls without a body (HTTP 204, typical for DELETE)
EMPTY_SUCCESS: Dict[str, Any] = {"success": True}


class PaletteApiClient(IDataSource):
    """Client for the Palette management API. Every call is attempted exactly once."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: int = DEFAULT_TIMEOUT,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """base_url like https://api.spectrocloud.com."""
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.verify = verify
        self.session = session or requests.Session()

    def _headers(
        self, project_uid: Optional[str], accept: str = "application/json"
    ) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": accept,
            "ApiKey": self.api_key,
        }
        if project_uid:
            headers["ProjectUid"] = project_uid
        return headers

    def _send(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]],
        headers: Dict[str, str],
    ) -> requests.Response:
        url = f"{self.base_url}/v1/{path}"
        logger.debug("API Request: %s %s", method, url)
        if "ProjectUid" in headers:
            logger.debug("  With ProjectUid header: %s", headers["ProjectUid"])
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                json=body,
                timeout=self.timeout,
                verify=self.verify,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to reach {url}: {e}")
            raise PaletteApiError(method, path, reason=f"Request error ({e})") from e

        if resp.status_code >= 400:
            error = PaletteApiError(method, path, resp.status_code, resp.text)
            logger.error(str(error))
            raise error
        return resp

    def execute(
        self,
        method: str,
        path: str,
        body: Optional[Dict[str, Any]] = None,
        project_uid: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Issue an API call and return its decoded JSON body.

        The ProjectUid header is only attached when project_uid is given.

        Raises:
            PaletteApiError: On transport errors and HTTP status >= 400.
            ApiResponseError: On an empty or non-JSON body (other than HTTP 204).
        """
        resp = self._send(method, path, body, self._headers(project_uid))

        if resp.status_code == 204:
            return dict(EMPTY_SUCCESS)

        if not resp.content or not resp.text.strip():
            error = ApiResponseError(
                method, path, resp.status_code, reason="API returned empty response"
            )
            logger.error(str(error))
            raise error

        try:
            return resp.json()
        except ValueError as e:
            error = ApiResponseError(
                method,
                path,
                resp.status_code,
                resp.text,
                reason="API returned invalid JSON",
            )
            logger.error(str(error))
            raise error from e

    @staticmethod
    def _items(payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            return []
        return payload.get("items") or []

    def list_projects(self) -> List[Dict[str, Any]]:
        """Get all the projects of the tenant"""
        return self._items(self.execute("GET", "projects"))

    def list_cluster_profiles(
        self, project_uid: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Get cluster profiles at tenant scope, or in project_uid when given"""
        return self._items(
            self.execute("GET", "clusterprofiles", project_uid=project_uid)
        )

    def get_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> Dict[str, Any]:
        """Get the cluster profile with uid profile_uid, including its status"""
        return self.execute(
            "GET", f"clusterprofiles/{profile_uid}", project_uid=project_uid
        )

    def delete_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> Dict[str, Any]:
        """Delete the cluster profile with uid profile_uid"""
        return self.execute(
            "DELETE", f"clusterprofiles/{profile_uid}", project_uid=project_uid
        )

    def export_cluster_profile(
        self, profile_uid: str, project_uid: Optional[str] = None
    ) -> bytes:
        """Get the exported cluster profile as raw bytes"""
        path = f"clusterprofiles/{profile_uid}/export"
        headers = self._headers(project_uid, accept="application/octet-stream")
        resp = self._send("GET", path, None, headers)
        if not resp.content:
            raise ApiResponseError(
                "GET", path, resp.status_code, reason="API returned empty export"
            )
        return resp.content
