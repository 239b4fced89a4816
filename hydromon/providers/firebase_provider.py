import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from hydromon.config import Settings
from hydromon.errors import FirebaseError, MalformedBatchError
from hydromon.models.profile import STANDARD_PROFILE, ReadingProfile, get_profile
from hydromon.services.firestore_decoder import encode_fields
from hydromon.services.history import build_range_query
from hydromon.services.simulator import generate_random_reading
from hydromon.services.validation import is_valid_reading

logger = logging.getLogger(__name__)

FIRESTORE_BASE = "https://firestore.googleapis.com/v1"
MAX_PAGE_SIZE = 1000
MOCK_STEP_SECONDS = 1800

class FirebaseProvider:
    """Provider for Firebase RTDB (live snapshot) and Firestore (history) over REST"""

    def __init__(
        self,
        api_key: str,
        database_url: str,
        project_id: str,
        profile: ReadingProfile = STANDARD_PROFILE,
        timeout: float = 30.0,
        sensor_path: str = "Sensor",
        collection: str = "history",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.database_url = (database_url or "").rstrip("/")
        self.project_id = project_id
        self.profile = profile
        self.timeout = timeout
        self.sensor_path = sensor_path.strip("/")
        self.collection = collection
        self._transport = transport

        self.mock_mode = not api_key or not database_url or not project_id

        if self.mock_mode:
            logger.warning("Firebase provider running in MOCK MODE - credentials not configured")
        else:
            logger.info("Firebase provider running in PRODUCTION MODE")

    @property
    def documents_url(self) -> str:
        return f"{FIRESTORE_BASE}/projects/{self.project_id}/databases/(default)/documents"

    def _rtdb_url(self, *parts: str) -> str:
        path = "/".join([self.sensor_path, *parts])
        return f"{self.database_url}/{path}.json"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send one request; non-2xx, transport errors and bad JSON raise FirebaseError"""
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Firebase {method} {url} failed: {str(e)}")
            raise FirebaseError(f"Could not reach Firebase: {str(e)}") from e

        if response.is_error:
            logger.error(f"Firebase {method} {url} answered HTTP {response.status_code}: {response.text}")
            raise FirebaseError(
                f"Firebase answered HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedBatchError(
                "Firebase response is not valid JSON",
                status_code=response.status_code,
                body=response.text,
            ) from e

    # ---------- Realtime Database ----------

    async def get_realtime_snapshot(self) -> Optional[Dict[str, Any]]:
        """Current sensor snapshot, or None when the node is empty"""
        if self.mock_mode:
            logger.info("MOCK: Getting realtime snapshot")
            data = generate_random_reading(self.profile)
            data["TDS_Target"] = 1000
            return data

        data = await self._request("GET", self._rtdb_url(), params={"auth": self.api_key})
        logger.info(f"Firebase RTDB data received: {data}")

        if data is None:
            return None
        if not isinstance(data, dict):
            raise MalformedBatchError(f"Expected an object at /{self.sensor_path}, got {type(data).__name__}")
        return data

    async def set_tds_target(self, value: float) -> Dict[str, Any]:
        """Write the TDS setpoint next to the live readings"""
        if self.mock_mode:
            logger.info(f"MOCK: Setting TDS_Target to {value}")
            return {"success": True, "new_value": value}

        stored = await self._request(
            "PUT", self._rtdb_url("TDS_Target"), params={"auth": self.api_key}, json=value
        )
        logger.info(f"TDS Target updated successfully: {value}")
        return {"success": True, "new_value": stored}

    async def put_realtime_snapshot(self, data: Dict[str, Any]) -> Any:
        """Replace the whole live snapshot (used by the simulator)"""
        if self.mock_mode:
            logger.debug(f"MOCK: Would write realtime snapshot {data}")
            return data
        return await self._request("PUT", self._rtdb_url(), params={"auth": self.api_key}, json=data)

    # ---------- Firestore ----------

    async def list_history(
        self,
        limit: int = 100,
        order_by: str = "timestamp",
        direction: str = "DESCENDING",
        page_token: Optional[str] = None,
    ) -> Tuple[List[Any], Optional[str]]:
        """One page of history documents plus the token for the next page"""
        page_size = min(limit, MAX_PAGE_SIZE)

        if self.mock_mode:
            logger.info(f"MOCK: Listing {page_size} history documents")
            end_ts = int(time.time())
            end_ts -= end_ts % MOCK_STEP_SECONDS
            stamps = [end_ts - i * MOCK_STEP_SECONDS for i in range(page_size)]
            if direction.upper().startswith("ASC"):
                stamps.reverse()
            return self._mock_documents(stamps), None

        params = {
            "key": self.api_key,
            "pageSize": page_size,
            "orderBy": f"{order_by} {direction}",
        }
        if page_token:
            params["pageToken"] = page_token

        data = await self._request("GET", f"{self.documents_url}/{self.collection}", params=params)
        if not isinstance(data, dict):
            raise MalformedBatchError(f"Expected a document listing, got {type(data).__name__}")

        documents = data.get("documents", [])
        if not isinstance(documents, list):
            raise MalformedBatchError("Firestore listing 'documents' is not a list")

        return documents, data.get("nextPageToken")

    async def query_history_range(self, start_ts: int, end_ts: int, limit: int = 500) -> List[Any]:
        """Documents with start_ts <= timestamp <= end_ts, newest first"""
        if self.mock_mode:
            logger.info(f"MOCK: Querying history between {start_ts} and {end_ts}")
            last = end_ts - (end_ts - start_ts) % MOCK_STEP_SECONDS
            stamps = list(range(last, start_ts - 1, -MOCK_STEP_SECONDS))[:limit]
            return [{"document": doc} for doc in self._mock_documents(stamps)]

        query = build_range_query(start_ts, end_ts, limit, self.collection)
        results = await self._request(
            "POST", f"{self.documents_url}:runQuery", params={"key": self.api_key}, json=query
        )
        if not isinstance(results, list):
            raise MalformedBatchError(f"Expected a list of query results, got {type(results).__name__}")

        # an empty result set still yields one {"readTime": ...} entry
        return [
            r for r in results
            if not (isinstance(r, dict) and "document" not in r and "readTime" in r)
        ]

    async def write_history_document(self, doc_id: str, data: Dict[str, Any]) -> Any:
        """Create or overwrite history/{doc_id} (used by the simulator)"""
        if self.mock_mode:
            logger.debug(f"MOCK: Would write history document {doc_id}")
            return {"fields": encode_fields(data)}
        return await self._request(
            "PATCH",
            f"{self.documents_url}/{self.collection}/{doc_id}",
            params={"key": self.api_key},
            json={"fields": encode_fields(data)},
        )

    def _mock_documents(self, stamps: List[int]) -> List[Dict[str, Any]]:
        docs = []
        for ts in stamps:
            data = generate_random_reading(self.profile, now=ts)
            docs.append({
                "name": f"{self.documents_url}/{self.collection}/{ts}",
                "fields": encode_fields(data),
            })
        return docs

    # ---------- Diagnostics ----------

    async def diagnostics(self) -> Dict[str, Any]:
        """Check configuration and connectivity, the way the dashboard's test button does"""
        report: Dict[str, Any] = {
            "config_check": {
                "api_key_exists": bool(self.api_key),
                "database_url_exists": bool(self.database_url),
                "project_id_exists": bool(self.project_id),
                "api_key_length": len(self.api_key or ""),
                "database_url": self.database_url.replace(self.api_key, "[HIDDEN]")
                if self.database_url and self.api_key else (self.database_url or None),
                "mock_mode": self.mock_mode,
            },
            "connection_test": None,
            "data_test": None,
        }

        if self.mock_mode:
            return {
                "success": False,
                "message": "Firebase configuration incomplete",
                "diagnostics": report,
            }

        try:
            async with self._client() as client:
                root = await client.get(f"{self.database_url}/.json", params={"auth": self.api_key, "shallow": "true"})
                report["connection_test"] = {"status_code": root.status_code}

                if root.is_error:
                    return {
                        "success": False,
                        "message": "Firebase connection failed",
                        "diagnostics": report,
                    }

                sensor = await client.get(self._rtdb_url(), params={"auth": self.api_key})
                try:
                    sensor_data = sensor.json()
                except ValueError:
                    sensor_data = None

        except httpx.HTTPError as e:
            logger.error(f"Firebase connection test failed: {str(e)}")
            report["connection_test"] = {"error": str(e), "type": type(e).__name__}
            return {
                "success": False,
                "message": f"Connection test failed: {str(e)}",
                "diagnostics": report,
            }

        is_mapping = isinstance(sensor_data, dict)
        report["data_test"] = {
            "sensor_endpoint_status": sensor.status_code,
            "data_exists": bool(sensor_data),
            "data_structure": list(sensor_data.keys()) if is_mapping else None,
            "validation_result": is_valid_reading(sensor_data, self.profile) if is_mapping else False,
        }

        return {
            "success": True,
            "message": "Firebase connection successful",
            "diagnostics": report,
            "sample_data": sensor_data,
        }

def provider_from_settings(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> FirebaseProvider:
    """Build a provider from explicit settings (no process-wide instance)"""
    return FirebaseProvider(
        settings.firebase_api_key,
        settings.firebase_database_url,
        settings.firebase_project_id,
        profile=get_profile(settings.device_profile),
        timeout=settings.firebase_timeout_seconds,
        sensor_path=settings.rtdb_sensor_path,
        collection=settings.firestore_collection,
        transport=transport,
    )
