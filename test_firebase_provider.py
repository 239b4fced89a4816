"""
Tests for the Firebase REST provider (RTDB + Firestore) against a mocked transport
"""
import asyncio
import json

import httpx
import pytest

from hydromon.config import Settings
from hydromon.errors import FirebaseError, MalformedBatchError
from hydromon.models.profile import TEMPERATURE_PROFILE
from hydromon.providers import FirebaseProvider, provider_from_settings
from hydromon.services.history import format_historical_batch

DB_URL = "https://demo-default-rtdb.firebaseio.com"

def make_provider(handler, **kwargs):
    return FirebaseProvider(
        "test-key",
        DB_URL + "/",
        "demo",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )

def run(coro):
    return asyncio.run(coro)

# ---------- Realtime Database ----------

def test_realtime_snapshot_reads_sensor_node():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"pH": 6.2, "TDS": 950})

    data = run(make_provider(handler).get_realtime_snapshot())

    assert data == {"pH": 6.2, "TDS": 950}
    assert seen[0].method == "GET"
    assert seen[0].url.host == "demo-default-rtdb.firebaseio.com"
    assert seen[0].url.path == "/Sensor.json"
    assert seen[0].url.params["auth"] == "test-key"

def test_realtime_snapshot_empty_node_is_none():
    provider = make_provider(lambda request: httpx.Response(200, content=b"null"))
    assert run(provider.get_realtime_snapshot()) is None

def test_realtime_snapshot_non_object_is_malformed():
    provider = make_provider(lambda request: httpx.Response(200, json=[1, 2, 3]))
    with pytest.raises(MalformedBatchError):
        run(provider.get_realtime_snapshot())

def test_upstream_error_status_is_kept():
    provider = make_provider(lambda request: httpx.Response(503, text="unavailable"))
    with pytest.raises(FirebaseError) as exc:
        run(provider.get_realtime_snapshot())
    assert exc.value.status_code == 503
    assert exc.value.body == "unavailable"

def test_transport_failure_becomes_firebase_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FirebaseError) as exc:
        run(make_provider(handler).get_realtime_snapshot())
    assert exc.value.status_code is None
    assert not isinstance(exc.value, MalformedBatchError)

def test_invalid_json_is_malformed():
    provider = make_provider(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
    with pytest.raises(MalformedBatchError):
        run(provider.get_realtime_snapshot())

def test_set_tds_target_puts_value():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=json.loads(request.content))

    result = run(make_provider(handler).set_tds_target(1200.0))

    assert result == {"success": True, "new_value": 1200.0}
    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/Sensor/TDS_Target.json"
    assert json.loads(seen[0].content) == 1200.0

def test_custom_sensor_path():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"pH": 6.0, "TDS": 900})

    run(make_provider(handler, sensor_path="/devices/greenhouse/").get_realtime_snapshot())
    assert seen[0].url.path == "/devices/greenhouse.json"

# ---------- Firestore ----------

def test_list_history_builds_listing_request():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={
            "documents": [{"name": "history/1", "fields": {"pH": {"doubleValue": 6.0}}}],
            "nextPageToken": "page-2",
        })

    docs, token = run(make_provider(handler).list_history(5000, "timestamp", "ASCENDING", "page-1"))

    assert len(docs) == 1
    assert token == "page-2"
    request = seen[0]
    assert request.url.path == "/v1/projects/demo/databases/(default)/documents/history"
    assert request.url.params["pageSize"] == "1000"
    assert request.url.params["orderBy"] == "timestamp ASCENDING"
    assert request.url.params["pageToken"] == "page-1"
    assert request.url.params["key"] == "test-key"

def test_list_history_empty_collection():
    docs, token = run(make_provider(lambda request: httpx.Response(200, json={})).list_history())
    assert docs == []
    assert token is None

def test_list_history_bad_documents_value_is_malformed():
    provider = make_provider(lambda request: httpx.Response(200, json={"documents": {"a": 1}}))
    with pytest.raises(MalformedBatchError):
        run(provider.list_history())

def test_range_query_posts_structured_query():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=[
            {"document": {"fields": {"pH": {"doubleValue": 6.0}, "timestamp": {"integerValue": "200"}}}},
            {"document": {"fields": {"pH": {"doubleValue": 6.1}, "timestamp": {"integerValue": "100"}}}},
            {"readTime": "2024-01-15T00:00:00Z"},
        ])

    results = run(make_provider(handler).query_history_range(100, 200, 10))

    assert len(results) == 2
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path.endswith("/documents:runQuery")
    body = json.loads(request.content)
    assert body["structuredQuery"]["limit"] == 10
    assert body["structuredQuery"]["from"] == [{"collectionId": "history"}]

def test_range_query_without_hits_is_empty():
    provider = make_provider(lambda request: httpx.Response(200, json=[{"readTime": "2024-01-15T00:00:00Z"}]))
    assert run(provider.query_history_range(100, 200)) == []

def test_range_query_non_list_is_malformed():
    provider = make_provider(lambda request: httpx.Response(200, json={"error": "nope"}))
    with pytest.raises(MalformedBatchError):
        run(provider.query_history_range(100, 200))

def test_write_history_document_encodes_fields():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=json.loads(request.content))

    run(make_provider(handler).write_history_document("1700000000", {"pH": 6.5, "Pump_24Jam": 1}))

    request = seen[0]
    assert request.method == "PATCH"
    assert request.url.path.endswith("/documents/history/1700000000")
    assert json.loads(request.content) == {
        "fields": {"pH": {"doubleValue": 6.5}, "Pump_24Jam": {"integerValue": "1"}},
    }

# ---------- Mock mode ----------

def test_missing_credentials_enable_mock_mode():
    provider = FirebaseProvider("", DB_URL, "demo")
    assert provider.mock_mode

    snapshot = run(provider.get_realtime_snapshot())
    assert "pH" in snapshot and "TDS" in snapshot

    docs, token = run(provider.list_history(10))
    assert len(docs) == 10
    assert token is None
    assert len(format_historical_batch(docs, provider.profile)) == 10

def test_mock_range_query_covers_the_whole_range():
    provider = FirebaseProvider("", "", "", profile=TEMPERATURE_PROFILE)
    results = run(provider.query_history_range(1705251600, 1705337999, 1000))
    formatted = format_historical_batch(results, TEMPERATURE_PROFILE)

    assert len(formatted) == 48
    assert all(1705251600 <= r["timestamp"] <= 1705337999 for r in formatted)
    assert formatted[0]["timestamp"] > formatted[-1]["timestamp"]
    assert "Temperature" in formatted[0]

# ---------- Diagnostics ----------

def test_diagnostics_reports_incomplete_config():
    report = run(FirebaseProvider("", "", "").diagnostics())
    assert report["success"] is False
    assert report["diagnostics"]["config_check"]["mock_mode"] is True

def test_diagnostics_success():
    def handler(request):
        if request.url.path == "/.json":
            assert request.url.params["shallow"] == "true"
            return httpx.Response(200, json={"Sensor": True})
        return httpx.Response(200, json={"pH": 6.0, "TDS": 900})

    report = run(make_provider(handler).diagnostics())

    assert report["success"] is True
    assert report["diagnostics"]["connection_test"] == {"status_code": 200}
    assert report["diagnostics"]["data_test"]["data_structure"] == ["pH", "TDS"]
    assert report["diagnostics"]["data_test"]["validation_result"] is True

def test_diagnostics_connection_failure():
    provider = make_provider(lambda request: httpx.Response(401, json={"error": "Permission denied"}))
    report = run(provider.diagnostics())
    assert report["success"] is False
    assert report["diagnostics"]["connection_test"] == {"status_code": 401}

# ---------- Settings ----------

def test_provider_from_settings():
    settings = Settings(
        firebase_api_key="k",
        firebase_database_url=DB_URL,
        firebase_project_id="p",
        device_profile="temperature",
        firestore_collection="readings",
    )
    provider = provider_from_settings(settings)
    assert not provider.mock_mode
    assert provider.profile is TEMPERATURE_PROFILE
    assert provider.collection == "readings"

def test_provider_from_settings_rejects_unknown_profile():
    with pytest.raises(KeyError):
        provider_from_settings(Settings(device_profile="aquarium"))
