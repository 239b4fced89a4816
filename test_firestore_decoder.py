"""
Tests for Firestore document decoding
"""
from hydromon.services.firestore_decoder import (
    decode_document,
    decode_fields,
    decode_value,
    encode_fields,
    is_wrapped,
)

HISTORY_DOC = {
    "name": "projects/demo/databases/(default)/documents/history/1700000000",
    "fields": {
        "pH": {"doubleValue": 6.2},
        "TDS": {"doubleValue": 950},
        "timestamp": {"integerValue": "1700000000"},
        "Pump_24Jam": {"integerValue": "1"},
        "device": {"stringValue": "greenhouse-1"},
        "approved_by": {"nullValue": None},
    },
    "createTime": "2023-11-14T22:13:21.000000Z",
}

def test_decode_resolves_every_supported_tag():
    """Wrappers resolve to native scalars"""
    decoded = decode_document(HISTORY_DOC)
    assert decoded == {
        "pH": 6.2,
        "TDS": 950.0,
        "timestamp": 1700000000,
        "Pump_24Jam": 1,
        "device": "greenhouse-1",
        "approved_by": None,
    }
    assert isinstance(decoded["TDS"], float)
    assert isinstance(decoded["timestamp"], int)

def test_unknown_tags_are_dropped():
    """Fields with an unsupported wrapper are left out of the result"""
    decoded = decode_fields({
        "pH": {"doubleValue": 6.0},
        "online": {"booleanValue": True},
        "meta": {"mapValue": {"fields": {"a": {"stringValue": "b"}}}},
        "seen": {"timestampValue": "2024-01-01T00:00:00Z"},
        "empty": {},
    })
    assert decoded == {"pH": 6.0}

def test_unparseable_numbers_are_dropped():
    decoded = decode_fields({
        "timestamp": {"integerValue": "not-a-number"},
        "TDS": {"doubleValue": "abc"},
        "pH": {"doubleValue": "6.5"},
    })
    assert decoded == {"pH": 6.5}

def test_missing_fields_container_decodes_to_none():
    """No `fields` means no document, not an error"""
    assert decode_document({}) is None
    assert decode_document({"name": "history/1"}) is None
    assert decode_document({"fields": "oops"}) is None
    assert decode_document(None) is None
    assert decode_document("garbage") is None

def test_empty_fields_container_decodes_to_empty_mapping():
    assert decode_document({"fields": {}}) == {}

def test_decode_is_idempotent_through_encoding():
    """decode -> encode -> decode gives the same flat mapping"""
    first = decode_document(HISTORY_DOC)
    again = decode_document({"fields": encode_fields(first)})
    assert again == first

def test_encode_stores_flags_as_integers():
    fields = encode_fields({"Pump_PH_Plus": True, "timestamp": 42, "pH": 6.1, "note": None})
    assert fields == {
        "Pump_PH_Plus": {"integerValue": "1"},
        "timestamp": {"integerValue": "42"},
        "pH": {"doubleValue": 6.1},
        "note": {"nullValue": None},
    }

def test_is_wrapped():
    assert is_wrapped({"doubleValue": 1.0})
    assert not is_wrapped(1.0)
    assert not is_wrapped({"pH": 1.0})
    assert decode_value({"nullValue": None}) is None
