"""Functional tests for the JSON request envelope served over HTTP.

Every reply is HTTP 200 with a `{status, ...}` body; failures are reported
in the body, never as transport errors.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from answersheet.config import AppConfig, ErrorsConfig, ResponseConfig, StoreConfig
from answersheet.main import create_app
from answersheet.sheets import InMemoryWorkbook

from conftest import frozen_clock


def _set(client: TestClient, *items: dict, path: str = "/") -> dict:
    resp = client.post(path, json={"request_type": "set", "content": list(items)})
    assert resp.status_code == 200
    return resp.json()


def _get(client: TestClient, numbers, qtype, path: str = "/") -> dict:
    resp = client.post(path, json={"request_type": "get", "question_number": numbers, "question_type": qtype})
    assert resp.status_code == 200
    return resp.json()


APPLE = {
    "question_number": 5,
    "question_type": "word-meaning",
    "question_answer_1": "apple",
    "question_answer_2": "a fruit",
}


def test_set_then_get_scenario(client: TestClient) -> None:
    assert _set(client, APPLE) == {"status": "success", "message": "1 questions updated."}
    assert _get(client, [5], "word-meaning") == {"status": "success", "content": [[5, "apple", "a fruit"]]}

    again = dict(APPLE, question_answer_1="pear", question_answer_2="not a fruit")
    assert _set(client, again) == {"status": "success", "message": "0 questions updated."}
    assert _get(client, [5], "word-meaning")["content"] == [[5, "apple", "a fruit"]]


def test_get_with_parallel_type_array(client: TestClient) -> None:
    _set(
        client,
        APPLE,
        {"question_number": 5, "question_type": "fill-blank", "question_answer_1": "ran"},
    )
    body = _get(client, [5, 6, 5], ["fill-blank", "word-meaning", "word-meaning"])
    assert body == {"status": "success", "content": [[5, "ran", None], [5, "apple", "a fruit"]]}


def test_get_with_unknown_type_returns_empty_content(client: TestClient) -> None:
    _set(client, APPLE)
    assert _get(client, [5], "listening") == {"status": "success", "content": []}


def test_set_counts_only_written_items(client: TestClient) -> None:
    body = _set(
        client,
        APPLE,
        dict(APPLE, question_number=6, question_type="listening"),
        dict(APPLE, question_number=7),
        {"question_type": "word-meaning"},
    )
    assert body["message"] == "2 questions updated."


@pytest.mark.parametrize(
    "payload",
    [
        {"request_type": "get"},
        {"request_type": "get", "question_number": 5, "question_type": "word-meaning"},
        {"request_type": "get", "question_number": [5]},
        {"request_type": "get", "question_number": [5], "question_type": ""},
        {"request_type": "get", "question_number": [5, 6], "question_type": ["word-meaning"]},
        {"request_type": "get", "question_number": [True], "question_type": "word-meaning"},
    ],
)
def test_malformed_get_is_rejected(client: TestClient, payload: dict) -> None:
    resp = client.post("/", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {
        "status": "error",
        "message": "Invalid or missing question_number array or question_type string",
    }


@pytest.mark.parametrize("payload", [{"request_type": "set"}, {"request_type": "set", "content": {"a": 1}}])
def test_malformed_set_is_rejected(client: TestClient, payload: dict) -> None:
    assert client.post("/", json=payload).json() == {"status": "error", "message": "Invalid or missing content array"}


@pytest.mark.parametrize("payload", [{"request_type": "delete"}, {}, [1, 2], "get", None])
def test_unknown_request_type(client: TestClient, payload) -> None:
    resp = client.post("/", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"status": "error", "message": "Invalid request_type"}


def test_invalid_json_body_is_reported_in_envelope(client: TestClient) -> None:
    resp = client.post("/", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "error"
    assert body["message"].startswith("An error occurred: ")
    assert "stack" not in body


def test_stack_is_attached_when_enabled(workbook: InMemoryWorkbook) -> None:
    config = AppConfig(errors=ErrorsConfig(include_stack=True))
    client = TestClient(create_app(config=config, workbook=workbook))
    body = client.post("/", content=b"{not json").json()
    assert body["status"] == "error"
    assert "Traceback" in body["stack"]


def test_missing_sheets_are_reported() -> None:
    config = AppConfig(store=StoreConfig(auto_provision=False))
    client = TestClient(create_app(config=config, workbook=InMemoryWorkbook()))

    expected = {
        "status": "error",
        "message": "Required sheets not found. Please create sheets: '単語の意味' and '空所補充'",
    }
    assert _get(client, [1], "word-meaning") == expected
    assert _set(client, APPLE) == expected


def test_unexpected_backend_error_becomes_error_envelope() -> None:
    class BrokenWorkbook(InMemoryWorkbook):
        def get_sheet(self, name):
            raise RuntimeError("spreadsheet offline")

    config = AppConfig(store=StoreConfig(auto_provision=False))
    client = TestClient(create_app(config=config, workbook=BrokenWorkbook()))
    assert _get(client, [1], "word-meaning") == {
        "status": "error",
        "message": "An error occurred: spreadsheet offline",
    }


def test_extension_layout_uses_six_slot_rows(workbook: InMemoryWorkbook) -> None:
    config = AppConfig(response=ResponseConfig(layout="extension"))
    client = TestClient(create_app(config=config, workbook=workbook, clock=frozen_clock))
    _set(
        client,
        APPLE,
        {"question_number": 5, "question_type": "fill-blank", "question_answer_1": "ran"},
    )
    assert _get(client, [5], "word-meaning")["content"] == [[5, "apple", "a fruit", None, None, None]]
    assert _get(client, [5], "fill-blank")["content"] == [[5, None, None, "ran", None, None]]


def test_exec_path_serves_the_same_envelope(client: TestClient) -> None:
    assert _set(client, APPLE, path="/exec")["message"] == "1 questions updated."
    assert _get(client, [5], "word-meaning", path="/exec")["content"] == [[5, "apple", "a fruit"]]


def test_health_reports_missing_sheets() -> None:
    config = AppConfig(store=StoreConfig(auto_provision=False))
    wb = InMemoryWorkbook()
    client = TestClient(create_app(config=config, workbook=wb))
    assert client.get("/health").json() == {"status": "degraded", "missing_sheets": ["単語の意味", "空所補充"]}

    wb.create_sheet("単語の意味")
    wb.create_sheet("空所補充")
    assert client.get("/health").json() == {"status": "ok", "missing_sheets": []}


def test_unknown_route_uses_error_envelope(client: TestClient) -> None:
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["status"] == "error"
