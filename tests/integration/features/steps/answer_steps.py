"""Step definitions for answers.feature.

Steps post JSON envelopes through `context.client` (TestClient or a live
httpx client, see environment.py) and keep the last decoded reply on
`context.reply`.
"""

from __future__ import annotations

import json
from typing import Any

from behave import given, then, when


def _post(context, body: Any) -> dict:
    resp = context.client.post("/", json=body)
    assert resp.status_code == 200, f"unexpected HTTP status {resp.status_code}: {resp.text}"
    context.reply = resp.json()
    return context.reply


def _set_one(context, number: int, qtype: str, a1: str | None, a2: str | None) -> dict:
    item = {
        "question_number": number,
        "question_type": qtype,
        "question_answer_1": a1,
        "question_answer_2": a2,
    }
    return _post(context, {"request_type": "set", "content": [item]})


@given("a fresh answer sheet service")
def step_fresh_service(context):
    # environment.py builds a new in-process app per scenario
    context.reply = None


# Two-answer form must be registered before the one-answer form
@given('question {number:d} of type "{qtype}" was saved as "{a1}" and "{a2}"')
def step_saved_two(context, number: int, qtype: str, a1: str, a2: str):
    _set_one(context, number, qtype, a1, a2)


@given('question {number:d} of type "{qtype}" was saved as "{a1}"')
def step_saved_one(context, number: int, qtype: str, a1: str):
    _set_one(context, number, qtype, a1, None)


@when('I set question {number:d} of type "{qtype}" to "{a1}" and "{a2}"')
def step_set_question(context, number: int, qtype: str, a1: str, a2: str):
    _set_one(context, number, qtype, a1, a2)


@when("I set these answers")
def step_set_table(context):
    content = []
    for row in context.table:
        content.append({
            "question_number": int(row["question_number"]),
            "question_type": row["question_type"],
            "question_answer_1": row["question_answer_1"] or None,
            "question_answer_2": row["question_answer_2"] or None,
        })
    _post(context, {"request_type": "set", "content": content})


@when('I get questions "{numbers}" of type "{qtype}"')
def step_get(context, numbers: str, qtype: str):
    parsed = [int(n) for n in numbers.split(",") if n.strip()]
    _post(context, {"request_type": "get", "question_number": parsed, "question_type": qtype})


@when("I send the raw body {body}")
def step_raw(context, body: str):
    _post(context, json.loads(body))


@then('the reply status is "{status}"')
def step_status(context, status: str):
    assert context.reply["status"] == status, context.reply


@then('the reply message is "{message}"')
def step_message(context, message: str):
    assert context.reply.get("message") == message, context.reply


@then("the reply content is {content}")
def step_content(context, content: str):
    assert context.reply.get("content") == json.loads(content), context.reply
