# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the quiz API client."""

import json

import httpx
import pytest

from quizroom.core.config.settings import QuizApiSettings
from quizroom.core.exceptions import ApiError, ContractError, NetworkError
from quizroom.services.quiz_api.client import QuizApiClient
from quizroom.services.quiz_api.schemas import InstructorQuizCreateOptions


def json_response(status: int, body: object) -> httpx.Response:
    return httpx.Response(status, json=body)


class TestHeaders:
    """Tests for request headers."""

    def test_token_adds_auth_and_content_type(self) -> None:
        """Test bearer and JSON headers are set when a token is given."""
        client = QuizApiClient("https://quiz.test")

        headers = client._get_headers("abc")

        assert headers["Authorization"] == "Bearer abc"
        assert headers["Content-Type"] == "application/json"

    def test_no_token_no_auth(self) -> None:
        """Test no Authorization header without a token."""
        headers = QuizApiClient("https://quiz.test")._get_headers(None)

        assert "Authorization" not in headers

    def test_from_settings(self) -> None:
        """Test the client takes base URL and timeout from settings."""
        client = QuizApiClient.from_settings(
            QuizApiSettings(base_url="https://api.example.com/", timeout=5.0)
        )

        assert client.base_url == "https://api.example.com"
        assert client.timeout == 5.0


class TestRequest:
    """Tests for request/response mapping."""

    @pytest.mark.asyncio
    async def test_success_decodes_model(self, make_client) -> None:
        """Test a 2xx body decodes into the response model."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, {"quizId": "q1", "firstQuestion": "What is a loop?"})

        client = make_client(handler)
        res = await client.create_quiz(
            "tok",
            InstructorQuizCreateOptions(name="Loops", question_limit=3, prompt="loops"),
        )

        assert res.quiz_id == "q1"
        assert res.first_question == "What is a loop?"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/instructor/quizs"
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content) == {
            "options": {"name": "Loops", "questionLimit": 3, "prompt": "loops"}
        }

    @pytest.mark.asyncio
    async def test_structured_error_becomes_api_error(self, make_client) -> None:
        """Test a non-2xx {status, error} body becomes ApiError."""
        client = make_client(lambda request: json_response(403, {"status": 403, "error": "Not your quiz"}))

        with pytest.raises(ApiError) as exc_info:
            await client.start_quiz("tok", "q1")

        assert exc_info.value.status_code == 403
        assert exc_info.value.error == "Not your quiz"

    @pytest.mark.asyncio
    async def test_unstructured_error_uses_http_status(self, make_client) -> None:
        """Test a non-JSON error body still becomes ApiError."""
        client = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(ApiError) as exc_info:
            await client.get_weekly_summary("tok")

        assert exc_info.value.status_code == 502
        assert exc_info.value.error == "Bad Gateway"

    @pytest.mark.asyncio
    async def test_transport_failure_becomes_network_error(self, make_client) -> None:
        """Test connection failures become NetworkError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        client = make_client(handler)

        with pytest.raises(NetworkError):
            await client.get_course_quizzes_for_student("tok")

    @pytest.mark.asyncio
    async def test_timeout_becomes_network_error(self, make_client) -> None:
        """Test timeouts become NetworkError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(NetworkError):
            await client.next_question("tok", "q1")

    @pytest.mark.asyncio
    async def test_bad_success_body_is_contract_error(self, make_client) -> None:
        """Test a 2xx body of the wrong shape is a ContractError, not ApiError."""
        client = make_client(lambda request: json_response(200, {"unexpected": True}))

        with pytest.raises(ContractError) as exc_info:
            await client.submit_quiz_attempt("tok", "a1", ["x"])

        assert not isinstance(exc_info.value, ApiError)

    @pytest.mark.asyncio
    async def test_non_json_success_body_is_contract_error(self, make_client) -> None:
        """Test a 2xx body that is not JSON is a ContractError."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ContractError):
            await client.next_question("tok", "q1")

    @pytest.mark.asyncio
    async def test_empty_success_body_is_accepted(self, make_client) -> None:
        """Test calls without a response body succeed on an empty 2xx."""
        client = make_client(lambda request: httpx.Response(204))

        await client.finish_quiz("tok", "q1")


class TestEndpoints:
    """Tests for individual endpoint wrappers."""

    @pytest.mark.asyncio
    async def test_edit_questions_sends_full_list(self, make_client) -> None:
        """Test the full ordered list is sent with PUT."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, {})

        client = make_client(handler)
        await client.edit_questions("tok", "q1", ["b", "a"])

        assert seen[0].method == "PUT"
        assert seen[0].url.path == "/instructor/quizs/q1/questions"
        assert json.loads(seen[0].content) == {"questions": ["b", "a"]}

    @pytest.mark.asyncio
    async def test_student_quiz_listing(self, make_client) -> None:
        """Test the quizs list decodes with optional fields."""
        body = {
            "quizs": [
                {"id": "q1", "name": "Loops", "finished": True, "attemptId": "a1", "score": 80},
                {"id": "q2", "name": "Classes"},
            ]
        }
        client = make_client(lambda request: json_response(200, body))

        res = await client.get_course_quizzes_for_student("tok")

        assert [q.id for q in res.quizzes] == ["q1", "q2"]
        assert res.quizzes[0].attempt_id == "a1"
        assert res.quizzes[1].score is None

    @pytest.mark.asyncio
    async def test_start_practice_quiz_sends_prompt_as_query(self, make_client) -> None:
        """Test the practice prompt goes in the query string."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return json_response(200, {"problem": "Reverse a list", "practiceQuizId": "p1"})

        client = make_client(handler)
        res = await client.start_practice_quiz("tok", "lists")

        assert res.practice_quiz_id == "p1"
        assert seen[0].url.params["prompt"] == "lists"

    @pytest.mark.asyncio
    async def test_weekly_summary(self, make_client) -> None:
        """Test the weekly summary decodes."""
        body = {
            "weeklySummary": {
                "days": [{"day": "MON", "averageScore": 75.5, "attempts": 2}],
                "averageScore": 75.5,
                "attempts": 2,
            }
        }
        client = make_client(lambda request: json_response(200, body))

        res = await client.get_weekly_summary("tok")

        assert res.weekly_summary.days[0].average_score == 75.5
        assert res.weekly_summary.attempts == 2
