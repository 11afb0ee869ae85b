"""Tests for the nominations API (FastAPI REST)."""

from __future__ import annotations

import io

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from starlette.datastructures import Headers, UploadFile

from nominations.api.app import create_app
from nominations.api.routes.media import read_attachment
from nominations.clients.feedback import FeedbackClient
from nominations.clients.trades import TradeDirectoryClient
from nominations.config import FeedbackConfig, NominationsConfig, TradeDirectoryConfig
from nominations.models import NominationSubmission, SubmissionReceipt


JUSTIFICATION = (
    "Priya rebuilt our collapsed garden wall in a weekend, kept us updated every "
    "evening and charged exactly what she quoted."
)


def _directory(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/trades":
        return httpx.Response(200, json={
            "data": [{"companyId": 101, "name": "Priya Builds", "location": "Bath"}],
            "page": 1,
            "size": 10,
            "total": 1,
        })
    if request.url.path == "/trades/101":
        return httpx.Response(200, json={"companyId": 101, "name": "Priya Builds"})
    return httpx.Response(404, json={"message": "not found"})


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture
def config() -> NominationsConfig:
    return NominationsConfig(
        trades=TradeDirectoryConfig(base_url="http://trades.test", search_debounce=0),
        feedback=FeedbackConfig(base_url="", idle_seconds=10),
        allowed_origins=["http://test"],
        max_media_bytes=1024 * 1024,
    )


@pytest.fixture
def submissions() -> list[NominationSubmission]:
    return []


@pytest.fixture
def app(config, submissions):
    """Create the FastAPI app with injected test dependencies."""

    async def submitter(submission: NominationSubmission) -> SubmissionReceipt:
        submissions.append(submission)
        return SubmissionReceipt(reference="nom-api", submitted_at=submission.submitted_at)

    return create_app(
        config=config,
        trade_client=TradeDirectoryClient(config.trades, transport=httpx.MockTransport(_directory)),
        feedback_client=FeedbackClient(config.feedback),
        submitter=submitter,
    )


@pytest_asyncio.fixture
async def client(app):
    """Create an async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def session_id(client: AsyncClient) -> str:
    resp = await client.post("/api/sessions")
    assert resp.status_code == 201
    return resp.json()["session_id"]


async def _complete_steps(client: AsyncClient, session_id: str) -> None:
    base = f"/api/sessions/{session_id}"
    await client.get(f"{base}/trades", params={"term": "priya"})
    await client.post(f"{base}/trades/select", json={"company_id": "101", "name": "Priya Builds"})
    await client.post(f"{base}/steps/next")
    await client.put(f"{base}/nominator", json={"name": "Tom", "email": "tom@example.com"})
    await client.post(f"{base}/steps/next")
    await client.put(f"{base}/category", json={"category_id": "quality"})
    await client.post(f"{base}/steps/next")
    await client.put(f"{base}/justification", json={"text": JUSTIFICATION})


# ── Health & Info ─────────────────────────────────────────────────────────


class TestHealth:
    @pytest.mark.asyncio
    async def test_health_check(self, client: AsyncClient):
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_system_info(self, client: AsyncClient, session_id: str):
        resp = await client.get("/api/info")
        assert resp.status_code == 200
        data = resp.json()
        assert data["version"] == "0.1.0"
        assert data["active_sessions"] == 1


# ── Sessions ──────────────────────────────────────────────────────────────


class TestSessions:
    @pytest.mark.asyncio
    async def test_new_session_is_empty(self, client: AsyncClient, session_id: str):
        resp = await client.get(f"/api/sessions/{session_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["current_step"] == 1
        assert not data["can_advance"]
        assert data["draft"]["nominator"]["relationship"] == "customer"

    @pytest.mark.asyncio
    async def test_unknown_session(self, client: AsyncClient):
        resp = await client.get("/api/sessions/nope")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_close_session(self, client: AsyncClient, session_id: str):
        resp = await client.delete(f"/api/sessions/{session_id}")
        assert resp.status_code == 204
        resp = await client.delete(f"/api/sessions/{session_id}")
        assert resp.status_code == 404


# ── Nominee ───────────────────────────────────────────────────────────────


class TestNominee:
    @pytest.mark.asyncio
    async def test_search_and_select(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}"
        resp = await client.get(f"{base}/trades", params={"term": "priya"})
        assert resp.status_code == 200
        results = resp.json()["results"]
        assert results[0]["company_id"] == "101"

        resp = await client.post(f"{base}/trades/select", json=results[0])
        data = resp.json()
        assert data["nominee"]["company_name"] == "Priya Builds"
        assert data["profile"]["is_valid_member"] is True

    @pytest.mark.asyncio
    async def test_select_unknown_trade(self, client: AsyncClient, session_id: str):
        resp = await client.post(
            f"/api/sessions/{session_id}/trades/select",
            json={"company_id": "404", "name": "Ghost Ltd"},
        )
        data = resp.json()
        assert data["profile"]["is_valid_member"] is False
        assert data["profile_error"] is None

    @pytest.mark.asyncio
    async def test_manual_entry_and_clear(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}"
        await client.post(f"{base}/trades/select", json={"company_id": "101", "name": "Priya Builds"})
        resp = await client.delete(f"{base}/trades/selection")
        assert resp.json()["company_id"] == ""

        resp = await client.put(f"{base}/nominee", json={"trade_name": "Stonemason"})
        data = resp.json()
        assert data["company_name"] == "Priya Builds"
        assert data["trade_name"] == "Stonemason"


# ── Steps & categories ────────────────────────────────────────────────────


class TestSteps:
    @pytest.mark.asyncio
    async def test_next_blocked_when_incomplete(self, client: AsyncClient, session_id: str):
        resp = await client.post(f"/api/sessions/{session_id}/steps/next")
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_jump_ahead_blocked(self, client: AsyncClient, session_id: str):
        resp = await client.post(f"/api/sessions/{session_id}/steps/3")
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_jump_cannot_skip_unfilled_steps(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}"
        await client.put(f"{base}/category", json={"category_id": "quality"})
        resp = await client.post(f"{base}/steps/3")
        assert resp.status_code == 409

        resp = await client.get(f"{base}/summary")
        data = resp.json()
        assert data["current_step"] == 1
        assert data["rows"][1]["complete"] is False

    @pytest.mark.asyncio
    async def test_self_nomination_category_rules(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}"
        await client.put(f"{base}/nominator", json={"relationship": "self"})

        resp = await client.get(f"{base}/categories")
        ids = [c["id"] for c in resp.json()]
        assert "tradesperson" not in ids
        assert "rising-star" in ids

        resp = await client.put(f"{base}/category", json={"category_id": "tradesperson"})
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_category_warns(self, client: AsyncClient, session_id: str):
        resp = await client.put(
            f"/api/sessions/{session_id}/category", json={"category_id": "best-apprentice"}
        )
        assert resp.status_code == 200
        assert resp.json()["warning"] is not None

    @pytest.mark.asyncio
    async def test_summary(self, client: AsyncClient, session_id: str):
        await _complete_steps(client, session_id)
        resp = await client.get(f"/api/sessions/{session_id}/summary")
        data = resp.json()
        assert data["current_step"] == 4
        assert data["completion_percentage"] == 80
        assert data["rows"][0]["can_edit"] is True
        assert data["text"].startswith("Nominating: Priya Builds")


# ── Justification ─────────────────────────────────────────────────────────


class TestJustification:
    @pytest.mark.asyncio
    async def test_short_text_feedback(self, client: AsyncClient, session_id: str):
        resp = await client.put(
            f"/api/sessions/{session_id}/justification", json={"text": "Great job"}
        )
        data = resp.json()
        assert data["feedback"]["quality"] == "too_short"
        assert data["state"] == "idle"

    @pytest.mark.asyncio
    async def test_check_quality(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}/justification"
        await client.put(base, json={"text": JUSTIFICATION})
        resp = await client.post(f"{base}/check")
        data = resp.json()
        assert data["feedback"]["quality"] == "average"
        assert data["show_suggestions"] is True

        resp = await client.post(f"{base}/suggestions/toggle")
        assert resp.json()["show_suggestions"] is False

    @pytest.mark.asyncio
    async def test_focus_arms_idle_timer(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}/justification"
        await client.post(f"{base}/focus")
        resp = await client.put(base, json={"text": JUSTIFICATION})
        assert resp.json()["state"] == "pending"


# ── Media ─────────────────────────────────────────────────────────────────


class TestMedia:
    @pytest.mark.asyncio
    async def test_oversized_file_rejected_rest_kept(self, client: AsyncClient, session_id: str):
        resp = await client.post(
            f"/api/sessions/{session_id}/media",
            files=[
                ("files", ("huge.jpg", b"x" * (1024 * 1024 + 10), "image/jpeg")),
                ("files", ("small.png", b"\x89PNG", "image/png")),
            ],
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["accepted"] == ["small.png"]
        assert data["rejected"] == [{"filename": "huge.jpg", "reason": "exceeds 1MB"}]
        assert [m["filename"] for m in data["media"]] == ["small.png"]

    @pytest.mark.asyncio
    async def test_read_is_capped_at_limit(self):
        class RecordingFile(io.BytesIO):
            def __init__(self, data: bytes) -> None:
                super().__init__(data)
                self.reads: list[int] = []

            def read(self, size: int = -1) -> bytes:
                self.reads.append(size)
                return super().read(size)

        body = RecordingFile(b"x" * 5000)
        upload = UploadFile(body, filename="big.jpg", headers=Headers({"content-type": "image/jpeg"}))
        attachment = await read_attachment(upload, max_bytes=100)
        assert attachment.size == 101
        assert body.reads == [101]

    @pytest.mark.asyncio
    async def test_non_image_body_not_read(self):
        body = io.BytesIO(b"%PDF" * 1000)
        upload = UploadFile(body, filename="quote.pdf", headers=Headers({"content-type": "application/pdf"}))
        attachment = await read_attachment(upload, max_bytes=100)
        assert attachment.data == b""
        assert body.tell() == 0

    @pytest.mark.asyncio
    async def test_upload_mixed_batch(self, client: AsyncClient, session_id: str):
        resp = await client.post(
            f"/api/sessions/{session_id}/media",
            files=[
                ("files", ("wall.png", b"\x89PNG", "image/png")),
                ("files", ("quote.pdf", b"%PDF", "application/pdf")),
            ],
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["accepted"] == ["wall.png"]
        assert data["rejected"][0]["reason"] == "not an image"
        assert len(data["media"]) == 1

    @pytest.mark.asyncio
    async def test_remove_media(self, client: AsyncClient, session_id: str):
        base = f"/api/sessions/{session_id}/media"
        await client.post(base, files=[("files", ("a.jpg", b"jpg", "image/jpeg"))])
        resp = await client.delete(f"{base}/0")
        assert resp.json() == []
        resp = await client.delete(f"{base}/0")
        assert resp.status_code == 404


# ── Submission ────────────────────────────────────────────────────────────


class TestSubmission:
    @pytest.mark.asyncio
    async def test_submit_incomplete(self, client: AsyncClient, session_id: str):
        resp = await client.post(f"/api/sessions/{session_id}/submit")
        assert resp.status_code == 409

    @pytest.mark.asyncio
    async def test_submit_and_reset(self, client: AsyncClient, session_id: str, submissions):
        await _complete_steps(client, session_id)
        resp = await client.post(f"/api/sessions/{session_id}/submit")
        assert resp.status_code == 200
        assert resp.json()["reference"] == "nom-api"
        assert submissions[0].draft.nominee.company_id == "101"

        resp = await client.get(f"/api/sessions/{session_id}")
        data = resp.json()
        assert data["current_step"] == 1
        assert data["draft"]["justification"] == ""

    @pytest.mark.asyncio
    async def test_score(self, client: AsyncClient, session_id: str):
        await _complete_steps(client, session_id)
        resp = await client.post(f"/api/sessions/{session_id}/score")
        assert resp.status_code == 200
        assert resp.json()["overall_score"] == 75
