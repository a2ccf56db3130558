"""End-to-end tests of the HTTP API on the in-memory stores."""

import pytest
from fastapi.testclient import TestClient

from tech_radar.api.dependencies import get_identity
from tech_radar.api.main import create_app
from tech_radar.bootstrap.radar import set_radar_config, set_stores
from tech_radar.config import RadarConfig
from tech_radar.infrastructure.observability import CORRELATION_HEADER
from tech_radar.infrastructure.stubs import (
    IdentityCheckerStub,
    VoteStoreStub,
    VotingEventStoreStub,
)

pytestmark = pytest.mark.integration

RUST = "tech-rust"
K8S = "tech-kubernetes"


@pytest.fixture
def client() -> TestClient:
    set_radar_config(RadarConfig(identity_tokens={"tok-a": "alice"}))
    event_store = VotingEventStoreStub()
    set_stores(event_store, VoteStoreStub(event_store))
    return TestClient(create_app())


def _open_event(client: TestClient, name: str = "Radar") -> str:
    response = client.post("/v1/voting-events", json={"name": name})
    assert response.status_code == 201
    event_id = response.json()["id"]
    assert client.post(f"/v1/voting-events/{event_id}/open").status_code == 200
    return event_id


def _ballot(event_id: str, first_name: str, rust: str, **extra: object) -> dict:
    return {
        "voting_event_id": event_id,
        "voter": {"first_name": first_name},
        "votes": [
            {"technology_id": RUST, "ring": rust, **extra},
            {"technology_id": K8S, "ring": "adopt"},
        ],
    }


def test_health(client: TestClient) -> None:
    response = client.get("/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["store_backend"] == "memory"


def test_voting_flow(client: TestClient) -> None:
    event_id = _open_event(client)

    first = client.post("/v1/votes", json=_ballot(event_id, "Ann", "HOLD"))
    second = client.post(
        "/v1/votes", json=_ballot(event_id, "Bob", "adopt", comment="ready")
    )
    tallies = client.get("/v1/votes/aggregate", params={"voting_event_id": event_id})
    blips = client.post(f"/v1/voting-events/{event_id}/blips")
    advanced = client.post(f"/v1/voting-events/{event_id}/next-flow-step")

    assert first.status_code == 201
    assert [v["ring"] for v in first.json()] == ["hold", "adopt"]
    assert second.json()[0]["comments"][0]["text"] == "ready"
    rust_tally = tallies.json()[0]
    assert rust_tally["technology_name"] == "Rust"
    assert rust_tally["for_revote"] is True
    assert [b["technology_name"] for b in blips.json()] == ["Rust", "Kubernetes"]
    assert blips.json()[0]["for_revote"] is True
    body = advanced.json()
    assert body["round"] == 2
    rust = next(t for t in body["technologies"] if t["id"] == RUST)
    assert rust["voting_result"]["round"] == 1
    assert rust["voting_result"]["for_revote"] is True


def test_duplicate_ballot_is_409_problem(client: TestClient) -> None:
    event_id = _open_event(client)
    client.post("/v1/votes", json=_ballot(event_id, "Ann", "hold"))

    response = client.post("/v1/votes", json=_ballot(event_id, " ANN ", "trial"))

    assert response.status_code == 409
    problem = response.json()["detail"]
    assert problem["type"] == "urn:tech-radar:error:duplicate-vote"
    assert problem["voter_key"] == "ann|"
    has_voted = client.get(
        "/v1/votes/has-voted",
        params={"voting_event_id": event_id, "first_name": "ann"},
    )
    assert has_voted.json() == {"has_voted": True}


def test_missing_event_is_404(client: TestClient) -> None:
    response = client.get("/v1/voting-events/nope")

    assert response.status_code == 404
    assert response.json()["detail"]["type"].endswith("event-not-found")


def test_invalid_ring_is_400(client: TestClient) -> None:
    event_id = _open_event(client)

    response = client.post("/v1/votes", json=_ballot(event_id, "Ann", "maybe"))

    assert response.status_code == 400
    assert response.json()["detail"]["type"].endswith("validation")


def test_closed_event_rejects_ballot(client: TestClient) -> None:
    event_id = _open_event(client)
    client.post(f"/v1/voting-events/{event_id}/close")

    response = client.post("/v1/votes", json=_ballot(event_id, "Ann", "hold"))

    assert response.status_code == 409
    problem = response.json()["detail"]
    assert problem["status"] == 409
    assert problem["error_status"] == "closed"


def test_cancel_and_undo(client: TestClient) -> None:
    event_id = _open_event(client)

    cancel = client.post(f"/v1/voting-events/{event_id}/cancel")
    hidden = client.get("/v1/voting-events")
    undo = client.post(f"/v1/voting-events/{event_id}/undo-cancel")

    assert cancel.status_code == 204
    assert hidden.json() == []
    assert undo.json()["status"] == "open"


def test_correlation_id_echoed(client: TestClient) -> None:
    response = client.get("/v1/health", headers={CORRELATION_HEADER: "req-42"})

    assert response.headers[CORRELATION_HEADER] == "req-42"


def test_invalid_request_timeout_header(client: TestClient) -> None:
    response = client.get("/v1/voting-events", headers={"X-Request-Timeout": "0"})

    assert response.status_code == 400
    assert response.json()["detail"]["type"].endswith("invalid-request-timeout")


class TestRecommendations:
    """Recommendation lock over HTTP."""

    def test_token_identity_overrides_body(self, client: TestClient) -> None:
        event_id = _open_event(client)

        response = client.put(
            f"/v1/voting-events/{event_id}/recommendation-author",
            json={"technology_name": "Rust", "author": "mallory"},
            headers={"Authorization": "Bearer tok-a"},
        )

        rust = next(t for t in response.json()["technologies"] if t["id"] == RUST)
        assert rust["recommendation_author"] == "alice"

    def test_second_author_conflicts(self, client: TestClient) -> None:
        event_id = _open_event(client)
        url = f"/v1/voting-events/{event_id}/recommendation-author"
        client.put(url, json={"technology_name": "Rust", "author": "A"})

        response = client.put(url, json={"technology_name": "Rust", "author": "B"})

        assert response.status_code == 409
        problem = response.json()["detail"]
        assert problem["current_author"] == "A"

    def test_write_and_reset(self, client: TestClient) -> None:
        event_id = _open_event(client)
        base = f"/v1/voting-events/{event_id}"

        written = client.put(
            f"{base}/recommendation",
            json={
                "technology_name": "Rust",
                "author": "A",
                "text": "worth a trial",
                "ring": "Trial",
            },
        )
        refused = client.post(
            f"{base}/recommendation/reset",
            json={"technology_name": "Rust", "requester": "B"},
        )
        reset = client.post(
            f"{base}/recommendation/reset",
            json={"technology_name": "Rust", "requester": "A"},
        )

        rust = next(t for t in written.json()["technologies"] if t["id"] == RUST)
        assert rust["recommendation"]["ring"] == "trial"
        assert refused.status_code == 409
        rust = next(t for t in reset.json()["technologies"] if t["id"] == RUST)
        assert rust["recommendation_author"] is None

    def test_identity_required(self, client: TestClient) -> None:
        event_id = _open_event(client)

        response = client.put(
            f"/v1/voting-events/{event_id}/recommendation-author",
            json={"technology_name": "Rust"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["type"].endswith("missing-identity")


def test_vote_comment_reply(client: TestClient) -> None:
    event_id = _open_event(client)
    [vote, _] = client.post(
        "/v1/votes", json=_ballot(event_id, "Ann", "hold", comment="early")
    ).json()

    reply = client.post(
        f"/v1/votes/{vote['id']}/comment/replies",
        json={"target_comment_id": vote["comments"][0]["id"], "text": "agreed"},
    )
    thread = client.get(f"/v1/votes/technologies/{RUST}/comments")

    assert reply.status_code == 201
    assert reply.json()["vote"]["version"] == 1
    assert thread.json()[0]["replies"][0]["text"] == "agreed"


def test_identity_checker_override(client: TestClient) -> None:
    app = client.app
    app.dependency_overrides[get_identity] = lambda: IdentityCheckerStub(
        {"tok-b": "bob"}
    )
    event_id = _open_event(client)

    response = client.put(
        f"/v1/voting-events/{event_id}/recommendation-author",
        json={"technology_name": "Rust"},
        headers={"Authorization": "Bearer tok-b"},
    )

    rust = next(t for t in response.json()["technologies"] if t["id"] == RUST)
    assert rust["recommendation_author"] == "bob"
