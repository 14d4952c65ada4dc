from unittest.mock import MagicMock

from kepler.exceptions import RubricSourceError

E2E_TRANSCRIPT = "Hello, my name is X. I studied computer science."


class TestScoreEndpoint:
    def test_score_success(self, client, persistence):
        response = client.post("/api/v1/score", json={"transcript": E2E_TRANSCRIPT})

        assert response.status_code == 200
        data = response.json()
        assert data["overall_score"] == 92.0
        assert data["word_count"] == 9
        assert len(data["criteria"]) == 1
        criterion = data["criteria"][0]
        assert criterion["name"] == "Introduction"
        assert criterion["keywords_found"] == ["hello", "name"]
        assert criterion["combined_score"] == 0.92
        assert criterion["feedback"].startswith("✓ All keywords found")
        assert data["transcript_id"]
        assert data["processing_time_ms"] >= 0

        stored = persistence.load_result(data["transcript_id"])
        assert stored.overall_score == 92.0
        assert stored.transcript_text == E2E_TRANSCRIPT

    def test_missing_transcript(self, client, stub_oracle):
        response = client.post("/api/v1/score", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid transcript provided"
        assert stub_oracle.calls == []

    def test_blank_transcript(self, client):
        response = client.post("/api/v1/score", json={"transcript": "  "})
        assert response.status_code == 400

    def test_non_string_transcript(self, client, stub_oracle):
        response = client.post("/api/v1/score", json={"transcript": 42})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid transcript provided"
        assert stub_oracle.calls == []

    def test_no_active_rubrics(self, client, mock_rubric_store: MagicMock):
        mock_rubric_store.list_active.return_value = []

        response = client.post("/api/v1/score", json={"transcript": "hello"})

        assert response.status_code == 404
        assert response.json()["detail"] == "No active rubrics found"

    def test_rubric_source_failure(self, client, mock_rubric_store: MagicMock, stub_oracle):
        mock_rubric_store.list_active.side_effect = RubricSourceError("disk gone")

        response = client.post("/api/v1/score", json={"transcript": "hello"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch rubrics"
        assert stub_oracle.calls == []

    def test_persistence_disabled(self, client, test_app):
        test_app.state.persistence = None

        response = client.post("/api/v1/score", json={"transcript": E2E_TRANSCRIPT})

        assert response.status_code == 200
        assert response.json()["transcript_id"] is None

    def test_persistence_failure_still_returns_score(self, client, test_app):
        broken = MagicMock()
        broken.save_result.side_effect = OSError("read-only file system")
        test_app.state.persistence = broken

        response = client.post("/api/v1/score", json={"transcript": E2E_TRANSCRIPT})

        assert response.status_code == 200
        assert response.json()["overall_score"] == 92.0
        assert response.json()["transcript_id"] is None


class TestRubricsEndpoint:
    def test_list_rubrics(self, client):
        response = client.get("/api/v1/rubrics")

        assert response.status_code == 200
        assert [r["criterion_name"] for r in response.json()] == ["Introduction"]

    def test_list_rubrics_failure(self, client, mock_rubric_store: MagicMock):
        mock_rubric_store.list_active.side_effect = RubricSourceError("bad file")
        assert client.get("/api/v1/rubrics").status_code == 500


class TestTranscriptsEndpoint:
    def test_get_and_list(self, client):
        transcript_id = client.post(
            "/api/v1/score", json={"transcript": E2E_TRANSCRIPT}
        ).json()["transcript_id"]

        record = client.get(f"/api/v1/transcripts/{transcript_id}")
        assert record.status_code == 200
        assert record.json()["overall_score"] == 92.0

        listing = client.get("/api/v1/transcripts")
        assert [r["id"] for r in listing.json()] == [transcript_id]

    def test_unknown_transcript(self, client):
        assert client.get("/api/v1/transcripts/nope").status_code == 404


class TestHealthEndpoint:
    def test_health_check(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json() == {"rubric_count": 1, "llm_reachable": True}
