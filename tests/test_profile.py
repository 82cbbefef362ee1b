"""Tests for therapist profile routes."""

from conftest import OTHER_THERAPIST, PARENT, THERAPIST

URL = "/api/therapist/profile"


class TestProfile:
    """Tests for /api/therapist/profile."""

    def test_get_own_profile(self, client):
        profile = client.get(URL, headers=THERAPIST).json()["profile"]
        assert profile["licenseNumber"] == "SLMC-30211"
        assert profile["languages"] == ["English", "Sinhala"]

    def test_therapists_only(self, client):
        assert client.get(URL, headers=PARENT).status_code == 403

    def test_seeded_profile_is_complete(self, client):
        assert client.get(f"{URL}/complete", headers=THERAPIST).json() == {
            "isComplete": True,
            "missingFields": [],
        }

    def test_incomplete_profile_cannot_be_marked(self, client):
        response = client.post(f"{URL}/complete", headers=OTHER_THERAPIST)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Profile is missing required fields"
        assert "phone" in body["missingFields"]
        assert "imageUrl" not in body["missingFields"]
        assert "image_url" in body["missingFields"]

    def test_filling_fields_allows_completion(self, client):
        client.post(
            URL,
            json={
                "phone": "+94 71 000 1111",
                "bio": "Occupational therapist.",
                "specialization": "Sensory processing",
                "licenseNumber": "SLMC-60001",
            },
            headers=OTHER_THERAPIST,
        )
        client.post(f"{URL}/image", json={"imageUrl": "/images/t2.png"}, headers=OTHER_THERAPIST)
        response = client.post(f"{URL}/complete", headers=OTHER_THERAPIST)
        assert response.status_code == 200
        assert response.json()["isComplete"] is True

    def test_clearing_required_field_reopens_profile(self, client):
        response = client.post(URL, json={"phone": ""}, headers=THERAPIST)
        assert response.status_code == 200
        assert response.json()["profile"]["isComplete"] is False
        assert client.get(f"{URL}/complete", headers=THERAPIST).json()["missingFields"] == ["phone"]

    def test_update_validation(self, client):
        response = client.post(URL, json={"sessionRate": -1}, headers=THERAPIST)
        assert response.status_code == 400
        assert "errors" in response.json()

    def test_client_round_trip(self, therapist_api):
        profile = therapist_api.update_profile(session_rate=5000.0)
        assert profile.session_rate == 5000.0
        assert therapist_api.get_profile().session_rate == 5000.0
        assert therapist_api.profile_completion()["isComplete"] is True
