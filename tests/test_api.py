import pytest
from fastapi.testclient import TestClient
from soulmatch.api.server import app, get_db, get_settings_service, settings_service
from soulmatch.core import config
from soulmatch.services.settings_service import SettingsService


def get_test_db(test_session):
    def _get_test_db():
        return test_session
    return _get_test_db


@pytest.fixture
def client(test_session, fake_redis):
    app.dependency_overrides[get_db] = get_test_db(test_session)
    app.dependency_overrides[get_settings_service] = lambda: SettingsService(redis_client=fake_redis)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _as(profile_id):
    return {"X-User-Id": str(profile_id)}


ADMIN = {"X-Admin-Token": config.ADMIN_TOKEN}


@pytest.fixture
def marco(client, sample_profile_data):
    response = client.post("/profiles", json=sample_profile_data)
    assert response.status_code == 200
    response = client.post(f"/admin/profiles/{response.json()['id']}/premium", json={"value": True}, headers=ADMIN)
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def giulia(client, second_profile_data):
    response = client.post("/profiles", json=second_profile_data)
    assert response.status_code == 200
    return response.json()


class TestAPI:

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "soulmatch-api"

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "SoulMatch API attiva" in data["message"]
        assert data["version"] == "1.0.0"

    def test_register_profile(self, client, marco, sample_profile_data):
        assert marco["name"] == sample_profile_data["name"]
        assert marco["dob"] == "1990-01-01"
        assert marco["orientation"] == ["Eterosessuale"]
        assert marco["looking_for"]["gender"] == ["Donna"]
        assert marco["photo_url"] == sample_profile_data["photos"][0]
        assert marco["likes_count"] == 0
        assert "id" in marco

    def test_register_invalid_gender(self, client, sample_profile_data):
        data = dict(sample_profile_data, gender="Marziano")
        response = client.post("/profiles", json=data)
        assert response.status_code == 422
        assert "Genere non valido" in response.json()["detail"]

    def test_get_nonexistent_profile(self, client):
        response = client.get("/profiles/999")
        assert response.status_code == 404
        assert "non trovato" in response.json()["detail"]

    def test_update_requires_owner(self, client, marco, giulia):
        response = client.put(f"/profiles/{marco['id']}", json={"city": "Napoli"}, headers=_as(giulia["id"]))
        assert response.status_code == 403

        response = client.put(f"/profiles/{marco['id']}", json={"city": "Napoli"}, headers=_as(marco["id"]))
        assert response.status_code == 200
        assert response.json()["city"] == "Napoli"
        assert response.json()["job"] == "Ingegnere"

    def test_browse_anonymous_sees_everyone(self, client, marco, giulia):
        response = client.get("/profiles")
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == [marco["id"], giulia["id"]]
        assert all(p["match_score"] is None for p in data)

    def test_browse_reciprocal_with_score(self, client, marco, giulia):
        other = client.post("/profiles", json={
            "name": "Paolo", "surname": "Verdi", "dob": "1988-02-02", "city": "Roma",
            "gender": "Uomo", "orientation": ["Eterosessuale"],
        }).json()

        response = client.get("/profiles", headers=_as(marco["id"]))
        assert response.status_code == 200
        data = response.json()
        assert [p["id"] for p in data] == [giulia["id"]]
        assert data[0]["match_score"] == 82
        assert other["id"] not in [p["id"] for p in data]

    def test_browse_filters(self, client, marco, giulia):
        response = client.get("/profiles", params={"gender": "Donna"})
        assert [p["id"] for p in response.json()] == [giulia["id"]]

        response = client.get("/profiles", params={"gender": "Tutti", "city": "roma"})
        assert len(response.json()) == 2

    def test_compatibility_endpoints(self, client, marco, giulia, sample_profile_data, second_profile_data):
        response = client.get(f"/profiles/{giulia['id']}/compatibility", headers=_as(marco["id"]))
        assert response.status_code == 200
        assert response.json() == {"score": 82, "mutual": True}

        viewer = {k: sample_profile_data[k] for k in ("dob", "city", "hobbies", "gender", "orientation")}
        candidate = {k: second_profile_data[k] for k in ("dob", "city", "hobbies", "gender", "orientation")}
        response = client.post("/compatibility", json={"viewer": viewer, "candidate": candidate})
        assert response.status_code == 200
        assert response.json()["score"] == 82
        assert response.json()["mutual"] is True

        response = client.post("/compatibility", json={"viewer": viewer})
        assert response.json()["score"] == 0

    def test_interaction_requires_user(self, client, giulia):
        response = client.post(f"/profiles/{giulia['id']}/interactions", json={"type": "like"})
        assert response.status_code == 403
        assert response.json()["detail"] == "Devi essere iscritto!"

    def test_interaction_toggle(self, client, marco, giulia):
        url = f"/profiles/{giulia['id']}/interactions"

        response = client.post(url, json={"type": "like"}, headers=_as(marco["id"]))
        assert response.json() == {"success": True, "toggled": False}

        state = client.get(url, headers=_as(marco["id"])).json()
        assert state == {"likes_count": 1, "hearts_count": 0, "kinds": ["like"]}

        response = client.post(url, json={"type": "like"}, headers=_as(marco["id"]))
        assert response.json() == {"success": True, "toggled": True}
        assert client.get(url).json()["likes_count"] == 0

    def test_interaction_unknown_type(self, client, marco, giulia):
        response = client.post(f"/profiles/{giulia['id']}/interactions",
                               json={"type": "wink"}, headers=_as(marco["id"]))
        assert response.status_code == 422

    def test_chat_request_flow(self, client, marco, giulia):
        response = client.post("/chat-requests", json={"to_profile_id": giulia["id"], "message": "Ciao!"},
                               headers=_as(marco["id"]))
        assert response.status_code == 200
        request_id = response.json()["id"]
        assert response.json()["status"] == "pending"

        response = client.post("/chat-requests", json={"to_profile_id": giulia["id"]}, headers=_as(marco["id"]))
        assert response.status_code == 409
        assert response.json()["detail"] == "Richiesta già inviata."

        pending = client.get("/chat-requests", headers=_as(giulia["id"])).json()
        assert [r["id"] for r in pending] == [request_id]
        assert pending[0]["name"] == "Marco"

        response = client.patch(f"/chat-requests/{request_id}", json={"status": "approved"},
                                headers=_as(marco["id"]))
        assert response.status_code == 403

        response = client.patch(f"/chat-requests/{request_id}", json={"status": "approved"},
                                headers=_as(giulia["id"]))
        assert response.status_code == 200
        assert response.json()["status"] == "approved"

        status = client.get(f"/chat-status/{marco['id']}/{giulia['id']}").json()
        assert status == {"status": "approved"}
        assert client.get(f"/chat-status/{giulia['id']}/{marco['id']}").json() == {"status": "none"}

    def test_chat_request_requires_premium(self, client, marco, giulia):
        response = client.post("/chat-requests", json={"to_profile_id": marco["id"]}, headers=_as(giulia["id"]))
        assert response.status_code == 403
        assert "Premium" in response.json()["detail"]

    def test_instant_chat_needs_online_target(self, client, marco, giulia):
        body = {"to_profile_id": giulia["id"], "instant": True}
        response = client.post("/chat-requests", json=body, headers=_as(marco["id"]))
        assert response.status_code == 409

        client.post(f"/profiles/{giulia['id']}/online", json={"online": True}, headers=_as(giulia["id"]))
        response = client.post("/chat-requests", json=body, headers=_as(marco["id"]))
        assert response.status_code == 200

    def test_one_post_per_day(self, client, marco, giulia):
        response = client.post("/posts", json={"photos": ["p.jpg"], "description": "Oggi"}, headers=_as(marco["id"]))
        assert response.status_code == 200
        post = response.json()
        assert post["author_name"] == "Marco"

        response = client.post("/posts", json={"description": "Ancora"}, headers=_as(marco["id"]))
        assert response.status_code == 429
        assert response.json()["detail"] == "Puoi pubblicare solo un post al giorno."

        response = client.post(f"/posts/{post['id']}/interactions", json={"type": "heart"}, headers=_as(giulia["id"]))
        assert response.json()["toggled"] is False

        feed = client.get("/posts", headers=_as(giulia["id"])).json()
        assert feed[0]["hearts_count"] == 1
        assert feed[0]["has_hearted"] is True
        assert client.get(f"/profiles/{giulia['id']}/posts").json() == []

    def test_banner_board(self, client, marco, giulia):
        response = client.post("/banner-messages", json={"message": "Aperitivo stasera?"}, headers=_as(marco["id"]))
        assert response.status_code == 200
        banner_id = response.json()["id"]

        client.post(f"/banner-messages/{banner_id}/replies", json={"reply_text": "Ci sto"}, headers=_as(giulia["id"]))

        board = client.get("/banner-messages").json()
        assert [m["id"] for m in board] == [banner_id]
        detail = client.get(f"/profiles/{marco['id']}/banner").json()
        assert detail["replies"][0]["reply_text"] == "Ci sto"

        assert client.delete(f"/banner-messages/{banner_id}").status_code == 403
        assert client.delete(f"/banner-messages/{banner_id}", headers=ADMIN).status_code == 200
        assert client.get("/banner-messages").json() == []

    def test_admin_requires_token(self, client, marco):
        assert client.get("/admin/profiles").status_code == 403
        assert client.get("/admin/profiles", headers={"X-Admin-Token": "sbagliato"}).status_code == 403

        response = client.post(f"/admin/profiles/{marco['id']}/block", json={"value": True}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["is_blocked"] is True
        assert client.get("/profiles").json() == []

    def test_admin_delete_profile(self, client, marco, giulia):
        client.post(f"/profiles/{giulia['id']}/interactions", json={"type": "like"}, headers=_as(marco["id"]))

        response = client.delete(f"/profiles/{marco['id']}", headers=ADMIN)
        assert response.status_code == 200
        assert client.get(f"/profiles/{marco['id']}").status_code == 404
        assert client.get(f"/profiles/{giulia['id']}").json()["likes_count"] == 0

    def test_settings(self, client):
        response = client.get("/settings/home_slider")
        assert response.status_code == 200
        assert response.json() == config.DEFAULT_HOME_SLIDER

        assert client.post("/settings/home_slider", json={"value": ["x.jpg"]}).status_code == 403
        response = client.post("/settings/home_slider", json={"value": ["x.jpg"]}, headers=ADMIN)
        assert response.status_code == 200
        assert client.get("/settings/home_slider").json() == ["x.jpg"]

        assert client.get("/settings/sconosciuta").status_code == 404

    def test_chat_decision_is_final(self, client, marco, giulia):
        request_id = client.post("/chat-requests", json={"to_profile_id": giulia["id"]},
                                 headers=_as(marco["id"])).json()["id"]
        url = f"/chat-requests/{request_id}"

        assert client.patch(url, json={"status": "approved"}, headers=_as(giulia["id"])).status_code == 200

        response = client.patch(url, json={"status": "rejected"}, headers=_as(giulia["id"]))
        assert response.status_code == 409
        assert response.json()["detail"] == "La richiesta è già stata gestita."
        assert client.get(f"/chat-status/{marco['id']}/{giulia['id']}").json() == {"status": "approved"}

    def test_unknown_profile_posts_and_banner(self, client):
        response = client.get("/profiles/999/posts")
        assert response.status_code == 404
        assert "non trovato" in response.json()["detail"]

        assert client.get("/profiles/999/banner").status_code == 404

    def test_premium_is_admin_only(self, client, giulia):
        response = client.put(f"/profiles/{giulia['id']}", json={"is_paid": True}, headers=_as(giulia["id"]))
        assert response.status_code == 200
        assert response.json()["is_paid"] is False

        response = client.post(f"/admin/profiles/{giulia['id']}/premium", json={"value": True})
        assert response.status_code == 403

        response = client.post(f"/admin/profiles/{giulia['id']}/premium", json={"value": True}, headers=ADMIN)
        assert response.json()["is_paid"] is True

    def test_settings_service_is_shared(self):
        assert get_settings_service() is settings_service
        assert get_settings_service() is get_settings_service()
