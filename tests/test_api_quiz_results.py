from tests.conftest import result_payload

API = "/api/quiz-results"

def record(client, **kwargs):
    r = client.post(API, json=result_payload(**kwargs))
    assert r.status_code == 201, r.text
    return r.json()

def test_record_returns_stored_result(client):
    saved = record(client, category="math")
    assert saved["userId"] == "u1"
    assert saved["category"] == "math"
    assert saved["ip"] == "testclient"
    assert saved["timestamp"].endswith("Z")
    assert client.get(API).json() == [saved]

def test_record_rejects_invalid_payload(client):
    assert client.post(API, json=result_payload(score=6, total=5)).status_code == 400
    assert client.post(API, json=result_payload(correct_rate=120)).status_code == 400
    payload = result_payload()
    del payload["userId"]
    assert client.post(API, json=payload).status_code == 400
    assert client.get(API).json() == []

def test_status_by_ip(client):
    record(client, category="math", lang="en", userName="Bob")
    r = client.get(f"{API}/status/ip", params={"category": "math"})
    assert r.status_code == 200
    body = r.json()
    assert body["canTakeQuiz"] is False
    assert body["lang"] == "en"
    assert body["userName"] == "Bob"
    assert "message" in body

    assert client.get(f"{API}/status/ip", params={"category": "history"}).json() == {"canTakeQuiz": True}
    assert client.get(f"{API}/status/ip").json() == {"canTakeQuiz": True}

def test_status_by_ip_ignores_imperfect_scores(client):
    record(client, category="math", correct_rate=60, score=3)
    assert client.get(f"{API}/status/ip", params={"category": "math"}).json() == {"canTakeQuiz": True}

def test_status_by_user(client):
    record(client, user_id="u7", category="math")
    body = client.get(f"{API}/status/u7", params={"category": "math"}).json()
    assert body["canTakeQuiz"] is False
    assert body["userName"] == "Alice"
    assert client.get(f"{API}/status/u8", params={"category": "math"}).json() == {"canTakeQuiz": True}

def test_status_by_blank_user(client):
    r = client.get(f"{API}/status/%20")
    assert r.status_code == 400

def test_delete_all(client):
    record(client, user_id="a")
    record(client, user_id="b")
    r = client.delete(API)
    assert r.status_code == 200
    assert "message" in r.json()
    assert client.get(API).json() == []
    assert client.delete(API).status_code == 200

def test_delete_by_user(client):
    record(client, user_id="a")
    record(client, user_id="b")
    assert client.delete(f"{API}/user/a").status_code == 200
    assert [r["userId"] for r in client.get(API).json()] == ["b"]
    assert client.delete(f"{API}/user/a").status_code == 404

def test_delete_by_timestamp(client):
    saved = record(client)
    r = client.delete(f"{API}/{saved['timestamp']}")
    assert r.status_code == 200
    assert client.get(API).json() == []
    assert client.delete(f"{API}/{saved['timestamp']}").status_code == 404
