def test_health_endpoints(client) -> None:
    resp = client.get("/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"

    db_resp = client.get("/health/db")
    assert db_resp.status_code == 200
    assert db_resp.json()["orm"] == "ok"
    assert db_resp.json()["orm_db_url"].startswith("sqlite")
