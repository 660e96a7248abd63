from datetime import timedelta

from customer_profiles.utils.jwt_handler import create_access_token


URL = "/api/customer-profile"


def test_invalid_token_is_rejected(client) -> None:
    resp = client.get(URL, headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token"


def test_expired_token_is_rejected(client, make_user) -> None:
    user_id = make_user("expired@example.com")
    token = create_access_token({"sub": str(user_id)}, timedelta(minutes=-5))
    resp = client.get(URL, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Token expired"


def test_token_for_unknown_user_is_rejected(client) -> None:
    token = create_access_token({"sub": "4242"})
    resp = client.get(URL, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "User not found"


def test_token_with_non_numeric_subject_is_rejected(client) -> None:
    token = create_access_token({"sub": "someone"})
    resp = client.get(URL, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token subject"
