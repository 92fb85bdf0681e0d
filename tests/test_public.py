from conftest import API


def test_health(client):
    response = client.get(f"{API}/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_missing_upload_is_json_404(client):
    response = client.get(f"{API}/uploads/products/missing.png")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_unknown_route_and_wrong_method_use_envelope(client, headers):
    response = client.get(f"{API}/does-not-exist")
    assert response.status_code == 404
    assert response.get_json()["statusCode"] == 4

    response = client.get(f"{API}/msg-apis/add", headers=headers)
    assert response.status_code == 405
    assert response.get_json()["success"] is False
