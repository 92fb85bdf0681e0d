from conftest import API
from models.messaging import MsgContent

BASE = f"{API}/msg-contents"


def content_payload(**overrides):
    payload = {
        "message_type": "Registration OTP",
        "sms_template_id": "1107160000000000001",
        "sms_content": "Your OTP is {otp}",
        "mail_subject": "Verify your account",
        "mail_content": "<p>Your OTP is {otp}</p>",
        "keywords": "otp,register",
    }
    payload.update(overrides)
    return payload


def test_add_applies_channel_defaults(client, headers):
    response = client.post(f"{BASE}/add", json=content_payload(), headers=headers)
    data = response.get_json()["data"]

    assert response.status_code == 200
    assert data["serial_no"] == 1
    assert (data["send_sms"], data["send_whatsapp"], data["send_email"], data["send_notification"]) == \
        ("Yes", "Yes", "Yes", "No")
    assert data["status"] == "Active"


def test_add_requires_some_content(client, headers):
    payload = content_payload(sms_content="", mail_content=" ")
    response = client.post(f"{BASE}/add", json=payload, headers=headers)

    assert response.status_code == 422
    assert "At least one" in response.get_json()["message"]


def test_message_type_is_unique_case_insensitively(client, headers):
    client.post(f"{BASE}/add", json=content_payload(), headers=headers)

    response = client.post(f"{BASE}/add", json=content_payload(message_type="registration otp"), headers=headers)

    assert response.status_code == 409
    assert MsgContent.query.count() == 1


def test_update_detects_no_changes_then_applies_change(client, headers):
    content_id = client.post(f"{BASE}/add", json=content_payload(), headers=headers).get_json()["data"]["id"]

    body = client.put(f"{BASE}/update/{content_id}", json=content_payload(), headers=headers).get_json()
    assert body["statusCode"] == 3

    response = client.put(f"{BASE}/update/{content_id}",
                          json=content_payload(send_whatsapp="no", whatsapp_content="OTP {otp}"),
                          headers=headers)
    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["send_whatsapp"] == "No"
    assert data["whatsapp_content"] == "OTP {otp}"


def test_list_filters_by_status(client, headers):
    client.post(f"{BASE}/add", json=content_payload(), headers=headers)
    client.post(f"{BASE}/add", json=content_payload(message_type="Welcome", status="Inactive"), headers=headers)

    body = client.post(f"{BASE}/get-list", json={"status": "Inactive"}, headers=headers).get_json()

    assert body["recordsTotal"] == 2
    assert body["recordsFiltered"] == 1
    assert body["data"][0]["message_type"] == "Welcome"


def test_delete_and_change_status(client, headers):
    first = client.post(f"{BASE}/add", json=content_payload(), headers=headers).get_json()["data"]["id"]
    second = client.post(f"{BASE}/add", json=content_payload(message_type="Welcome"),
                         headers=headers).get_json()["data"]["id"]

    response = client.post(f"{BASE}/change-status/{second}", json={"status": "Inactive"}, headers=headers)
    assert response.get_json()["data"]["status"] == "Inactive"

    assert client.delete(f"{BASE}/delete/{first}", headers=headers).status_code == 200
    remaining = MsgContent.query.one()
    assert remaining.id == second
    assert remaining.serial_no == 1
