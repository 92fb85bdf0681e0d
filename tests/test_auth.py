from datetime import datetime, timedelta

import jwt

from conftest import API, BOT_UA, BROWSER_UA, make_user
from models import db
from models.login_history import LoginHistory
from models.otp_verification import OtpVerification
from models.user import TempUser, User
from models.wallet import Wallet
from utils.auth_utils import generate_token

REGISTRATION = {
    "name": "Asha Verma",
    "email": "Asha@Example.com",
    "password": "Secret@1",
    "mobile_no": "9876543210",
}


def register(client, **overrides):
    payload = dict(REGISTRATION, **overrides)
    return client.post(f"{API}/auth/register", json=payload)


def verify(client, token, email_otp="123456", mobile_otp="123456"):
    return client.post(f"{API}/auth/verify-otp", json={
        "tempUserId": token,
        "emailOtp": email_otp,
        "mobileOtp": mobile_otp,
    })


def login(client, email, password, user_agent=BROWSER_UA, **extra):
    payload = {"email": email, "password": password}
    payload.update(extra)
    return client.post(f"{API}/auth/login", json=payload, headers={"User-Agent": user_agent})


# ---------- register ----------

def test_register_stages_temp_user_and_hashed_otps(client, fixed_otp):
    response = register(client)
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["statusCode"] == 1
    assert body["data"]["email"] == "as****@example.com"
    assert body["data"]["mobile"] == "****3210"
    assert body["data"]["tempUserId"]

    temp_user = TempUser.query.one()
    assert temp_user.email == "asha@example.com"
    assert temp_user.password != REGISTRATION["password"]

    rows = OtpVerification.query.filter_by(user_id=temp_user.id).all()
    assert sorted(row.type for row in rows) == ["email", "mobile"]
    assert all(row.otp_hash != fixed_otp and len(row.otp_hash) == 64 for row in rows)


def test_register_rejects_duplicate_pending_email(client, fixed_otp):
    assert register(client).status_code == 200
    response = register(client, email="asha@example.com")

    assert response.status_code == 409
    assert response.get_json()["success"] is False
    assert TempUser.query.count() == 1


def test_register_rejects_existing_user_email(client, admin_user, fixed_otp):
    response = register(client, email=admin_user.email)
    assert response.status_code == 409
    assert TempUser.query.count() == 0


def test_register_validation_reports_first_error(client):
    response = register(client, password="weakpass")
    body = response.get_json()

    assert response.status_code == 422
    assert body["statusCode"] == 2
    assert "uppercase" in body["message"]

    response = register(client, mobile_no="12345")
    assert response.status_code == 422
    assert "10 digits" in response.get_json()["message"]


def test_register_rejects_non_string_password(client):
    response = register(client, password=12345678)

    assert response.status_code == 422
    assert response.get_json()["message"] == "Password must be a string"


def test_register_purges_expired_pending_registrations(client, fixed_otp):
    stale = TempUser(
        name="Old",
        email="old@example.com",
        mobile_no="9000000000",
        password="x",
        created_at=datetime.utcnow() - timedelta(hours=30),
    )
    db.session.add(stale)
    db.session.flush()
    db.session.add(OtpVerification(user_id=stale.id, type="email", otp_hash="0" * 64,
                                   expires_at=datetime.utcnow()))
    db.session.commit()
    stale_id = stale.id

    assert register(client).status_code == 200
    assert db.session.get(TempUser, stale_id) is None
    assert OtpVerification.query.filter_by(user_id=stale_id).count() == 0


# ---------- verify-otp ----------

def test_verify_otp_creates_user_and_wallet(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]

    response = verify(client, token)
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is True
    assert "****3210" in body["message"]

    user = User.query.filter_by(email="asha@example.com").one()
    assert user.role == "user"
    assert user.status == "active"
    assert user.otp_status == "verified"
    assert user.check_password(REGISTRATION["password"])
    assert TempUser.query.count() == 0

    wallet = Wallet.query.filter_by(user_id=user.id).one()
    assert float(wallet.free_balance) == 100
    assert float(wallet.balance) == 0
    assert wallet.balance_expire_at > datetime.utcnow() + timedelta(days=364)
    assert OtpVerification.query.filter_by(is_verified=True).count() == 2


def test_verify_otp_wrong_email_code_changes_nothing(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]

    response = verify(client, token, email_otp="654321")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid Email OTP"
    assert TempUser.query.count() == 1
    assert User.query.count() == 0
    assert OtpVerification.query.filter_by(is_verified=True).count() == 0


def test_verify_otp_wrong_mobile_code(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]

    response = verify(client, token, mobile_otp="111111")

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid Mobile OTP"
    assert OtpVerification.query.filter_by(is_verified=True).count() == 0


def test_verify_otp_expired_code(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]
    OtpVerification.query.filter_by(type="email").update(
        {"expires_at": datetime.utcnow() - timedelta(minutes=1)}
    )
    db.session.commit()

    response = verify(client, token)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Email OTP expired"
    assert User.query.count() == 0


def test_verify_otp_already_used_code(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]
    OtpVerification.query.filter_by(type="mobile").update({"is_verified": True})
    db.session.commit()

    response = verify(client, token)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Mobile OTP already verified"
    assert TempUser.query.count() == 1


def test_verify_otp_twice_reports_already_verified(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]
    assert verify(client, token).status_code == 200

    response = verify(client, token)

    assert response.status_code == 200
    assert response.get_json()["message"] == "User already verified"
    assert User.query.count() == 1


def test_verify_otp_rejects_bad_token(client):
    response = verify(client, "not-a-token")
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_verify_otp_requires_six_digit_codes(client):
    response = verify(client, "token", email_otp="12")
    assert response.status_code == 422
    assert response.get_json()["message"] == "Email OTP must be 6 digits"


# ---------- login ----------

def test_login_success_returns_token_and_records_history(client, app, admin_user):
    response = login(client, "admin@example.com", "Admin@123", latitude="28.61", longitude="77.20")
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is True
    claims = jwt.decode(body["data"]["token"], app.config["JWT_SECRET_KEY"], algorithms=["HS256"])
    assert claims["id"] == admin_user.id
    assert claims["uuid"] == admin_user.uuid
    assert claims["role"] == "admin"

    history = LoginHistory.query.one()
    assert history.status == "Success"
    assert history.latitude == 28.61
    assert history.browser.startswith("Chrome")


def test_login_wrong_password_records_failure_without_token(client, admin_user):
    response = login(client, "admin@example.com", "Wrong@123")
    body = response.get_json()

    assert response.status_code == 401
    assert body["success"] is False
    assert "data" not in body
    assert LoginHistory.query.filter_by(status="Failed", user_id=admin_user.id).count() == 1


def test_login_unknown_email_is_not_found(client):
    response = login(client, "nobody@example.com", "Secret@1")
    assert response.status_code == 404


def test_login_rejects_bot_user_agent(client, admin_user):
    response = login(client, "admin@example.com", "Admin@123", user_agent=BOT_UA)

    assert response.status_code == 400
    assert response.get_json()["message"] == "Unidentified User Agent"
    assert LoginHistory.query.count() == 0


def test_login_pending_registration_reissues_otp(client, fixed_otp):
    register(client)
    before = OtpVerification.query.count()

    response = login(client, "asha@example.com", "Secret@1")
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is False
    assert body["statusCode"] == 5
    assert body["verify"] == "mobile"
    assert body["info"] == "****3210"
    assert OtpVerification.query.count() == before + 1


def test_login_blocks_unknown_role_and_inactive_account(client, app):
    make_user(email="ops@example.com", password="Ops@1234", role="support", with_wallet=False)
    make_user(email="gone@example.com", password="Gone@1234", role="user", status="inactive",
              with_wallet=False)

    assert login(client, "ops@example.com", "Ops@1234").status_code == 403
    response = login(client, "gone@example.com", "Gone@1234")
    assert response.status_code == 403
    assert response.get_json()["message"] == "Account not active"


def test_login_validation(client):
    response = login(client, "admin@example.com", "Admin@123", latitude="123")
    assert response.status_code == 422
    assert response.get_json()["message"] == "Invalid latitude"

    response = login(client, "admin@example.com", 12345678)
    assert response.status_code == 422
    assert response.get_json()["message"] == "Password must be a string"


# ---------- bearer guard ----------

def test_protected_route_requires_token(client):
    response = client.get(f"{API}/wallet")
    assert response.status_code == 401
    assert response.get_json()["message"] == "No token provided"


def test_protected_route_rejects_invalid_and_expired_tokens(client, admin_user):
    response = client.get(f"{API}/wallet", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.get_json()["message"] == "Token expired or invalid"

    expired = generate_token({"id": admin_user.id, "role": "admin"}, expires_delta=timedelta(seconds=-5))
    response = client.get(f"{API}/wallet", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_registration_token_is_not_an_access_token(client, fixed_otp):
    token = register(client).get_json()["data"]["tempUserId"]
    response = client.get(f"{API}/wallet", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
