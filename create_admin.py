"""
Create or reset the API admin account (role 'admin') together with its wallet.
Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME / ADMIN_MOBILE.
"""
import os
from datetime import datetime, timedelta

from app import create_app
from models import db
from models.user import User
from models.wallet import Wallet
from utils.validators import validate_email, validate_password


def create_admin():
    """Create or reset admin user"""
    email = os.environ.get("ADMIN_EMAIL", "admin@msgcatalog.local").strip().lower()
    password = os.environ.get("ADMIN_PASSWORD", "Admin@2026")
    name = os.environ.get("ADMIN_NAME", "Administrator").strip()
    mobile_no = os.environ.get("ADMIN_MOBILE", "9999999999").strip()

    if not validate_email(email):
        raise SystemExit(f"[ERROR] Invalid ADMIN_EMAIL: {email}")
    is_valid, error = validate_password(password)
    if not is_valid:
        raise SystemExit(f"[ERROR] {error}")

    app = create_app()
    with app.app_context():
        user = User.query.filter_by(email=email).first()
        created = user is None
        if created:
            user = User(name=name, email=email, mobile_no=mobile_no, otp_status='verified')
            db.session.add(user)
        user.role = 'admin'
        user.status = 'active'
        user.set_password(password)
        db.session.flush()

        if not Wallet.query.filter_by(user_id=user.id).first():
            db.session.add(Wallet(
                user_id=user.id,
                balance=0,
                lien_balance=0,
                free_balance=app.config.get("WALLET_FREE_BALANCE", 100),
                balance_expire_at=datetime.utcnow() + timedelta(days=app.config.get("WALLET_VALIDITY_DAYS", 365)),
            ))

        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            raise SystemExit(f"[ERROR] Could not save admin user: {e}")

        print("[SUCCESS] Admin user {}!".format("created" if created else "password reset"))
        print("\n" + "=" * 50)
        print("ADMIN LOGIN:")
        print("=" * 50)
        print(f"POST {app.config['API_PREFIX']}/auth/login")
        print(f"Email: {email}")
        print("=" * 50)


if __name__ == '__main__':
    create_admin()
