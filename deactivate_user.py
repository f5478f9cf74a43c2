# deactivate_user.py
# Usage: python deactivate_user.py someone@example.com [--reactivate]
#
# Users are never deleted. Deactivated users drop off the leaderboards and can
# no longer log in, but still count toward their referrer's referral totals.

import sys

from app import create_app
from extensions import db
from logger import app_logger
from models import User


def set_active(email, active, app=None):
    app = app or create_app()
    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            app_logger.warning(f"set_active: no user with email {email}")
            return None

        user.is_active = active
        db.session.commit()
        app_logger.info(f"User {user.id} is_active set to {active}")
        return user


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    if len(args) != 1:
        print("Usage: python deactivate_user.py <email> [--reactivate]")
        sys.exit(1)

    reactivate = "--reactivate" in sys.argv
    if not set_active(args[0], active=reactivate):
        print(f"No user with email {args[0]} found.")
        sys.exit(1)
    print(f"{args[0]} {'reactivated' if reactivate else 'deactivated'}.")
