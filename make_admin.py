# make_admin.py
# Usage: python make_admin.py someone@example.com

import sys

from app import create_app
from extensions import db
from logger import app_logger
from models import User, UserRole


def make_admin(email, app=None):
    """Promote an existing user to admin. Returns the user, or None if not found."""
    app = app or create_app()
    with app.app_context():
        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            app_logger.warning(f"make_admin: no user with email {email}")
            return None

        user.role = UserRole.ADMIN.value
        db.session.commit()
        app_logger.info(f"User (id={user.id}, email={user.email}) is now admin.")
        return user


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python make_admin.py <email>")
        sys.exit(1)
    if not make_admin(sys.argv[1]):
        print(f"No user with email {sys.argv[1]} found.")
        sys.exit(1)
    print(f"{sys.argv[1]} is now admin.")
