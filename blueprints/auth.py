from flask import Blueprint, jsonify, request, current_app
from flask_login import login_user, logout_user, login_required, current_user
from sqlalchemy.exc import IntegrityError
from models import User
from utils import validate_signup, generate_referral_code
from extensions import db

#==================================================================================================================

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def referral_code_taken(code):
    return User.query.filter_by(referral_code=code).first() is not None


#===========================================================================
#      SIGN UP ROUTE.
#==============================================================================
@bp.route("/signup", methods=["POST"])
def signup():
    """
    Create a new intern account, linking it to a referrer when the
    supplied referral code matches one. Unknown codes are ignored.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({"error": "Invalid or missing JSON body"}), 400

    errors = validate_signup(data)
    if errors:
        return jsonify({"errors": errors}), 400

    name = data["name"].strip()
    email = data["email"].strip().lower()
    password = data["password"]
    referral_code = (data.get("referralCode") or "").strip()

    try:
        if User.query.filter_by(email=email).first():
            return jsonify({"error": "User already exists with this email"}), 400

        new_user = User(
            name=name,
            email=email,
            referral_code=generate_referral_code(name, exists=referral_code_taken),
        )
        new_user.set_password(password)

        # -----------------------------------------
        #  HANDLE REFERRAL CODE
        # -----------------------------------------
        if referral_code:
            referrer = User.find_by_referral_code(referral_code)
            if referrer:
                new_user.referred_by = referrer.id
                current_app.logger.info(f"Signup {email} referred by user {referrer.id}")
            else:
                current_app.logger.info(f"Signup {email} used unknown referral code {referral_code}")

        db.session.add(new_user)
        db.session.commit()

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f"Signup integrity error for {email}: {e}")
        return jsonify({"error": "User already exists with this email"}), 400
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Signup error: {e}", exc_info=True)
        return jsonify({"error": "Server error during signup"}), 500

    login_user(new_user)
    current_app.logger.info(f"User {new_user.id} registered")

    return jsonify({
        "message": "User registered successfully",
        "user": new_user.to_dict(),
    }), 201


# --------------------------------------------------
#      Login Route
# --------------------------------------------------
@bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate a user.
    Expected JSON:
    {
        "email": "",
        "password": ""
    }
    """
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    user = User.query.filter_by(email=email).first()

    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 400

    if not login_user(user):
        # login_user refuses users whose is_active flag is off
        return jsonify({"error": "Account is deactivated"}), 403

    return jsonify({
        "message": "Login successful",
        "user": user.to_dict(),
    }), 200


#-----------------------------------------------------------------------------------------------------
@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    """
    Destroy User session
    """
    logout_user()
    return jsonify({"message": "Logged out successfully"}), 200


# --------------------------------------------------
# Current user (for frontend auto-login)
# --------------------------------------------------
@bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"user": current_user.to_dict()}), 200


@bp.route("/validate-referral", methods=["POST"])
def validate_referral():
    data = request.get_json(silent=True) or {}
    referral_code = data.get("referralCode")

    if not referral_code:
        return jsonify({"error": "Referral code is required"}), 400

    referrer = User.find_by_referral_code(referral_code)
    if not referrer:
        return jsonify({"error": "Invalid referral code"}), 404

    return jsonify({
        "valid": True,
        "referrerName": referrer.name,
    }), 200
