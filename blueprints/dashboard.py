from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from extensions import db
from models import User
from rewards.services import DonationService
from rewards.tiers import REWARD_TIERS, next_tier, reward_progress
from utils import parse_donation_amount


bp = Blueprint('dashboard', __name__, url_prefix="/api/dashboard")


def referral_summary(user):
    """(count, donation sum) over everyone this user referred, active or not."""
    referrals = user.referrals.all()
    total = sum((Decimal(str(r.total_donations or 0)) for r in referrals), Decimal("0"))
    return len(referrals), total

# ----------------------------------------------------------------------------------
# PROFILE + DASHBOARD CARDS
# ----------------------------------------------------------------------------------
@bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    try:
        user = current_user
        referral_count, referral_donations = referral_summary(user)
        referrer = user.referrer

        data = user.to_dict()
        data.update({
            "referredBy": {"name": referrer.name, "email": referrer.email} if referrer else None,
            "referralCount": referral_count,
            "totalReferralDonations": float(referral_donations),
        })
        return jsonify({"user": data}), 200

    except SQLAlchemyError as e:
        current_app.logger.error(f"Dashboard profile error for user {current_user.id}: {e}")
        return jsonify({"error": "Server error"}), 500


#===================================================================================
#      DONATIONS
#===================================================================================
@bp.route("/update-donations", methods=["POST"])
@login_required
def update_donations():
    """
    Add a donation to the current user's total and unlock any badges it reaches.
    Expected JSON: {"amount": 250}
    """
    data = request.get_json(silent=True) or {}
    amount = parse_donation_amount(data.get("amount") if isinstance(data, dict) else None)
    if amount is None:
        return jsonify({"error": "Valid donation amount is required"}), 400

    user = db.session.get(User, current_user.id)
    try:
        total, rewards = DonationService.record_donation(user, amount)
    except SQLAlchemyError:
        return jsonify({"error": "Server error"}), 500

    return jsonify({
        "message": "Donations updated successfully",
        "totalDonations": float(total),
        "rewards": [r.to_dict() for r in rewards],
    }), 200


@bp.route("/referrals", methods=["GET"])
@login_required
def get_referrals():
    referrals = (
        User.query.filter_by(referred_by=current_user.id)
        .order_by(User.created_at.desc(), User.id.desc())
        .all()
    )
    return jsonify({
        "referrals": [
            {
                "name": r.name,
                "email": r.email,
                "totalDonations": float(r.total_donations or 0),
                "createdAt": r.created_at.isoformat() if r.created_at else None,
            }
            for r in referrals
        ]
    }), 200


@bp.route("/rewards", methods=["GET"])
@login_required
def get_rewards():
    user = current_user
    total = user.total_donations or 0
    upcoming = next_tier(total, REWARD_TIERS)

    return jsonify({
        "userRewards": [r.to_dict() for r in user.rewards],
        "availableRewards": reward_progress(total, user.rewards, REWARD_TIERS),
        "nextReward": upcoming.name if upcoming else None,
        "totalDonations": float(total),
    }), 200


@bp.route("/share-referral", methods=["POST"])
@login_required
def share_referral():
    frontend_url = current_app.config.get("FRONTEND_URL", "http://localhost:3000").rstrip("/")
    shareable_link = f"{frontend_url}/signup?ref={current_user.referral_code}"

    return jsonify({
        "referralCode": current_user.referral_code,
        "shareableLink": shareable_link,
        "message": "Share this link with friends to earn rewards!",
    }), 200
