from flask import Blueprint, jsonify, request, current_app
from sqlalchemy.exc import SQLAlchemyError
from leaderboard.ranker import LeaderboardRanker, platform_stats
from leaderboard.repository import SqlAlchemyUserRepository
from utils import parse_pagination


bp = Blueprint("leaderboard", __name__, url_prefix="/api/leaderboard")


def _ranker():
    return LeaderboardRanker(SqlAlchemyUserRepository())


def _page_args():
    return parse_pagination(request.args, current_app.config.get("LEADERBOARD_DEFAULT_LIMIT", 10))


def _board_response(key, view):
    page, limit = _page_args()
    try:
        result = view(page, limit)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Leaderboard {key} error: {e}")
        return jsonify({"error": "Server error"}), 500

    return jsonify({
        key: [entry.to_dict() for entry in result.entries],
        "pagination": result.pagination(),
    }), 200


#===========================================================================
#      PUBLIC LEADERBOARDS
#===========================================================================
@bp.route("/top-donors", methods=["GET"])
def top_donors():
    return _board_response("topDonors", _ranker().by_donations)


@bp.route("/top-referrers", methods=["GET"])
def top_referrers():
    return _board_response("topReferrers", _ranker().by_referrals)


@bp.route("/overall", methods=["GET"])
def overall():
    """Donations plus 50 points per referral plus 10% of referred donations."""
    return _board_response("overallLeaders", _ranker().overall)


@bp.route("/stats", methods=["GET"])
def stats():
    try:
        return jsonify(platform_stats(SqlAlchemyUserRepository())), 200
    except SQLAlchemyError as e:
        current_app.logger.error(f"Stats error: {e}")
        return jsonify({"error": "Server error"}), 500
