from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Tuple

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from logger import rewards_logger
from models import Reward
from rewards.evaluator import RewardStatus, evaluate, newly_unlocked
from rewards.tiers import REWARD_TIERS

CENTS = Decimal("0.01")


class DonationService:
    """
    Applies a donation to a user and persists any badges it unlocks.
    Amount validation is the caller's job.
    """

    @staticmethod
    def record_donation(user, amount, now=None) -> Tuple[Decimal, List[Reward]]:
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            # evaluate against the value the Numeric(18, 2) column will store
            total = Decimal(str(user.total_donations or 0)) + Decimal(str(amount))
            user.total_donations = total.quantize(CENTS, rounding=ROUND_HALF_UP)

            before = [RewardStatus.from_model(r) for r in user.rewards]
            after = evaluate(user.total_donations, before, REWARD_TIERS, now)

            for status in newly_unlocked(before, after):
                user.rewards.append(Reward(
                    name=status.name,
                    description=status.description,
                    unlocked=status.unlocked,
                    unlocked_at=status.unlocked_at,
                ))
                rewards_logger.info(f"User {user.id} unlocked {status.name} at total {user.total_donations}")

            db.session.commit()

        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.error(f"Failed to record donation of {amount} for user {user.id}: {e}")
            raise

        current_app.logger.info(f"Donation of {amount} recorded for user {user.id}, total {user.total_donations}")
        return user.total_donations, list(user.rewards)
