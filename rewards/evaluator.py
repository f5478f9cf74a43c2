# rewards/evaluator.py
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence

from rewards.tiers import REWARD_TIERS, RewardTier


@dataclass(frozen=True)
class RewardStatus:
    name: str
    description: str
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, reward) -> "RewardStatus":
        return cls(
            name=reward.name,
            description=reward.description,
            unlocked=bool(reward.unlocked),
            unlocked_at=reward.unlocked_at,
        )


def evaluate(total_donations: Decimal,
             current_rewards: Sequence[RewardStatus],
             tiers: Sequence[RewardTier] = REWARD_TIERS,
             now: Optional[datetime] = None) -> List[RewardStatus]:
    """
    Return the reward list after unlocking every tier the total qualifies for.

    Tiers are walked in declared order. A tier already present in
    current_rewards is left alone whatever its unlock state, so a locked entry
    is never flipped and repeated calls at the same total change nothing.
    Tiers crossed in the same call all share the same unlocked_at.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    total = Decimal(str(total_donations))
    updated = list(current_rewards)
    existing = {reward.name for reward in updated}

    for tier in tiers:
        if total >= tier.threshold and tier.name not in existing:
            updated.append(RewardStatus(
                name=tier.name,
                description=tier.description,
                unlocked=True,
                unlocked_at=now,
            ))
            existing.add(tier.name)

    return updated


def newly_unlocked(before: Sequence[RewardStatus], after: Sequence[RewardStatus]) -> List[RewardStatus]:
    """Entries evaluate() appended to `before`."""
    known = {reward.name for reward in before}
    return [reward for reward in after if reward.name not in known]
