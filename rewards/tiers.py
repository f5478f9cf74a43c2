# rewards/tiers.py
from decimal import Decimal
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence


class RewardTier(NamedTuple):
    name: str
    description: str
    threshold: Decimal
    icon: str = ""


# Donation milestones, ascending threshold. The dashboard renders progress
# toward the same table, so both sides read it from here.
REWARD_TIERS = (
    RewardTier("Bronze Badge", "First donation milestone", Decimal("100"), "🥉"),
    RewardTier("Silver Badge", "Consistent donor", Decimal("500"), "🥈"),
    RewardTier("Gold Badge", "Top contributor", Decimal("1000"), "🥇"),
    RewardTier("Platinum Badge", "Elite donor", Decimal("2500"), "💎"),
    RewardTier("Diamond Badge", "Legendary contributor", Decimal("5000"), "💎"),
)


def _reward_field(reward, field, default=None):
    # Accept both RewardStatus objects and ORM Reward rows
    if isinstance(reward, dict):
        return reward.get(field, default)
    return getattr(reward, field, default)


def next_tier(total_donations, tiers: Sequence[RewardTier] = REWARD_TIERS) -> Optional[RewardTier]:
    """First tier the user has not reached yet, or None past the last one."""
    total = Decimal(str(total_donations))
    for tier in tiers:
        if total < tier.threshold:
            return tier
    return None


def reward_progress(total_donations, rewards: Iterable[Any],
                    tiers: Sequence[RewardTier] = REWARD_TIERS) -> List[Dict[str, Any]]:
    """
    Every tier with the user's unlock state and percentage progress.
    Progress is capped at 100 and computed from the current total.
    """
    total = Decimal(str(total_donations))
    by_name = {_reward_field(r, "name"): r for r in rewards}

    result = []
    for tier in tiers:
        user_reward = by_name.get(tier.name)
        unlocked_at = _reward_field(user_reward, "unlocked_at") if user_reward is not None else None
        progress = min(total / tier.threshold * 100, Decimal("100"))
        result.append({
            "name": tier.name,
            "description": tier.description,
            "threshold": float(tier.threshold),
            "icon": tier.icon,
            "unlocked": bool(_reward_field(user_reward, "unlocked", False)) if user_reward is not None else False,
            "unlockedAt": unlocked_at.isoformat() if unlocked_at else None,
            "progress": float(progress),
        })
    return result
