from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from models import User
from rewards.evaluator import RewardStatus


@dataclass(frozen=True)
class UserRecord:
    """Read-only snapshot of a user, detached from the session."""
    id: Any
    name: str
    referral_code: str = ""
    total_donations: Decimal = Decimal("0")
    referred_by: Optional[Any] = None
    is_active: bool = True
    rewards: tuple = field(default_factory=tuple)

    @classmethod
    def from_model(cls, user: User, with_rewards: bool = False) -> "UserRecord":
        # rewards stay empty unless asked for, the leaderboards never read them
        rewards = tuple(RewardStatus.from_model(r) for r in user.rewards) if with_rewards else ()
        return cls(
            id=user.id,
            name=user.name,
            referral_code=user.referral_code,
            total_donations=Decimal(str(user.total_donations or 0)),
            referred_by=user.referred_by,
            is_active=bool(user.is_active),
            rewards=rewards,
        )


def group_by_referrer(users: Iterable[UserRecord]) -> Dict[Any, List[UserRecord]]:
    grouped: Dict[Any, List[UserRecord]] = {}
    for user in users:
        if user.referred_by is not None:
            grouped.setdefault(user.referred_by, []).append(user)
    return grouped


class SqlAlchemyUserRepository:
    """
    Reads user snapshots from the database for the leaderboards.
    Rows come back in insertion order so the ranking sort stays deterministic.

    Referrals are loaded with a single query the first time they are asked
    for and grouped by referrer; build a new repository per request.
    """

    def __init__(self):
        self._referred: Optional[Dict[Any, List[UserRecord]]] = None

    def fetch_active_users(self) -> List[UserRecord]:
        users = User.query.filter_by(is_active=True).order_by(User.id.asc()).all()
        return [UserRecord.from_model(u) for u in users]

    def fetch_users_referred_by(self, user_id) -> List[UserRecord]:
        if self._referred is None:
            # No is_active filter here, inactive referrals still count for the referrer
            users = User.query.filter(User.referred_by.isnot(None)).order_by(User.id.asc()).all()
            self._referred = group_by_referrer(UserRecord.from_model(u) for u in users)
        return list(self._referred.get(user_id, []))

    def fetch_all_users(self) -> List[UserRecord]:
        users = User.query.order_by(User.id.asc()).all()
        return [UserRecord.from_model(u) for u in users]


class InMemoryUserRepository:
    """Same reads over a plain list, for fixtures and scripts."""

    def __init__(self, users: Iterable[UserRecord] = ()):
        self._users = list(users)
        self._referred = group_by_referrer(self._users)

    def fetch_active_users(self) -> List[UserRecord]:
        return [u for u in self._users if u.is_active]

    def fetch_users_referred_by(self, user_id) -> List[UserRecord]:
        return list(self._referred.get(user_id, []))

    def fetch_all_users(self) -> List[UserRecord]:
        return list(self._users)
