# leaderboard/ranker.py
import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List

REFERRAL_POINTS = Decimal("50")  # flat bonus per referred user
REFERRAL_DONATION_WEIGHT = Decimal("0.1")  # share of referred users' donations


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    referral_code: str
    total_donations: Decimal
    referral_count: int = 0
    total_referral_donations: Decimal = Decimal("0")
    overall_score: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "referralCode": self.referral_code,
            "totalDonations": float(self.total_donations),
            "referralCount": self.referral_count,
            "totalReferralDonations": float(self.total_referral_donations),
            "overallScore": float(self.overall_score),
        }


@dataclass(frozen=True)
class LeaderboardPage:
    entries: List[LeaderboardEntry] = field(default_factory=list)
    total_count: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        # an empty board has zero pages
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_next(self) -> bool:
        skip = (self.page - 1) * self.page_size
        return skip + len(self.entries) < self.total_count

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination(self) -> Dict[str, Any]:
        return {
            "currentPage": self.page,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def overall_score(total_donations, referral_count, total_referral_donations) -> Decimal:
    return (Decimal(str(total_donations))
            + referral_count * REFERRAL_POINTS
            + Decimal(str(total_referral_donations)) * REFERRAL_DONATION_WEIGHT)


def paginate(ranked: List[LeaderboardEntry], page: int, page_size: int) -> LeaderboardPage:
    skip = (page - 1) * page_size
    return LeaderboardPage(
        entries=ranked[skip:skip + page_size],
        total_count=len(ranked),
        page=page,
        page_size=page_size,
    )


class LeaderboardRanker:
    """
    The three leaderboard views over one repository snapshot.

    The repository only needs fetch_active_users() and
    fetch_users_referred_by(user_id). Sorting relies on Python's stable sort,
    so ties keep the order the repository returned users in.
    """

    def __init__(self, repository):
        self.repository = repository

    def _entry(self, user) -> LeaderboardEntry:
        # every view carries the same referral figures for a given user
        referred = self.repository.fetch_users_referred_by(user.id)
        referral_count = len(referred)
        referral_donations = sum((Decimal(str(r.total_donations)) for r in referred), Decimal("0"))

        return LeaderboardEntry(
            name=user.name,
            referral_code=user.referral_code,
            total_donations=Decimal(str(user.total_donations)),
            referral_count=referral_count,
            total_referral_donations=referral_donations,
            overall_score=overall_score(user.total_donations, referral_count, referral_donations),
        )

    def by_donations(self, page: int = 1, page_size: int = 10) -> LeaderboardPage:
        entries = [self._entry(u) for u in self.repository.fetch_active_users()]
        ranked = sorted(entries, key=lambda e: e.total_donations, reverse=True)
        return paginate(ranked, page, page_size)

    def by_referrals(self, page: int = 1, page_size: int = 10) -> LeaderboardPage:
        entries = [self._entry(u) for u in self.repository.fetch_active_users()]
        referrers = [e for e in entries if e.referral_count > 0]
        ranked = sorted(
            referrers,
            key=lambda e: (e.referral_count, e.total_referral_donations),
            reverse=True,
        )
        return paginate(ranked, page, page_size)

    def overall(self, page: int = 1, page_size: int = 10) -> LeaderboardPage:
        entries = [self._entry(u) for u in self.repository.fetch_active_users()]
        ranked = sorted(entries, key=lambda e: e.overall_score, reverse=True)
        return paginate(ranked, page, page_size)


def platform_stats(repository) -> Dict[str, Any]:
    """Totals for the stats banner: donations over active users, referrals over everyone."""
    active = repository.fetch_active_users()
    totals = [Decimal(str(u.total_donations)) for u in active]
    total_donations = sum(totals, Decimal("0"))

    everyone = repository.fetch_all_users()
    known_ids = {u.id for u in everyone}
    referral_counts: Dict[Any, int] = {}
    for user in everyone:
        if user.referred_by is not None and user.referred_by in known_ids:
            referral_counts[user.referred_by] = referral_counts.get(user.referred_by, 0) + 1

    return {
        "totalUsers": len(active),
        "totalDonations": float(total_donations),
        "avgDonations": float(total_donations / len(totals)) if totals else 0.0,
        "maxDonations": float(max(totals)) if totals else 0.0,
        "totalReferrals": sum(referral_counts.values()),
        "usersWithReferrals": len(referral_counts),
    }
