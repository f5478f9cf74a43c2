from decimal import Decimal

import pytest

from leaderboard.ranker import LeaderboardRanker, overall_score, paginate, platform_stats
from leaderboard.repository import InMemoryUserRepository, UserRecord


def record(uid, total, referred_by=None, is_active=True, name=None):
    return UserRecord(
        id=uid,
        name=name or f"user{uid}",
        referral_code=f"ref{uid}",
        total_donations=Decimal(str(total)),
        referred_by=referred_by,
        is_active=is_active,
    )


@pytest.fixture
def population():
    return [
        record(1, 200),
        record(2, 150, referred_by=1),
        record(3, 150, referred_by=1),
        record(4, 900),
        record(5, 50, referred_by=4, is_active=False),
        record(6, 0, referred_by=4),
        record(7, 10000, is_active=False),
        record(8, 150),
    ]


@pytest.fixture
def ranker(population):
    return LeaderboardRanker(InMemoryUserRepository(population))


def test_composite_score_example():
    assert overall_score(Decimal("200"), 2, Decimal("300")) == Decimal("330")


def test_by_donations_excludes_inactive_and_sorts_descending(ranker):
    result = ranker.by_donations(page=1, page_size=10)

    totals = [e.total_donations for e in result.entries]
    assert totals == sorted(totals, reverse=True)
    assert result.total_count == 6
    assert "user7" not in [e.name for e in result.entries]
    assert "user5" not in [e.name for e in result.entries]


def test_by_donations_ties_keep_insertion_order(ranker):
    names = [e.name for e in ranker.by_donations(1, 10).entries]
    assert names.index("user2") < names.index("user3") < names.index("user8")


def test_pagination_pages_cover_everything_once(ranker):
    full = [e.name for e in ranker.by_donations(1, 100).entries]

    first = ranker.by_donations(1, 4)
    pages = [ranker.by_donations(p, 4) for p in range(1, first.total_pages + 1)]
    combined = [e.name for page in pages for e in page.entries]

    assert first.total_pages == 2
    assert combined == full
    assert len(set(combined)) == len(combined)


def test_pagination_flags(ranker):
    first = ranker.by_donations(1, 4)
    last = ranker.by_donations(2, 4)

    assert first.has_next is True and first.has_prev is False
    assert last.has_next is False and last.has_prev is True
    assert len(last.entries) == 2


def test_page_past_the_end_is_empty(ranker):
    result = ranker.by_donations(10, 3)
    assert result.entries == []
    assert result.has_next is False
    assert result.has_prev is True


def test_by_referrals_counts_inactive_referrals(ranker):
    result = ranker.by_referrals(1, 10)

    assert [e.name for e in result.entries] == ["user1", "user4"]
    assert result.total_count == 2

    user1, user4 = result.entries
    assert user1.referral_count == 2
    assert user1.total_referral_donations == Decimal("300")
    # user5 is inactive but still counted for its referrer
    assert user4.referral_count == 2
    assert user4.total_referral_donations == Decimal("50")


def test_by_referrals_breaks_ties_on_referral_donations():
    users = [
        record(1, 0), record(2, 0),
        record(3, 10, referred_by=1),
        record(4, 80, referred_by=2),
    ]
    result = LeaderboardRanker(InMemoryUserRepository(users)).by_referrals(1, 10)
    assert [e.name for e in result.entries] == ["user2", "user1"]


def test_inactive_referrer_is_not_listed():
    users = [record(1, 0, is_active=False), record(2, 10, referred_by=1)]
    result = LeaderboardRanker(InMemoryUserRepository(users)).by_referrals(1, 10)
    assert result.entries == []
    assert result.total_count == 0


def test_overall_includes_zero_referral_users(ranker):
    result = ranker.overall(1, 10)
    by_name = {e.name: e for e in result.entries}

    assert result.total_count == 6
    assert by_name["user8"].overall_score == Decimal("150")
    # 200 + 2 * 50 + 300 * 0.1
    assert by_name["user1"].overall_score == Decimal("330")
    # 900 + 2 * 50 + 50 * 0.1
    assert by_name["user4"].overall_score == Decimal("1005")
    scores = [e.overall_score for e in result.entries]
    assert scores == sorted(scores, reverse=True)
    assert result.entries[0].name == "user4"


@pytest.mark.parametrize("view", ["by_donations", "by_referrals", "overall"])
def test_empty_population(view):
    result = getattr(LeaderboardRanker(InMemoryUserRepository([])), view)(1, 10)

    assert result.entries == []
    assert result.total_count == 0
    assert result.total_pages == 0
    assert result.has_next is False
    assert result.has_prev is False


def test_paginate_reports_partial_last_page():
    page = paginate(list(range(5)), 2, 2)
    assert page.entries == [2, 3]
    assert page.pagination() == {
        "currentPage": 2,
        "totalPages": 3,
        "totalCount": 5,
        "hasNext": True,
        "hasPrev": True,
    }


def test_entry_serialization(ranker):
    entry = ranker.overall(1, 1).entries[0]
    assert entry.to_dict() == {
        "name": "user4",
        "referralCode": "ref4",
        "totalDonations": 900.0,
        "referralCount": 2,
        "totalReferralDonations": 50.0,
        "overallScore": 1005.0,
    }


def test_platform_stats(population):
    stats = platform_stats(InMemoryUserRepository(population))

    assert stats["totalUsers"] == 6
    assert stats["totalDonations"] == 1550.0
    assert stats["maxDonations"] == 900.0
    assert stats["avgDonations"] == pytest.approx(1550 / 6)
    assert stats["totalReferrals"] == 4
    assert stats["usersWithReferrals"] == 2


def test_platform_stats_empty():
    stats = platform_stats(InMemoryUserRepository([]))
    assert stats["totalUsers"] == 0
    assert stats["totalDonations"] == 0.0
    assert stats["avgDonations"] == 0.0
    assert stats["totalReferrals"] == 0


def test_entry_is_the_same_in_every_view(ranker):
    donors = {e.name: e for e in ranker.by_donations(1, 10).entries}
    referrers = {e.name: e for e in ranker.by_referrals(1, 10).entries}
    overall = {e.name: e for e in ranker.overall(1, 10).entries}

    assert donors["user1"].to_dict() == overall["user1"].to_dict() == referrers["user1"].to_dict()
    assert donors["user1"].referral_count == 2
    assert donors["user1"].total_referral_donations == Decimal("300")
    assert donors["user1"].overall_score == Decimal("330")
