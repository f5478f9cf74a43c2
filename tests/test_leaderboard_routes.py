def seed(make_user):
    alice = make_user(name="Alice", total=200)
    bob = make_user(name="Bob", total=900)
    make_user(name="Cara", total=150, referred_by=alice)
    make_user(name="Dan", total=150, referred_by=alice)
    make_user(name="Eve", total=5000, is_active=False, referred_by=bob)
    make_user(name="Finn", total=0)
    return alice, bob


def test_top_donors(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/top-donors").get_json()

    assert [d["name"] for d in data["topDonors"]] == ["Bob", "Alice", "Cara", "Dan", "Finn"]
    assert data["pagination"] == {
        "currentPage": 1,
        "totalPages": 1,
        "totalCount": 5,
        "hasNext": False,
        "hasPrev": False,
    }


def test_top_donors_pagination(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/top-donors?limit=2&page=2").get_json()

    assert [d["name"] for d in data["topDonors"]] == ["Cara", "Dan"]
    assert data["pagination"]["totalPages"] == 3
    assert data["pagination"]["hasNext"] is True
    assert data["pagination"]["hasPrev"] is True


def test_bad_pagination_params_fall_back_to_defaults(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/top-donors?limit=abc&page=-3").get_json()

    assert data["pagination"]["currentPage"] == 1
    assert len(data["topDonors"]) == 5


def test_top_referrers(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/top-referrers").get_json()

    assert [d["name"] for d in data["topReferrers"]] == ["Alice", "Bob"]
    alice, bob = data["topReferrers"]
    assert alice["referralCount"] == 2
    assert alice["totalReferralDonations"] == 300.0
    # Eve is inactive but still counts for Bob
    assert bob["referralCount"] == 1
    assert bob["totalReferralDonations"] == 5000.0
    assert data["pagination"]["totalCount"] == 2


def test_overall(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/overall").get_json()
    leaders = {d["name"]: d for d in data["overallLeaders"]}

    # 900 + 50 + 500
    assert data["overallLeaders"][0]["name"] == "Bob"
    assert leaders["Bob"]["overallScore"] == 1450.0
    assert leaders["Alice"]["overallScore"] == 330.0
    assert leaders["Finn"]["overallScore"] == 0.0
    assert data["pagination"]["totalCount"] == 5


def test_donor_entry_matches_overall_entry(client, make_user):
    seed(make_user)

    donors = client.get("/api/leaderboard/top-donors").get_json()["topDonors"]
    leaders = client.get("/api/leaderboard/overall").get_json()["overallLeaders"]
    alice_donor = next(d for d in donors if d["name"] == "Alice")
    alice_overall = next(d for d in leaders if d["name"] == "Alice")

    assert alice_donor == alice_overall
    assert alice_donor["referralCount"] == 2
    assert alice_donor["totalReferralDonations"] == 300.0
    assert alice_donor["overallScore"] == 330.0


def test_empty_leaderboards(client):
    for path, key in (
        ("/api/leaderboard/top-donors", "topDonors"),
        ("/api/leaderboard/top-referrers", "topReferrers"),
        ("/api/leaderboard/overall", "overallLeaders"),
    ):
        data = client.get(path).get_json()
        assert data[key] == []
        assert data["pagination"]["totalCount"] == 0
        assert data["pagination"]["totalPages"] == 0
        assert data["pagination"]["hasNext"] is False


def test_stats(client, make_user):
    seed(make_user)

    data = client.get("/api/leaderboard/stats").get_json()

    assert data["totalUsers"] == 5
    assert data["totalDonations"] == 1400.0
    assert data["maxDonations"] == 900.0
    assert data["avgDonations"] == 280.0
    assert data["totalReferrals"] == 3
    assert data["usersWithReferrals"] == 2


def test_leaderboards_are_public(client):
    assert client.get("/api/leaderboard/stats").status_code == 200


def test_healthz(client):
    assert client.get("/healthz").get_json() == {"status": "ok"}


def test_unknown_route_returns_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}
