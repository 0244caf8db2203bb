from conftest import internship
from models import UserProfile
from recommendations import (
    FALLBACK_MESSAGE,
    classify,
    fallback_queries,
    find_fallback_internships,
    get_fallback_recommendations,
    is_remote,
)


def profile(**fields):
    return UserProfile(id="u1", **fields)


class TestCascade:

    def test_sector_only_query_used_when_city_has_no_match(self, internships):
        internships.insert_many([
            internship("A", sector="tech", location_city="Mumbai"),
            internship("B", sector="tech", location_city="Mumbai"),
        ])
        user = profile(sectors=["tech"], location="Pune")

        queries = dict(fallback_queries(user))
        assert list(internships.find(queries["sector+location"]())) == []
        assert len(list(internships.find(queries["sector"]()))) == 2

        results = find_fallback_internships(internships, user)
        assert [r["title"] for r in results] == ["A", "B"]

    def test_most_specific_match_wins(self, internships):
        internships.insert_many([
            internship("Pune tech", sector="Tech", location_city="Pune"),
            internship("Mumbai tech", sector="tech", location_city="Mumbai"),
            internship("Pune finance", sector="finance", location_city="pune"),
        ])
        user = profile(sectors=["TECH"], location="pune")

        results = find_fallback_internships(internships, user)
        assert [r["title"] for r in results] == ["Pune tech"]

    def test_sector_match_is_exact_not_substring(self, internships):
        internships.insert_one(internship("Fintech", sector="fintech"))
        user = profile(sectors=["tech"])

        assert list(internships.find(dict(fallback_queries(user))["sector"]())) == []

    def test_location_query_after_sector_fails(self, internships):
        internships.insert_many([
            internship("Pune design", sector="design", location_city="Pune City"),
            internship("Delhi design", sector="design", location_city="Delhi"),
        ])
        user = profile(sectors=["tech"], location="pune")

        results = find_fallback_internships(internships, user)
        assert [r["title"] for r in results] == ["Pune design"]

    def test_skills_query_matches_any_skill_case_insensitive(self, internships):
        internships.insert_many([
            internship("Py", skills=["Python", "SQL"], location_city="Delhi"),
            internship("Js", skills=["javascript"], location_city="Delhi"),
        ])
        user = profile(skills=["python", "go"], sectors=["health"], location="Pune")

        results = find_fallback_internships(internships, user)
        assert [r["title"] for r in results] == ["Py"]

    def test_skills_query_matches_skill_inside_longer_name(self, internships):
        internships.insert_many([
            internship("Py", skills=["Python 3", "SQL"]),
            internship("Other", skills=["cobol"]),
        ])
        user = profile(skills=["python"], sectors=["health"], location="Pune")

        results = find_fallback_internships(internships, user)
        assert [r["title"] for r in results] == ["Py"]

    def test_unfiltered_query_is_last_resort(self, internships):
        internships.insert_many([internship(f"I{n}") for n in range(12)])
        user = profile(skills=["cobol"], sectors=["mining"], location="Leh")

        results = find_fallback_internships(internships, user)
        assert len(results) == 10

    def test_skips_steps_without_inputs(self):
        names = [name for name, _ in fallback_queries(profile(skills=["python"]))]
        assert names == ["skills", "any"]

    def test_location_is_escaped(self, internships):
        internships.insert_one(internship("Odd", location_city="Navi Mumbai"))
        user = profile(location="Navi.*")

        assert list(internships.find(dict(fallback_queries(user))["location"]())) == []

    def test_empty_store_gives_empty_result(self, internships):
        result = get_fallback_recommendations(internships, profile(sectors=["tech"], location="Pune"))

        assert result.fallback_mode is True
        assert result.recommendations.nearby_ids == []
        assert result.recommendations.remote_ids == []


class TestClassify:

    def test_backfills_nearby_up_to_five(self):
        records = [internship(f"I{n}", sector="tech", location_city="Mumbai") for n in range(8)]

        nearby, remote = classify(records, "Pune")

        assert [r["title"] for r in nearby] == ["I0", "I1", "I2", "I3", "I4"]
        assert remote == []

    def test_remote_by_mode_or_flag(self):
        assert is_remote({"mode": "Work from home / REMOTE"})
        assert is_remote({"mode": "On-site", "remote_work_allowed": True})
        assert not is_remote({"mode": "Hybrid"})
        assert not is_remote({})

    def test_buckets_are_independent(self):
        both = internship("Both", location_city="Pune", mode="Remote")
        records = [both, internship("Other", location_city="Delhi")]

        nearby, remote = classify(records, "pune")

        assert both in nearby and both in remote
        assert [r["title"] for r in nearby] == ["Both", "Other"]
        assert [r["title"] for r in remote] == ["Both"]

    def test_no_location_means_nothing_is_nearby_before_backfill(self):
        records = [internship("Remote", mode="remote"), internship("Plain", location_city="Pune")]

        nearby, remote = classify(records, "")

        assert [r["title"] for r in nearby] == ["Plain"]
        assert [r["title"] for r in remote] == ["Remote"]

    def test_backfill_stops_when_nearby_is_full(self):
        records = [internship(f"P{n}", location_city="Pune") for n in range(5)]
        records.append(internship("Extra", location_city="Delhi"))

        nearby, _ = classify(records, "Pune")
        assert len(nearby) == 5
        assert "Extra" not in [r["title"] for r in nearby]


def test_fallback_result_shape(internships):
    internships.insert_many([
        internship("Near", sector="tech", location_city="Pune"),
        internship("Away", sector="tech", location_city="Goa", mode="Remote"),
    ])
    user = profile(sectors=["tech"], location="Pune", skills=["python"], education="12th")

    result = get_fallback_recommendations(internships, user).to_dict()

    assert result["fallback_mode"] is True
    assert result["message"] == FALLBACK_MESSAGE
    recs = result["recommendations"]
    assert [i["title"] for i in recs["nearby_internships"]] == ["Near"]
    assert recs["nearby_ids"] == [i["_id"] for i in recs["nearby_internships"]]
    assert all(isinstance(i, str) for i in recs["nearby_ids"])
    assert result["user_profile"] == {
        "skills": ["python"],
        "sectors": ["tech"],
        "education_level": "12th",
        "location": "Pune",
    }
