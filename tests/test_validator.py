from wrestlequest.engine.validator import validate_progress
from wrestlequest.kb import default_progress
from wrestlequest.models.kb import ProgressionConfig


def _doc() -> dict:
    return default_progress().model_dump(mode="json")


def _rules(result) -> set[str]:
    return {v.rule_id for v in result.violations}


class TestValidDocuments:
    def test_default_document_passes(self):
        result = validate_progress(_doc())
        assert result.valid
        assert result.violations == []
        assert result.progress == default_progress()

    def test_leveling_flag_not_in_document(self):
        assert "is_leveling_up" not in _doc()["skills"][0]

    def test_profile_image_optional(self):
        doc = _doc()
        del doc["profile_image"]
        assert validate_progress(doc).valid


class TestFields:
    def test_missing_top_level_field(self):
        doc = _doc()
        del doc["xp"]
        result = validate_progress(doc)
        assert not result.valid
        assert _rules(result) == {"FIELDS"}
        assert result.progress is None

    def test_missing_skill_field(self):
        doc = _doc()
        del doc["skills"][3]["rank"]
        result = validate_progress(doc)
        assert not result.valid
        assert result.violations[0].skill_index == 3


class TestShape:
    def test_negative_points(self):
        doc = _doc()
        doc["skills"][0]["points"] = -1
        result = validate_progress(doc)
        assert _rules(result) == {"SHAPE"}
        assert "skills.0.points" in result.violations[0].message

    def test_negative_xp(self):
        doc = _doc()
        doc["xp"] = -10
        assert _rules(validate_progress(doc)) == {"SHAPE"}

    def test_six_skills(self):
        doc = _doc()
        doc["skills"].pop()
        assert not validate_progress(doc).valid

    def test_unknown_skill_name(self):
        doc = _doc()
        doc["skills"][2]["name"] = "Cardio"
        assert _rules(validate_progress(doc)) == {"SHAPE"}


class TestRoster:
    def test_swapped_skills(self):
        doc = _doc()
        doc["skills"][0], doc["skills"][1] = doc["skills"][1], doc["skills"][0]
        result = validate_progress(doc)
        assert not result.valid
        assert _rules(result) == {"ROSTER"}
        assert {v.skill_index for v in result.violations} == {0, 1}


class TestRankFloor:
    def test_rank_without_points(self):
        doc = _doc()
        doc["skills"][5]["rank"] = 3
        result = validate_progress(doc)
        assert _rules(result) == {"RANK"}
        assert result.violations[0].skill_index == 5


class TestPoints:
    def test_full_rank_of_points_rejected(self):
        doc = _doc()
        doc["skills"][0]["points"] = 5
        result = validate_progress(doc)
        assert _rules(result) == {"POINTS"}
        assert result.violations[0].skill_index == 0

    def test_bound_follows_points_per_rank(self):
        doc = _doc()
        doc["skills"][4]["points"] = 5
        doc["skills"][4]["total_points"] = 5
        result = validate_progress(doc, ProgressionConfig(points_per_rank=6))
        assert result.valid
        assert result.progress.skills[4].points == 5

    def test_smaller_rank_tightens_bound(self):
        doc = _doc()
        doc["skills"][1]["points"] = 3
        assert _rules(validate_progress(doc, ProgressionConfig(points_per_rank=3))) == {"POINTS"}
