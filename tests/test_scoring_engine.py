"""
Unit tests for the scoring engine.

Tests cover:
1. Score formula and the two-entity ranking scenario
2. Sex and age gating
3. Confidence transform and bounds
4. Ranking shape, stability and positive-match filtering
5. Random tie-break in choose()
"""
import random

import pytest

from possessao.core.catalog import EntityCatalog
from possessao.core.entities import (
    AGE_ADULT,
    AGE_CHILD,
    AGE_ELDER,
    AGE_TEEN,
    LEGACY_YOUTH_TRAIT,
    NO_ENTITY,
    SEX_FEMALE,
    SEX_MALE,
    SEX_UNDISCLOSED,
    AssessmentInput,
)
from possessao.core.questions import TRAIT_TAGS
from possessao.core.scoring_engine import ScoringEngine


def _answers(*traits):
    return {t: True for t in traits}


# =============================================================================
# Score formula
# =============================================================================

class TestScoreFormula:

    def test_two_entity_scenario(self, make_entity):
        a = make_entity("a", ["x", "y"])
        b = make_entity("b", ["x"])
        engine = ScoringEngine([a, b])

        ranked = engine.rank(AssessmentInput(answers=_answers("x", "y")), 3)

        assert [c.entity_id for c in ranked] == ["a", "b"]
        first, second = ranked
        assert first.match_ratio == 1.0 and first.match_count == 2
        assert second.match_ratio == 1.0 and second.match_count == 1
        # x is shared (1/2), y is unique (1/1)
        assert first.score == pytest.approx(100 + 12 + 1.5 * 12)
        assert second.score == pytest.approx(100 + 6 + 0.5 * 12)

    def test_matched_traits_follow_entity_order(self, make_entity):
        engine = ScoringEngine([make_entity("a", ["z", "y", "x"])])
        candidate = engine.score_entity(
            engine.entities[0],
            AssessmentInput(answers={"x": True, "z": True, "y": False})
        )
        assert candidate.matched_traits == ("z", "x")

    def test_false_and_unknown_answers_do_not_match(self, make_entity):
        engine = ScoringEngine([make_entity("a", ["x", "y"])])
        candidate = engine.score_entity(
            engine.entities[0],
            AssessmentInput(answers={"x": False, "unknown": True})
        )
        assert candidate.match_count == 0
        assert candidate.score == 0.0

    def test_entity_without_traits_does_not_divide_by_zero(self, make_entity):
        engine = ScoringEngine([make_entity("empty", [])])
        candidate = engine.score_entity(engine.entities[0], AssessmentInput(answers=_answers("x")))
        assert candidate.match_ratio == 0.0

    def test_adding_a_matching_trait_never_lowers_score(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        assessment_base = dict(sex=SEX_FEMALE, age_group=AGE_ADULT)

        for entity in sample_catalog:
            answers = {}
            previous = engine.score_entity(entity, AssessmentInput(answers=answers, **assessment_base)).score
            for trait in entity.traits:
                answers = {**answers, trait: True}
                current = engine.score_entity(entity, AssessmentInput(answers=answers, **assessment_base)).score
                assert current >= previous
                previous = current

    def test_legacy_youth_bonus_only_for_children(self, make_entity):
        engine = ScoringEngine([make_entity("kid", [LEGACY_YOUTH_TRAIT, "x"])])
        entity = engine.entities[0]
        answers = _answers("x")

        child = engine.score_entity(entity, AssessmentInput(age_group=AGE_CHILD, answers=answers))
        adult = engine.score_entity(entity, AssessmentInput(age_group=AGE_ADULT, answers=answers))

        assert child.score - adult.score == pytest.approx(4.0)

    def test_legacy_youth_bonus_is_noop_for_shipped_catalog(self, sample_catalog):
        assert all(LEGACY_YOUTH_TRAIT not in e.traits for e in sample_catalog)


# =============================================================================
# Gating
# =============================================================================

class TestGating:

    def test_gender_gap_is_exactly_18(self, make_entity):
        engine = ScoringEngine([make_entity("f", ["x", "y"], genders=[SEX_FEMALE])])
        entity = engine.entities[0]
        answers = _answers("x")

        female = engine.score_entity(entity, AssessmentInput(sex=SEX_FEMALE, answers=answers))
        male = engine.score_entity(entity, AssessmentInput(sex=SEX_MALE, answers=answers))

        assert female.score - male.score == pytest.approx(18.0)
        assert female.gender_factor == 10.0
        assert male.gender_factor == -8.0

    @pytest.mark.parametrize("sex", [None, "", "   ", SEX_UNDISCLOSED, "não informar"])
    def test_undisclosed_sex_is_neutral(self, make_entity, sex):
        entity = make_entity("f", ["x"], genders=[SEX_FEMALE])
        assert ScoringEngine.gender_factor(entity, AssessmentInput(sex=sex)) == 0.0

    def test_gender_match_is_case_insensitive(self, make_entity):
        entity = make_entity("f", ["x"], genders=[SEX_FEMALE])
        assert ScoringEngine.gender_factor(entity, AssessmentInput(sex="feminino")) == 10.0

    def test_unrestricted_entity_ignores_demographics(self, make_entity):
        entity = make_entity("any", ["x"])
        assessment = AssessmentInput(sex=SEX_MALE, age_group=AGE_ELDER)
        assert ScoringEngine.gender_factor(entity, assessment) == 0.0
        assert ScoringEngine.age_factor(entity, assessment) == 0.0

    def test_age_match_and_mismatch(self, make_entity):
        entity = make_entity("teen", ["x"], age_groups=[AGE_TEEN])
        assert ScoringEngine.age_factor(entity, AssessmentInput(age_group=AGE_TEEN)) == 10.0
        assert ScoringEngine.age_factor(entity, AssessmentInput(age_group="adolescente")) == 10.0
        assert ScoringEngine.age_factor(entity, AssessmentInput(age_group=AGE_ADULT)) == -6.0
        assert ScoringEngine.age_factor(entity, AssessmentInput(age_group="")) == 0.0


# =============================================================================
# Confidence
# =============================================================================

class TestConfidence:

    def test_no_matches_gives_floor_confidence(self):
        assert ScoringEngine.confidence_for(0, 0.0) == 0.18

    def test_formula(self):
        assert ScoringEngine.confidence_for(2, 0.5) == pytest.approx(0.35 + 0.275 + 0.06)

    def test_clamped_to_maximum(self):
        assert ScoringEngine.confidence_for(4, 1.0) == 0.95

    def test_bounds_hold_for_random_inputs(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        rng = random.Random(7)

        for _ in range(200):
            answers = {t: rng.random() < 0.3 for t in TRAIT_TAGS}
            assessment = AssessmentInput(
                sex=rng.choice([None, SEX_MALE, SEX_FEMALE, SEX_UNDISCLOSED]),
                age_group=rng.choice([AGE_CHILD, AGE_TEEN, AGE_ADULT, AGE_ELDER]),
                answers=answers,
            )
            for candidate in engine.rank(assessment, 5):
                assert 0.18 <= candidate.confidence <= 0.95
                assert (candidate.confidence == 0.18) == (candidate.match_count == 0)

    def test_empty_answers_choose_returns_floor_confidence(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        chosen = engine.choose(AssessmentInput(answers={}), random.Random(1))

        assert not chosen.is_empty
        assert chosen.entity_id in sample_catalog
        assert chosen.confidence == 0.18
        assert chosen.matched_traits == ()


# =============================================================================
# Ranking
# =============================================================================

class TestRank:

    def test_length_membership_and_uniqueness(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        rng = random.Random(3)

        for top_n in (1, 3, 5, 20):
            answers = {t: rng.random() < 0.5 for t in TRAIT_TAGS}
            ranked = engine.rank(AssessmentInput(answers=answers), top_n)
            ids = [c.entity_id for c in ranked]

            assert len(ranked) <= top_n
            assert len(set(ids)) == len(ids)
            assert all(i in sample_catalog for i in ids)

    def test_identical_entities_keep_catalog_order(self, make_entity):
        first = make_entity("first", ["x"])
        second = make_entity("second", ["x"])
        assessment = AssessmentInput(answers=_answers("x"))

        forward = ScoringEngine([first, second]).rank(assessment, 2)
        backward = ScoringEngine([second, first]).rank(assessment, 2)

        assert [c.entity_id for c in forward] == ["first", "second"]
        assert [c.entity_id for c in backward] == ["second", "first"]

    def test_only_positive_matches_when_any_exist(self, make_entity):
        engine = ScoringEngine([
            make_entity("a", ["x"]),
            make_entity("b", ["y"]),
            make_entity("c", ["z"]),
        ])
        ranked = engine.rank(AssessmentInput(answers=_answers("y")), 3)
        assert [c.entity_id for c in ranked] == ["b"]

    def test_no_matches_returns_full_ranking(self, sample_catalog):
        ranked = ScoringEngine(sample_catalog).rank(AssessmentInput(answers={}), 3)
        assert len(ranked) == 3
        assert all(c.match_count == 0 for c in ranked)

    def test_gated_entity_wins_for_matching_profile(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        assessment = AssessmentInput(
            sex=SEX_FEMALE,
            age_group=AGE_ADULT,
            answers=_answers("mood_swings", "unexplained_fatigue"),
        )
        assert engine.rank(assessment, 3)[0].entity_id == "lamashtu"

    def test_rank_is_deterministic(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        assessment = AssessmentInput(answers=_answers("voice_shift", "mood_swings"))
        assert engine.rank(assessment, 3) == engine.rank(assessment, 3)

    def test_empty_catalog(self):
        engine = ScoringEngine([])
        assert engine.rank(AssessmentInput(answers=_answers("x")), 3) == []
        assert engine.choose(AssessmentInput()) == NO_ENTITY

    def test_zero_top_n(self, sample_catalog):
        assert ScoringEngine(sample_catalog).rank(AssessmentInput(), 0) == []

    def test_to_dict_hides_ranking_internals(self, make_entity):
        engine = ScoringEngine([make_entity("a", ["x"])])
        data = engine.rank(AssessmentInput(answers=_answers("x")), 1)[0].to_dict()
        assert set(data) == {"entity_id", "confidence", "matched_traits"}


# =============================================================================
# Choose
# =============================================================================

class TestChoose:

    def test_single_best_is_always_chosen(self, make_entity):
        engine = ScoringEngine([make_entity("a", ["x", "y"]), make_entity("b", ["x"])])
        assessment = AssessmentInput(answers=_answers("x", "y"))
        for seed in range(20):
            assert engine.choose(assessment, random.Random(seed)).entity_id == "a"

    def test_ties_are_broken_roughly_uniformly(self, make_entity):
        engine = ScoringEngine([make_entity("a", ["x"]), make_entity("b", ["x"])])
        assessment = AssessmentInput(answers=_answers("x"))
        rng = random.Random(42)

        counts = {"a": 0, "b": 0}
        for _ in range(2000):
            counts[engine.choose(assessment, rng).entity_id] += 1

        assert 800 < counts["a"] < 1200
        assert 800 < counts["b"] < 1200

    def test_seeded_rng_is_reproducible(self, make_entity):
        engine = ScoringEngine([make_entity(i, ["x"]) for i in ("a", "b", "c")])
        assessment = AssessmentInput(answers=_answers("x"))

        first = [engine.choose(assessment, random.Random(s)).entity_id for s in range(10)]
        second = [engine.choose(assessment, random.Random(s)).entity_id for s in range(10)]
        assert first == second

    def test_chosen_is_in_top_three(self, sample_catalog):
        engine = ScoringEngine(sample_catalog)
        assessment = AssessmentInput(answers=_answers("mood_swings"))
        top_ids = {c.entity_id for c in engine.rank(assessment, 3)}
        for seed in range(30):
            assert engine.choose(assessment, random.Random(seed)).entity_id in top_ids

    def test_works_without_injected_rng(self, sample_catalog):
        chosen = ScoringEngine(sample_catalog).choose(AssessmentInput(answers=_answers("mood_swings")))
        assert chosen.entity_id in sample_catalog

    def test_catalog_object_can_back_the_engine(self, sample_catalog):
        engine = ScoringEngine(EntityCatalog(list(sample_catalog)[:2]))
        assert len(engine.entities) == 2
