"""
Tests for the seed catalog and the question bank.
"""
import random

import pytest

from possessao.core.catalog import EntityCatalog, get_catalog, sample_entities
from possessao.core.entities import AGE_GROUPS, SEX_OPTIONS
from possessao.core.questions import QUESTION_BANK, TRAIT_TAGS, random_questions


class TestCatalog:

    def test_seed_ids_in_order(self, sample_catalog):
        assert sample_catalog.ids() == [
            "pazuzu", "lamashtu", "legiao", "beelzebub", "aka_oni", "ao_oni",
            "namahage", "ifrit", "marid", "ghul", "silat",
        ]

    def test_ids_are_unique(self):
        ids = [e.id for e in sample_entities()]
        assert len(ids) == len(set(ids)) == 11

    def test_every_entity_has_content(self, sample_catalog):
        for entity in sample_catalog:
            assert entity.name and entity.description
            assert entity.traits
            assert entity.traditions

    def test_gating_uses_closed_vocabularies(self, sample_catalog):
        for entity in sample_catalog:
            assert entity.affected_genders <= set(SEX_OPTIONS)
            assert entity.affected_age_groups <= set(AGE_GROUPS)

    def test_known_gating(self, sample_catalog):
        lamashtu = sample_catalog.get("lamashtu")
        assert lamashtu.affected_genders == {"Feminino"}
        assert lamashtu.affected_age_groups == {"Adulto", "Idoso"}
        assert sample_catalog.get("pazuzu").affected_genders == frozenset()

    def test_every_trait_has_a_question(self, sample_catalog):
        assert set(sample_catalog.trait_vocabulary()) <= set(TRAIT_TAGS)

    def test_lookup(self, sample_catalog):
        assert "legiao" in sample_catalog
        assert "nope" not in sample_catalog
        assert sample_catalog.get("nope") is None
        assert len(sample_catalog) == 11

    def test_catalog_is_immutable(self, sample_catalog):
        entity = sample_catalog.get("legiao")
        with pytest.raises(Exception):
            entity.name = "Outro"
        assert isinstance(sample_catalog.get_all(), tuple)

    def test_empty_catalog(self):
        catalog = EntityCatalog([])
        assert len(catalog) == 0
        assert catalog.trait_vocabulary() == []

    def test_global_catalog_is_shared(self):
        assert get_catalog() is get_catalog()

    def test_to_dict(self, sample_catalog):
        data = sample_catalog.get("lamashtu").to_dict()
        assert data["id"] == "lamashtu"
        assert data["affected_age_groups"] == ["Adulto", "Idoso"]
        assert isinstance(data["traits"], list)


class TestQuestions:

    def test_bank_covers_sixteen_unique_traits(self):
        assert len(QUESTION_BANK) == 16
        assert len(set(TRAIT_TAGS)) == 16

    def test_default_quantity(self):
        questions = random_questions(rng=random.Random(0))
        assert len(questions) == 7
        assert len({q.trait for q in questions}) == 7

    def test_seeded_selection_is_reproducible(self):
        first = random_questions(7, random.Random(5))
        second = random_questions(7, random.Random(5))
        assert first == second

    def test_quantity_is_capped_by_bank_size(self):
        assert len(random_questions(50, random.Random(0))) == 16
        assert random_questions(0) == []

    def test_bank_is_not_mutated(self):
        before = list(QUESTION_BANK)
        random_questions(16, random.Random(1))
        assert QUESTION_BANK == before

    def test_perspectives(self):
        question = QUESTION_BANK[0]
        assert question.text() == question.first_person
        assert question.text("third") == question.third_person
        assert question.third_person.endswith("?")
