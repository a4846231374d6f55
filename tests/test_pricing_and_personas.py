"""Tests for credit pricing and persona resolution."""

import math

import pytest

from pratikai.services.personas import (
    Persona,
    normalize_persona_key,
    resolve_persona,
    system_instruction,
)
from pratikai.services.pricing import CHARS_PER_CREDIT, MINIMUM_CHARGE, price_for


class TestPricing:
    def test_empty_text_costs_minimum(self):
        assert price_for("") == MINIMUM_CHARGE

    @pytest.mark.parametrize(
        "length,expected",
        [(1, 3), (150, 3), (151, 4), (200, 4), (201, 5), (1000, 20), (2049, 41)],
    )
    def test_cost_by_length(self, length, expected):
        assert price_for("a" * length) == expected

    def test_never_below_minimum_and_ceil_above_it(self):
        for length in range(0, 600, 7):
            cost = price_for("x" * length)
            assert cost >= MINIMUM_CHARGE
            per_length = math.ceil(length / CHARS_PER_CREDIT)
            if per_length > MINIMUM_CHARGE:
                assert cost == per_length

    def test_counts_characters_not_bytes(self):
        assert price_for("ş" * 151) == 4


class TestPersonas:
    @pytest.mark.parametrize(
        "key,persona",
        [
            ("muhendis", Persona.ENGINEER),
            ("avukat", Persona.LAWYER),
            ("doktor", Persona.DOCTOR),
            ("ogretmen", Persona.TEACHER),
            ("is-analisti", Persona.ANALYST),
            ("tasarimci", Persona.DESIGNER),
        ],
    )
    def test_known_keys(self, key, persona):
        assert resolve_persona(key) is persona

    def test_normalizes_case_and_whitespace(self):
        assert normalize_persona_key("  Is   Analisti ") == "is-analisti"
        assert resolve_persona("IS ANALISTI") is Persona.ANALYST
        assert resolve_persona("Doktor") is Persona.DOCTOR

    def test_english_aliases(self):
        assert resolve_persona("Doctor") is Persona.DOCTOR
        assert resolve_persona("business analyst") is Persona.ANALYST

    @pytest.mark.parametrize("key", ["astronot", "", None, "   "])
    def test_unknown_keys_fall_back_to_default(self, key):
        assert resolve_persona(key) is Persona.DEFAULT

    def test_default_uses_engineering_instruction(self):
        assert system_instruction(Persona.DEFAULT) == system_instruction(Persona.ENGINEER)

    def test_every_persona_has_an_instruction(self):
        for persona in Persona:
            assert system_instruction(persona).strip()

    def test_doctor_does_not_diagnose_and_lawyer_disclaims(self):
        assert "Teşhis koymaz" in system_instruction(Persona.DOCTOR)
        assert "hukuki tavsiye değil" in system_instruction(Persona.LAWYER)
