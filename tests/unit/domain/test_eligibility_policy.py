"""Tests for the category → specialty eligibility filter."""

from app.domain.policies.eligibility import specialties_match


def test_no_category_matches_everyone():
    assert specialties_match(("Pintor",), None)
    assert specialties_match((), "")


def test_keyword_match_is_case_insensitive_substring():
    assert specialties_match(("PLOMERO matriculado",), "plomeria")
    assert specialties_match(("Instalador sanitario",), "Plomeria")


def test_other_trade_does_not_match():
    assert not specialties_match(("Pintor", "Decorador"), "plomeria")


def test_unknown_category_matches_nobody():
    assert not specialties_match(("Plomero",), "astronautica")


def test_any_declared_specialty_is_enough():
    assert specialties_match(("Pintor", "Electricista"), "electricidad")


def test_empty_specialty_entries_are_ignored():
    assert not specialties_match(("", None), "limpieza")
