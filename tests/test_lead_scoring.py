"""Tests for Lead Scoring components."""

import itertools

import pytest
from lead_scoring.field_normalizer import LeadAttributes, normalize_lead_data
from lead_scoring.dimension_scorers import (
    MAX_POINTS,
    score_interest,
    score_authority,
    score_need,
    score_timing,
    score_budget,
)
from lead_scoring.scoring_model import (
    Qualification,
    ScoreBreakdown,
    calculate_score,
    classify_total,
)


# ── Field Normalizer ──────────────────────────────────

class TestFieldNormalizer:
    def test_missing_fields_are_none(self):
        attrs = normalize_lead_data({})
        assert attrs.interesse_iniziale is None
        assert attrs.nome is None

    def test_none_input(self):
        assert normalize_lead_data(None) == LeadAttributes()

    def test_unknown_keys_ignored(self):
        attrs = normalize_lead_data({"ruolo_aziendale": "CEO", "colore": "blu"})
        assert attrs.ruolo_aziendale == "CEO"
        assert not hasattr(attrs, "colore")

    def test_scalars_coerced_to_str(self):
        attrs = normalize_lead_data({"budget_indicativo": 2500, "nome": True})
        assert attrs.budget_indicativo == "2500"
        assert attrs.nome == "True"

    def test_containers_dropped(self):
        attrs = normalize_lead_data({"principale_sfida": ["a", "b"]})
        assert attrs.principale_sfida is None

    def test_passthrough_attributes(self):
        attrs = LeadAttributes(nome="Anna")
        assert normalize_lead_data(attrs) is attrs

    def test_input_not_mutated(self, hot_lead_data):
        before = dict(hot_lead_data)
        normalize_lead_data(hot_lead_data)
        assert hot_lead_data == before


# ── Dimension Scorers ─────────────────────────────────

class TestInterestScorer:
    @pytest.mark.parametrize("value,points", [
        ("Aumentare l'efficienza operativa", 25),
        ("Ridurre i costi", 20),
        ("Risparmiare tempo", 18),
        ("Migliorare la qualità del servizio", 15),
        ("Altro", 0),
        ("", 0),
        (None, 0),
    ])
    def test_points(self, value, points):
        assert score_interest(value).points == points

    def test_first_match_wins(self):
        assert score_interest("Ridurre i costi e Aumentare l'efficienza").points == 25

    def test_no_insight_on_zero(self):
        assert score_interest(None).insight is None

    def test_case_sensitive(self):
        assert score_interest("ridurre i costi").points == 0


class TestAuthorityScorer:
    @pytest.mark.parametrize("value,points", [
        ("Proprietario", 25),
        ("CEO", 25),
        ("Direttore commerciale", 20),
        ("Marketing Manager", 20),
        ("Responsabile acquisti", 15),
        ("Impiegato", 5),
        (None, 5),
    ])
    def test_points(self, value, points):
        assert score_authority(value).points == points

    def test_ceo_beats_responsabile(self):
        assert score_authority("Responsabile e CEO").points == 25

    def test_manager_beats_responsabile(self):
        assert score_authority("Responsabile Manager").points == 20

    def test_fallback_has_insight(self):
        assert score_authority(None).insight


class TestNeedScorer:
    def test_urgency_keyword(self):
        assert score_need("problema urgente").points == 20

    def test_urgency_is_case_insensitive(self):
        assert score_need("URGENTE").points == 20
        assert score_need("Grande Difficoltà").points == 20

    def test_urgency_beats_length(self):
        assert score_need("x" * 80 + " problema").points == 20

    def test_long_description(self):
        text = "Vorremmo organizzare meglio il lavoro del team commerciale ogni giorno"
        assert len(text) > 50
        assert score_need(text).points == 15

    def test_medium_description(self):
        text = "Gestire meglio i clienti"
        assert 20 < len(text) <= 50
        assert score_need(text).points == 10

    def test_length_boundaries(self):
        assert score_need("a" * 50).points == 10
        assert score_need("a" * 51).points == 15
        assert score_need("a" * 20).points == 0
        assert score_need("a" * 21).points == 10

    def test_length_counts_characters(self):
        # 11 emoji are 22 UTF-16 units but 11 characters
        assert score_need("\U0001F680" * 11).points == 0
        assert score_need("\U0001F680" * 21).points == 10

    def test_short_or_missing(self):
        assert score_need("ok").points == 0
        assert score_need("").points == 0
        assert score_need(None).points == 0
        assert score_need(None).insight is None


class TestTimingScorer:
    @pytest.mark.parametrize("value,points", [
        ("Immediatamente", 20),
        ("Entro 1 mese", 15),
        ("Entro 3 mesi", 10),
        ("Entro 6 mesi", 5),
        ("non sappiamo", 2),
        (None, 2),
    ])
    def test_points(self, value, points):
        assert score_timing(value).points == points

    def test_fallback_has_insight(self):
        assert score_timing(None).insight


class TestBudgetScorer:
    @pytest.mark.parametrize("value,points", [
        ("Oltre €2500 al mese", 10),
        ("€1000-2500", 8),
        ("€500-1000", 6),
        ("Sotto €500", 3),
        ("non specificato", 0),
        (None, 0),
    ])
    def test_points(self, value, points):
        assert score_budget(value).points == points

    def test_fallback_has_insight(self):
        assert score_budget(None).insight


# ── Aggregator ────────────────────────────────────────

class TestCalculateScore:
    def test_scenario_hot(self, hot_lead_data):
        result = calculate_score(hot_lead_data)
        assert result.breakdown == ScoreBreakdown(
            interest=25, authority=25, need=20, timing=20, budget=10
        )
        assert result.total == 100
        assert result.qualification == Qualification.HOT

    def test_scenario_cold(self, cold_lead_data):
        result = calculate_score(cold_lead_data)
        assert result.breakdown.to_dict() == {
            "interest": 0, "authority": 5, "need": 0, "timing": 2, "budget": 0,
        }
        assert result.total == 7
        assert result.qualification == Qualification.COLD

    def test_all_missing(self):
        result = calculate_score({})
        assert result.total == 7
        assert result.qualification == Qualification.COLD

    def test_total_70_is_hot(self):
        result = calculate_score({
            "interesse_iniziale": "Aumentare l'efficienza",
            "ruolo_aziendale": "CEO",
            "timeline_implementazione": "Immediatamente",
        })
        assert result.total == 70
        assert result.qualification == Qualification.HOT

    def test_total_69_is_warm(self):
        result = calculate_score({
            "interesse_iniziale": "Risparmiare tempo",
            "ruolo_aziendale": "CEO",
            "principale_sfida": "Gestire meglio i clienti",
            "timeline_implementazione": "Entro 3 mesi",
            "budget_indicativo": "€500-1000 al mese",
        })
        assert result.total == 69
        assert result.qualification == Qualification.WARM

    def test_total_40_is_warm(self):
        result = calculate_score({
            "interesse_iniziale": "Migliorare la qualità",
            "ruolo_aziendale": "Responsabile",
            "timeline_implementazione": "Entro 3 mesi",
        })
        assert result.total == 40
        assert result.qualification == Qualification.WARM

    def test_total_39_is_cold(self):
        result = calculate_score({
            "interesse_iniziale": "Risparmiare tempo",
            "principale_sfida": "ok",
            "timeline_implementazione": "Entro 3 mesi",
            "budget_indicativo": "€500-1000",
        })
        assert result.total == 39
        assert result.qualification == Qualification.COLD

    @pytest.mark.parametrize("total,tier", [
        (100, Qualification.HOT),
        (70, Qualification.HOT),
        (69, Qualification.WARM),
        (40, Qualification.WARM),
        (39, Qualification.COLD),
        (0, Qualification.COLD),
    ])
    def test_classify_total(self, total, tier):
        assert classify_total(total) == tier

    def test_insights_order(self, hot_lead_data):
        result = calculate_score(hot_lead_data)
        assert len(result.insights) == 6
        assert result.insights[0] == score_interest(hot_lead_data["interesse_iniziale"]).insight
        assert result.insights[-1].startswith("🔥")

    def test_insights_skip_empty_dimensions(self):
        result = calculate_score({})
        # authority, timing, budget fallbacks + tier summary
        assert len(result.insights) == 4
        assert result.insights[-1].startswith("🔵")

    def test_tier_summaries_differ(self, hot_lead_data, cold_lead_data):
        warm = calculate_score({
            "interesse_iniziale": "Migliorare la qualità",
            "ruolo_aziendale": "Responsabile",
            "timeline_implementazione": "Entro 3 mesi",
        })
        summaries = {
            calculate_score(hot_lead_data).insights[-1],
            warm.insights[-1],
            calculate_score(cold_lead_data).insights[-1],
        }
        assert len(summaries) == 3

    def test_idempotent(self, hot_lead_data):
        assert calculate_score(hot_lead_data) == calculate_score(hot_lead_data)

    def test_does_not_mutate_input(self, hot_lead_data):
        before = dict(hot_lead_data)
        calculate_score(hot_lead_data)
        assert hot_lead_data == before

    def test_accepts_lead_attributes(self, hot_lead_data):
        attrs = LeadAttributes.from_submission(hot_lead_data)
        assert calculate_score(attrs) == calculate_score(hot_lead_data)

    def test_to_dict(self, cold_lead_data):
        data = calculate_score(cold_lead_data).to_dict()
        assert data["total"] == 7
        assert data["qualification"] == "cold"
        assert isinstance(data["insights"], list)

    def test_bounds_and_sum(self):
        samples = {
            "interesse_iniziale": [None, "Ridurre i costi", "Aumentare l'efficienza"],
            "ruolo_aziendale": [None, "Responsabile", "Proprietario"],
            "principale_sfida": [None, "Gestire meglio i clienti", "difficoltà"],
            "timeline_implementazione": [None, "6 mesi", "Immediatamente"],
            "budget_indicativo": [None, "Sotto €500", "Oltre €2500"],
        }
        keys = list(samples)
        for values in itertools.product(*(samples[k] for k in keys)):
            result = calculate_score(dict(zip(keys, values)))
            b = result.breakdown
            assert 0 <= result.total <= 100
            assert result.total == b.interest + b.authority + b.need + b.timing + b.budget
            for dimension, value in b.to_dict().items():
                assert 0 <= value <= MAX_POINTS[dimension]
