"""Unit tests for the two-stage scorecard engine."""
import random

import pytest

from underwriting.scorecard import (
    ComponentScores,
    Decision,
    ScorecardEngine,
    compute_component_scores,
    parse_profile,
    resolve_config,
    score,
    score_components,
)
from underwriting.scorecard.profile import (
    EmploymentType,
    GuarantorLocation,
    HealthStatus,
    MaritalStatus,
    ReferenceRating,
    UtilityPaymentHistory,
)
from underwriting.scorecard.scorecard_config import COMPONENTS
from underwriting.scorecard.scorecard_engine import (
    NO_CONCERNS_EXPLANATION,
    best_reference_points,
    build_explanations,
    classify_decision,
    compute_pd,
    rescale_components,
    score_housing,
    score_personal,
)


BASE_PROFILE = {
    "age": 30,
    "maritalStatus": "Married",
    "numberOfDependents": 1,
    "employmentType": "Permanent",
    "monthlyNetSalary": 3000,
    "employmentYears": 6,
    "rentAmount": 800,
    "monthlyDebtPayments": 0,
    "savingsBalance": 6000,
    "otherObligations": 0,
    "hasGuarantor": True,
    "guarantorLocation": "Tunisia",
    "monthsAtResidence": 40,
    "numberOfPastDefaults": 0,
    "landlordReferences": [{"rating": "Positive"}],
    "utilityPaymentHistory": "Always",
    "healthStatus": "Good",
    "verifiedId": True,
}


class TestReferenceScenarios:
    """End-to-end scoring of known applicants."""

    def test_fully_qualified_applicant_is_accepted(self):
        result = score(BASE_PROFILE)

        assert result.components == {
            "personal": 10.0,
            "employment": 25.0,
            "financial": 20.0,
            "housing": 25.0,
            "other": 20.0,
        }
        assert result.safety_score == 100.0
        assert result.pd_12m == 0.0
        assert result.decision == Decision.ACCEPT
        assert result.explanations == [NO_CONCERNS_EXPLANATION]

    def test_unemployed_applicant_without_savings(self):
        profile = dict(BASE_PROFILE, monthlyNetSalary=0, employmentType="Unemployed", savingsBalance=0)
        result = score(profile)

        # Type 0, unknown ratio +5, six years +5
        assert result.components["employment"] == 10.0
        assert result.components["financial"] == 0.0
        assert "High debt or low savings." in result.explanations
        # 10 of 25 is exactly the 40% cut-off, which is not below it
        assert "Employment not stable or low income." not in result.explanations
        assert result.safety_score == 65.0
        assert result.pd_12m == 0.0875
        assert result.decision == Decision.CONDITIONAL_ACCEPT

    def test_all_zero_weights_score_zero(self):
        config = {"weights": {"personal": 0, "employment": 0, "financial": 0, "housing": 0, "other": 0}}
        result = score(BASE_PROFILE, config)

        assert result.safety_score == 0.0
        assert result.pd_12m == 0.25
        assert result.decision == Decision.DECLINE
        # Zero-weight components are never reported as weak
        assert result.explanations == [NO_CONCERNS_EXPLANATION]

    def test_empty_profile(self):
        result = score({})

        assert result.components == {
            "personal": 2.0,
            "employment": 6.0,
            "financial": 0.0,
            "housing": 8.0,
            "other": 10.0,
        }
        assert result.safety_score == 26.0
        assert result.pd_12m == 0.185
        assert result.decision == Decision.DECLINE
        assert result.explanations == [
            "Weak housing history or missing guarantor.",
            "Employment not stable or low income.",
            "High debt or low savings.",
        ]


class TestStageA:
    """Fixed-scale component rules."""

    @pytest.mark.parametrize("age, expected", [(18, 7), (21, 10), (60, 10), (61, 7), (None, 5)])
    def test_personal_age_bands(self, age, expected):
        profile = parse_profile({"age": age, "maritalStatus": "Married", "numberOfDependents": 0})
        # Married +3, no dependents +2
        assert score_personal(profile) == expected

    def test_many_dependents_earn_nothing(self):
        profile = parse_profile({"age": 30, "maritalStatus": "Single", "numberOfDependents": 5})
        assert score_personal(profile) == 7.0

    def test_best_landlord_reference_wins(self):
        mixed = parse_profile({"landlordReferences": [
            {"rating": "Negative"}, {"rating": "Positive"}, {"rating": "Neutral"},
        ]})
        neutral_only = parse_profile({"landlordReferences": [{"rating": "Neutral"}]})

        assert best_reference_points(mixed.landlord_references) == 5
        assert best_reference_points(()) == 0
        assert score_housing(mixed) - score_housing(neutral_only) == 3

    def test_guarantor_location_requires_guarantor(self):
        without = parse_profile({"hasGuarantor": False, "guarantorLocation": "Tunisia"})
        with_guarantor = parse_profile({"hasGuarantor": True, "guarantorLocation": "Tunisia"})
        assert score_housing(with_guarantor) - score_housing(without) == 8

    def test_components_stay_within_fixed_scale(self):
        components = compute_component_scores(parse_profile(BASE_PROFILE)).as_dict()
        assert components == {
            "personal": 10.0,
            "employment": 25.0,
            "financial": 20.0,
            "housing": 25.0,
            "other": 20.0,
        }

    def test_better_utility_history_never_lowers_score(self):
        scores = [
            score(dict(BASE_PROFILE, utilityPaymentHistory=history)).safety_score
            for history in ("Frequently", "Sometimes", "Always")
        ]
        assert scores == sorted(scores)

    def test_more_defaults_never_raise_score(self):
        scores = [
            score(dict(BASE_PROFILE, numberOfPastDefaults=n)).safety_score
            for n in (0, 1, 2, 3, 10)
        ]
        assert scores == sorted(scores, reverse=True)


class TestStageB:
    """Rescaling, aggregation and decision."""

    def test_rescale_to_configured_weights(self):
        config = resolve_config({"weights": {"housing": 40, "personal": 5}})
        components = ComponentScores(personal=5, employment=25, financial=10, housing=20, other=20)

        scaled = rescale_components(components, config.weights)

        assert scaled == {
            "personal": 2.5,
            "employment": 25.0,
            "financial": 10.0,
            "housing": 32.0,
            "other": 20.0,
        }

    def test_reweighting_keeps_perfect_score(self):
        result = score(BASE_PROFILE, {"weights": {"housing": 40, "other": 5}})
        assert result.safety_score == 100.0
        assert result.components["housing"] == 40.0

    def test_pd_is_linear_in_safety_score(self):
        assert compute_pd(100, 0.25) == 0.0
        assert compute_pd(0, 0.25) == 0.25
        assert compute_pd(60, 0.5) == 0.2

    def test_decision_boundaries_are_inclusive(self):
        thresholds = resolve_config(None).decision_thresholds
        assert classify_decision(0.03, thresholds) == Decision.ACCEPT
        assert classify_decision(0.0301, thresholds) == Decision.CONDITIONAL_ACCEPT
        assert classify_decision(0.10, thresholds) == Decision.CONDITIONAL_ACCEPT
        assert classify_decision(0.1001, thresholds) == Decision.DECLINE

    def test_lower_pd_never_gets_harsher_decision(self):
        thresholds = resolve_config(None).decision_thresholds
        decisions = [classify_decision(pd / 100, thresholds) for pd in range(0, 26)]
        severities = [d.severity for d in decisions]
        assert severities == sorted(severities)

    def test_other_component_uses_thirty_percent_cutoff(self):
        weights = resolve_config(None).weights
        scaled = {"personal": 10, "employment": 25, "financial": 20, "housing": 25, "other": 7.9}
        # 39.5% would be weak for housing, employment or financial
        assert build_explanations(scaled, weights) == [NO_CONCERNS_EXPLANATION]

        scaled["other"] = 5.99
        assert build_explanations(scaled, weights) == ["Utility payments or verification missing."]

    def test_score_components_matches_score(self):
        profile = parse_profile(BASE_PROFILE)
        config = resolve_config({"pdMax": 0.4})
        assert score_components(compute_component_scores(profile), config) == score(profile, config)


class TestScorecardEngine:
    """Engine bound to one configuration."""

    def test_scoring_is_idempotent(self):
        engine = ScorecardEngine({"weights": {"financial": 30}})
        assert engine.score(BASE_PROFILE) == engine.score(BASE_PROFILE)

    def test_score_batch(self):
        engine = ScorecardEngine()
        results = engine.score_batch([BASE_PROFILE, {}])
        assert [r.decision for r in results] == [Decision.ACCEPT, Decision.DECLINE]

    def test_get_weights(self):
        engine = ScorecardEngine({"weights": {"personal": 15}})
        assert engine.get_weights()["personal"] == 15.0
        assert engine.get_weights()["housing"] == 25.0

    def test_result_serializes_with_wire_names(self):
        payload = score(BASE_PROFILE).to_dict()
        assert set(payload) == {"safetyScore", "PD_12m", "decision", "components", "explanations"}
        assert payload["decision"] == "accept"


def _values(enum_cls):
    return [member.value for member in enum_cls]


def random_profile(rng):
    """Applicant with every field drawn independently, absent values included."""
    return {
        "age": rng.choice([None, rng.randint(18, 120)]),
        "maritalStatus": rng.choice([None] + _values(MaritalStatus)),
        "numberOfDependents": rng.choice([None, rng.randint(0, 8)]),
        "employmentType": rng.choice([None] + _values(EmploymentType)),
        "monthlyNetSalary": rng.choice([None, 0, round(rng.uniform(0, 10000), 2)]),
        "employmentYears": rng.choice([None, rng.randint(0, 40)]),
        "monthlyDebtPayments": round(rng.uniform(0, 3000), 2),
        "savingsBalance": round(rng.uniform(0, 50000), 2),
        "otherObligations": round(rng.uniform(0, 2000), 2),
        "rentAmount": rng.choice([None, 0, round(rng.uniform(100, 5000), 2)]),
        "hasGuarantor": rng.random() < 0.5,
        "guarantorLocation": rng.choice(_values(GuarantorLocation)),
        "monthsAtResidence": rng.randint(0, 120),
        "numberOfPastDefaults": rng.randint(0, 5),
        "landlordReferences": [
            {"rating": rng.choice(_values(ReferenceRating))} for _ in range(rng.randint(0, 3))
        ],
        "utilityPaymentHistory": rng.choice(_values(UtilityPaymentHistory)),
        "healthStatus": rng.choice(_values(HealthStatus)),
        "verifiedId": rng.random() < 0.5,
    }


def random_config(rng):
    """Whole, fractional and zero weights; values on the 2- and 4-decimal grids used by the engine."""
    accept_pd = round(rng.uniform(0, 0.2), 4)
    return {
        "weights": {
            name: rng.choice([0, rng.randint(1, 100), round(rng.uniform(0, 50), 2)])
            for name in COMPONENTS
        },
        "pdMax": round(rng.uniform(0.01, 1), 4),
        "decisionThresholds": {
            "acceptPd": accept_pd,
            "conditionalPd": round(accept_pd + rng.uniform(0, 0.3), 4),
        },
    }


class TestScoringProperties:
    """Invariants that must hold for every profile and configuration."""

    @pytest.mark.parametrize("rent", [0, 500, 800, 2000])
    def test_more_savings_never_lowers_financial(self, rent):
        financial = [
            compute_component_scores(
                parse_profile(dict(BASE_PROFILE, rentAmount=rent, savingsBalance=savings))
            ).financial
            for savings in range(0, 10001, 250)
        ]
        assert financial == sorted(financial)

    @pytest.mark.parametrize("seed", range(10))
    def test_bounds_hold_for_random_profiles_and_configs(self, seed):
        rng = random.Random(seed)
        for _ in range(100):
            config = resolve_config(random_config(rng))
            result = score(random_profile(rng), config)
            weights = config.weights.as_dict()

            assert 0 <= result.safety_score <= 100
            assert 0 <= result.pd_12m <= config.pd_max
            for name in COMPONENTS:
                assert 0 <= result.components[name] <= weights[name]
            assert result.decision == classify_decision(result.pd_12m, config.decision_thresholds)
            assert result.explanations

    @pytest.mark.parametrize("seed", range(5))
    def test_zero_weights_score_zero_for_any_profile(self, seed):
        rng = random.Random(seed)
        engine = ScorecardEngine({"weights": {name: 0 for name in COMPONENTS}, "pdMax": 0.3})
        for _ in range(100):
            result = engine.score(random_profile(rng))
            assert result.safety_score == 0.0
            assert result.pd_12m == 0.3
            assert result.decision == Decision.DECLINE
