"""
Unit tests for the attribution stability engine.

Tests:
- zero-noise samples equal the baselines; anchor timepoint scores 1.0
- reference ranking is fixed (anchor, zero noise) whatever the selection
- positional matching against the reference, including the tie in "Day 7"
- additive noise with scripted draws, floored at zero
- stability always within [0.5, 1.0]; raw value below the floor is clamped
- empty feature set defines 0/0 as no agreement
- parameter rejection
"""

import pytest

from core.config import AttributionConfig
from core.errors import InvalidParameterError
from core.schema import DEFAULT_REFERENCE_DATASET, ReferenceDataset
from engine import attribute
from engine.attribution import AttributionStabilityEngine, ImportanceSample
from noise.sources import UniformNoiseSource

DAY1_REFERENCE = (
    "Freshness", "Sillage", "Texture", "Longevity",
    "Package", "Eco Score", "Price", "Brand",
)


# ---------------------------------------------------------------------------
# Zero noise
# ---------------------------------------------------------------------------

def test_day1_zero_noise_matches_baseline_and_scores_one():
    result = attribute("Day 1", 0.0)

    assert {s.name: s.value for s in result.samples} == dict(DEFAULT_REFERENCE_DATASET["Day 1"])
    assert result.matches == result.n_features == 8
    assert result.raw_stability == pytest.approx(1.0)
    assert result.stability == 1.0


def test_reference_ranking_is_day1_descending():
    engine = AttributionStabilityEngine()
    assert engine.reference_ranking == DAY1_REFERENCE


@pytest.mark.parametrize("timepoint", ["Day 1", "Day 7", "Day 14"])
def test_reference_ranking_independent_of_selection(timepoint):
    result = AttributionStabilityEngine().attribute(timepoint, 0.0)
    assert result.reference_ranking == DAY1_REFERENCE


def test_day14_disagrees_with_reference():
    result = attribute("Day 14", 0.0)

    assert result.current_ranking == (
        "Sillage", "Longevity", "Texture", "Freshness",
        "Eco Score", "Package", "Price", "Brand",
    )
    # Texture, Price, Brand line up
    assert result.matches == 3
    assert result.raw_stability == pytest.approx(3 / 8 * 0.3 + 0.7)
    assert result.stability < 1.0


def test_day7_tie_keeps_insertion_order():
    # Freshness and Texture are both 0.18; Freshness comes first in the table
    result = attribute("Day 7", 0.0)

    assert result.current_ranking[:3] == ("Sillage", "Freshness", "Texture")
    assert result.matches == 4
    assert result.raw_stability == pytest.approx(0.85)


def test_zero_noise_does_not_consume_noise(scripted_noise):
    source = scripted_noise([])
    AttributionStabilityEngine(noise_source=source).attribute("Day 14", 0.0)
    assert source.consumed == 0


# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("timepoint", ["Day 1", "Day 7", "Day 14"])
@pytest.mark.parametrize("noise", [0.0, 0.03, 0.08])
def test_one_sample_per_feature(timepoint, noise):
    engine = AttributionStabilityEngine(noise_source=UniformNoiseSource(seed=2))
    result = engine.attribute(timepoint, noise)

    names = [s.name for s in result.samples]
    assert len(names) == len(set(names))
    assert set(names) == set(DEFAULT_REFERENCE_DATASET[timepoint])
    assert all(s.value >= 0.0 for s in result.samples)


def test_additive_noise_with_scripted_draws(two_feature_dataset, scripted_noise):
    engine = AttributionStabilityEngine(
        dataset=two_feature_dataset,
        noise_source=scripted_noise([1.0, -1.0]),
    )
    result = engine.attribute("T0", 0.2)

    values = {s.name: s.value for s in result.samples}
    # not scaled by the baseline
    assert values["alpha"] == pytest.approx(0.7)
    assert values["beta"] == pytest.approx(0.2)
    assert result.matches == 2
    assert result.raw_stability == pytest.approx(0.3 + 0.7 - 0.2 * 0.5)
    assert result.stability == pytest.approx(0.9)


def test_noise_can_flip_ranking(two_feature_dataset, scripted_noise):
    engine = AttributionStabilityEngine(
        dataset=two_feature_dataset,
        noise_source=scripted_noise([-1.0, 1.0]),
    )
    result = engine.attribute("T0", 0.1)

    assert result.current_ranking == ("beta", "alpha")
    assert result.matches == 0
    assert result.raw_stability == pytest.approx(0.7 - 0.05)


def test_negative_values_floor_at_zero(scripted_noise):
    engine = AttributionStabilityEngine(noise_source=scripted_noise([-1.0], cycle=True))
    result = engine.attribute("Day 14", 0.08)

    values = {s.name: s.value for s in result.samples}
    assert values["Brand"] == 0.0      # 0.03 - 0.08
    assert values["Price"] == 0.0      # 0.04 - 0.08
    assert values["Sillage"] == pytest.approx(0.17)


def test_ranked_is_descending_and_stable():
    ranked = attribute("Day 7", 0.0).ranked()
    values = [s.value for s in ranked]

    assert values == sorted(values, reverse=True)
    assert [s.name for s in ranked[1:3]] == ["Freshness", "Texture"]


def test_to_dataframe():
    df = attribute("Day 14", 0.0).to_dataframe()

    assert list(df.columns) == ["rank", "name", "value", "reference_rank"]
    assert df["rank"].tolist() == list(range(1, 9))
    assert df.iloc[0]["name"] == "Sillage"
    assert df.iloc[0]["reference_rank"] == 2


# ---------------------------------------------------------------------------
# Stability bounds
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("noise", [0.0, 0.01, 0.08, 0.5, 2.0, 10.0])
def test_stability_always_in_display_range(noise):
    engine = AttributionStabilityEngine(noise_source=UniformNoiseSource(seed=17))
    for timepoint in engine.timepoints:
        for _ in range(20):
            result = engine.attribute(timepoint, noise)
            assert 0.5 <= result.stability <= 1.0


def test_raw_below_floor_is_clamped(zero_noise):
    engine = AttributionStabilityEngine(noise_source=zero_noise)
    result = engine.attribute("Day 14", 1.0)

    assert result.raw_stability == pytest.approx(0.8125 - 0.5)
    assert result.stability == 0.5


def test_stability_non_increasing_in_noise(zero_noise):
    engine = AttributionStabilityEngine(noise_source=zero_noise)
    scores = [engine.attribute("Day 1", n).stability for n in (0.0, 0.02, 0.05, 0.1, 0.4, 1.2)]
    assert all(a >= b for a, b in zip(scores, scores[1:]))
    assert scores[0] == 1.0
    assert scores[-1] == 0.5


def test_custom_config(zero_noise):
    cfg = AttributionConfig(match_weight=0.5, base_stability=0.5, noise_penalty=1.0,
                            stability_floor=0.0, stability_ceiling=1.0)
    engine = AttributionStabilityEngine(config=cfg, noise_source=zero_noise)
    result = engine.attribute("Day 14", 0.1)

    assert result.raw_stability == pytest.approx(3 / 8 * 0.5 + 0.5 - 0.1)
    assert result.stability == pytest.approx(result.raw_stability)


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------

def test_empty_feature_set_counts_as_no_agreement():
    engine = AttributionStabilityEngine(dataset=ReferenceDataset({"A": {}, "B": {}}))
    result = engine.attribute("B", 0.0)

    assert result.samples == ()
    assert result.matches == 0
    assert result.raw_stability == pytest.approx(0.7)
    assert result.stability == pytest.approx(0.7)


def test_anchor_is_first_inserted_timepoint(two_feature_dataset):
    engine = AttributionStabilityEngine(dataset=two_feature_dataset)
    assert engine.reference_ranking == ("alpha", "beta")
    assert engine.attribute("T1", 0.0).current_ranking == ("beta", "alpha")


def test_convenience_attribute_accepts_dataset_and_noise(two_feature_dataset, scripted_noise):
    source = scripted_noise([-1.0, 1.0])
    result = attribute("T0", 0.1, dataset=two_feature_dataset, noise_source=source)

    assert source.consumed == 2
    assert result.reference_ranking == ("alpha", "beta")
    assert result.current_ranking == ("beta", "alpha")
    assert {s.name: s.value for s in result.samples} == pytest.approx({"alpha": 0.4, "beta": 0.5})
    assert result.raw_stability == pytest.approx(0.65)


def test_samples_are_immutable():
    sample = attribute("Day 1", 0.0).samples[0]
    assert isinstance(sample, ImportanceSample)
    with pytest.raises(AttributeError):
        sample.value = 1.0


# ---------------------------------------------------------------------------
# Parameter rejection
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("timepoint", ["Day 2", "", None, "day 1"])
def test_rejects_unknown_timepoint(timepoint):
    with pytest.raises(InvalidParameterError):
        AttributionStabilityEngine().attribute(timepoint, 0.0)


@pytest.mark.parametrize("noise", [-0.001, float("nan"), float("-inf"), "loud"])
def test_rejects_bad_noise_level(noise):
    with pytest.raises(InvalidParameterError):
        AttributionStabilityEngine().attribute("Day 1", noise)
