"""
Significance testing for A/B results.

Two families of analysis over per-variant conversion counts:

- Frequentist: two-proportion z-test, confidence interval of the rate
  difference, required sample size, many-variants-vs-control comparison.
- Bayesian: Beta(conversions + 1, failures + 1) posteriors (uniform prior),
  Monte Carlo probability to be best, expected loss, stopping advice.

Monte Carlo functions take an optional ``numpy.random.Generator`` so results
are repeatable under a seed.
"""

from collections.abc import Sequence
from typing import Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from scipy import stats

from ..core.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIDENCE = 0.95
DEFAULT_POWER = 0.8
DEFAULT_MIN_SAMPLE_SIZE = 100
DEFAULT_SIMULATIONS = 10_000
DEFAULT_PROBABILITY_THRESHOLD = 0.95
DEFAULT_LOSS_THRESHOLD = 0.001

_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class VariantCounts(BaseModel):
    """Observed traffic for one variant."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel, extra="forbid"
    )

    id: str = ""
    conversions: int = Field(ge=0)
    impressions: int = Field(ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "VariantCounts":
        if self.conversions > self.impressions:
            raise ValueError("conversions cannot exceed impressions")
        return self

    @property
    def rate(self) -> float:
        return self.conversions / self.impressions if self.impressions else 0.0


class SignificanceResult(BaseModel):
    model_config = _MODEL_CONFIG

    has_significance: bool
    p_value: float
    z_score: float
    confidence_interval: tuple[float, float]
    conversion_rate_diff: float
    relative_improvement: float
    sample_size_reached: bool


class VariantComparison(BaseModel):
    model_config = _MODEL_CONFIG

    variant_id: str
    vs_control: SignificanceResult


class MultiVariantResult(BaseModel):
    model_config = _MODEL_CONFIG

    winning_variant_id: str
    has_significance: bool
    comparisons: list[VariantComparison]


class BayesianResult(BaseModel):
    model_config = _MODEL_CONFIG

    probability_a_better: float
    probability_b_better: float
    expected_loss_a: float
    expected_loss_b: float
    recommend_stop: bool
    recommended_variant: Literal["A", "B"] | None
    confidence: float


class MultiVariantBayesianResult(BaseModel):
    model_config = _MODEL_CONFIG

    probabilities: dict[str, float]
    expected_losses: dict[str, float]
    recommended_variant: str | None
    recommend_stop: bool


# ----------------------------------------------------------------------
# Frequentist
# ----------------------------------------------------------------------


def z_critical(confidence_level: float = DEFAULT_CONFIDENCE) -> float:
    """Two-sided critical value, e.g. 1.96 for 0.95."""
    if not 0 < confidence_level < 1:
        raise ValueError(f"confidence_level must be in (0, 1), got {confidence_level}")
    return float(stats.norm.ppf(1 - (1 - confidence_level) / 2))


def z_score(a: VariantCounts, b: VariantCounts) -> float:
    """Pooled two-proportion z statistic of ``a`` over ``b`` (0 when undefined)."""
    total = a.impressions + b.impressions
    if not a.impressions or not b.impressions:
        return 0.0
    pooled = (a.conversions + b.conversions) / total
    se = np.sqrt(pooled * (1 - pooled) * (1 / a.impressions + 1 / b.impressions))
    if se == 0:
        return 0.0
    return float((a.rate - b.rate) / se)


def p_value(z: float) -> float:
    """Two-tailed p-value of a standard normal statistic."""
    return float(2 * stats.norm.sf(abs(z)))


def confidence_interval(
    a: VariantCounts, b: VariantCounts, confidence_level: float = DEFAULT_CONFIDENCE
) -> tuple[float, float]:
    """
    Interval for ``a.rate - b.rate`` using the unpooled standard error.

    Raises:
        ValueError: If either variant has no impressions
    """
    if not a.impressions or not b.impressions:
        raise ValueError("confidence interval needs impressions on both variants")
    diff = a.rate - b.rate
    se = np.sqrt(a.rate * (1 - a.rate) / a.impressions + b.rate * (1 - b.rate) / b.impressions)
    margin = z_critical(confidence_level) * se
    return (float(diff - margin), float(diff + margin))


def significance_test(
    a: VariantCounts,
    b: VariantCounts,
    confidence_level: float = DEFAULT_CONFIDENCE,
    minimum_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
) -> SignificanceResult:
    """
    Compare ``a`` against ``b``.

    Below ``minimum_sample_size`` impressions on either side the test is not
    run: p-value 1, z 0 and a zero interval, with the observed rate
    difference still reported.
    """
    diff = a.rate - b.rate
    relative = diff / b.rate * 100 if b.rate > 0 else 0.0
    reached = a.impressions >= minimum_sample_size and b.impressions >= minimum_sample_size

    if not reached or not a.impressions or not b.impressions:
        return SignificanceResult(
            has_significance=False,
            p_value=1.0,
            z_score=0.0,
            confidence_interval=(0.0, 0.0),
            conversion_rate_diff=diff,
            relative_improvement=relative,
            sample_size_reached=reached,
        )

    z = z_score(a, b)
    p = p_value(z)
    return SignificanceResult(
        has_significance=p < 1 - confidence_level,
        p_value=p,
        z_score=z,
        confidence_interval=confidence_interval(a, b, confidence_level),
        conversion_rate_diff=diff,
        relative_improvement=relative,
        sample_size_reached=True,
    )


def required_sample_size(
    baseline_rate: float,
    minimum_detectable_effect: float,
    confidence_level: float = DEFAULT_CONFIDENCE,
    power: float = DEFAULT_POWER,
) -> int:
    """
    Impressions needed per variant to detect a relative lift.

    Args:
        baseline_rate: Control conversion rate, in (0, 1)
        minimum_detectable_effect: Relative lift, e.g. 0.1 for +10%
        confidence_level: Two-sided confidence
        power: Probability of detecting a real lift of that size

    Raises:
        ValueError: If the rates or the lift are out of range
    """
    if not 0 < baseline_rate < 1:
        raise ValueError(f"baseline_rate must be in (0, 1), got {baseline_rate}")
    if minimum_detectable_effect == 0:
        raise ValueError("minimum_detectable_effect cannot be 0")
    if not 0 < power < 1:
        raise ValueError(f"power must be in (0, 1), got {power}")
    p1 = baseline_rate
    p2 = baseline_rate * (1 + minimum_detectable_effect)
    if not 0 < p2 < 1:
        raise ValueError(f"lifted rate {p2:.4f} is outside (0, 1)")

    z_alpha = z_critical(confidence_level)
    z_beta = float(stats.norm.ppf(power))
    numerator = (
        z_alpha * np.sqrt(2 * p1 * (1 - p1)) + z_beta * np.sqrt(p1 * (1 - p1) + p2 * (1 - p2))
    ) ** 2
    return int(np.ceil(numerator / (p2 - p1) ** 2))


def compare_variants(
    control: VariantCounts,
    variants: Sequence[VariantCounts],
    confidence_level: float = DEFAULT_CONFIDENCE,
    minimum_sample_size: int = DEFAULT_MIN_SAMPLE_SIZE,
) -> MultiVariantResult:
    """Test each variant against the control; the control wins unless one beats it significantly."""
    comparisons = [
        VariantComparison(
            variant_id=variant.id,
            vs_control=significance_test(variant, control, confidence_level, minimum_sample_size),
        )
        for variant in variants
    ]

    winner = None
    best_improvement = 0.0
    for comparison in comparisons:
        result = comparison.vs_control
        if result.has_significance and result.relative_improvement > best_improvement:
            best_improvement = result.relative_improvement
            winner = comparison.variant_id

    return MultiVariantResult(
        winning_variant_id=winner if winner is not None else control.id,
        has_significance=winner is not None,
        comparisons=comparisons,
    )


# ----------------------------------------------------------------------
# Bayesian
# ----------------------------------------------------------------------


def posterior(counts: VariantCounts):
    """Beta posterior of the conversion rate under a uniform prior."""
    return stats.beta(counts.conversions + 1, counts.impressions - counts.conversions + 1)


def _draw(
    variants: Sequence[VariantCounts], simulations: int, rng: np.random.Generator | None
) -> np.ndarray:
    if simulations < 1:
        raise ValueError(f"simulations must be positive, got {simulations}")
    rng = rng if rng is not None else np.random.default_rng()
    return np.vstack(
        [posterior(counts).rvs(size=simulations, random_state=rng) for counts in variants]
    )


def probability_to_be_best(
    a: VariantCounts,
    b: VariantCounts,
    simulations: int = DEFAULT_SIMULATIONS,
    rng: np.random.Generator | None = None,
) -> float:
    """P(rate of ``a`` > rate of ``b``)."""
    draws = _draw((a, b), simulations, rng)
    return float(np.mean(draws[0] > draws[1]))


def expected_loss(
    a: VariantCounts,
    b: VariantCounts,
    simulations: int = DEFAULT_SIMULATIONS,
    rng: np.random.Generator | None = None,
) -> tuple[float, float]:
    """Expected rate given up by shipping ``a`` and by shipping ``b``."""
    draws = _draw((a, b), simulations, rng)
    loss_a = np.mean(np.maximum(draws[1] - draws[0], 0))
    loss_b = np.mean(np.maximum(draws[0] - draws[1], 0))
    return float(loss_a), float(loss_b)


def bayesian_ab_test(
    a: VariantCounts,
    b: VariantCounts,
    simulations: int = DEFAULT_SIMULATIONS,
    probability_threshold: float = DEFAULT_PROBABILITY_THRESHOLD,
    loss_threshold: float = DEFAULT_LOSS_THRESHOLD,
    rng: np.random.Generator | None = None,
) -> BayesianResult:
    """
    Two-variant Bayesian test with early stopping advice.

    Stopping is recommended for a variant whose probability to be best
    reaches ``probability_threshold`` while its expected loss stays within
    ``loss_threshold``.
    """
    draws = _draw((a, b), simulations, rng)
    prob_a = float(np.mean(draws[0] > draws[1]))
    prob_b = 1 - prob_a
    loss_a = float(np.mean(np.maximum(draws[1] - draws[0], 0)))
    loss_b = float(np.mean(np.maximum(draws[0] - draws[1], 0)))

    recommended = None
    if prob_a >= probability_threshold and loss_a <= loss_threshold:
        recommended = "A"
    elif prob_b >= probability_threshold and loss_b <= loss_threshold:
        recommended = "B"

    logger.debug("bayesian_test", prob_a=prob_a, loss_a=loss_a, loss_b=loss_b, recommended=recommended)
    return BayesianResult(
        probability_a_better=prob_a,
        probability_b_better=prob_b,
        expected_loss_a=loss_a,
        expected_loss_b=loss_b,
        recommend_stop=recommended is not None,
        recommended_variant=recommended,
        confidence=max(prob_a, prob_b),
    )


def bayesian_multi_variant_test(
    variants: Sequence[VariantCounts],
    simulations: int = DEFAULT_SIMULATIONS,
    probability_threshold: float = DEFAULT_PROBABILITY_THRESHOLD,
    loss_threshold: float = DEFAULT_LOSS_THRESHOLD,
    rng: np.random.Generator | None = None,
) -> MultiVariantBayesianResult:
    """Probability to be best and expected loss for every variant, keyed by id."""
    if not variants:
        raise ValueError("at least one variant is required")
    ids = [v.id for v in variants]
    if len(set(ids)) != len(ids):
        raise ValueError("variant ids must be unique")

    draws = _draw(variants, simulations, rng)
    # ties go to the earliest variant
    best = np.argmax(draws, axis=0)
    wins = np.bincount(best, minlength=len(variants)) / simulations
    losses = np.mean(draws.max(axis=0) - draws, axis=1)

    probabilities = {vid: float(p) for vid, p in zip(ids, wins)}
    expected_losses = {vid: float(loss) for vid, loss in zip(ids, losses)}

    recommended = None
    best_probability = 0.0
    for vid in ids:
        prob = probabilities[vid]
        if prob >= probability_threshold and expected_losses[vid] <= loss_threshold and prob > best_probability:
            best_probability = prob
            recommended = vid

    return MultiVariantBayesianResult(
        probabilities=probabilities,
        expected_losses=expected_losses,
        recommended_variant=recommended,
        recommend_stop=recommended is not None,
    )


def value_of_information(
    a: VariantCounts,
    b: VariantCounts,
    future_traffic: int,
    simulations: int = DEFAULT_SIMULATIONS,
    rng: np.random.Generator | None = None,
) -> float:
    """Conversions at risk over ``future_traffic`` visitors if the test stops now."""
    result = bayesian_ab_test(a, b, simulations=simulations, rng=rng)
    loss_now = (
        result.probability_a_better * result.expected_loss_a
        + result.probability_b_better * result.expected_loss_b
    )
    return loss_now * future_traffic


# ----------------------------------------------------------------------
# Experiment report
# ----------------------------------------------------------------------


class ExperimentResults(BaseModel):
    """Counts for one experiment; the first variant is the control."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel, extra="forbid")

    variants: list[VariantCounts] = Field(min_length=2)
    confidence_level: float = Field(default=DEFAULT_CONFIDENCE, gt=0, lt=1)
    minimum_sample_size: int = Field(default=DEFAULT_MIN_SAMPLE_SIZE, ge=0)
    simulations: int = Field(default=DEFAULT_SIMULATIONS, ge=100, le=200_000)
    probability_threshold: float = Field(default=DEFAULT_PROBABILITY_THRESHOLD, gt=0, le=1)
    loss_threshold: float = Field(default=DEFAULT_LOSS_THRESHOLD, ge=0)

    @model_validator(mode="after")
    def check_ids(self) -> "ExperimentResults":
        ids = [v.id for v in self.variants]
        if not all(ids) or len(set(ids)) != len(ids):
            raise ValueError("every variant needs a unique non-empty id")
        return self


class ExperimentAnalysis(BaseModel):
    model_config = _MODEL_CONFIG

    frequentist: MultiVariantResult
    bayesian: MultiVariantBayesianResult


def analyze_experiment(
    results: ExperimentResults, rng: np.random.Generator | None = None
) -> ExperimentAnalysis:
    """Run both the control comparison and the Bayesian multi-variant test."""
    control, *others = results.variants
    frequentist = compare_variants(
        control, others, results.confidence_level, results.minimum_sample_size
    )
    bayesian = bayesian_multi_variant_test(
        results.variants,
        simulations=results.simulations,
        probability_threshold=results.probability_threshold,
        loss_threshold=results.loss_threshold,
        rng=rng,
    )
    logger.info(
        "experiment_analyzed",
        variants=len(results.variants),
        frequentist_winner=frequentist.winning_variant_id,
        bayesian_winner=bayesian.recommended_variant,
    )
    return ExperimentAnalysis(frequentist=frequentist, bayesian=bayesian)
