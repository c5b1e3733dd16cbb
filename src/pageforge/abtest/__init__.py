"""A/B element variant configuration and result statistics."""

from .statistics import (
    ExperimentAnalysis,
    ExperimentResults,
    VariantCounts,
    analyze_experiment,
    bayesian_ab_test,
    bayesian_multi_variant_test,
    compare_variants,
    confidence_interval,
    expected_loss,
    probability_to_be_best,
    required_sample_size,
    significance_test,
    value_of_information,
)
from .variants import (
    ChangeType,
    ElementChange,
    ElementVariantConfig,
    VariantConfigError,
    VariantSet,
)

__all__ = [
    "ChangeType",
    "ElementChange",
    "ElementVariantConfig",
    "ExperimentAnalysis",
    "ExperimentResults",
    "VariantConfigError",
    "VariantCounts",
    "VariantSet",
    "analyze_experiment",
    "bayesian_ab_test",
    "bayesian_multi_variant_test",
    "compare_variants",
    "confidence_interval",
    "expected_loss",
    "probability_to_be_best",
    "required_sample_size",
    "significance_test",
    "value_of_information",
]
