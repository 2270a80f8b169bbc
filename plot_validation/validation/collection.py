"""Collection-level validation and submission gating.

Maps the per-plot validator over every feature, aggregates a summary
and applies the all-or-nothing gate: a collection passes only when every
plot passes and there are no collection-level errors. There is no
partial-pass mode.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from functools import partial

from plot_validation.core.config import ValidationConfig
from plot_validation.models.feature import Feature
from plot_validation.models.results import (
    CollectionValidationResult,
    PerPlotValidationResult,
    ValidationState,
    ValidationSummary,
)
from plot_validation.validation.plot import validate_plot

logger = logging.getLogger("plot_validation.validation.collection")


def validate_collection(
    features: Sequence[Feature],
    *,
    config: ValidationConfig | None = None,
) -> CollectionValidationResult:
    """Validate every plot and decide whether the collection may proceed.

    Args:
        features: Current plots, in display order. Not modified.
        config: Validation configuration. With ``max_workers > 1`` plots
            are validated on a thread pool; results keep input order.

    Returns:
        A ``CollectionValidationResult`` in state ``ALL_VALID`` or
        ``HAS_ERRORS``. ``validated_plot_ids`` lists every plot id when
        the collection passed and is empty otherwise.
    """
    config = config or ValidationConfig()
    check = partial(validate_plot, config=config)

    if config.max_workers > 1 and len(features) > 1:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            results = list(pool.map(check, features))
    else:
        results = [check(feature) for feature in features]

    aggregate_errors = find_aggregate_errors(features)
    summary = summarize(
        results,
        aggregate_errors=aggregate_errors,
        top_errors_limit=config.top_errors_limit,
    )

    overall_valid = bool(results) and not aggregate_errors and summary.invalid_count == 0
    state = ValidationState.ALL_VALID if overall_valid else ValidationState.HAS_ERRORS
    validated_ids = tuple(r.plot_id for r in results) if overall_valid else ()

    for message in aggregate_errors:
        logger.warning("Collection error | %s", message)
    logger.info(
        "Collection validated | state=%s | valid=%d/%d | aggregate_errors=%d",
        state.value,
        summary.valid_count,
        summary.total_count,
        len(aggregate_errors),
    )

    return CollectionValidationResult(
        state=state,
        results=tuple(results),
        summary=summary,
        validated_plot_ids=validated_ids,
    )


def summarize(
    results: Sequence[PerPlotValidationResult],
    *,
    aggregate_errors: Sequence[str] = (),
    top_errors_limit: int = 2,
) -> ValidationSummary:
    """Aggregate per-plot results into totals and the most frequent errors.

    Each plot contributes each distinct message once. Ties keep the order
    in which messages first appeared.
    """
    counts: Counter[str] = Counter()
    for result in results:
        counts.update(dict.fromkeys(result.errors, 1))

    return ValidationSummary(
        total_count=len(results),
        valid_count=sum(1 for r in results if r.is_valid),
        top_errors=tuple(message for message, _ in counts.most_common(top_errors_limit)),
        aggregate_errors=tuple(aggregate_errors),
    )


def find_aggregate_errors(features: Sequence[Feature]) -> list[str]:
    """Collection-level problems: currently duplicate plot ids."""
    counts = Counter(feature.plot_id for feature in features)
    return [
        f"Duplicate plot id {plot_id!r} used by {count} features"
        for plot_id, count in counts.items()
        if count > 1
    ]
