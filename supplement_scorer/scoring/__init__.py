"""
Scoring engine: component calculators + weighted aggregator + explainability.

Modules
-------
normalize   : normalize() + clamp() + round_half_up(): numeric helpers.
weights     : DEFAULT_WEIGHTS + validate_weights() + apply_weights().
calculators : evidence / safety / cost / practicality calculators.
engine      : score() orchestrator with missing-data tracking and fallback.
summary     : score_many() + summarize_components() + rank_products().

All modules are pure functions over immutable inputs, with no I/O.
"""
