"""
Effect scoring: pure functions from a tea record and reference tables to
effect vectors, plus their combination and ranking.

Modules
-------
normalizer  Rescale table values to 0–10; resolve legacy effect aliases.
base_type   Tea type + sub type vector.
flavor      Flavor tags, with diminishing returns per effect.
processing  Processing methods and firing modifiers.
elements    Five-element derivation from geography, processing and age.
geography   Element → effect projection.
compounds   Caffeine / L-theanine ratio bands and catechins.
aggregator  Weighted sum, interaction pass, clamp.
ranker      Dominant and supporting effects.
comparison  Calculated vs. expected effect profile.
assembler   ``EffectResult`` construction.
"""
