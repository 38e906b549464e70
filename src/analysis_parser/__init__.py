"""Classify LLM-authored markdown analyses into typed, structured sections.

Subpackages:
  parsing     -- normalizer, segmenter, detectors, extractors, dispatcher
  tiers       -- 1-, 2-, and 6-part tier parsers and the parse_analysis router
  classifier  -- optional confidence-gated secondary classification

Modules:
  config      -- .env loading and ClassifierSettings
  streaming   -- debounced incremental parsing
  cli         -- command-line entry point
"""
