"""Heuristic markdown section classification and extraction.

Submodules:
  patterns     -- compiled regex patterns and keyword tuples
  text         -- text normalizer and list/paragraph/table-row helpers
  segmenter    -- heading-delimited block splitting and block relocation
  schema       -- ParsedSection, payload records, and PhaseData Pydantic models
  detectors    -- boolean type predicates over (heading, body)
  extractors   -- per-type structured payload extractors
  dispatcher   -- ordered rule table; classify_and_parse() entry point
  sources      -- citation URL sanitization
"""
