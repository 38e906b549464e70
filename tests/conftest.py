"""Shared test configuration: project .env loaded once for every test module."""

from dotenv import load_dotenv

from analysis_parser.config import ROOT

load_dotenv(ROOT / ".env")
