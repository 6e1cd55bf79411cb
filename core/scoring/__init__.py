"""Scoring Module - access to the external match score oracle."""
from core.scoring.interfaces import ScoringOracle
from core.scoring.sql_oracle import SqlScoringOracle, normalize_score

__all__ = ['ScoringOracle', 'SqlScoringOracle', 'normalize_score']
