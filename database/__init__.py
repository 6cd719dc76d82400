"""
Database package for the Daily Challenge Bot
Provides PostgreSQL database management and row models
"""

from .manager import DatabaseManager
from .models import (
    DailyProblem,
    ChallengeExample,
    Submission,
    UserProfile,
    Campaign,
    CampaignApplication,
)

__all__ = [
    'DatabaseManager',
    'DailyProblem',
    'ChallengeExample',
    'Submission',
    'UserProfile',
    'Campaign',
    'CampaignApplication',
]
