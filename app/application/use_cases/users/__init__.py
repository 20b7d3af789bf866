"""User use cases: team directory, privacy settings, stats."""

from app.application.use_cases.users.team_operations import TeamService

__all__ = ["TeamService"]
