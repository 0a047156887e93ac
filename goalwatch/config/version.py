"""
GoalWatch - football schedules and results
"""

# Application version - single source of truth
VERSION = "1.0.0"

APP_NAME = "GoalWatch"
APP_DESCRIPTION = "Match data powered by OpenLigaDB & TheSportsDB"
