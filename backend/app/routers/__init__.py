"""
API routers for SquadStats.
"""
