"""
Data models for the SquadStats API.

This module contains Pydantic models defining the data structures used
in the SquadStats service for validation, serialization, and documentation.
"""
