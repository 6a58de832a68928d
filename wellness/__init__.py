"""Core domain logic for wellness scoring.

This package contains the score calculator, its domain models and the
orchestration service, isolated from platform SDKs for easy testing and reasoning.
"""
