"""Domain layer: state domains, rule expansion and the transition matcher.

This layer depends only on stdlib, statetransit.errors and
statetransit.config. It must never import from services or infrastructure.
"""
