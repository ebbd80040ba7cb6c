"""Configuration package for the fishing simulation.

Tuned constants are grouped per concern (clock, catch, skill check, events,
missions, session, shop, server). Runtime toggles live in
``angler.config.session_config.SessionConfig``.
"""
