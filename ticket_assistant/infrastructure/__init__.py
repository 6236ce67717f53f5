"""
Infrastructure Package
======================

Database engine/session management and LLM provider clients.
"""
