"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from ticket_assistant.core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    AuthenticationException,
    AuthorizationException,
    ResourceNotFoundException,
    RepositoryException,
    ConfigurationException,
    ExternalServiceException,
    LLMException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "AuthenticationException",
    "AuthorizationException",
    "ResourceNotFoundException",
    "RepositoryException",
    "ConfigurationException",
    "ExternalServiceException",
    "LLMException",
]
