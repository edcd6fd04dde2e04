"""
domain.exceptions - Custom exception hierarchy for the contract agent.

All domain-level errors inherit from DomainError so callers can catch
broad or specific exceptions as needed.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class InvalidArgumentsError(DomainError):
    """Raised when operation arguments fail to parse or validate."""


class ContractNotFoundError(DomainError):
    """Raised when an id or name lookup matches no contract."""


class RepositoryError(DomainError):
    """Raised when a database operation fails."""


class LLMProviderError(DomainError):
    """Raised when the language-model call fails or returns an unusable shape."""
