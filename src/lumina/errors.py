"""Exceptions raised by Lumina services."""


class LuminaError(Exception):
    """Base exception for Lumina errors"""
    pass


class IngestionError(LuminaError):
    """Statement parsing failed or produced unusable output"""
    pass


class AdviceError(LuminaError):
    """Advice generation failed or produced unusable output"""
    pass


class BusyError(LuminaError):
    """A collaborator call of the same kind is already in flight"""
    pass


class CollaboratorUnavailableError(LuminaError):
    """No LLM client is configured"""
    pass
