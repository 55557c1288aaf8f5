"""High level services that connect the engine to documents, lists and settings."""

from .pipeline import AnnotationEngine, EngineDependencies, EngineHost, is_blocked_host

__all__ = ["AnnotationEngine", "EngineDependencies", "EngineHost", "is_blocked_host"]
