"""
Storage Backends

Modules:
    memory: In-process reference implementation of the knowledge-base
            collaborator interfaces (EntityStore, GraphStore, SearchIndex)

Production deployments supply their own document-store and search-index
clients implementing graphrag_orchestrator.providers.base.
"""

from graphrag_orchestrator.storage.memory import InMemoryKnowledgeStore

__all__ = ["InMemoryKnowledgeStore"]
