from ancestry_atlas.importer.orchestrator import EVENT_SOURCE, ImportOrchestrator

__all__ = ["EVENT_SOURCE", "ImportOrchestrator"]
