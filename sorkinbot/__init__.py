"""Domain core of a clinic appointment chat bot: entities, cache, workers, use cases, services, dialogue states and periodic tasks."""

__version__ = "0.1.0"