"""Request pipelines that can be bound to the server."""

from .middleware import StaticPipeline, create_pipeline

__all__ = ["StaticPipeline", "create_pipeline"]
