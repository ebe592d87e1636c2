from ember.db.base import Base, async_session_factory, build_engine, engine, init_models

__all__ = ["Base", "async_session_factory", "build_engine", "engine", "init_models"]
