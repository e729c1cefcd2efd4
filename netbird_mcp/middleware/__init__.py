from .tool_filter_middleware import ToolFilterMiddleware, get_registry, tool

__all__ = ["ToolFilterMiddleware", "get_registry", "tool"]
