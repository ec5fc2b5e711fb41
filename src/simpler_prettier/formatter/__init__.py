"""Formatter invocation."""

from simpler_prettier.formatter.invoker import PROJECT_TARGET, FormatterInvoker

__all__ = ["FormatterInvoker", "PROJECT_TARGET"]
