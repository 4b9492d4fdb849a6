"""Stateful modules: ad cache and click analytics."""
