"""Domain layer — calendar arithmetic, presets, selection rules, month pairs.

This layer depends only on stdlib and pydantic.
It must never import from services, plugins, commands, or config.
"""
