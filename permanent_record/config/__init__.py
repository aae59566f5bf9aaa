"""Configuration package.

Settings are built from the environment when
``permanent_record.config.settings`` is first imported.
"""

__all__: list[str] = []
