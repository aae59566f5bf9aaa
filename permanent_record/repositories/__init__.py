"""Record source registries.

Models that do not declare their records explicitly resolve them by name from
a :class:`~permanent_record.repositories.sources.SourceRegistry`.
"""
