"""Content storage adapters."""

from content_directives.adapters.storage.yaml_content_store import YamlContentStore

__all__ = ["YamlContentStore"]
