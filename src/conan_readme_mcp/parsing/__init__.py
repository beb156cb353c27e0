from .readme_parser import ReadmeParser

__all__ = ["ReadmeParser"]
