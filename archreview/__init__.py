"""ArchReview — configurable architectural-principle validation for source files."""

__version__ = "1.0.0"
