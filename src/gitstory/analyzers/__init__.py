"""Analyzers for fetching and processing account activity."""

from gitstory.analyzers.archetype import ArchetypeClassifier
from gitstory.analyzers.github import GitHubFetcher
from gitstory.analyzers.pipeline import ReportPipeline, assemble_report
from gitstory.analyzers.scorer import Scorer

__all__ = ["ArchetypeClassifier", "GitHubFetcher", "ReportPipeline", "Scorer", "assemble_report"]
