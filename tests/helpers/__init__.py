"""Test helpers for the wiki mirror test suite."""

from .fake_wiki import FakeWikiAPI

__all__ = ['FakeWikiAPI']
