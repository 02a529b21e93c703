"""
Shared fixtures for BriefDesk tests.

APPDATA is pointed at a throwaway folder before any briefdesk module is
imported, so config's directory creation and the debug log never touch the
real user profile.
"""

import os
import tempfile

os.environ["APPDATA"] = tempfile.mkdtemp(prefix="briefdesk-tests-")

import pytest  # noqa: E402

from briefdesk.brief.sections import parse_sections  # noqa: E402
from briefdesk.session_store import JsonSessionStore  # noqa: E402

SAMPLE_BRIEF = """## Brand Essence
Quiet confidence for people who hate noise.

## Audience
Gen Z climate activists who buy less but buy better.

## Key Message
Every step leaves a lighter footprint."""


@pytest.fixture
def sample_brief() -> str:
    return SAMPLE_BRIEF


@pytest.fixture
def sample_sections():
    return parse_sections(SAMPLE_BRIEF)


@pytest.fixture
def session_store(tmp_path):
    return JsonSessionStore(tmp_path / "sessions")
