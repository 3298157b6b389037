"""
Pytest configuration and shared fixtures for presse_leads tests.
"""

import pytest

from presse_leads.config import Settings


@pytest.fixture
def settings(tmp_path):
    """Settings that never touch the network or the real cache directory."""
    return Settings(
        hunter_api_key=None,
        n8n_sequence_webhook=None,
        openai_api_key=None,
        app_url="http://track.test",
        demo_mode=True,
        use_cache=False,
        cache_dir=str(tmp_path / "cache"),
    )
