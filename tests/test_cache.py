"""
Unit tests for the JSON disk cache.
"""

import os
import time

from presse_leads.cache import cache_get_json, cache_path, cache_set_json


class TestJsonCache:
    def test_miss(self, tmp_path):
        assert cache_get_json(str(tmp_path), "nope") is None

    def test_hit(self, tmp_path):
        cache_set_json(str(tmp_path), "hunter::lefigaro.fr::5", {"emails": [], "organization": "Le Figaro"})
        assert cache_get_json(str(tmp_path), "hunter::lefigaro.fr::5") == {"emails": [], "organization": "Le Figaro"}

    def test_stale_entry(self, tmp_path):
        cache_set_json(str(tmp_path), "k", {"a": 1})
        old = time.time() - 3600
        os.utime(cache_path(str(tmp_path), "k"), (old, old))
        assert cache_get_json(str(tmp_path), "k", max_age_s=60) is None
        assert cache_get_json(str(tmp_path), "k") == {"a": 1}

    def test_unreadable_entry(self, tmp_path):
        p = cache_path(str(tmp_path), "k")
        p.write_text("{not json", encoding="utf-8")
        assert cache_get_json(str(tmp_path), "k") is None

    def test_non_dict_entry(self, tmp_path):
        cache_set_json(str(tmp_path), "k", [1, 2])
        assert cache_get_json(str(tmp_path), "k") is None
