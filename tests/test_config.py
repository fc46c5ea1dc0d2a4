import json

import pytest
from pydantic import ValidationError

from data_extractor import Config, ExtractorConfig, FetchConfig, Job, load_config, load_schema


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestConfig:
    """Test suite for schema and job configuration loading."""

    def test_load_schema(self, tmp_path):
        schema = {"title": {"type": "string", "selector": "h1"}}
        assert load_schema(write_json(tmp_path / "schema.json", schema)) == schema

    def test_load_schema_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schema(tmp_path / "missing.json")

    def test_load_schema_requires_object(self, tmp_path):
        with pytest.raises(ValueError):
            load_schema(write_json(tmp_path / "schema.json", [1, 2]))

    def test_load_config_resolves_paths(self, tmp_path):
        schema = {"title": {"type": "string", "selector": "h1"}}
        write_json(tmp_path / "schema.json", schema)
        config_path = write_json(tmp_path / "jobs.json", {
            "defaults": {"render": False, "waitFor": "main"},
            "extractor": {"concurrentKeys": True},
            "jobs": [
                {"file": "page.html", "schemaFile": "schema.json", "output": "out.json"},
                {"url": "https://example.com", "schema": {"h": {"type": "string", "selector": "h1"}}}
            ]
        })

        config = load_config(config_path)

        assert config.defaults.render is False
        assert config.defaults.wait_for == "main"
        assert config.extractor.concurrent_keys is True
        assert config.jobs[0].file == str(tmp_path / "page.html")
        assert config.jobs[0].schema_def == schema
        assert config.jobs[0].output == str(tmp_path / "out.json")
        assert config.jobs[1].output is None
        assert config.jobs[1].source == "https://example.com"

    def test_load_config_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_job_needs_one_source(self):
        with pytest.raises(ValidationError):
            Job(schema={})
        with pytest.raises(ValidationError):
            Job(url="https://example.com", file="page.html", schema={})

    def test_job_needs_schema(self):
        with pytest.raises(ValidationError):
            Job(url="https://example.com")

    def test_defaults(self):
        config = Config()
        assert config.jobs == []
        assert config.defaults == FetchConfig()
        assert config.extractor == ExtractorConfig()
        assert config.extractor.concurrent_keys is False
        assert config.defaults.render is True
