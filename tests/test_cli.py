import json

import pytest

from data_extractor.cli import is_url, run_extract, run_jobs

title_schema = {
    "heading": {"type": "string", "selector": "h1"},
    "years": {
        "type": "array",
        "selector": "#archive > li",
        "items": {"year": {"type": "number"}}
    }
}


@pytest.fixture
def schema_file(tmp_path):
    """Provide a schema file on disk."""
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(title_schema), encoding="utf-8")
    return path


class TestCli:
    """Test suite for the command-line runners."""

    def test_is_url(self):
        assert is_url("https://example.com")
        assert is_url("http://example.com/page")
        assert not is_url("page.html")

    @pytest.mark.asyncio
    async def test_run_extract_writes_output(self, tmp_path, schema_file, catalog_path):
        output = tmp_path / "out" / "result.json"

        await run_extract(str(schema_file), str(catalog_path), output=str(output))

        assert json.loads(output.read_text(encoding="utf-8")) == {
            "heading": "Catalog",
            "years": [{"year": 2019}, {"year": 2020}, {"year": 2021}]
        }

    @pytest.mark.asyncio
    async def test_run_extract_prints_without_output(self, schema_file, catalog_path, capsys):
        await run_extract(str(schema_file), str(catalog_path))
        assert json.loads(capsys.readouterr().out)["heading"] == "Catalog"

    @pytest.mark.asyncio
    async def test_run_extract_exits_on_failure(self, tmp_path, catalog_path):
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps({"x": {"type": "string", "selector": ".missing"}}), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            await run_extract(str(schema_path), str(catalog_path))
        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_run_jobs(self, tmp_path, schema_file, catalog_path):
        config_path = tmp_path / "jobs.json"
        config_path.write_text(json.dumps({
            "jobs": [
                {"file": str(catalog_path), "schemaFile": "schema.json", "output": str(tmp_path / "a.json")},
                {"file": str(catalog_path), "schema": {"og": {"type": "string", "selector": "meta[name='og:type']"}},
                 "output": str(tmp_path / "b.json")}
            ]
        }), encoding="utf-8")

        await run_jobs(str(config_path))

        assert json.loads((tmp_path / "a.json").read_text(encoding="utf-8"))["heading"] == "Catalog"
        assert json.loads((tmp_path / "b.json").read_text(encoding="utf-8")) == {"og": "website"}

    @pytest.mark.asyncio
    async def test_run_jobs_reports_failures(self, tmp_path, catalog_path):
        config_path = tmp_path / "jobs.json"
        config_path.write_text(json.dumps({
            "jobs": [
                {"file": str(catalog_path), "schema": {"x": {"type": "string", "selector": ".missing"}}},
                {"file": str(catalog_path), "schema": {"h": {"type": "string", "selector": "h1"}},
                 "output": str(tmp_path / "ok.json")}
            ]
        }), encoding="utf-8")

        with pytest.raises(SystemExit) as exc_info:
            await run_jobs(str(config_path))

        assert exc_info.value.code == 1
        assert json.loads((tmp_path / "ok.json").read_text(encoding="utf-8")) == {"h": "Catalog"}
