"""
Configuration module for data_extractor.

Uses Pydantic models for validation and parsing of schema and job files.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


class ExtractorConfig(BaseModel):
    """Options for the extraction engine."""
    concurrent_keys: bool = Field(False, alias="concurrentKeys")

    model_config = ConfigDict(populate_by_name=True)


class FetchConfig(BaseModel):
    """Options for loading pages before extraction."""
    render: bool = True  # False fetches the raw HTML with requests
    headless: bool = True
    timeout: float = 30.0  # seconds
    wait_for: Optional[str] = Field(None, alias="waitFor")  # CSS selector to wait for when rendering

    model_config = ConfigDict(populate_by_name=True)


class Job(BaseModel):
    """
    A single page to extract and the schema to extract it with.

    Relative paths are taken from the directory of the configuration file.
    """
    url: Optional[str] = None
    file: Optional[str] = None
    schema_def: Optional[Dict[str, Any]] = Field(None, alias="schema")
    schema_file: Optional[str] = Field(None, alias="schemaFile")
    output: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_sources(self) -> "Job":
        if (self.url is None) == (self.file is None):
            raise ValueError("A job needs exactly one of 'url' or 'file'")
        if self.schema_def is None and self.schema_file is None:
            raise ValueError("A job needs a 'schema' or a 'schemaFile'")
        return self

    @property
    def source(self) -> str:
        return self.url or self.file


class Config(BaseModel):
    """Main configuration class."""
    defaults: FetchConfig = Field(default_factory=FetchConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    jobs: List[Job] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


def load_schema(schema_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load an extraction schema from a JSON file.

    The file holds a mapping of output keys to schema nodes. Nodes are not
    validated here; that happens during extraction.

    Args:
        schema_path: Path to schema file

    Returns:
        Schema mapping
    """
    schema_path = Path(schema_path)

    if not schema_path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_path}")

    logger.debug(f"Loading schema from: {schema_path}")

    with open(schema_path, 'r', encoding='utf-8') as f:
        schema = json.load(f)

    if not isinstance(schema, dict):
        raise ValueError(f"Schema file must contain a JSON object: {schema_path}")

    return schema


def load_config(config_path: Union[str, Path]) -> Config:
    """
    Load and process a job configuration from a JSON file.

    Relative ``file``, ``schemaFile`` and ``output`` paths are resolved
    against the directory of the configuration file, and schema files are
    loaded.

    Args:
        config_path: Path to configuration file

    Returns:
        Processed configuration object
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    config = Config.model_validate(data)

    base_dir = config_path.parent
    for job in config.jobs:
        if job.file:
            job.file = str(base_dir / job.file)
        if job.output:
            job.output = str(base_dir / job.output)
        if job.schema_def is None:
            job.schema_def = load_schema(base_dir / job.schema_file)

    logger.info(f"Loaded {len(config.jobs)} jobs")

    return config
