"""YAML config loader."""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from .errors import ConfigError


@dataclass
class SiteConfig:
    index_url: str = "https://etd.unsyiah.ac.id/index.php"
    repository_url: str = "https://etd.unsyiah.ac.id/repository/"
    listing_selector: str = "table.zebra-table td a[href]"
    detail_marker: str = "show_detail"
    id_param: str = "id"
    index_params: Dict[str, str] = field(default_factory=dict)


@dataclass
class DownloadConfig:
    timeout: int = 60
    connect_timeout: int = 30
    user_agent: str = "EtdCrawler/1.0 (Cosmos)"
    ignore_cert: bool = False


@dataclass
class CrawlConfig:
    output_dir: str = ""
    embargo: int = 0
    start_page: int = 1
    max_page: int = 0xFFFFFFFF
    # Reserved: parsed and logged, not applied to discovered ids
    min_id: int = 0
    max_id: int = 0xFFFFFFFF
    fetch_attachments: bool = True


@dataclass
class AppConfig:
    log_dir: str = "logs"
    site: SiteConfig = field(default_factory=SiteConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    crawl: CrawlConfig = field(default_factory=CrawlConfig)


def _pick(cls, raw: Optional[dict]):
    raw = raw or {}
    return cls(**{k: v for k, v in raw.items() if k in cls.__dataclass_fields__})


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load config from YAML, falling back to defaults when no path is given."""
    if config_path is None:
        return AppConfig()

    if not os.path.exists(config_path):
        raise ConfigError(f"config file not found: {config_path}")

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config {config_path} must be a mapping")

    site = _pick(SiteConfig, raw.get("site"))
    site.index_params = {str(k): str(v) for k, v in (site.index_params or {}).items()}

    return AppConfig(
        log_dir=raw.get("log_dir", "logs"),
        site=site,
        download=_pick(DownloadConfig, raw.get("download")),
        crawl=_pick(CrawlConfig, raw.get("crawl")),
    )
