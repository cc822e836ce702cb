import httpx
import pytest

from etd_crawler.config import AppConfig
from etd_crawler.downloader import Downloader
from etd_crawler.storage import OutputStore
from tests.helpers import FakeCatalog


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def app_config(tmp_path):
    config = AppConfig(log_dir="")
    config.crawl.output_dir = str(tmp_path / "out")
    return config


@pytest.fixture
def store(app_config):
    s = OutputStore(app_config.crawl.output_dir)
    s.ensure()
    return s


@pytest.fixture
def downloader(app_config, catalog):
    d = Downloader(app_config.download, transport=httpx.MockTransport(catalog.handler))
    yield d
    d.close()
