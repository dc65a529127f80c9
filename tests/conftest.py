import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from neodictate.api.main import create_app
from neodictate.managers import PaletteManager, ServerSettings
from neodictate.models import EndpointConfig, Location, LogLevel
from neodictate.services import EndpointRegistry, ServiceContainer
from neodictate.utils.logger import configure_logger, get_logger

TEST_CLIENT = "8c:aa:b5:7a:7d:13"
GUTTER_KITCHEN = "8c:aa:b5:7a:bc:ad"

NANOS = 1_000_000_000


class FakeClock:
    """Settable nanosecond clock"""

    def __init__(self, now_ns: int = 1_700_000_000 * NANOS):
        self.now_ns = now_ns

    def __call__(self) -> int:
        return self.now_ns

    def advance(self, seconds: float) -> None:
        self.now_ns += int(seconds * NANOS)


@pytest.fixture(autouse=True)
def quiet_logger():
    """Plain, WARN-and-up output; restores the singleton afterwards."""
    logger = get_logger()
    saved = (logger.min_level, logger.use_colors, logger.stream)
    configure_logger(LogLevel.WARN, use_colors=False)
    yield logger
    configure_logger(*saved)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def endpoint_configs():
    return [
        EndpointConfig(
            id=TEST_CLIENT,
            display_name="Test Client",
            location=Location.TEST,
            led_count=2,
            step_duration_ms=100,
        ),
        EndpointConfig(
            id=GUTTER_KITCHEN,
            display_name="Gutter Kitchen",
            location=Location.GUTTER,
            led_count=5,
            step_duration_ms=100,
        ),
    ]


@pytest.fixture
def registry(endpoint_configs, clock):
    """Two endpoints, initialized with white at TS=1"""
    reg = EndpointRegistry(endpoint_configs, clock=clock)
    reg.initialize(timestamp_ns=1)
    return reg


@pytest.fixture
def palette():
    return PaletteManager({"Red": "0xFF0000", "Blue": "#0000FF"})


@pytest.fixture
def settings():
    return ServerSettings()


@pytest.fixture
def services(registry, palette, settings):
    return ServiceContainer(registry=registry, palette=palette, settings=settings)


@pytest.fixture
def app(services):
    return create_app(services)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
