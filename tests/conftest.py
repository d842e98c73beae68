import pytest

from src.observability.alerting import AlertManager
from src.observability.metrics import MetricsCollector
from src.persistence.memory import InMemoryWebhookStore
from src.subscriber_receiver.server import SubscriberEndpointServer
from src.utils.factories import DeliveryRecordFactory, SubscriberFactory
from src.webhook_dispatcher.dispatcher import WebhookDispatcher
from src.webhook_dispatcher.engine import WebhookDeliveryEngine
from src.webhook_dispatcher.recorder import DeliveryRecorder
from src.webhook_dispatcher.retry import RetryManager
from src.webhook_dispatcher.signer import WebhookSigner


WEBHOOK_SECRET = "test-secret-key-for-hmac"
OWNER_ID = "user_owner_1"


@pytest.fixture
def webhook_secret():
    return WEBHOOK_SECRET


@pytest.fixture
def owner_id():
    return OWNER_ID


@pytest.fixture
def signer():
    return WebhookSigner(WEBHOOK_SECRET)


@pytest.fixture
def retry_manager():
    """Default retry policy with backoff disabled so tests stay fast."""
    return RetryManager(base_delay=0)


@pytest.fixture
def store():
    return InMemoryWebhookStore()


@pytest.fixture
def recorder(store):
    return DeliveryRecorder(store)


@pytest.fixture
def engine(retry_manager, recorder):
    return WebhookDeliveryEngine(
        retry_manager=retry_manager,
        recorder=recorder,
        timeout_seconds=5,
    )


@pytest.fixture
def metrics():
    return MetricsCollector(window_seconds=300)


@pytest.fixture
def alert_manager(metrics):
    return AlertManager(metrics=metrics, threshold=0.10)


@pytest.fixture
def dispatcher(store, engine, metrics):
    return WebhookDispatcher(store=store, engine=engine, metrics=metrics)


@pytest.fixture
def endpoint_server():
    server = SubscriberEndpointServer(secret=WEBHOOK_SECRET)
    server.start()
    yield server
    server.stop()


@pytest.fixture
def endpoint_server_no_auth():
    """Subscriber endpoint without signature verification."""
    server = SubscriberEndpointServer()
    server.start()
    yield server
    server.stop()


@pytest.fixture
def subscriber(endpoint_server):
    """Active subscriber for user_created pointing at the verifying endpoint."""
    return SubscriberFactory.create(
        url=endpoint_server.url,
        secret=WEBHOOK_SECRET,
        owner_id=OWNER_ID,
    )


@pytest.fixture
def subscriber_factory():
    return SubscriberFactory


@pytest.fixture
def record_factory():
    return DeliveryRecordFactory
