from __future__ import absolute_import

import os.path

import pytest

from brakeline.base import Notifier, notify_completed
from brakeline.conf import Config
from brakeline.utils.testutils import InMemoryTransport


@pytest.fixture
def project_root():
    return os.path.dirname(os.path.abspath(__file__))


@pytest.fixture
def config():
    return Config(project_id='113743', project_key='81bbff95d52f8856c770bb39e827f3f6',
                  environment='production', app_version='1.2.3')


@pytest.fixture
def transport():
    return InMemoryTransport()


@pytest.fixture
def notifier(config, transport):
    return Notifier(config, transport=transport)


@pytest.fixture
def completions():
    events = []

    def receiver(sender, event):
        events.append((sender, event))

    notify_completed.connect(receiver)
    try:
        yield events
    finally:
        notify_completed.disconnect(receiver)
