from __future__ import absolute_import

import pytest
from mock import patch

from brakeline.base import Notifier
from brakeline.notice import RequestStatus, Severity
from brakeline.scripts.runner import main, send_test_notice
from brakeline.utils import json
from brakeline.utils.testutils import InMemoryTransport


def test_send_test_notice(notifier, transport, capsys):
    assert send_test_notice(notifier, {'params': {'order': 7}})

    notice = transport.sent[0].notice
    assert notice['errors'][0]['type'].endswith('TestNotice')
    assert notice['context']['severity'] == Severity.INFO
    assert notice['params'] == {'order': '7'}

    out = capsys.readouterr().out
    assert 'success!' in out
    assert "Notice ID was '1'" in out


def test_send_test_notice_rejected(config, capsys):
    transport = InMemoryTransport(reply=(400, b'{"errors": ["invalid key"]}'))
    notifier = Notifier(config, transport=transport)

    assert not send_test_notice(notifier, {})

    out = capsys.readouterr().out
    assert 'Status was %s' % RequestStatus.REQUEST_ERROR in out
    assert 'invalid key' in out


def test_main_requires_test_command(monkeypatch):
    monkeypatch.setattr('sys.argv', ['brakeline'])

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1


def test_main_requires_configuration(monkeypatch, capsys):
    monkeypatch.delenv('AIRBRAKE_PROJECT_ID', raising=False)
    monkeypatch.delenv('AIRBRAKE_PROJECT_KEY', raising=False)
    monkeypatch.setattr('sys.argv', ['brakeline', 'test'])

    with pytest.raises(SystemExit) as exc_info:
        main()

    assert exc_info.value.code == 1
    assert 'No configuration detected' in capsys.readouterr().out


def test_main_sends_notice(monkeypatch, capsys):
    transport = InMemoryTransport()
    monkeypatch.setattr('sys.argv', [
        'brakeline', 'test', '42', 'secret',
        '--environment', 'staging', '--params', json.dumps({'a': 1}),
    ])

    with patch('brakeline.scripts.runner.RequestsHTTPTransport.from_config',
               return_value=transport) as from_config:
        main()

    config = from_config.call_args[0][0]
    assert config.project_id == '42'
    assert config.project_key == 'secret'
    assert config.environment == 'staging'

    notice = transport.sent[0].notice
    assert notice['context']['environment'] == 'staging'
    assert notice['params'] == {'a': '1'}
    assert 'success!' in capsys.readouterr().out
