import logging
from threading import Event, Lock, Thread

import pytest
from botocore.stub import Stubber
from ldclient.evaluation import EvaluationDetail

from ldfirehose.event import SOURCE_HOOK, EventBuilder
from ldfirehose.impl.exporter import ExperimentExporter, is_in_experiment
from ldfirehose.sender import FirehoseSender
from ldfirehose.testing.mock_components import (MockSender,
                                                experiment_detail,
                                                fixed_builder, make_config,
                                                plain_detail)

context = {'key': 'u1', 'kind': 'user'}


@pytest.mark.parametrize('reason,expected', [
    ({'kind': 'RULE_MATCH', 'inExperiment': True}, True),
    ({'kind': 'FALLTHROUGH', 'inExperiment': True}, True),
    ({'kind': 'FALLTHROUGH'}, False),
    ({'kind': 'FALLTHROUGH', 'inExperiment': False}, False),
    ({'kind': 'FALLTHROUGH', 'inExperiment': 'yes'}, False),
    ({'kind': 'FALLTHROUGH', 'inExperiment': None}, False),
    (None, False),
    ('RULE_MATCH', False),
])
def test_is_in_experiment(reason, expected):
    assert is_in_experiment(EvaluationDetail('v', 0, reason)) is expected


def test_is_in_experiment_without_detail():
    assert is_in_experiment(None) is False


def test_export_returns_whether_event_was_handed_off():
    sender = MockSender()
    exporter = ExperimentExporter(sender, SOURCE_HOOK, fixed_builder())

    assert exporter.export('flag', context, experiment_detail()) is True
    assert exporter.export('flag', context, plain_detail()) is False
    assert len(sender.events) == 1
    assert exporter.source == SOURCE_HOOK


def test_export_swallows_errors():
    sender = MockSender(error=RuntimeError('deliberate error'))
    exporter = ExperimentExporter(sender, SOURCE_HOOK)
    assert exporter.export('flag', context, experiment_detail()) is False
    assert len(sender.events) == 1


def test_export_swallows_build_errors():
    def broken_clock():
        raise RuntimeError('deliberate error')

    sender = MockSender()
    exporter = ExperimentExporter(sender, SOURCE_HOOK, EventBuilder(clock=broken_clock))
    assert exporter.export('flag', context, experiment_detail()) is False
    assert sender.events == []


def test_close_is_idempotent_and_stops_async_export():
    sender = MockSender(config=make_config(async_export=True))
    exporter = ExperimentExporter(sender, SOURCE_HOOK)
    exporter.export('flag', context, experiment_detail())
    exporter.close()
    exporter.close()

    assert len(sender.events) == 1
    # after close, delivery happens inline again
    assert exporter.export('flag', context, experiment_detail()) is True
    assert len(sender.events) == 2


def test_delivery_failure_is_logged_once(caplog):
    sender = FirehoseSender(make_config())
    exporter = ExperimentExporter(sender, SOURCE_HOOK, fixed_builder())
    with Stubber(sender.client) as stubber:
        stubber.add_client_error('put_record', service_error_code='ServiceUnavailableException')
        with caplog.at_level(logging.DEBUG, logger='ldfirehose'):
            assert exporter.export('flag', context, experiment_detail()) is True

    warnings = [r.getMessage() for r in caplog.records if r.levelno >= logging.WARNING]
    assert len(warnings) == 1
    assert warnings[0].startswith('Failed to send experiment event for flag flag to Firehose')


def test_close_while_exporting_delivers_every_accepted_event():
    sender = MockSender(config=make_config(async_export=True, export_threads=2))
    exporter = ExperimentExporter(sender, SOURCE_HOOK, fixed_builder())
    accepted = []
    accepted_lock = Lock()
    started = Event()

    def export_many():
        started.set()
        count = 0
        for _ in range(200):
            if exporter.export('flag', context, experiment_detail()):
                count += 1
        with accepted_lock:
            accepted.append(count)

    threads = [Thread(target=export_many) for _ in range(4)]
    for t in threads:
        t.start()
    started.wait()
    exporter.close()
    for t in threads:
        t.join()
    exporter.close()

    assert len(sender.events) == sum(accepted) == 800
