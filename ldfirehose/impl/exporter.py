from collections.abc import Mapping
from threading import Lock
from typing import Any, Optional

from ldclient.evaluation import EvaluationDetail

from ldfirehose.event import EventBuilder, ExperimentEvent
from ldfirehose.impl.context_sanitizer import ContextSanitizer
from ldfirehose.impl.fixed_thread_pool import FixedThreadPool
from ldfirehose.impl.util import log
from ldfirehose.sender import FirehoseSender


def is_in_experiment(detail: Optional[EvaluationDetail]) -> bool:
    """
    True if the evaluation reason says the evaluation counts toward an experiment. Only a
    boolean ``inExperiment`` of True qualifies.
    """
    if detail is None:
        return False
    reason = detail.reason
    return isinstance(reason, Mapping) and reason.get('inExperiment') is True


class ExperimentExporter:
    """
    Turns an experiment evaluation into an :class:`ExperimentEvent` and hands it to a sender.

    The event is always built on the calling thread, so it reflects the context as it was at
    evaluation time. Delivery happens on the calling thread too, unless the sender's
    configuration enables ``async_export``.
    """

    def __init__(self, sender: FirehoseSender, source: str, builder: Optional[EventBuilder] = None):
        self._sender = sender
        self._source = source
        self._sanitizer = ContextSanitizer()
        self._builder = builder or EventBuilder()
        self._pool = None  # type: Optional[FixedThreadPool]
        self._pool_full = False
        self._lock = Lock()
        config = sender.config
        if config.async_export:
            self._pool = FixedThreadPool(config.export_threads, config.export_max_pending, 'ldfirehose.export')

    @property
    def source(self) -> str:
        return self._source

    def export(self, flag_key: str, context: Any, detail: EvaluationDetail) -> bool:
        """
        Exports the evaluation if it is part of an experiment. Never raises.

        :return: True if an event was built and passed to the sender, or queued for it, without
          an exception being raised
        """
        try:
            if not is_in_experiment(detail):
                log.debug('Evaluation of flag %s is not part of an experiment; nothing to export', flag_key)
                return False
            log.info('Experiment detected for flag %s - sending to Firehose', flag_key)
            event = self._builder.build(flag_key, self._sanitizer.extract(context), detail, self._source)
            return self._dispatch(event)
        except Exception:
            log.warning('Unexpected error while exporting experiment event for flag %s', flag_key, exc_info=True)
            return False

    def flush(self):
        """Waits until every queued event has been delivered."""
        with self._lock:
            pool = self._pool
        if pool is not None:
            pool.wait()

    def close(self):
        with self._lock:
            pool = self._pool
            self._pool = None
        if pool is not None:
            pool.wait()
            pool.stop()

    def _dispatch(self, event: ExperimentEvent) -> bool:
        # The pool is only read and used under the lock, so close() cannot stop it between an
        # accepted job and its place in the queue.
        with self._lock:
            pool = self._pool
            accepted = pool is not None and pool.execute(lambda: self._deliver(event))
        if pool is None:
            self._deliver(event)
            return True
        if accepted:
            self._pool_full = False
            return True
        if not self._pool_full:
            # only log once per stretch of rejections
            self._pool_full = True
            log.warning('Experiment events are being produced faster than they can be sent to Firehose; some events will be dropped')
        return False

    def _deliver(self, event: ExperimentEvent):
        outcome = self._sender.put_record(event)
        if not outcome.success:
            log.warning('Failed to send experiment event for flag %s to Firehose: %s', event.flag_key, outcome.error)
