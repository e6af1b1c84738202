"""
This submodule contains :class:`VariationDetailAnalyticsWrapper`, which captures experiment
evaluations by wrapping calls to :func:`ldclient.client.LDClient.variation_detail()`.
"""

from typing import Any, Optional

from ldclient.client import LDClient
from ldclient.evaluation import EvaluationDetail

from ldfirehose.event import SOURCE_WRAPPER, EventBuilder
from ldfirehose.impl.exporter import ExperimentExporter
from ldfirehose.impl.util import log
from ldfirehose.sender import FirehoseSender


class VariationDetailAnalyticsWrapper:
    """
    Wraps an SDK client so that every evaluation made through it which is part of an
    experiment is also sent to Kinesis Data Firehose.

    The wrapper returns exactly what the client returns. Problems while exporting are logged
    and never reach the caller. If ``sender`` is None, for instance because the application
    could not configure one at startup, evaluations pass straight through.
    ::

        try:
            sender = FirehoseSender()
        except ConfigurationError:
            sender = None
        wrapper = VariationDetailAnalyticsWrapper(ldclient.get(), sender)
        detail = wrapper.variation_detail('checkout-button-color', context, 'Control')

    :param client: the SDK client, or any object with a compatible ``variation_detail`` method
    :param sender: the sender to deliver experiment events with, if any
    :param event_builder: builds the delivered events; the default uses the current time
    """

    def __init__(self, client: LDClient, sender: Optional[FirehoseSender] = None, event_builder: Optional[EventBuilder] = None):
        self._client = client
        self._sender = sender
        self._exporter = None  # type: Optional[ExperimentExporter]
        if sender is not None:
            self._exporter = ExperimentExporter(sender, SOURCE_WRAPPER, event_builder)

    @property
    def client(self) -> LDClient:
        return self._client

    @property
    def sender(self) -> Optional[FirehoseSender]:
        return self._sender

    def variation_detail(self, key: str, context: Any, default: Any = False) -> EvaluationDetail:
        """
        Evaluates a flag with :func:`ldclient.client.LDClient.variation_detail()` and exports
        the result if the context is in an experiment for that flag.

        :param key: the unique key for the feature flag
        :param context: the evaluation context
        :param default: the default value of the flag, to be used if the value is not
          available from LaunchDarkly
        :return: the evaluation detail returned by the client, unchanged
        """
        detail = self._client.variation_detail(key, context, default)
        self._send_to_analytics(key, context, detail)
        return detail

    def variation(self, key: str, context: Any, default: Any = False) -> Any:
        """
        Like :func:`variation_detail()`, but returns only the flag value.
        """
        return self.variation_detail(key, context, default).value

    def flush(self):
        """Waits for pending deliveries when asynchronous export is enabled."""
        if self._exporter is not None:
            self._exporter.flush()

    def close(self):
        """
        Stops any background export workers. The wrapped client is not closed.
        """
        if self._exporter is not None:
            self._exporter.close()

    def _send_to_analytics(self, key: str, context: Any, detail: EvaluationDetail):
        if self._exporter is None:
            log.debug('No Firehose sender is configured; not exporting evaluation of flag %s', key)
            return
        self._exporter.export(key, context, detail)
