from typing import Optional

from ldclient.evaluation import EvaluationDetail
from ldclient.hook import EvaluationSeriesContext, Hook, Metadata

from ldfirehose.event import SOURCE_HOOK, EventBuilder
from ldfirehose.impl.exporter import ExperimentExporter
from ldfirehose.sender import FirehoseSender

HOOK_NAME = 'ldfirehose-experiment-hook'


class FirehoseExperimentHook(Hook):
    """
    An SDK hook that sends every experiment evaluation to Kinesis Data Firehose.

    Add it to the client configuration, or register it on an existing client:
    ::

        from ldclient.config import Config
        from ldfirehose import FirehoseExperimentHook, FirehoseSender
        config = Config(sdk_key, hooks=[FirehoseExperimentHook(FirehoseSender())])

    The hook never changes the evaluation result. With no sender, it does nothing.
    """

    def __init__(self, sender: Optional[FirehoseSender] = None, event_builder: Optional[EventBuilder] = None):
        self._sender = sender
        self._exporter = None  # type: Optional[ExperimentExporter]
        if sender is not None:
            self._exporter = ExperimentExporter(sender, SOURCE_HOOK, event_builder)

    @property
    def metadata(self) -> Metadata:
        return Metadata(name=HOOK_NAME)

    @property
    def sender(self) -> Optional[FirehoseSender]:
        return self._sender

    def before_evaluation(self, series_context: EvaluationSeriesContext, data: dict) -> dict:
        return data

    def after_evaluation(self, series_context: EvaluationSeriesContext, data: dict, detail: EvaluationDetail) -> dict:
        if self._exporter is not None:
            self._exporter.export(series_context.key, series_context.context, detail)
        return data

    def flush(self):
        if self._exporter is not None:
            self._exporter.flush()

    def close(self):
        if self._exporter is not None:
            self._exporter.close()
