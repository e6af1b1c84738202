"""
This submodule contains :class:`FirehoseSender`, which delivers experiment events to an Amazon
Kinesis Data Firehose delivery stream.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ldfirehose.config import FirehoseConfig
from ldfirehose.credentials import resolve_credentials
from ldfirehose.errors import ConfigurationError, TransportError
from ldfirehose.event import ExperimentEvent, encode_record
from ldfirehose.impl.util import _Fail, log

# PutRecordBatch accepts at most 500 records and 4 MiB per call.
MAX_BATCH_RECORDS = 500
MAX_BATCH_SIZE = 4 * 1024 * 1024

Record = Union[ExperimentEvent, Mapping]


@dataclass(frozen=True)
class DeliveryOutcome:
    """
    The result of delivering one record.
    """

    success: bool  #: True if Firehose accepted the record.
    record_id: Optional[str] = None  #: The ID Firehose assigned to the record, if accepted.
    error: Optional[Exception] = None  #: What went wrong, if the record was not accepted.

    @staticmethod
    def succeeded(record_id: Optional[str]) -> 'DeliveryOutcome':
        return DeliveryOutcome(True, record_id, None)

    @staticmethod
    def failed(error: Exception) -> 'DeliveryOutcome':
        return DeliveryOutcome(False, None, error)


@dataclass(frozen=True)
class BatchOutcome:
    """
    The result of delivering a batch of records.
    """

    outcomes: List[DeliveryOutcome] = field(default_factory=list)  #: One outcome per input record, in input order.
    failed_count: int = 0  #: The number of records that were not accepted.


class FirehoseSender:
    """
    Delivers experiment events to a Kinesis Data Firehose delivery stream.

    The sender holds a single boto3 client, which may be shared by any number of threads.
    Failed deliveries are reported in the returned outcome and are not retried.
    ::

        from ldfirehose import FirehoseConfig, FirehoseSender
        sender = FirehoseSender(FirehoseConfig(stream_name='ld-experiments'))

    If none of the configured credential providers resolves, a warning is logged and the client
    is left to find credentials through the AWS SDK default chain when it first sends, so a
    missing credential shows up as a failed delivery rather than a construction error.

    :param config: the sender configuration; defaults to a :class:`ldfirehose.config.FirehoseConfig`
      that reads everything from the environment
    :raises ConfigurationError: if no stream name is configured
    """

    def __init__(self, config: Optional[FirehoseConfig] = None):
        self._config = FirehoseConfig() if config is None else config
        self._stream_name = self._config.stream_name
        if not self._stream_name:
            raise ConfigurationError("Firehose stream name must be provided via the stream_name parameter or the FIREHOSE_STREAM_NAME environment variable")

        try:
            session_args = resolve_credentials(self._config.credential_providers)
        except ConfigurationError as e:
            log.warning('%s; the Firehose client will look for credentials with the AWS SDK default chain when it sends', e)
            session_args = {}
        session = boto3.session.Session(region_name=self._config.region, **session_args)
        self._client = session.client('firehose', **self._config.firehose_opts)
        log.info('Firehose sender initialized for stream %s in %s', self._stream_name, self._config.region)

    @property
    def config(self) -> FirehoseConfig:
        return self._config

    @property
    def stream_name(self) -> str:
        return self._stream_name

    @property
    def client(self):
        """The underlying boto3 Firehose client."""
        return self._client

    def put_record(self, event: Record) -> DeliveryOutcome:
        """
        Delivers one record as a line of JSON.

        :param event: an :class:`ldfirehose.event.ExperimentEvent`, or an event dictionary
        :return: the outcome; this method does not raise for delivery failures, and logs them only
          at debug level, leaving it to the caller to report them
        """
        encoded = encode_record(event)
        if isinstance(encoded, _Fail):
            log.debug('Experiment event was not sent to Firehose: %s', encoded.error)
            return DeliveryOutcome.failed(encoded.error)

        log.debug('Sending experiment event to Firehose: %s', encoded.value)
        try:
            resp = self._client.put_record(DeliveryStreamName=self._stream_name, Record={'Data': encoded.value})
        except (BotoCoreError, ClientError) as e:
            log.debug('Error sending experiment event to Firehose stream %s: %s', self._stream_name, e)
            return DeliveryOutcome.failed(TransportError('PutRecord failed: %s' % e, e))

        record_id = resp.get('RecordId')
        log.info('Sent experiment event to Firehose. Record ID: %s', record_id)
        return DeliveryOutcome.succeeded(record_id)

    def put_batch(self, events: Iterable[Record]) -> BatchOutcome:
        """
        Delivers several records, using as few ``PutRecordBatch`` calls as Firehose's limits
        allow.

        Each record is encoded on its own; a record that cannot be encoded is counted as failed
        and the rest are still sent. Likewise, if one call fails, only the records in that call
        are counted as failed.

        :param events: the records to deliver, in order
        :return: one outcome per record in input order, and the number of failures
        """
        events = list(events)
        if len(events) == 0:
            return BatchOutcome()

        outcomes = [None] * len(events)  # type: List[Optional[DeliveryOutcome]]
        failed_count = 0
        pending = []  # type: List[Tuple[int, bytes]]
        for i, event in enumerate(events):
            encoded = encode_record(event)
            if isinstance(encoded, _Fail):
                log.warning('Experiment event %d of batch was not sent to Firehose: %s', i, encoded.error)
                outcomes[i] = DeliveryOutcome.failed(encoded.error)
                failed_count += 1
            else:
                pending.append((i, encoded.value))

        for chunk in _chunks(pending):
            failed_count += self._put_chunk(chunk, outcomes)

        log.info('Sent %d of %d experiment events to Firehose', len(events) - failed_count, len(events))
        if failed_count > 0:
            log.warning('Failed to send %d experiment events to Firehose', failed_count)
        return BatchOutcome(outcomes, failed_count)  # type: ignore

    def _put_chunk(self, chunk: List[Tuple[int, bytes]], outcomes: List[Optional[DeliveryOutcome]]) -> int:
        try:
            resp = self._client.put_record_batch(
                DeliveryStreamName=self._stream_name,
                Records=[{'Data': data} for _, data in chunk]
            )
        except (BotoCoreError, ClientError) as e:
            log.warning('Error sending batch of %d experiment events to Firehose stream %s: %s', len(chunk), self._stream_name, e)
            error = TransportError('PutRecordBatch failed: %s' % e, e)
            for i, _ in chunk:
                outcomes[i] = DeliveryOutcome.failed(error)
            return len(chunk)

        responses = resp.get('RequestResponses') or []
        failed = 0
        for pos, (i, _) in enumerate(chunk):
            entry = responses[pos] if pos < len(responses) else None
            if entry is None:
                outcomes[i] = DeliveryOutcome.failed(TransportError('PutRecordBatch returned no result for this record'))
                failed += 1
            elif entry.get('ErrorCode'):
                outcomes[i] = DeliveryOutcome.failed(TransportError('%s: %s' % (entry['ErrorCode'], entry.get('ErrorMessage', ''))))
                failed += 1
            else:
                outcomes[i] = DeliveryOutcome.succeeded(entry.get('RecordId'))
        return failed


def _chunks(records: List[Tuple[int, bytes]]) -> Iterator[List[Tuple[int, bytes]]]:
    chunk = []  # type: List[Tuple[int, bytes]]
    size = 0
    for record in records:
        record_size = len(record[1])
        if chunk and (len(chunk) >= MAX_BATCH_RECORDS or size + record_size > MAX_BATCH_SIZE):
            yield chunk
            chunk = []
            size = 0
        chunk.append(record)
        size += record_size
    if chunk:
        yield chunk
