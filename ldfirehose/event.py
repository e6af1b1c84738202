"""
This submodule defines the experiment event record that is delivered to Kinesis Data Firehose,
and the functions that build and encode it.
"""

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union

import pyrfc3339
from ldclient.evaluation import EvaluationDetail

from ldfirehose.errors import SerializationError
from ldfirehose.impl.util import (JSONValue, _Fail, _Result, _Success,
                                normalize_json, to_json)

SCHEMA_VERSION = '1.0'

SOURCE_WRAPPER = 'launchdarkly-python-wrapper'
SOURCE_HOOK = 'launchdarkly-python-hook'

# Firehose rejects records whose data blob is larger than 1,000 KiB.
MAX_RECORD_SIZE = 1000 * 1024


@dataclass(frozen=True)
class ExperimentEvent:
    """
    One experiment evaluation, in the form that is written to the delivery stream.

    Instances are built by :class:`EventBuilder`; the context and value they hold are copies
    taken at build time, in the form they take after a round trip through JSON, so later
    changes to the caller's objects are not reflected here.
    """

    timestamp: str  #: Capture time as an RFC 3339 timestamp with an explicit UTC offset.
    flag_key: str  #: The key of the evaluated flag.
    evaluation_context: Dict[str, JSONValue]  #: The sanitized evaluation context.
    flag_value: Any  #: The evaluated flag value.
    variation_index: Optional[int]  #: The index of the returned variation, if any.
    reason_kind: Optional[str]  #: The kind of the evaluation reason, such as ``RULE_MATCH``.
    source: str  #: Which integration captured the evaluation.
    version: str = SCHEMA_VERSION  #: The record schema version.

    def to_dict(self) -> dict:
        return {
            'timestamp': self.timestamp,
            'flag_key': self.flag_key,
            'evaluation_context': self.evaluation_context,
            'flag_value': self.flag_value,
            'variation_index': self.variation_index,
            'reason_kind': self.reason_kind,
            'metadata': {
                'source': self.source,
                'version': self.version,
            },
        }

    @classmethod
    def from_dict(cls, props: Mapping) -> 'ExperimentEvent':
        metadata = props.get('metadata') or {}
        return ExperimentEvent(
            timestamp=props['timestamp'],
            flag_key=props['flag_key'],
            evaluation_context=props.get('evaluation_context') or {},
            flag_value=props.get('flag_value'),
            variation_index=props.get('variation_index'),
            reason_kind=props.get('reason_kind'),
            source=metadata.get('source', ''),
            version=metadata.get('version', SCHEMA_VERSION),
        )

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> 'ExperimentEvent':
        """Parses one line of the delivery stream's newline-delimited JSON."""
        return cls.from_dict(json.loads(data))


def _now() -> datetime:
    return datetime.now().astimezone()


def _snapshot(value: Any) -> Any:
    # Values that cannot be encoded are copied as they are; encode_record reports them.
    try:
        return normalize_json(value)
    except (TypeError, ValueError, RecursionError):
        return copy.deepcopy(value)


class EventBuilder:
    """
    Builds :class:`ExperimentEvent` instances.

    :param clock: returns the capture instant as a timezone-aware datetime; defaults to the
      current time in the local time zone
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or _now

    def build(self, flag_key: str, context: Dict[str, JSONValue], detail: EvaluationDetail, source: str) -> ExperimentEvent:
        reason = detail.reason
        reason_kind = reason.get('kind') if isinstance(reason, Mapping) else None
        return ExperimentEvent(
            timestamp=pyrfc3339.generate(self._clock(), utc=False),
            flag_key=flag_key,
            evaluation_context=_snapshot(context),
            flag_value=_snapshot(detail.value),
            variation_index=detail.variation_index,
            reason_kind=reason_kind,
            source=source,
        )


def encode_record(record: Union[ExperimentEvent, Mapping]) -> _Result[bytes, SerializationError]:
    """
    Encodes an event, or an already-built event dictionary, as one UTF-8 line of JSON
    terminated by a newline.
    """
    if isinstance(record, ExperimentEvent):
        props = record.to_dict()
    elif isinstance(record, Mapping):
        props = record
    else:
        return _Fail(SerializationError('record must be an ExperimentEvent or a mapping, not %s' % type(record).__name__))
    try:
        data = (to_json(props) + '\n').encode('utf-8')
    except (TypeError, ValueError, RecursionError) as e:
        return _Fail(SerializationError('record could not be encoded as JSON: %s' % e), e)
    if len(data) > MAX_RECORD_SIZE:
        return _Fail(SerializationError('encoded record is %d bytes, larger than the %d byte limit' % (len(data), MAX_RECORD_SIZE)))
    return _Success(data)
