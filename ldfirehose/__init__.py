"""
The ldfirehose module exports LaunchDarkly experiment evaluations to Amazon Kinesis Data
Firehose.

Evaluations can be captured either by wrapping the SDK client with
:class:`ldfirehose.wrapper.VariationDetailAnalyticsWrapper`, or by registering
:class:`ldfirehose.hook.FirehoseExperimentHook` (or :class:`ldfirehose.plugin.FirehosePlugin`)
with it. Either way, evaluations whose reason has ``inExperiment`` set are sent to the delivery
stream configured by :class:`ldfirehose.config.FirehoseConfig`.
"""

from ldfirehose.config import FirehoseConfig
from ldfirehose.credentials import (CredentialProvider,
                                    DefaultCredentialProvider,
                                    EnvironmentCredentialProvider,
                                    SessionCredentialProvider,
                                    StaticCredentialProvider)
from ldfirehose.errors import (ConfigurationError, ContextExtractionError,
                               FirehoseError, SerializationError,
                               TransportError)
from ldfirehose.event import EventBuilder, ExperimentEvent
from ldfirehose.hook import FirehoseExperimentHook
from ldfirehose.impl.util import log
from ldfirehose.plugin import FirehosePlugin
from ldfirehose.sender import BatchOutcome, DeliveryOutcome, FirehoseSender
from ldfirehose.version import VERSION
from ldfirehose.wrapper import VariationDetailAnalyticsWrapper

__version__ = VERSION

__all__ = [
    'BatchOutcome',
    'ConfigurationError',
    'ContextExtractionError',
    'CredentialProvider',
    'DefaultCredentialProvider',
    'DeliveryOutcome',
    'EnvironmentCredentialProvider',
    'EventBuilder',
    'ExperimentEvent',
    'FirehoseConfig',
    'FirehoseError',
    'FirehoseExperimentHook',
    'FirehosePlugin',
    'FirehoseSender',
    'SerializationError',
    'SessionCredentialProvider',
    'StaticCredentialProvider',
    'TransportError',
    'VariationDetailAnalyticsWrapper',
    'log',
]
