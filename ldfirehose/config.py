"""
This submodule contains the :class:`FirehoseConfig` class for configuring the delivery of
experiment events to Kinesis Data Firehose.
"""

import os
from typing import Any, List, Mapping, Optional

from ldfirehose.credentials import CredentialProvider, default_credential_providers

DEFAULT_REGION = 'us-east-1'


class FirehoseConfig:
    """Configuration options for :class:`ldfirehose.sender.FirehoseSender`.

    Every option that is not passed explicitly falls back to the matching variable in
    ``environ``, so the simplest setup is to export ``FIREHOSE_STREAM_NAME`` and rely on the
    default AWS credential chain:
    ::

        from ldfirehose import FirehoseConfig, FirehoseSender
        sender = FirehoseSender(FirehoseConfig())
    """

    def __init__(
        self,
        stream_name: Optional[str] = None,
        region: Optional[str] = None,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        aws_session_token: Optional[str] = None,
        credential_providers: Optional[List[CredentialProvider]] = None,
        firehose_opts: Optional[Mapping[str, Any]] = None,
        async_export: bool = False,
        export_threads: int = 1,
        export_max_pending: int = 10000,
        environ: Optional[Mapping[str, str]] = None,
    ):
        """
        :param stream_name: The name of the Firehose delivery stream. If omitted,
          ``FIREHOSE_STREAM_NAME`` is used. A sender cannot be created without one.
        :param region: The AWS region of the delivery stream. If omitted, ``AWS_REGION`` or
          ``AWS_DEFAULT_REGION`` is used, and otherwise ``us-east-1``.
        :param aws_access_key_id: An explicit AWS access key ID.
        :param aws_secret_access_key: An explicit AWS secret access key.
        :param aws_session_token: An explicit session token, for temporary credentials.
        :param credential_providers: The credential providers to try, in order. If omitted,
          explicit credentials are tried first, then the ``AWS_*`` variables in ``environ``,
          then boto3's default credential chain.
        :param firehose_opts: Extra keyword arguments for creating the boto3 Firehose client,
          as defined in the `boto3 API <https://boto3.amazonaws.com/v1/documentation/api/latest/reference/core/session.html#boto3.session.Session.client>`_;
          for instance ``endpoint_url`` or a ``botocore.config.Config``.
        :param async_export: If true, events are delivered on background worker threads
          instead of on the thread that evaluated the flag.
        :param export_threads: The number of worker threads used when ``async_export`` is set.
        :param export_max_pending: The number of events that may wait for a worker when
          ``async_export`` is set. Further events are discarded until the backlog clears.
        :param environ: The environment mapping used for fallback values. Defaults to
          ``os.environ``.
        """
        env = os.environ if environ is None else environ
        self.__stream_name = stream_name or env.get('FIREHOSE_STREAM_NAME') or None
        self.__region = region or env.get('AWS_REGION') or env.get('AWS_DEFAULT_REGION') or DEFAULT_REGION
        if credential_providers is None:
            credential_providers = default_credential_providers(aws_access_key_id, aws_secret_access_key, aws_session_token, env)
        self.__credential_providers = list(credential_providers)
        self.__firehose_opts = dict(firehose_opts or {})
        self.__async_export = async_export
        self.__export_threads = max(export_threads, 1)
        self.__export_max_pending = max(export_max_pending, 1)

    @property
    def stream_name(self) -> Optional[str]:
        return self.__stream_name

    @property
    def region(self) -> str:
        return self.__region

    @property
    def credential_providers(self) -> List[CredentialProvider]:
        return list(self.__credential_providers)

    @property
    def firehose_opts(self) -> dict:
        return dict(self.__firehose_opts)

    @property
    def async_export(self) -> bool:
        return self.__async_export

    @property
    def export_threads(self) -> int:
        return self.__export_threads

    @property
    def export_max_pending(self) -> int:
        return self.__export_max_pending
