from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ldclient.hook import Hook
from ldclient.plugin import EnvironmentMetadata, Plugin, PluginMetadata

from ldfirehose.hook import FirehoseExperimentHook
from ldfirehose.impl.util import log
from ldfirehose.sender import FirehoseSender

if TYPE_CHECKING:
    from ldclient.client import LDClient

PLUGIN_NAME = 'ldfirehose'


class FirehosePlugin(Plugin):
    """
    An SDK plugin that installs a :class:`ldfirehose.hook.FirehoseExperimentHook`.

    ::

        from ldclient.config import Config
        from ldfirehose import FirehosePlugin, FirehoseSender
        config = Config(sdk_key, plugins=[FirehosePlugin(FirehoseSender())])
    """

    def __init__(self, sender: Optional[FirehoseSender] = None):
        self._hook = FirehoseExperimentHook(sender)
        self._client = None  # type: Optional[LDClient]

    @property
    def metadata(self) -> PluginMetadata:
        return PluginMetadata(name=PLUGIN_NAME)

    @property
    def hook(self) -> FirehoseExperimentHook:
        return self._hook

    def register(self, client: LDClient, metadata: EnvironmentMetadata) -> None:
        self._client = client
        if self._hook.sender is None:
            log.info('Firehose plugin registered with %s %s without a sender; experiment events will not be exported', metadata.sdk.name, metadata.sdk.version)
        else:
            log.info('Firehose plugin registered with %s %s, exporting to stream %s', metadata.sdk.name, metadata.sdk.version, self._hook.sender.stream_name)

    def get_hooks(self, metadata: EnvironmentMetadata) -> List[Hook]:
        return [self._hook]

    def close(self):
        self._hook.close()
