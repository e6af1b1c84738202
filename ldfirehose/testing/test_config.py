from ldfirehose.config import DEFAULT_REGION, FirehoseConfig
from ldfirehose.credentials import (DefaultCredentialProvider,
                                    StaticCredentialProvider,
                                    resolve_credentials)


def test_explicit_values():
    config = FirehoseConfig(stream_name='my-stream', region='eu-west-1', environ={'FIREHOSE_STREAM_NAME': 'env-stream', 'AWS_REGION': 'us-west-2'})
    assert config.stream_name == 'my-stream'
    assert config.region == 'eu-west-1'


def test_values_from_environment():
    config = FirehoseConfig(environ={'FIREHOSE_STREAM_NAME': 'env-stream', 'AWS_REGION': 'us-west-2'})
    assert config.stream_name == 'env-stream'
    assert config.region == 'us-west-2'


def test_default_region_variable():
    config = FirehoseConfig(environ={'AWS_DEFAULT_REGION': 'ap-south-1'})
    assert config.region == 'ap-south-1'


def test_defaults():
    config = FirehoseConfig(environ={})
    assert config.stream_name is None
    assert config.region == DEFAULT_REGION == 'us-east-1'
    assert config.firehose_opts == {}
    assert config.async_export is False
    assert config.export_threads == 1
    assert config.export_max_pending == 10000
    assert isinstance(config.credential_providers[-1], DefaultCredentialProvider)


def test_empty_stream_name_is_unset():
    assert FirehoseConfig(stream_name='', environ={'FIREHOSE_STREAM_NAME': ''}).stream_name is None


def test_explicit_credentials_are_used_first():
    config = FirehoseConfig(aws_access_key_id='key', aws_secret_access_key='secret', environ={'AWS_ACCESS_KEY_ID': 'env-key', 'AWS_SECRET_ACCESS_KEY': 'env-secret'})
    assert resolve_credentials(config.credential_providers)['aws_access_key_id'] == 'key'


def test_custom_credential_providers():
    provider = StaticCredentialProvider('key', 'secret')
    config = FirehoseConfig(credential_providers=[provider], environ={})
    assert config.credential_providers == [provider]


def test_minimum_export_settings_are_enforced():
    config = FirehoseConfig(export_threads=0, export_max_pending=-5, environ={})
    assert config.export_threads == 1
    assert config.export_max_pending == 1


def test_returned_collections_are_copies():
    config = FirehoseConfig(firehose_opts={'endpoint_url': 'http://localhost:4566'}, environ={})
    config.firehose_opts['endpoint_url'] = 'changed'
    config.credential_providers.clear()
    assert config.firehose_opts == {'endpoint_url': 'http://localhost:4566'}
    assert len(config.credential_providers) > 0
