import pytest

from ldfirehose.credentials import (DefaultCredentialProvider,
                                    EnvironmentCredentialProvider,
                                    SessionCredentialProvider,
                                    StaticCredentialProvider,
                                    default_credential_providers,
                                    resolve_credentials)
from ldfirehose.errors import ConfigurationError


class CountingProvider(StaticCredentialProvider):
    def __init__(self, key, secret):
        super().__init__(key, secret)
        self.calls = 0

    def resolve(self):
        self.calls += 1
        return super().resolve()


def test_static_credentials():
    assert StaticCredentialProvider('key', 'secret').resolve() == {'aws_access_key_id': 'key', 'aws_secret_access_key': 'secret'}


@pytest.mark.parametrize('key,secret', [(None, 'secret'), ('key', None), ('', ''), (None, None)])
def test_static_credentials_need_key_and_secret(key, secret):
    assert StaticCredentialProvider(key, secret).resolve() is None


def test_session_credentials():
    assert SessionCredentialProvider('key', 'secret', 'token').resolve() == {
        'aws_access_key_id': 'key',
        'aws_secret_access_key': 'secret',
        'aws_session_token': 'token',
    }


def test_session_credentials_need_token():
    assert SessionCredentialProvider('key', 'secret', None).resolve() is None


def test_environment_credentials():
    env = {'AWS_ACCESS_KEY_ID': 'key', 'AWS_SECRET_ACCESS_KEY': 'secret'}
    assert EnvironmentCredentialProvider(env).resolve() == {'aws_access_key_id': 'key', 'aws_secret_access_key': 'secret'}


def test_environment_credentials_with_session_token():
    env = {'AWS_ACCESS_KEY_ID': 'key', 'AWS_SECRET_ACCESS_KEY': 'secret', 'AWS_SESSION_TOKEN': 'token'}
    assert EnvironmentCredentialProvider(env).resolve()['aws_session_token'] == 'token'


def test_environment_credentials_missing():
    assert EnvironmentCredentialProvider({'AWS_ACCESS_KEY_ID': 'key'}).resolve() is None


def test_default_provider_uses_ambient_credentials(monkeypatch):
    monkeypatch.delenv('AWS_PROFILE', raising=False)
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'ambient-key')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'ambient-secret')
    assert DefaultCredentialProvider().resolve() == {}


def test_default_order():
    providers = default_credential_providers('key', 'secret', None, {})
    assert [type(p) for p in providers] == [StaticCredentialProvider, SessionCredentialProvider, EnvironmentCredentialProvider, DefaultCredentialProvider]


def test_default_order_with_session_token_skips_static():
    providers = default_credential_providers('key', 'secret', 'token', {})
    assert [type(p) for p in providers] == [SessionCredentialProvider, EnvironmentCredentialProvider, DefaultCredentialProvider]
    assert resolve_credentials(providers)['aws_session_token'] == 'token'


def test_explicit_credentials_take_precedence_over_environment():
    env = {'AWS_ACCESS_KEY_ID': 'env-key', 'AWS_SECRET_ACCESS_KEY': 'env-secret'}
    args = resolve_credentials(default_credential_providers('key', 'secret', None, env))
    assert args['aws_access_key_id'] == 'key'


def test_environment_used_when_no_explicit_credentials():
    env = {'AWS_ACCESS_KEY_ID': 'env-key', 'AWS_SECRET_ACCESS_KEY': 'env-secret'}
    args = resolve_credentials(default_credential_providers(environ=env))
    assert args['aws_access_key_id'] == 'env-key'


def test_providers_are_tried_in_order_until_one_resolves():
    first = CountingProvider(None, None)
    second = CountingProvider('key', 'secret')
    third = CountingProvider('other', 'other')

    assert resolve_credentials([first, second, third])['aws_access_key_id'] == 'key'
    assert (first.calls, second.calls, third.calls) == (1, 1, 0)


def test_no_provider_resolves():
    with pytest.raises(ConfigurationError):
        resolve_credentials([StaticCredentialProvider(None, None), EnvironmentCredentialProvider({})])


def test_empty_provider_list():
    with pytest.raises(ConfigurationError):
        resolve_credentials([])
