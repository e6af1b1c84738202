"""
This submodule contains the credential providers that :class:`ldfirehose.sender.FirehoseSender`
tries, in order, when it creates its AWS client.

Each provider returns the keyword arguments to pass to ``boto3.session.Session``, or None if it
has nothing to offer. An empty dictionary means "let boto3 find credentials on its own".
"""

from abc import ABCMeta, abstractmethod
from typing import Dict, List, Mapping, Optional, Sequence

import boto3

from ldfirehose.errors import ConfigurationError
from ldfirehose.impl.util import log

SessionArgs = Dict[str, str]


class CredentialProvider(metaclass=ABCMeta):
    """
    Abstract base class for a source of AWS credentials.
    """

    @property
    def name(self) -> str:
        """A short description used in log messages."""
        return type(self).__name__

    @abstractmethod
    def resolve(self) -> Optional[SessionArgs]:
        """
        Returns ``boto3.session.Session`` keyword arguments, or None if this provider has no
        credentials.
        """
        return None


class StaticCredentialProvider(CredentialProvider):
    """
    Long-lived credentials supplied by the application.

    :param access_key_id: the AWS access key ID
    :param secret_access_key: the AWS secret access key
    """

    def __init__(self, access_key_id: Optional[str], secret_access_key: Optional[str]):
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key

    def resolve(self) -> Optional[SessionArgs]:
        if not self._access_key_id or not self._secret_access_key:
            return None
        return {
            'aws_access_key_id': self._access_key_id,
            'aws_secret_access_key': self._secret_access_key,
        }


class SessionCredentialProvider(CredentialProvider):
    """
    Temporary credentials supplied by the application, such as the result of an STS
    ``AssumeRole`` call. All three values are required.
    """

    def __init__(self, access_key_id: Optional[str], secret_access_key: Optional[str], session_token: Optional[str]):
        self._access_key_id = access_key_id
        self._secret_access_key = secret_access_key
        self._session_token = session_token

    def resolve(self) -> Optional[SessionArgs]:
        if not self._access_key_id or not self._secret_access_key or not self._session_token:
            return None
        return {
            'aws_access_key_id': self._access_key_id,
            'aws_secret_access_key': self._secret_access_key,
            'aws_session_token': self._session_token,
        }


class EnvironmentCredentialProvider(CredentialProvider):
    """
    Reads ``AWS_ACCESS_KEY_ID``, ``AWS_SECRET_ACCESS_KEY`` and the optional
    ``AWS_SESSION_TOKEN`` from the given environment mapping.
    """

    def __init__(self, environ: Mapping[str, str]):
        self._environ = environ

    def resolve(self) -> Optional[SessionArgs]:
        key = self._environ.get('AWS_ACCESS_KEY_ID')
        secret = self._environ.get('AWS_SECRET_ACCESS_KEY')
        token = self._environ.get('AWS_SESSION_TOKEN')
        if token:
            return SessionCredentialProvider(key, secret, token).resolve()
        return StaticCredentialProvider(key, secret).resolve()


class DefaultCredentialProvider(CredentialProvider):
    """
    Defers to boto3's default credential chain: environment variables, shared credential and
    config files, and container or instance roles. It resolves only if that chain currently
    finds credentials; the client itself then refreshes them as boto3 normally does.
    """

    def resolve(self) -> Optional[SessionArgs]:
        if boto3.session.Session().get_credentials() is None:
            return None
        return {}


def default_credential_providers(
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    session_token: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> List[CredentialProvider]:
    """
    Builds the standard provider order: explicit static credentials, explicit session
    credentials, the environment mapping, then boto3's default chain.

    Explicit static credentials are only offered when no session token was given, since a key
    pair without its token is not usable for temporary credentials.
    """
    providers = []  # type: List[CredentialProvider]
    if not session_token:
        providers.append(StaticCredentialProvider(access_key_id, secret_access_key))
    providers.append(SessionCredentialProvider(access_key_id, secret_access_key, session_token))
    if environ is not None:
        providers.append(EnvironmentCredentialProvider(environ))
    providers.append(DefaultCredentialProvider())
    return providers


def resolve_credentials(providers: Sequence[CredentialProvider]) -> SessionArgs:
    """
    Returns the session arguments from the first provider that resolves.

    :raises ConfigurationError: if no provider resolves
    """
    for provider in providers:
        args = provider.resolve()
        if args is not None:
            log.debug('Using AWS credentials from %s', provider.name)
            return args
    raise ConfigurationError('No AWS credentials were found by any of: %s' % ', '.join(p.name for p in providers))
