from collections.abc import Mapping
from typing import Any, Dict, Optional

from ldfirehose.errors import ContextExtractionError
from ldfirehose.impl.util import JSONValue, log, normalize_json

# Names that describe the SDK's own bookkeeping rather than anything the caller set on the
# context. Both the JSON spelling and the Python property spelling are listed, since contexts
# can arrive as dictionaries built by hand.
RESERVED_ATTRIBUTES = frozenset([
    '_meta',
    'privateAttributes',
    'private_attributes',
    'DEFAULT_KIND',
    'MULTI_KIND',
    'error',
    'fullyQualifiedKey',
    'fully_qualified_key',
    'individualContextCount',
    'individual_context_count',
    'multiple',
    'valid',
])

DEFAULT_KIND = 'user'
MULTI_KIND = 'multi'


class ContextSanitizer:
    """
    Extracts the caller-defined attributes of an evaluation context into a plain dictionary
    that is safe to encode as JSON.

    A context may be an :class:`ldclient.Context`, any object with a ``to_dict()`` method that
    returns the LaunchDarkly JSON representation, or that representation itself as a mapping.
    """

    def extract(self, context: Any) -> Dict[str, JSONValue]:
        """
        Returns ``key``, ``kind`` and every custom attribute of the context. Reserved names and
        values that cannot be encoded as JSON are left out. If the context cannot be read at
        all, a minimal dictionary with whatever of ``key``, ``kind`` and ``name`` is readable
        is returned instead; this method does not raise.
        """
        try:
            return self._extract(context)
        except ContextExtractionError as e:
            log.debug('Using minimal context data for analytics event: %s', e)
            return self._minimal(context)

    def _extract(self, context: Any) -> Dict[str, JSONValue]:
        props = _context_as_dict(context)
        kind = props.get('kind', DEFAULT_KIND)
        if not isinstance(kind, str) or kind == '':
            raise ContextExtractionError('context kind must be a non-empty string')

        if kind == MULTI_KIND:
            # A multi-context has no key of its own; each individual context carries one.
            out = {'key': '', 'kind': kind}  # type: Dict[str, JSONValue]
            for name, value in props.items():
                if name == 'kind' or name in RESERVED_ATTRIBUTES:
                    continue
                if not isinstance(value, Mapping):
                    raise ContextExtractionError('multi-context entry "%s" is not an object' % name)
                individual_key = value.get('key')
                if not isinstance(individual_key, str):
                    raise ContextExtractionError('multi-context entry "%s" has no string key' % name)
                individual = {'key': individual_key}  # type: Dict[str, JSONValue]
                _copy_attributes(value, individual)
                out[name] = individual
            return out

        key = props.get('key')
        if not isinstance(key, str):
            raise ContextExtractionError('context key must be a string')
        out = {'key': key, 'kind': kind}
        _copy_attributes(props, out)
        return out

    def _minimal(self, context: Any) -> Dict[str, JSONValue]:
        key = _read_string(context, 'key')
        out = {'key': key if key is not None else ''}  # type: Dict[str, JSONValue]
        kind = _read_string(context, 'kind')
        if kind:
            out['kind'] = kind
        name = _read_string(context, 'name')
        if name:
            out['name'] = name
        return out


def _context_as_dict(context: Any) -> Mapping:
    if isinstance(context, Mapping):
        return context
    if not hasattr(context, 'to_dict'):
        raise ContextExtractionError('unsupported context type %s' % type(context).__name__)
    if getattr(context, 'valid', True) is False:
        raise ContextExtractionError('context is invalid: %s' % getattr(context, 'error', None))
    try:
        props = context.to_dict()
    except Exception as e:
        raise ContextExtractionError('to_dict() failed: %s' % e) from e
    if not isinstance(props, Mapping):
        raise ContextExtractionError('to_dict() returned %s' % type(props).__name__)
    return props


def _copy_attributes(props: Mapping, out: Dict[str, JSONValue]):
    for name, value in props.items():
        if name in out or name in RESERVED_ATTRIBUTES:
            continue
        if not isinstance(name, str):
            continue
        try:
            out[name] = normalize_json(value)
        except (TypeError, ValueError, RecursionError):
            log.debug('Dropping context attribute "%s" because it cannot be encoded as JSON', name)


def _read_string(context: Any, name: str) -> Optional[str]:
    try:
        value = context.get(name) if isinstance(context, Mapping) else getattr(context, name, None)
    except Exception:
        return None
    return value if isinstance(value, str) else None
