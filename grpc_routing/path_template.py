# Copyright 2026 The gRPC Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Path templates used to extract routing parameters from request fields.

A path template is a '/'-delimited sequence of segments. Each segment is a
literal, '*' (exactly one non-empty segment), '**' (one or more trailing
segments) or a capture, '{name}' or '{name=subpattern}'. A capture without a
subpattern is equivalent to '{name=*}'.

    pattern = path_template.compile('{parent=projects/*}/**')
    path_template.match(pattern, 'projects/100/topics/t1')  # 'projects/100'
"""

import collections
from typing import Dict, Optional, Union

_SEPARATOR = '/'
_SINGLE_WILDCARD_TEXT = '*'
_MULTI_WILDCARD_TEXT = '**'


class MalformedTemplateError(ValueError):
    """Raised when a path template violates the template grammar.

    Attributes:
      template: The offending template text.
      reason: A short description of the violation.
    """

    def __init__(self, template, reason):
        super(MalformedTemplateError,
              self).__init__('Malformed path template %r: %s' %
                             (template, reason))
        self.template = template
        self.reason = reason


class Literal(collections.namedtuple('Literal', ('text',))):
    """Matches one segment equal to text."""
    __slots__ = ()

    def __str__(self):
        return self.text


class SingleWildcard(object):
    """Matches exactly one non-empty segment."""
    __slots__ = ()

    def __eq__(self, other):
        return isinstance(other, SingleWildcard)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(_SINGLE_WILDCARD_TEXT)

    def __repr__(self):
        return 'SingleWildcard()'

    def __str__(self):
        return _SINGLE_WILDCARD_TEXT


class MultiWildcard(object):
    """Matches one or more segments; only valid as the last of its sequence."""
    __slots__ = ()

    def __eq__(self, other):
        return isinstance(other, MultiWildcard)

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(_MULTI_WILDCARD_TEXT)

    def __repr__(self):
        return 'MultiWildcard()'

    def __str__(self):
        return _MULTI_WILDCARD_TEXT


class Capture(
        collections.namedtuple('Capture', ('name', 'segments', 'explicit'))):
    """A named subpattern whose matched text is extracted.

    Attributes:
      name: The capture name.
      segments: A tuple of Literal, SingleWildcard and MultiWildcard.
      explicit: False if the template omitted '=subpattern'.
    """
    __slots__ = ()

    @property
    def subpattern(self):
        return _SEPARATOR.join(str(segment) for segment in self.segments)

    def __str__(self):
        if self.explicit:
            return '{%s=%s}' % (self.name, self.subpattern)
        return '{%s}' % self.name


SINGLE_WILDCARD = SingleWildcard()
MULTI_WILDCARD = MultiWildcard()


def _width(segment):
    if isinstance(segment, Capture):
        return sum(_width(inner) for inner in segment.segments)
    return 1


def _is_open_ended(segment):
    if isinstance(segment, Capture):
        return any(_is_open_ended(inner) for inner in segment.segments)
    return isinstance(segment, MultiWildcard)


def _consume(segments, parts, index, slack):
    for segment in segments:
        if isinstance(segment, Literal):
            if parts[index] != segment.text:
                return None
            index += 1
        elif isinstance(segment, SingleWildcard):
            if not parts[index]:
                return None
            index += 1
        else:
            if not any(parts[index:index + 1 + slack]):
                return None
            index += 1 + slack
    return index


class CompiledPattern(object):
    """An immutable, compiled path template.

    Instances are safe to share between threads.
    """
    __slots__ = ('_template', '_segments', '_captures', '_fixed_width',
                 '_open_ended')

    def __init__(self, template, segments):
        self._template = template
        self._segments = tuple(segments)
        self._captures = tuple(segment for segment in self._segments
                               if isinstance(segment, Capture))
        self._fixed_width = sum(_width(segment) for segment in self._segments)
        self._open_ended = any(
            _is_open_ended(segment) for segment in self._segments)

    @property
    def template(self):
        return self._template

    @property
    def segments(self):
        return self._segments

    @property
    def captures(self):
        return self._captures

    def match(self, value: str) -> Optional[Dict[str, str]]:
        """Matches value against this pattern.

        Args:
          value: A '/'-delimited string.

        Returns:
          A dict of capture name to captured text if value matches (empty
          when the pattern has no captures), otherwise None.
        """
        if not isinstance(value, str):
            return None
        parts = value.split(_SEPARATOR)
        # At most one element is open-ended, so its width is whatever the
        # fixed-width elements leave over.
        slack = len(parts) - self._fixed_width
        if slack < 0 or (slack and not self._open_ended):
            return None
        captures = {}
        index = 0
        for segment in self._segments:
            if isinstance(segment, Capture):
                start = index
                index = _consume(segment.segments, parts, index, slack)
                if index is None:
                    return None
                captures[segment.name] = _SEPARATOR.join(parts[start:index])
            else:
                index = _consume((segment,), parts, index, slack)
                if index is None:
                    return None
        return captures

    def __eq__(self, other):
        if not isinstance(other, CompiledPattern):
            return NotImplemented
        return self._segments == other._segments

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    def __hash__(self):
        return hash(self._segments)

    def __repr__(self):
        return 'CompiledPattern(%r)' % str(self)

    def __str__(self):
        return _SEPARATOR.join(str(segment) for segment in self._segments)


def _split(template):
    """Splits template on '/' characters that are outside of braces."""
    parts = []
    current = []
    in_capture = False
    for char in template:
        if char == '{':
            if in_capture:
                raise MalformedTemplateError(template, 'nested capture')
            in_capture = True
        elif char == '}':
            if not in_capture:
                raise MalformedTemplateError(template, 'unmatched "}"')
            in_capture = False
        elif char == _SEPARATOR and not in_capture:
            parts.append(''.join(current))
            current = []
            continue
        current.append(char)
    if in_capture:
        raise MalformedTemplateError(template, 'unclosed capture')
    parts.append(''.join(current))
    return parts


def _parse_plain(template, text):
    if not text:
        raise MalformedTemplateError(template, 'empty segment')
    if text == _SINGLE_WILDCARD_TEXT:
        return SINGLE_WILDCARD
    if text == _MULTI_WILDCARD_TEXT:
        return MULTI_WILDCARD
    return Literal(text)


def _parse_capture(template, text):
    if (not (text.startswith('{') and text.endswith('}')) or
            '{' in text[1:] or '}' in text[:-1]):
        raise MalformedTemplateError(
            template, 'capture %r must span a whole segment' % text)
    name, separator, subpattern = text[1:-1].partition('=')
    if not name:
        raise MalformedTemplateError(template, 'empty capture name')
    if separator and not subpattern:
        raise MalformedTemplateError(template,
                                     'empty subpattern for %r' % name)
    segments = tuple(
        _parse_plain(template, part)
        for part in (subpattern or _SINGLE_WILDCARD_TEXT).split(_SEPARATOR))
    _check_multi_wildcard(template, segments)
    return Capture(name, segments, bool(separator))


def _check_multi_wildcard(template, segments):
    for index, segment in enumerate(segments):
        if isinstance(segment, MultiWildcard) and index != len(segments) - 1:
            raise MalformedTemplateError(
                template, '"**" must be the last segment of its sequence')


def compile(template: str) -> CompiledPattern:  # pylint: disable=redefined-builtin
    """Compiles a path template.

    Args:
      template: The template text, e.g. '{name=projects/*}/topics/**'.

    Returns:
      A CompiledPattern.

    Raises:
      MalformedTemplateError: If the template is empty, has an unclosed,
        nested or unnamed capture, has an empty segment, or places '**'
        anywhere other than the end of its sequence.
    """
    if not template:
        raise MalformedTemplateError(template, 'empty template')
    segments = []
    names = set()
    for part in _split(template):
        if '{' in part or '}' in part:
            capture = _parse_capture(template, part)
            if capture.name in names:
                raise MalformedTemplateError(
                    template, 'duplicate capture %r' % capture.name)
            names.add(capture.name)
            segments.append(capture)
        else:
            segments.append(_parse_plain(template, part))
    _check_multi_wildcard(template, segments)
    if sum(1 for segment in segments if _is_open_ended(segment)) > 1:
        raise MalformedTemplateError(template, 'more than one "**"')
    return CompiledPattern(template, segments)


def match(pattern: Union[CompiledPattern, str],
          value: str) -> Optional[str]:
    """Extracts the single captured value of pattern from value.

    Args:
      pattern: A CompiledPattern, or template text to compile, with exactly
        one capture.
      value: The '/'-delimited string to match.

    Returns:
      The captured text, with internal '/' preserved, or None if value does
      not match.

    Raises:
      ValueError: If pattern does not have exactly one capture.
    """
    if not isinstance(pattern, CompiledPattern):
        pattern = compile(pattern)
    if len(pattern.captures) != 1:
        raise ValueError('Pattern %r must have exactly one capture.' %
                         pattern.template)
    captures = pattern.match(value)
    if captures is None:
        return None
    return captures[pattern.captures[0].name]
