import typing
from typing import Iterable, List
from collections import namedtuple

from .utils import *

class Keyword(namedtuple('Keyword', 'text, tag')):
  """
  A reserved word of a grammar.
  'text' is what the tokenizer matches (case-insensitively),
    'tag' is the canonical name of the keyword, e.g. Keyword('=', 'EQ').
  """
  __slots__ = ()

  @classmethod
  def of(cls, text: str, tag: str = None) -> 'Keyword':
    return cls(text, tag if tag is not None else text.upper())

class KeywordTable(object):
  """
  An ordered and immutable table of keywords.

  Tables of different grammars are combined by 'merge',
    which keeps the order of both tables (the receiver's keywords first)
    and drops the keywords whose texts already appear earlier.
  """
  __slots__ = ('_keywords', '_lookup')

  def __init__(self, keywords: Iterable[Keyword]):
    ordered: List[Keyword] = []
    lookup: typing.Dict[str, Keyword] = {}
    for keyword in keywords:
      ERROR_IF_NOT_INSTANCE_OF(keyword, Keyword,
        "KeywordTable only accepts Keyword entries ({} received)".format(type(keyword)),
        ExtensionInternalError
      )
      text = keyword.text.lower()
      if text in lookup:
        continue
      lookup[text] = keyword
      ordered.append(keyword)
    object.__setattr__(self, '_keywords', tuple(ordered))
    object.__setattr__(self, '_lookup', lookup)

  def __setattr__(self, name, value):
    raise AttributeError("KeywordTable is immutable")

  def __iter__(self):
    return iter(self._keywords)

  def __len__(self):
    return len(self._keywords)

  def __contains__(self, text) -> bool:
    return self.isKeyword(text)

  def __eq__(self, other):
    return isinstance(other, KeywordTable) and self._keywords == other._keywords

  def __ne__(self, other):
    return not self == other

  def __hash__(self):
    return hash(self._keywords)

  def __repr__(self):
    return "<KeywordTable({})>".format(', '.join(self.texts()))

  def isKeyword(self, text: str) -> bool:
    return isinstance(text, str) and text.lower() in self._lookup

  def get(self, text: str) -> Keyword:
    """Returns the keyword matching the text case-insensitively, or None"""
    if not isinstance(text, str):
      return None
    return self._lookup.get(text.lower())

  def texts(self) -> List[str]:
    return [keyword.text for keyword in self._keywords]

  def tags(self) -> List[str]:
    return [keyword.tag for keyword in self._keywords]

  def merge(self, other: 'KeywordTable') -> 'KeywordTable':
    ERROR_IF_NOT_INSTANCE_OF(other, KeywordTable,
      "can only merge with another KeywordTable ({} received)".format(type(other))
    )
    return KeywordTable(self._keywords + other._keywords)
