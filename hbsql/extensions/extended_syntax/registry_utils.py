import typing
from typing import List, Type, Callable
from collections import OrderedDict
from .extended_syntax import ExtendedSyntax
from ...utils import *
from ...keywords import KeywordTable
from ...query_parser_toolbox import StatementParser

Registry = OrderedDict
Name = str

TriggerFunc = str
ParserFunc = str

class RegEntry(object):
  """
  Each RegEntry represents a registered extended syntax.

  'statement_parsers' maps the name of each statement form of the syntax
    to the names of its (trigger function, parser function).
  The trigger function receives the tokens of a statement and returns True
    if the statement is of this form, in which case the parser function
    is called to parse the tokens and all of its errors are reported to the caller.
  """
  __slots__ = ("syntax", "statement_parsers", "entry_points", )
  def __init__(
    self,
    syntax: Type[ExtendedSyntax],
    statement_parsers: 'OrderedDict[Name, typing.Tuple[TriggerFunc, ParserFunc]]',
    entry_points: List[Callable[[], None]]
  ) -> None:
    self.syntax = syntax
    self.statement_parsers = statement_parsers
    self.entry_points = entry_points

class RegistryUtils(object):
  @classmethod
  def collectStatementParsers(cls, registry: Registry) -> List[StatementParser]:
    """
    Parameters
    -----------
    registry: the dictionary of the registry

    Return
    -----------
    The statement parsers of all the registered syntax, in the order of the registry,
      with the trigger and parser functions bound to one instance of each syntax.
    """
    parsers = []
    seen = set()
    for name in registry:
      entry: RegEntry = registry[name]
      syntax_instance = entry.syntax()
      for statement, (trigger_func, parser_func) in entry.statement_parsers.items():
        qualified_name = "{}.{}".format(name, statement)
        ERROR_IF_EXISTS_IN(
          qualified_name, seen,
          "duplicated statement parser '{}' found in registry".format(qualified_name),
          RegistryError
        )
        seen.add(qualified_name)
        parsers.append(StatementParser(
          name=qualified_name,
          trigger=getFuncByName(syntax_instance, trigger_func),
          parser=getFuncByName(syntax_instance, parser_func),
          block_error=False
        ))
    return parsers

  @classmethod
  def getAllExtendedSyntax(cls, registry: Registry) -> List[Type[ExtendedSyntax]]:
    return [reg_entry.syntax for reg_entry in registry.values()]

  @classmethod
  def mergeExtendedKeywords(cls, registry: Registry) -> KeywordTable:
    """Returns the reserved words of all the registered syntax, in the order of the registry"""
    keywords = KeywordTable(())
    for syntax in cls.getAllExtendedSyntax(registry):
      keywords = keywords.merge(syntax.getExtendedKeywords())
    return keywords
