from typing import Callable, List
from collections import OrderedDict

from .ast import *
from .utils import *
from .utils.exceptions import SQLSyntaxError, SyntaxNoMatch
from .utils.logger import Logger
from .field import DataType
from .keywords import KeywordTable
from .query_parser_toolbox import *
from .extensions.extended_syntax.registry import getRegistry
from .extensions.extended_syntax.registry_utils import *
from .extensions.extended_syntax.hbase_syntax import HBaseSyntax

finer_logger = Logger.finer_logger

class HBaseSQLParser(object):
  """
  The parser of the base SQL grammar extended by the registered syntax.

  A statement is parsed by the ordered choice over
    the base statements (tried first, their failures fall through)
    and then the statements of each registered syntax (committed once triggered).
  The parser keeps no state between two calls, so it can be shared freely.
  Note that the symbols of a custom registry are added to the tokenizer of every parser,
    since the tokenizer symbols are global.
  """
  __slots__ = ('keywords', 'statement_parsers')

  def __init__(
    self,
    base_parsers: 'OrderedDict[str, Callable[[TokenList], Expr]]' = None,
    registry: Registry = None
  ):
    if base_parsers is None:
      base_parsers = BASE_STATEMENT_PARSERS
    if registry is None:
      registry = getRegistry()
    elif registry is not getRegistry():
      # the default registry is initialized on importing
      for reg_entry in registry.values():
        for func in reg_entry.entry_points:
          func()
    ERROR_IF_NOT_INSTANCE_OF(base_parsers, OrderedDict,
      "'base_parsers' must be an OrderedDict(should not be {}).".format(type(base_parsers)),
      ExtensionInternalError
    )
    # the reserved words of the dialects come first, followed by the base ones
    self.keywords: KeywordTable = RegistryUtils.mergeExtendedKeywords(registry).merge(BASE_KEYWORDS)
    self.statement_parsers = ParsersBundle(
      [
        StatementParser(name=name, trigger=None, parser=parser, block_error=BLOCK_ERROR)
        for name, parser in base_parsers.items()
      ]
      + RegistryUtils.collectStatementParsers(registry)
    )

  def getKeywords(self) -> List[str]:
    return self.keywords.texts()

  def tokenize(self, statement: str) -> TokenList:
    tokens = tokenize(statement, self.keywords)
    finer_logger.debug("tokens: {}".format(tokens))
    return tokens

  def parse_statement(self, statement: str):
    """
    Parses one statement (with an optional trailing ';')
      and returns the command or the relational plan of the first matching statement form.
    """
    tokens = self.tokenize(statement)
    if not tokens or tokens == [STATEMENT_SEPARATOR]:
      raise SyntaxNoMatch("empty statement")
    return self.statement_parsers(tokens)

  def parse(self, statement: str, root_exp: Callable[[TokenList], object] = None):
    """
    Parses the statement with the given production ('or_exp' if not given),
      which must consume the whole statement.
    """
    if root_exp is None:
      root_exp = or_exp
    tokens = self.tokenize(statement)
    exp = root_exp(tokens)
    skip_separator(tokens)
    if tokens:
      raise SQLSyntaxError("Incomplete statement", near=tokens)
    return exp

  def parse_data_type(self, text: str) -> DataType:
    return self.parse(text, root_exp=HBaseSyntax.primitive_type_exp)

default_parser = HBaseSQLParser()

# Parses a statement string and returns a command or a relational plan
def parse_statement(statement: str):
  return default_parser.parse_statement(statement)

def parse(statement: str, root_exp: Callable[[TokenList], object] = None):
  return default_parser.parse(statement, root_exp)

def parse_data_type(text: str) -> DataType:
  return default_parser.parse_data_type(text)

def getKeywords() -> List[str]:
  return default_parser.getKeywords()
