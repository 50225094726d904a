import string
import typing
from typing import Callable, List
from collections import OrderedDict, namedtuple

import codd

from .ast import *
from .utils import *
from .utils.exceptions import *
from .utils.logger import Logger
from .keywords import Keyword, KeywordTable

logger = Logger.general_logger
finer_logger = Logger.finer_logger
BLOCK_ERROR = True

Token = str
TokenList = List[Token]

IDENT_START = string.ascii_letters + '_'
QUOTES = ("'", '"')
STATEMENT_SEPARATOR = ';'

# reserved words of the base grammar
BASE_KEYWORDS = KeywordTable(Keyword.of(text) for text in (
  'select', 'from', 'where', 'limit', 'offset', 'having', 'group', 'by', 'order',
  'left', 'join', 'on', 'union', 'outer', 'in', 'is', 'and', 'or', 'between', 'not',
  'all', 'as', 'with', 'insert', 'into', 'overwrite', 'table', 'null', 'true', 'false',
  'like', 'rlike', 'regexp', 'case', 'when', 'then', 'else', 'end', 'cast', 'asc', 'desc',
))

# clause keywords (and symbols) ending the column list of a SELECT
select_terminators = (
  'from', 'where', 'group', 'order', 'limit', 'offset', 'having', 'union',
  ')', STATEMENT_SEPARATOR
)

class ReservedToken(str):
  """
  A token matching a reserved word.
  Its text is always lower case, so productions compare it with plain lower case literals.
  """
  __slots__ = ()

def isReserved(token: Token) -> bool:
  return isinstance(token, ReservedToken)

def addSyntaxSymbol(new_symbols: str) -> int:
  count_success = 0
  for symbol in new_symbols:
    if symbol not in ExtensibleTokens.SYMBOLS:
      ExtensibleTokens.SYMBOLS += symbol
      count_success += 1
  return count_success

def removeSyntaxSymbol(symbols: str) -> int:
  count_success = 0
  for symbol in symbols:
    symbol_idx = ExtensibleTokens.SYMBOLS.find(symbol)
    if symbol_idx >= 0:
      ExtensibleTokens.SYMBOLS = ExtensibleTokens.SYMBOLS[:symbol_idx] + ExtensibleTokens.SYMBOLS[symbol_idx+1:]
      count_success += 1
  return count_success

class ExtensibleTokens(codd.Tokens):

  SYMBOLS = codd.SYMBOLS

  def read_symbol(self):
    if self.current_char in ExtensibleTokens.SYMBOLS:
      char = self.current_char
      self.read_char()
      return char
    elif self.current_char == '`':
      # a quoted identifier, kept with its quotes
      quoted = self.current_char
      self.read_char()
      while self.current_char and self.current_char != '`':
        quoted += self.current_char
        self.read_char()
      if self.current_char != '`':
        raise SQLSyntaxError("missing closing '`' in {}".format(quoted))
      self.read_char()
      return quoted + '`'
    elif self.current_char == '<':
      self.read_char()
      if self.current_char == '=':
        self.read_char()
        return '<='
      else:
        return '<'
    elif self.current_char == '>':
      self.read_char()
      if self.current_char == '=':
        self.read_char()
        return '>='
      else:
        return '>'
    elif self.current_char == '!':
      self.read_char()
      if self.current_char == '=':
        self.read_char()
        return "!="
      else:
        return '!'
    else:
      raise SQLSyntaxError("Unexpected token " + self.current_char)

def tokenize(statement: str, keywords: KeywordTable = BASE_KEYWORDS) -> TokenList:
  """
  Splits the statement into tokens.
  Tokens matching a keyword (in any case) become lower case ReservedTokens,
    all the other tokens are kept as they are.
  """
  ERROR_IF_NOT_INSTANCE_OF(statement, str,
    "can only tokenize a str ({} received)".format(type(statement)), SQLSyntaxError
  )
  return [
    ReservedToken(token.lower()) if keywords.isKeyword(token) else token
    for token in ExtensibleTokens(statement)
  ]

######## token helpers ###################

def peek(tokens: TokenList, offset: int = 0) -> Token:
  return tokens[offset] if len(tokens) > offset else None

def expect(tokens: TokenList, *words: str) -> None:
  """Consumes the given words in order, raising SQLSyntaxError on the first mismatch"""
  for word in words:
    if not tokens:
      raise SQLSyntaxError("expected '{}' but the statement ended".format(word.upper()))
    if tokens[0] != word:
      raise SQLSyntaxError("expected '{}'".format(word.upper()), near=tokens[:5])
    tokens.pop(0)

def accept(tokens: TokenList, word: str) -> bool:
  """Consumes the word if it is the next token"""
  if tokens and tokens[0] == word:
    tokens.pop(0)
    return True
  return False

def skip_separator(tokens: TokenList) -> None:
  accept(tokens, STATEMENT_SEPARATOR)

def unquote_ident(token: Token) -> str:
  if len(token) >= 2 and token[0] == '`' and token[-1] == '`':
    return token[1:-1]
  return token

def is_ident_token(token: Token) -> bool:
  return (
    token is not None and len(token) > 0 and not isReserved(token)
    and (token[0] in IDENT_START or (token[0] == '`' and token[-1] == '`' and len(token) >= 2))
  )

def repsep(tokens: TokenList, parser: Callable, separator: str = ',', closing: str = None) -> list:
  """
  Parses zero or more items separated by the separator.
  If 'closing' is given, an immediately following closing token means an empty list.
  """
  items = []
  if closing is not None and peek(tokens) == closing:
    return items
  items.append(parser(tokens))
  while accept(tokens, separator):
    items.append(parser(tokens))
  return items

######## base productions ################
#   ident, stringLit, literal, expression and relation
#   are the productions the extended syntax builds upon.
##########################################

def ident_exp(tokens: TokenList) -> str:
  token = peek(tokens)
  if token is None:
    raise SQLSyntaxError("expected an identifier but the statement ended")
  if isReserved(token):
    raise SQLSyntaxError(
      "'{}' is a reserved word and cannot be used as an identifier".format(token.upper()), near=tokens[:5]
    )
  if not is_ident_token(token):
    raise SQLSyntaxError("expected an identifier", near=tokens[:5])
  return unquote_ident(tokens.pop(0))

def string_lit_exp(tokens: TokenList) -> str:
  token = peek(tokens)
  if token is None:
    raise SQLSyntaxError("expected a string literal but the statement ended")
  if token[0] not in QUOTES:
    raise SQLSyntaxError("expected a string literal", near=tokens[:5])
  tokens.pop(0)
  return token[1:-1]

def number_exp(token: Token, tokens: TokenList):
  if len(tokens) >= 2 and tokens[0] == '.' and tokens[1][:1] in string.digits:
    token = token + tokens.pop(0) + tokens.pop(0)
  try:
    return int(token)
  except ValueError:
    try:
      return float(token)
    except ValueError:
      raise SQLSyntaxError("invalid number '{}'".format(token))

def literal_exp(tokens: TokenList) -> Const:
  """A scalar constant: a (signed) number, a string, null, true or false"""
  token = peek(tokens)
  if token is None:
    raise SQLSyntaxError("expected a literal but the statement ended")
  if token == 'null':
    tokens.pop(0)
    return NullConst()
  if token == 'true':
    tokens.pop(0)
    return TrueConst()
  if token == 'false':
    tokens.pop(0)
    return FalseConst()
  if token[0] in QUOTES:
    return StringConst(string_lit_exp(tokens))
  sign = 1
  if token in ('-', '+') and peek(tokens, 1) is not None and peek(tokens, 1)[:1] in string.digits:
    sign = -1 if tokens.pop(0) == '-' else 1
    token = peek(tokens)
  if token[0] in string.digits:
    tokens.pop(0)
    return NumberConst(sign * number_exp(token, tokens))
  raise SQLSyntaxError("expected a literal", near=tokens[:5])

def or_exp(tokens):
  lhs = and_exp(tokens)
  while len(tokens) and tokens[0] == 'or':
    tokens.pop(0)
    lhs = Or(lhs, and_exp(tokens))
  return lhs

def and_exp(tokens):
  lhs = comparison_exp(tokens)
  while len(tokens) and tokens[0] == 'and':
    tokens.pop(0)
    lhs = And(lhs, comparison_exp(tokens))
  return lhs

def comparison_exp(tokens):
  lhs = additive_exp(tokens)
  if len(tokens):

    if tokens[0:2] == ['not', 'like']:
      tokens.pop(0)
      tokens.pop(0)
      tokens.insert(0, 'not like')

    if tokens[0:2] == ['not', 'rlike']:
      tokens.pop(0)
      tokens.pop(0)
      tokens.insert(0, 'not rlike')

    if tokens[0] == 'between':
      tokens.pop(0)
      expr = lhs
      lhs = additive_exp(tokens)
      expect(tokens, 'and')
      rhs = additive_exp(tokens)
      return BetweenOp(expr, lhs, rhs)

    elif tokens[0:2] == ['in', '(']:
      tokens.pop(0)
      tokens.pop(0)
      return InOp(lhs, tuple_exp(tokens))

    elif tokens[0:3] == ['not', 'in', '(']:
      tokens.pop(0)
      tokens.pop(0)
      tokens.pop(0)
      return NotOp(InOp(lhs, tuple_exp(tokens)))

    elif tokens[0].lower() in COMPARISON_OPS:
      token = tokens.pop(0).lower()
      if token == 'is' and tokens and tokens[0] == 'not':
        token = 'is not'
        tokens.pop(0)

      Op = COMPARISON_OPS[token]
      rhs = additive_exp(tokens)
      return Op(lhs, rhs)

  # otherwise
  return lhs

def additive_exp(tokens):
  lhs = multiplicative_exp(tokens)
  while tokens:
    Op = ADDITIVE_OPS.get(tokens[0])
    if Op:
      tokens.pop(0)
      rhs = multiplicative_exp(tokens)
      lhs = Op(lhs, rhs)
    else:
      break
  return lhs

def multiplicative_exp(tokens):
  lhs = unary_exp(tokens)
  while len(tokens):
    Op = MULTIPLICATIVE_OPS.get(tokens[0])
    if Op:
      tokens.pop(0)
      rhs = unary_exp(tokens)
      lhs = Op(lhs, rhs)
    else:
      break
  return lhs

def unary_exp(tokens):
  if not tokens:
    raise SQLSyntaxError("expected an expression but the statement ended")
  if tokens[0] == '-':
    tokens.pop(0)
    return NegOp(value_exp(tokens))
  elif tokens[0] == 'not':
    tokens.pop(0)
    return NotOp(value_exp(tokens))
  elif tokens[0] == '+':
    tokens.pop(0)

  return value_exp(tokens)

def value_exp(tokens):
  """
  Returns the value node for the given token
  """
  if not tokens:
    raise SQLSyntaxError("expected a value but the statement ended")
  token = tokens[0]

  if token in ('null', 'true', 'false') or token[0] in QUOTES or token[0] in string.digits:
    return literal_exp(tokens)

  tokens.pop(0)
  if token == '(':
    # a parenthesized expression, or a tuple if it has several elements
    parenthesized = tuple_exp(tokens)
    if len(parenthesized.exprs) == 1:
      return parenthesized.exprs[0]
    return parenthesized
  elif token == 'case':
    return case_when_core_exp(tokens)
  elif token == 'cast':
    return cast_core_exp(tokens)
  elif is_ident_token(token):
    if tokens and tokens[0] == '(':
      return function_exp(token, tokens)
    else:
      return var_exp(token, tokens)
  else:
    raise SQLSyntaxError("unexpected '{}'".format(token), near=[token] + tokens[:4])

def tuple_exp(tokens):
  args = []
  if tokens and tokens[0] != ')':
    args.append(or_exp(tokens))
    while tokens and tokens[0] == ',':
      tokens.pop(0)
      args.append(or_exp(tokens))
  if not tokens or tokens[0] != ')':
    raise SQLSyntaxError("missing closing ')'", near=tokens[:5])

  tokens.pop(0)

  return Tuple(*args)

def function_exp(name, tokens):
  expect(tokens, '(')
  args = tuple_exp(tokens)
  return Function(unquote_ident(name), *args.exprs)

def cast_core_exp(tokens):
  expect(tokens, '(')
  expr = or_exp(tokens)
  expect(tokens, 'as')
  if not tokens:
    raise SQLSyntaxError("expected a type name but the statement ended")
  type = tokens.pop(0)
  expect(tokens, ')')
  return CastOp(expr, type)

def case_when_core_exp(tokens):
  all_conditions = []
  if peek(tokens) != 'when':
    raise SQLSyntaxError('Expected "WHEN"', near=tokens[:5])
  while tokens and tokens[0] == 'when':
    tokens.pop(0)
    condition = or_exp(tokens)
    expect(tokens, 'then')
    expr = or_exp(tokens)
    condition_map = dict(
      condition=condition,
      expr=expr
    )
    all_conditions.append(condition_map)

  if accept(tokens, 'else'):
    def_value = or_exp(tokens)
  else:
    def_value = None
  expect(tokens, 'end')
  return CaseWhenOp(all_conditions, def_value)

def var_exp(name, tokens):
  path = [unquote_ident(name)]

  while len(tokens) >= 2 and tokens[0] == '.' and is_ident_token(tokens[1]):
    tokens.pop(0) # '.'
    path.append(unquote_ident(tokens.pop(0)))

  return Var('.'.join(path))

# sql specific parsing

def projection_op(relation, columns):
  if len(columns) == 1 and isinstance(columns[0], SelectAllExpr) and columns[0].table is None:
    # select all columns, i.e., 'select *'
    return relation
  else:
    return ProjectionOp(relation, *columns)

def select_core_exp(tokens) -> List[Expr]:
  """
  Parses the columns to be selected (which are between 'select' and 'from'/'where' keywords)
    and returns the corresponding operators over them
  """
  columns = []

  while tokens and tokens[0] not in select_terminators:
    col = result_column_exp(tokens)

    columns.append(col)
    if tokens and tokens[0] == ',':
      tokens.pop(0)
    else:
      break

  if not columns:
    raise SQLSyntaxError("no column is selected", near=tokens[:5])
  return columns

def alias_exp(tokens, source):
  """Wraps the source with an AliasOp if it is followed by '[AS] alias'"""
  if accept(tokens, 'as'):
    return AliasOp(ident_exp(tokens), source)
  if is_ident_token(peek(tokens)):
    return AliasOp(ident_exp(tokens), source)
  return source

def join_source(tokens):
  """
  Parses and returns the data sources (i.e., the stuffs between 'from' and 'where' keywords in SQL)
  """
  # Always parses at least one data source
  source = single_source(tokens)
  # If the current SQL query includes Join, continues parsing the other data sources
  while tokens and tokens[0] in (',', 'join', 'left'):

    join_type = tokens.pop(0)

    if join_type == 'left':
      accept(tokens, 'outer')
      expect(tokens, 'join')
      op = LeftJoinOp
    else:
      op = JoinOp

    right = single_source(tokens)
    if accept(tokens, 'on'):
      source = op(source, right, or_exp(tokens))
    else:
      source = op(source, right)

  return source

def single_source(tokens):
  """
  Parses and returns the first data source from the tokens, i.e., the 'relation' production
  """
  if not tokens:
    raise SQLSyntaxError("expected a relation but the statement ended")
  if tokens[0] == '(':
    # The first data source is a nested SQL query
    tokens.pop(0)
    if tokens and tokens[0] == 'select':
      source = select_stmt(tokens)
    else:
      source = join_source(tokens)
    expect(tokens, ')')
    return alias_exp(tokens, source)
  else:
    # The first data source is not a complete SQL query but a simple table name, function, or other stuffs.
    if tokens[1:2] == ['('] and is_ident_token(tokens[0]):
      # Current tokens start with a string followed by a '(', i.e., a function
      source = relation_function_exp(tokens.pop(0), tokens)
    else:
      name = ident_exp(tokens)
      if len(tokens) >= 2 and tokens[0] == '.' and is_ident_token(tokens[1]):
        # a full table name that looks like 'schemaName.tableName'
        tokens.pop(0)
        name = name + '.' + ident_exp(tokens)
      # the data source is a table, load it
      source = LoadOp(name)

    return alias_exp(tokens, source)

def relation_function_exp(name, tokens):
  expect(tokens, '(')

  args = []

  while tokens and tokens[0] != ")":
    if tokens[0] == '(':
      args.append(single_source(tokens))
    else:
      expr = value_exp(tokens)
      if isinstance(expr, Var):
        args.append(LoadOp(expr.path))
      elif isinstance(expr, Const):
        args.append(expr)
      else:
        raise SQLSyntaxError("Only constants, relation names or select queries allowed")

    if tokens and tokens[0] == ',':
      tokens.pop(0)

  expect(tokens, ')')

  return Function(unquote_ident(name), *args)

def result_column_exp(tokens) -> Expr:

  if tokens[0] == '*':
    tokens.pop(0)
    return SelectAllExpr()
  else:
    exp = or_exp(tokens)
    if tokens and isinstance(exp, Var) and tokens[:2] == ['.', '*']:
      tokens.pop(0) # '.'
      tokens.pop(0) # '*'
      return SelectAllExpr(exp.path)
    else:
      if accept(tokens, 'as'):
        return RenameOp(ident_exp(tokens), exp)
      else:
        return exp

def where_core_expr(tokens, relation):
  return SelectionOp(relation, or_exp(tokens))

def order_by_core_expr(tokens):
  columns = []

  while tokens and tokens[0] not in select_terminators:
    col = value_exp(tokens)
    if tokens:
      if tokens[0] == "desc":
        col = Desc(col)
        tokens.pop(0)
      elif tokens[0] == "asc":
        tokens.pop(0)

    columns.append(col)

    if not accept(tokens, ','):
      break

  if not columns:
    raise SQLSyntaxError("ORDER BY requires at least one column", near=tokens[:5])
  return columns

def group_by_core_expr(tokens):

  columns = []
  while tokens and tokens[0] not in select_terminators:
    columns.append(var_exp(ident_exp(tokens), tokens))
    if not accept(tokens, ','):
      break

  if not columns:
    raise SQLSyntaxError("GROUP BY requires at least one column", near=tokens[:5])
  return columns

def union_stmt(tokens: TokenList) -> Expr:

  op = select_stmt(tokens)

  if tokens[0:2] == ["union", "all"]:
    tokens.pop(0)
    tokens.pop(0)
    return UnionAllOp(op, union_stmt(tokens))
  return op

def select_stmt(tokens: TokenList) -> Expr:
  expect(tokens, 'select')
  # select_core_exp returns operators over the columns to be selected
  select_cols = select_core_exp(tokens)

  if accept(tokens, 'from'):
    # join_source: parses and returns the data sources (i.e., the stuffs between 'from' and 'where' keywords in SQL)
    #   For single data source, it returns the source;
    #   while for multiple data sources (i.e., join operation), it returns a LeftJoinOp, JoinOp or AliasOp over the sources.
    relation = join_source(tokens)
  else:
    relation = LoadOp('')

  if accept(tokens, 'where'):
    relation = where_core_expr(tokens, relation)

  relation = projection_op(relation, select_cols)

  if tokens[:2] == ['group', 'by']:
    tokens.pop(0)
    tokens.pop(0)
    relation = GroupByOp(relation, *group_by_core_expr(tokens))

  if tokens[:2] == ['order', 'by']:
    tokens.pop(0)
    tokens.pop(0)
    relation = OrderByOp(relation, *order_by_core_expr(tokens))

  start = stop = None
  if accept(tokens, 'limit'):
    stop = literal_exp(tokens).const

  if accept(tokens, 'offset'):
    start = literal_exp(tokens).const
    if stop is not None:
      stop += start

  if not (start is None and stop is None):
    relation = SliceOp(relation, start or 0, stop)

  return relation

def insert_stmt(tokens: TokenList) -> Expr:
  """INSERT (INTO | OVERWRITE) TABLE name <select>"""
  expect(tokens, 'insert')
  if accept(tokens, 'overwrite'):
    overwrite = True
  else:
    expect(tokens, 'into')
    overwrite = False
  expect(tokens, 'table')
  table_name = ident_exp(tokens)
  return InsertIntoOp(table_name, union_stmt(tokens), overwrite)

def cte_stmt(tokens: TokenList) -> Expr:
  """WITH name AS (<select>) [, name AS (<select>)]* (<select> | <insert>)"""
  expect(tokens, 'with')
  ctes = []
  while True:
    name = ident_exp(tokens)
    expect(tokens, 'as', '(')
    ctes.append((name, union_stmt(tokens)))
    expect(tokens, ')')
    if not accept(tokens, ','):
      break
  if peek(tokens) == 'insert':
    body = insert_stmt(tokens)
  else:
    body = union_stmt(tokens)
  return WithOp(body, *ctes)

# the statement alternatives of the base grammar, tried in this order
BASE_STATEMENT_PARSERS: 'OrderedDict[str, Callable[[TokenList], Expr]]' = OrderedDict([
  ('select', union_stmt),
  ('insert', insert_stmt),
  ('cte', cte_stmt),
])

######## statement alternatives ##########

class StatementParser(namedtuple('StatementParser', 'name, trigger, parser, block_error')):
  """
  One alternative of the entry production.
  'trigger' (or None for always) decides whether the alternative applies to the tokens;
    'block_error' decides whether its errors fall through to the next alternative.
  """
  __slots__ = ()

class ParsersBundle:
  """
  The ordered choice over the statement alternatives.
  For the tokens of a statement, this bundle tries the triggered alternatives in order,
    each on its own copy of the tokens, and returns the result of the first one
    which parses the whole statement (an optional trailing ';' allowed).

  Errors of an alternative with 'block_error' are logged and the next alternative is tried;
    errors of the other alternatives are raised, i.e., such an alternative commits
    to the statement once its trigger fires.
  """
  __slots__ = ("parsers",)
  def __init__(self, parsers: List[StatementParser]):
    for entry in parsers:
      ERROR_IF_NOT_INSTANCE_OF(entry, StatementParser,
        "'{}' is not a {} instance.".format(type(entry), getClassNameOfClass(StatementParser)),
        ExtensionInternalError
      )
    self.parsers = list(parsers)

  def __call__(self, tokens: TokenList):
    triggered = [
      entry for entry in self.parsers
      if entry.trigger is None or entry.trigger(tokens)
    ]
    committed = [entry.name for entry in triggered if not entry.block_error]
    if len(committed) > 1:
      logger.warning(
        "Multiple statement parsers are triggered ({}), only '{}' is used".format(', '.join(committed), committed[0])
      )

    failures = []
    for entry in triggered:
      tokens_copy = list(tokens)
      try:
        res = entry.parser(tokens_copy)
        skip_separator(tokens_copy)
        if tokens_copy:
          raise SQLSyntaxError("Incomplete statement", near=tokens_copy)
        return res
      except Exception as e:
        """
        if block errors, all exceptions will not be raised
          and the parsing work is simply passed to the next parser;
        if not block, any exception will be raised.
        """
        if not entry.block_error:
          raise e
        finer_logger.debug("'{}' could not parse the statement: {}".format(entry.name, e))
        failures.append("{}: {}".format(entry.name, e))

    raise SyntaxNoMatch(
      "No statement form matches the input" + (" ({})".format('; '.join(failures)) if failures else ""),
      near=tokens[:5]
    )