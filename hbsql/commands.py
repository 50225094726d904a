"""
The commands produced by the HBase statements.

Each command is an immutable and fully resolved representation of one statement.
The parser keeps no reference to the commands it returns;
  executing them is left to the consumer.
"""
import re
from collections import namedtuple

from .ast import *
from .utils import *

PLAIN_IDENT = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

def quoteIdent(name: str) -> str:
  """Renders an identifier, quoted with '`' if it is a reserved word or not a plain word"""
  # imported here to avoid circular importing
  from .query_parser import getKeywords
  if PLAIN_IDENT.match(name) and name.lower() not in {text.lower() for text in getKeywords()}:
    return name
  return "`{}`".format(name)

def quoteString(value: str) -> str:
  """
  Renders a string literal with double quotes, or with single quotes if the value contains '"'.
  String literals have no escape sequence, so a value containing both quotes cannot be written.
  """
  if '"' in value:
    ERROR_IF_FALSE("'" not in value,
      "cannot write {!r} as a string literal: it contains both kinds of quotes".format(value),
      ValueError
    )
    return "'{}'".format(value)
  return '"{}"'.format(value)

def textLiteral(value: str) -> str:
  """Renders a textual value as a literal, None as null"""
  return "null" if value is None else quoteString(value)

def exprToSQL(expr: Expr) -> str:
  """Renders a predicate or value expression as text that parses back to an equal expression"""
  if isinstance(expr, Var):
    return '.'.join(quoteIdent(part) for part in expr.path.split('.'))
  if isinstance(expr, StringConst):
    return quoteString(expr.const)
  if isinstance(expr, Function):
    return "{}({})".format(quoteIdent(expr.name), ', '.join(map(exprToSQL, expr.args)))
  ERROR_IF_NOT_INSTANCE_OF(expr, SimpleOp,
    "cannot render {} as an expression".format(getClassNameOfInstance(expr)), NotImplementedError
  )
  return expr.render(exprToSQL)

def relationToSQL(relation: Expr) -> str:
  if isinstance(relation, AliasOp):
    return "{} AS {}".format(relationToSQL(relation.relation), quoteIdent(relation.name))
  if isinstance(relation, LoadOp):
    return '.'.join(quoteIdent(part) for part in relation.name.split('.'))
  raise NotImplementedError("cannot render {} as a table reference".format(getClassNameOfInstance(relation)))

class Command(object):
  """
  The base class of commands.
  Commands of different classes never equal each other even if they have the same fields.
  Commands are hashed by value, their filter plans included.
  The nodes of a filter plan are not frozen, so they must not be modified once the command is built.
  """
  __slots__ = ()

  def __eq__(self, other):
    return getClass(self) == getClass(other) and tuple.__eq__(self, other)

  def __ne__(self, other):
    return not self == other

  __hash__ = tuple.__hash__

  def getCommandName(self) -> str:
    return getClassNameOfInstance(self).replace('Command', '')

  def toSQL(self) -> str:
    """Renders the canonical text of the command, which parses back to an equal command"""
    raise NotImplementedError

  def __str__(self):
    return self.toSQL()

class DropTableCommand(Command, namedtuple('DropTableCommand', 'table_name')):
  """DROP TABLE table_name"""
  __slots__ = ()

  def toSQL(self) -> str:
    return "DROP TABLE {}".format(quoteIdent(self.table_name))

class AlterDropColumnCommand(Command, namedtuple('AlterDropColumnCommand', 'table_name, column_name')):
  """ALTER TABLE table_name DROP column_name"""
  __slots__ = ()

  def toSQL(self) -> str:
    return "ALTER TABLE {} DROP {}".format(quoteIdent(self.table_name), quoteIdent(self.column_name))

class AlterAddColumnCommand(
  Command,
  namedtuple('AlterAddColumnCommand', 'table_name, column_name, data_type, family, qualifier')
):
  """ALTER TABLE table_name ADD column_name data_type MAPPED BY (column_name = "family.qualifier")"""
  __slots__ = ()

  def toSQL(self) -> str:
    return "ALTER TABLE {} ADD {} {} MAPPED BY ({} = {})".format(
      quoteIdent(self.table_name), quoteIdent(self.column_name), str(self.data_type),
      quoteIdent(self.column_name), quoteString(self.family + '.' + self.qualifier)
    )

class InsertValuesCommand(Command, namedtuple('InsertValuesCommand', 'table_name, values')):
  """
  INSERT INTO TABLE table_name VALUES (v1, v2, ...)
  'values' holds the textual representation of each literal, and None for null.
  """
  __slots__ = ()

  def __new__(cls, table_name: str, values):
    return super().__new__(cls, table_name, tuple(values))

  def toSQL(self) -> str:
    return "INSERT INTO TABLE {} VALUES ({})".format(
      quoteIdent(self.table_name), ', '.join(map(textLiteral, self.values))
    )

class UpdateTableCommand(Command, namedtuple('UpdateTableCommand', 'table_name, columns, values, filter')):
  """
  UPDATE relation SET c1 = v1 [, ...] WHERE predicate
  'columns' and 'values' are in the order of the assignments, with None for null.
  'filter' is a SelectionOp of the predicate over the original table reference.
  """
  __slots__ = ()

  def __new__(cls, table_name: str, columns, values, filter: SelectionOp):
    ERROR_IF_NOT_EQ(len(columns), len(values),
      "the number of columns and values of UPDATE must be equal", ValueError)
    return super().__new__(cls, table_name, tuple(columns), tuple(values), filter)

  def toSQL(self) -> str:
    assignments = ', '.join(
      "{} = {}".format(quoteIdent(column), textLiteral(value))
      for column, value in zip(self.columns, self.values)
    )
    return "UPDATE {} SET {} WHERE {}".format(
      relationToSQL(self.filter.relation), assignments, exprToSQL(self.filter.bool_op)
    )

class DeleteFromTableCommand(Command, namedtuple('DeleteFromTableCommand', 'table_name, filter')):
  """
  DELETE FROM relation WHERE predicate
  'filter' is a SelectionOp of the predicate over the original table reference.
  """
  __slots__ = ()

  def toSQL(self) -> str:
    return "DELETE FROM {} WHERE {}".format(
      relationToSQL(self.filter.relation), exprToSQL(self.filter.bool_op)
    )

class LoadOptions(namedtuple('LoadOptions', 'is_local, delimiter, is_parallel')):
  """The optional clauses of LOAD DATA, each one independent from the others"""
  __slots__ = ()

  def __new__(cls, is_local: bool = False, delimiter: str = None, is_parallel: bool = False):
    return super().__new__(cls, is_local, delimiter, is_parallel)

class BulkLoadCommand(
  Command,
  namedtuple('BulkLoadCommand', 'input_path, table_name, is_local, delimiter, is_parallel')
):
  """LOAD [PARALL] DATA [LOCAL] INPATH input_path INTO TABLE table_name [FIELDS TERMINATED BY delimiter]"""
  __slots__ = ()

  @classmethod
  def fromOptions(cls, input_path: str, table_name: str, options: LoadOptions) -> 'BulkLoadCommand':
    return cls(input_path, table_name, options.is_local, options.delimiter, options.is_parallel)

  @property
  def options(self) -> LoadOptions:
    return LoadOptions(self.is_local, self.delimiter, self.is_parallel)

  def toSQL(self) -> str:
    sql = "LOAD {}DATA {}INPATH {} INTO TABLE {}".format(
      "PARALL " if self.is_parallel else "",
      "LOCAL " if self.is_local else "",
      quoteString(self.input_path),
      quoteIdent(self.table_name)
    )
    if self.delimiter is not None:
      sql += " FIELDS TERMINATED BY {}".format(quoteString(self.delimiter))
    return sql
